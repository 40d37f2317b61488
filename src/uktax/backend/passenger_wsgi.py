"""WSGI entrypoint for deploying the UK tax backend behind Passenger."""

from uktax.backend.app import create_app

# Passenger expects a module-level variable named ``application``.
application = create_app()
