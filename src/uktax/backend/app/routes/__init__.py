"""Blueprint registrations for application routes."""

from flask import Flask

from .config import blueprint as config_blueprint
from .localization import blueprint as translations_blueprint
from .reports import blueprint as reports_blueprint


def register_routes(app: Flask) -> None:
    """Register all Flask blueprints with the provided application."""

    app.register_blueprint(reports_blueprint)
    app.register_blueprint(config_blueprint)
    app.register_blueprint(translations_blueprint)
