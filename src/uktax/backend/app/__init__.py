"""Application factory for the UK Self Assessment backend."""

import logging
import os
from pathlib import Path
from warnings import warn

from flask import Flask, jsonify
from flask_cors import CORS
from werkzeug.exceptions import BadRequest

from uktax.backend.config.schema import ConfigurationError, UnknownTaxYearError

from .http import problem_response
from .routes import register_routes
from .routes.config import get_configuration_metadata
from .routes.reports import LEDGER_EXTENSION_KEY
from .services.ledger import InMemoryLedger, LedgerAggregator, LedgerError, SQLiteLedger

_LOGGER = logging.getLogger(__name__)


def _parse_allowed_origins(raw: str | None) -> set[str]:
    """Convert an environment variable into a normalised set of origins."""

    if not raw:
        return set()

    return {origin.strip() for origin in raw.split(",") if origin.strip()}


def _build_ledger() -> LedgerAggregator:
    """Return the SQLite ledger named by ``UKTAX_LEDGER_DB`` or an empty in-memory one."""

    db_path = os.getenv("UKTAX_LEDGER_DB")
    if db_path and db_path.strip():
        return SQLiteLedger(Path(db_path.strip()).expanduser())

    _LOGGER.warning("UKTAX_LEDGER_DB is not set; reports will use an empty in-memory ledger")
    return InMemoryLedger()


def create_app(ledger: LedgerAggregator | None = None) -> Flask:
    """Create and configure the Flask application instance."""

    app = Flask(__name__)
    app.extensions[LEDGER_EXTENSION_KEY] = ledger if ledger is not None else _build_ledger()

    allowed_origins = _parse_allowed_origins(os.getenv("UKTAX_ALLOWED_ORIGINS"))
    if not allowed_origins:
        warn(
            "No allowed origins configured; cross-origin requests will be rejected.",
            stacklevel=1,
        )

    CORS(
        app,
        resources={r"/api/*": {"origins": sorted(allowed_origins)}},
        supports_credentials=False,
        methods=["GET", "OPTIONS"],
        allow_headers=["Content-Type", "Accept-Language"],
    )

    register_routes(app)

    @app.route("/health", methods=["GET"])
    def health_check():
        """Simple health check endpoint for infrastructure monitoring."""

        payload = {"status": "ok", **get_configuration_metadata()}
        return jsonify(payload)

    @app.errorhandler(BadRequest)
    def handle_bad_request(error: BadRequest):
        """Return consistent JSON responses for malformed requests."""

        message = error.description or "Invalid request"
        return problem_response("bad_request", status=400, message=message).to_response()

    @app.errorhandler(ValueError)
    def handle_value_error(error: ValueError):
        """Gracefully surface domain validation errors to clients."""

        return problem_response(
            "validation_error", status=400, message=str(error)
        ).to_response()

    @app.errorhandler(ConfigurationError)
    def handle_configuration_error(error: ConfigurationError):
        _LOGGER.error("Rate table configuration is invalid: %s", error)
        return problem_response(
            "configuration_error", status=500, message=str(error)
        ).to_response()

    @app.errorhandler(UnknownTaxYearError)
    def handle_unknown_tax_year(error: UnknownTaxYearError):
        return problem_response(
            "not_found", status=404, message=str(error), tax_year=error.tax_year
        ).to_response()

    @app.errorhandler(LedgerError)
    def handle_ledger_error(error: LedgerError):
        """Abort the report when the transaction store is unavailable."""

        _LOGGER.error("Ledger unavailable: %s", error)
        return problem_response(
            "ledger_unavailable", status=503, message=str(error)
        ).to_response()

    return app
