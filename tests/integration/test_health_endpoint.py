"""Integration tests for the health endpoint."""

from http import HTTPStatus

from flask.testing import FlaskClient

from uktax.backend.config import year_config
from uktax.backend.version import get_project_version


def test_health_endpoint(client: FlaskClient) -> None:
    """Ensure the health endpoint returns a successful status payload."""
    response = client.get("/health")
    assert response.status_code == HTTPStatus.OK
    payload = response.get_json()
    assert payload["status"] == "ok"
    assert payload["version"] == get_project_version()
    assert payload["supported_tax_years"] == list(year_config.available_tax_years())
    assert payload["default_tax_year"] == "2025-26"
    assert response.mimetype == "application/json"
