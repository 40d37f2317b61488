"""Pydantic models describing the public API surface."""

from __future__ import annotations

from typing import Any, Literal

from pydantic import BaseModel, ConfigDict, Field, ValidationError, field_validator

__all__ = [
    "DateRangeQuery",
    "ReportOptions",
    "SUPPORTED_REGIONS",
    "format_validation_error",
]

SUPPORTED_REGIONS: tuple[str, ...] = ("england", "scotland")


class ReportOptions(BaseModel):
    """Presentation options shared by every report endpoint."""

    model_config = ConfigDict(extra="ignore", frozen=True)

    region: Literal["england", "scotland"] = "england"
    locale: str | None = None

    @field_validator("region", mode="before")
    @classmethod
    def _normalise_region(cls, value: Any) -> Any:
        if value is None:
            return "england"
        if isinstance(value, str):
            text = value.strip().lower()
            return text or "england"
        return value

    @field_validator("locale", mode="before")
    @classmethod
    def _normalise_locale(cls, value: Any) -> str | None:
        if value is None:
            return None
        text = str(value).strip()
        return text or None


class DateRangeQuery(ReportOptions):
    """Query string accepted by the arbitrary date range report."""

    start_date: str = Field(..., min_length=1)
    end_date: str = Field(..., min_length=1)


def format_validation_error(error: ValidationError) -> str:
    """Return a concise human-readable description of validation issues."""

    messages: list[str] = []
    for issue in error.errors():
        location = ".".join(str(part) for part in issue.get("loc", ()))
        message = issue.get("msg", "Invalid value")
        if issue.get("type") == "missing":
            message = "field is required"
        if location:
            messages.append(f"Field '{location}': {message}")
        else:
            messages.append(message)

    details = "; ".join(messages) if messages else str(error)
    return f"Invalid report request: {details}"
