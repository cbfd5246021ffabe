"""Common Pydantic schemas shared across the API."""

from typing import Any

from pydantic import BaseModel


class ErrorResponse(BaseModel):
    """Standardized error response."""

    error_code: str
    message: str
    details: Any | None = None


class CountResponse(BaseModel):
    """A single aggregate number."""

    data: int


class FlagResponse(BaseModel):
    """A single yes/no answer."""

    data: bool


def blank_to_none(value: Any) -> Any:
    """Treat empty or whitespace-only optional text as absent."""
    if isinstance(value, str) and not value.strip():
        return None
    return value
