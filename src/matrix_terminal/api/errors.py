"""Relay error taxonomy.

Every failure of a relay request ends as one of these exceptions and is
rendered as ``{"error": ..., "details": ...}`` by ``relay_error_handler``.
None of them are retried.
"""

from __future__ import annotations

from fastapi import Request
from fastapi.responses import JSONResponse

from matrix_terminal.api.schemas import ErrorResponse


class RelayError(Exception):
    """Base class for errors returned to relay callers."""

    status_code = 500
    error = "Relay error"

    def __init__(self, details: str | None = None, *, error: str | None = None) -> None:
        if error is not None:
            self.error = error
        self.details = details
        super().__init__(self.error if details is None else f"{self.error}: {details}")

    def to_response(self) -> ErrorResponse:
        return ErrorResponse(error=self.error, details=self.details)


class ConfigurationError(RelayError):
    """A required provider credential is missing."""

    def __init__(self, credential: str) -> None:
        super().__init__(
            f"Please add {credential} to your environment or .env file",
            error=f"{credential} not configured",
        )


class ValidationError(RelayError):
    status_code = 400
    error = "Message is required and must be a string"


class ProviderAuthError(RelayError):
    error = "Invalid OpenAI API key"


class ProviderError(RelayError):
    error = "Error calling OpenAI API"


class EmptyReplyError(RelayError):
    """The provider answered but produced no usable text."""

    error = "No response content from OpenAI"


async def relay_error_handler(request: Request, exc: RelayError) -> JSONResponse:
    return JSONResponse(
        status_code=exc.status_code,
        content=exc.to_response().model_dump(exclude_none=True),
    )
