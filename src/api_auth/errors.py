"""
Error taxonomy and the single HTTP boundary that renders it.

Every failure inside the service is raised as AuthError tagged with an
ErrorKind. Handlers never build error responses themselves; the exception
handlers installed by install_error_handlers() turn AuthError (and request
body validation errors) into the {"kind", "message"} envelope, with the
status taken from STATUS_CODES.
"""

from enum import Enum
from typing import Dict

from fastapi import FastAPI, Request
from fastapi.exceptions import RequestValidationError
from fastapi.responses import JSONResponse
from pydantic import BaseModel

from api_auth.logging import get_logger

logger = get_logger(__name__)


class ErrorKind(str, Enum):
    UNKNOWN_PROVIDER = "UnknownProvider"
    CODE_EXCHANGE_FAILED = "CodeExchangeFailed"
    IDENTITY_FETCH_FAILED = "IdentityFetchFailed"
    ROLE_NOT_FOUND = "RoleNotFound"
    ROLE_READ_FAILED = "RoleReadFailed"
    ROLE_WRITE_FAILED = "RoleWriteFailed"
    SIGNING_FAILURE = "SigningFailure"
    MISSING_REQUIRED_FIELD = "MissingRequiredField"
    MALFORMED_REQUEST = "MalformedRequest"


# Every kind is currently surfaced to clients as Unprocessable Entity.
STATUS_CODES: Dict[ErrorKind, int] = {kind: 422 for kind in ErrorKind}


class ErrorResponse(BaseModel):
    """Error envelope returned for every failed request."""

    kind: ErrorKind
    message: str


class AuthError(Exception):
    """A failure of one pipeline step, tagged with its kind."""

    def __init__(self, kind: ErrorKind, message: str):
        self.kind = kind
        self.message = message
        super().__init__(message)

    @property
    def status_code(self) -> int:
        return STATUS_CODES[self.kind]

    def to_response(self) -> ErrorResponse:
        return ErrorResponse(kind=self.kind, message=self.message)

    def __repr__(self) -> str:
        return f"AuthError({self.kind.value}, {self.message!r})"


async def auth_error_handler(request: Request, exc: AuthError) -> JSONResponse:
    logger.warning(
        "request_failed",
        path=request.url.path,
        method=request.method,
        kind=exc.kind.value,
        message=exc.message,
    )
    return JSONResponse(exc.to_response().model_dump(mode="json"), status_code=exc.status_code)


async def validation_error_handler(request: Request, exc: RequestValidationError) -> JSONResponse:
    """Render undecodable request bodies in the same envelope as AuthError."""
    first = exc.errors()[0] if exc.errors() else {}
    location = ".".join(str(part) for part in first.get("loc", ()))
    message = f"{location}: {first.get('msg', 'invalid request')}" if location else "invalid request"
    return await auth_error_handler(request, AuthError(ErrorKind.MALFORMED_REQUEST, message))


def install_error_handlers(app: FastAPI) -> None:
    """Register the error boundary on the application."""
    app.add_exception_handler(AuthError, auth_error_handler)
    app.add_exception_handler(RequestValidationError, validation_error_handler)
