"""
Error taxonomy of the todo service.

Each error knows its HTTP status and how to render itself; the handlers
registered by ``register_exception_handlers`` turn them into JSON responses.
"""
from __future__ import annotations

from typing import Any, Dict, List, Optional

from fastapi import FastAPI, Request, status
from fastapi.exceptions import RequestValidationError
from fastapi.responses import JSONResponse

from .logging_config import get_logger

logger = get_logger(__name__)


class TodoAPIError(Exception):
    """Base class for every error reported to API callers."""

    status_code: int = status.HTTP_500_INTERNAL_SERVER_ERROR

    def __init__(self, message: str, error: Optional[str] = None) -> None:
        super().__init__(message)
        self.message = message
        self.error = error

    def to_dict(self) -> Dict[str, Any]:
        body: Dict[str, Any] = {"message": self.message}
        if self.error is not None:
            body["error"] = self.error
        return body


class InvalidPayload(TodoAPIError):
    """Request body is not a well-formed JSON object."""

    status_code = status.HTTP_400_BAD_REQUEST

    def __init__(self, error: Optional[str] = None) -> None:
        super().__init__("invalid data", error)


class ValidationError(TodoAPIError):
    """Request body is well-formed but semantically invalid."""

    status_code = status.HTTP_400_BAD_REQUEST


class InvalidIdentifier(TodoAPIError):
    """Path id is not a valid store identifier."""

    status_code = status.HTTP_400_BAD_REQUEST

    def __init__(self, raw: str) -> None:
        super().__init__("invalid id")
        self.raw = raw


class StoreUnavailable(TodoAPIError):
    """A round trip to the document store could not complete."""

    status_code = status.HTTP_500_INTERNAL_SERVER_ERROR

    def __init__(self, message: str = "database error", error: Optional[str] = None) -> None:
        super().__init__(message, error)


def _is_payload_error(err: Dict[str, Any]) -> bool:
    # Errors located on the body itself (not on one of its fields) mean the
    # payload could not be decoded into an object at all.
    loc = tuple(err.get("loc", ()))
    return err.get("type") == "json_invalid" or loc == ("body",)


# PUBLIC_INTERFACE
def translate_validation_error(exc: RequestValidationError) -> TodoAPIError:
    """
    Map FastAPI's request validation failure onto the service taxonomy.

    - Malformed JSON or a body that is not an object -> InvalidPayload
    - Field-level failures (missing/empty title, wrong types) -> ValidationError
    """
    errors: List[Dict[str, Any]] = list(exc.errors())
    payload_errors = [e for e in errors if _is_payload_error(e)]
    if payload_errors:
        return InvalidPayload(str(payload_errors[0].get("msg", "")))

    for err in errors:
        loc = tuple(err.get("loc", ()))
        if loc[-1:] == ("title",):
            return ValidationError("title is required")

    first = errors[0] if errors else {}
    field = ".".join(str(p) for p in first.get("loc", ())[1:]) or "body"
    return ValidationError(f"invalid value for {field}", str(first.get("msg", "")))


# PUBLIC_INTERFACE
def register_exception_handlers(app: FastAPI) -> None:
    """Install JSON renderers for the service errors on ``app``."""

    @app.exception_handler(RequestValidationError)
    async def validation_exception_handler(request: Request, exc: RequestValidationError) -> JSONResponse:
        """
        Return 400 with ``{message[, error]}`` for undecodable or invalid bodies.
        """
        translated = translate_validation_error(exc)
        logger.info("Rejected %s %s: %s", request.method, request.url.path, translated.message)
        return JSONResponse(status_code=translated.status_code, content=translated.to_dict())

    @app.exception_handler(TodoAPIError)
    async def todo_api_exception_handler(request: Request, exc: TodoAPIError) -> JSONResponse:
        if isinstance(exc, StoreUnavailable):
            logger.error("Store failure on %s %s: %s", request.method, request.url.path, exc.error)
        else:
            logger.info("Rejected %s %s: %s", request.method, request.url.path, exc.message)
        return JSONResponse(status_code=exc.status_code, content=exc.to_dict())
