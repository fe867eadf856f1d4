"""Ok/Err result type and the transport envelope built from it."""

from __future__ import annotations

import logging
from collections.abc import Callable
from dataclasses import dataclass
from typing import Any, Generic, TypeVar, Union

from pydantic import ValidationError
from sqlalchemy.exc import IntegrityError, SQLAlchemyError

from family_ledger.utils.errors import AppError, ConflictError, InvalidInputError, StorageError

T = TypeVar("T")
U = TypeVar("U")

logger = logging.getLogger(__name__)


@dataclass(frozen=True)
class Ok(Generic[T]):
    """Successful outcome carrying the call's data."""

    value: T

    def is_ok(self) -> bool:
        return True

    def map(self, f: Callable[[T], U]) -> Ok[U]:
        return Ok(f(self.value))

    def get_or_else(self, default: Any) -> T:
        return self.value

    def to_envelope(self) -> dict[str, Any]:
        return {"success": True, "data": self.value}


@dataclass(frozen=True)
class Err:
    """Failed outcome carrying a human-readable reason and a stable code."""

    error: str
    code: str = "INTERNAL_ERROR"

    def is_ok(self) -> bool:
        return False

    def map(self, f: Callable[[Any], Any]) -> Err:
        return self

    def get_or_else(self, default: T) -> T:
        return default

    def to_envelope(self) -> dict[str, Any]:
        return {"success": False, "error": self.error, "code": self.code}


Result = Union[Ok[T], Err]


def validation_message(exc: ValidationError) -> str:
    """Return the first pydantic error as a short ``field: message`` string."""
    errors = exc.errors()
    if not errors:
        return "Invalid request"
    first = errors[0]
    location = ".".join(str(part) for part in first.get("loc", ()) if part != "body")
    message = first.get("msg", "Invalid request")
    return f"{location}: {message}" if location else message


def to_app_error(exc: Exception) -> AppError | None:
    """Map known exception types onto the application error hierarchy."""
    if isinstance(exc, AppError):
        return exc
    if isinstance(exc, ValidationError):
        return InvalidInputError(validation_message(exc))
    if isinstance(exc, IntegrityError):
        return ConflictError(f"Integrity constraint violated: {exc.orig}", code="INTEGRITY_ERROR")
    if isinstance(exc, SQLAlchemyError):
        logger.error("Storage failure: %s", exc)
        return StorageError()
    return None


def capture(func: Callable[..., T], *args: Any, **kwargs: Any) -> Result[T]:
    """Run ``func`` and wrap its return value or raised error in a result."""
    try:
        return Ok(func(*args, **kwargs))
    except Exception as exc:
        app_error = to_app_error(exc)
        if app_error is None:
            logger.exception("Unhandled error in %s", getattr(func, "__name__", func))
            return Err(str(exc) or exc.__class__.__name__)
        logger.info("Request rejected: %s (%s)", app_error.message, app_error.code)
        return Err(app_error.message, app_error.code)
