"""Custom exception hierarchy for the Family Ledger API."""

from __future__ import annotations


class AppError(Exception):
    """Base application error with a stable machine-readable code."""

    def __init__(self, message: str, code: str, status_code: int = 400) -> None:
        self.message = message
        self.code = code
        self.status_code = status_code
        super().__init__(message)

    def to_dict(self) -> dict[str, object]:
        """Serialize the error in the failure envelope shape."""
        return {"success": False, "error": self.message, "code": self.code}


class NotFoundError(AppError):
    """Raised when a referenced resource does not exist."""

    def __init__(self, resource: str) -> None:
        super().__init__(message=f"{resource} not found", code="NOT_FOUND", status_code=404)


class ConflictError(AppError):
    """Raised on duplicate/conflicting operations."""

    def __init__(self, reason: str, code: str = "CONFLICT") -> None:
        super().__init__(message=reason, code=code, status_code=409)


class InvalidInputError(AppError):
    """Raised for request payload or parameter validation issues."""

    def __init__(self, reason: str) -> None:
        super().__init__(message=reason, code="INVALID_INPUT", status_code=422)


class StorageError(AppError):
    """Raised when the underlying database read or write fails."""

    def __init__(self, reason: str = "Database request failed") -> None:
        super().__init__(message=reason, code="STORAGE_ERROR", status_code=500)
