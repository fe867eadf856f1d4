"""Shared response shapes."""

from typing import Generic, TypeVar

from pydantic import BaseModel

T = TypeVar("T")


class Envelope(BaseModel, Generic[T]):
    """Success envelope wrapping an endpoint's data."""

    success: bool = True
    data: T


class MutationResult(BaseModel):
    """Outcome of an update or delete: whether any row was affected."""

    success: bool
    changes: int
