"""Error taxonomy for the scheduling core.

Service functions raise these; routers translate them to HTTP responses.
Lookups whose contract says "may not exist" return ``None`` instead.
"""
from contextlib import contextmanager
from typing import Iterator

from sqlalchemy.exc import SQLAlchemyError


class SchedulingError(Exception):
    """Base class for classes service errors."""


class NotFoundError(SchedulingError):
    """A referenced row that must exist does not."""


class IntegrityViolationError(SchedulingError):
    """A delete would orphan enrollments or attendance."""


class StoreFailureError(SchedulingError):
    """Any other data-store failure, tagged with the operation that hit it."""

    def __init__(self, operation: str, cause: Exception):
        self.operation = operation
        self.cause = cause
        super().__init__(f"Failed to {operation}: {cause}")


@contextmanager
def store_errors(operation: str) -> Iterator[None]:
    """Wrap SQLAlchemy errors raised inside the block as StoreFailureError."""
    try:
        yield
    except SQLAlchemyError as exc:
        raise StoreFailureError(operation, exc) from exc
