"""Helpers shared by the classes service routers."""

from contextlib import contextmanager
from typing import Iterator

from fastapi import HTTPException, Request, status
from libs.common.logging import get_logger
from services.classes_service.errors import (
    IntegrityViolationError,
    NotFoundError,
    StoreFailureError,
)
from services.classes_service.services.summary import ScheduleSummaryService

logger = get_logger(__name__)


@contextmanager
def http_errors() -> Iterator[None]:
    """Translate service-layer errors into HTTP responses."""
    try:
        yield
    except NotFoundError as exc:
        raise HTTPException(status_code=status.HTTP_404_NOT_FOUND, detail=str(exc))
    except IntegrityViolationError as exc:
        raise HTTPException(status_code=status.HTTP_409_CONFLICT, detail=str(exc))
    except StoreFailureError as exc:
        logger.error("Store failure during %s: %s", exc.operation, exc.cause)
        raise HTTPException(
            status_code=status.HTTP_500_INTERNAL_SERVER_ERROR, detail=str(exc)
        )


def get_schedule_summary_service(request: Request) -> ScheduleSummaryService:
    """The application's summary service (owns the process-wide cache)."""
    return request.app.state.schedule_summary
