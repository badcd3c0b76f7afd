from typing import Optional

from fastapi import APIRouter, Depends
from services.classes_service.routers._shared import get_schedule_summary_service
from services.classes_service.schemas import MainPageScheduleSummary
from services.classes_service.services.summary import ScheduleSummaryService

router = APIRouter(prefix="/classes/public", tags=["public"])


@router.get("/schedule-summary", response_model=Optional[MainPageScheduleSummary])
async def get_schedule_summary(
    summary: ScheduleSummaryService = Depends(get_schedule_summary_service),
):
    """
    One aggregate description of when classes run, for the marketing pages.

    Served from a short-lived cache. Returns null when nothing is scheduled
    or the last refresh failed.
    """
    return await summary.get_main_page_schedule_data()
