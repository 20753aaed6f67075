# backend/tennisplan/routes/v1/calendar.py
"""
Calendar routes - API v1

Endpoints:
    GET /week?anchor=&trainer_id=  → Monday-based week grid with positioned events
"""

from datetime import date
import logging
from typing import Optional

from fastapi import APIRouter, Depends, Query

from ...api.dependencies.services import get_calendar_service
from ...core.exceptions import DomainException
from ...schemas.calendar import CalendarWeekResponse
from ...services.calendar_service import CalendarService
from ..utils import handle_domain_exception

logger = logging.getLogger(__name__)

router = APIRouter(tags=["calendar-v1"])


@router.get("/week", response_model=CalendarWeekResponse)
def calendar_week(
    anchor: Optional[date] = Query(None, description="Any date of the wanted week; defaults to today"),
    trainer_id: Optional[str] = Query(None, description="Only events whose effective trainer matches"),
    service: CalendarService = Depends(get_calendar_service),
) -> CalendarWeekResponse:
    try:
        return service.week(anchor=anchor, trainer_id=trainer_id)
    except DomainException as e:
        handle_domain_exception(e)
