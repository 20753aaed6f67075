# backend/tennisplan/routes/v1/substitutes.py
"""
Substitute trainer routes - API v1

Assigning and removing happens on the session
(``/trainings/{session_id}/substitute``); this module lists assignments.

Endpoints:
    GET /?from=&to=  → Substitute assignments for sessions in the range
"""

from datetime import date, timedelta
import logging
from typing import Optional

from fastapi import APIRouter, Depends, Query

from ...api.dependencies.services import get_substitute_service
from ...core.constants import PLANNING_LOOKAHEAD_DAYS
from ...core.exceptions import DomainException
from ...core.timezone_utils import get_school_today
from ...schemas.substitute import SubstituteListResponse, SubstituteResponse
from ...services.substitute_service import SubstituteService
from ..utils import handle_domain_exception

logger = logging.getLogger(__name__)

router = APIRouter(tags=["substitutes-v1"])


@router.get("", response_model=SubstituteListResponse)
def list_substitutes(
    date_from: Optional[date] = Query(None, alias="from", description="Defaults to today"),
    date_to: Optional[date] = Query(None, alias="to", description="Inclusive; defaults to one week after 'from'"),
    service: SubstituteService = Depends(get_substitute_service),
) -> SubstituteListResponse:
    start = date_from or get_school_today()
    end = date_to or start + timedelta(days=PLANNING_LOOKAHEAD_DAYS - 1)
    try:
        assignments = service.list_substitutes(start, end)
    except DomainException as e:
        handle_domain_exception(e)
    return SubstituteListResponse(
        items=[SubstituteResponse.from_assignment(a) for a in assignments],
        total=len(assignments),
    )
