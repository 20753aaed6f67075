# backend/tennisplan/routes/v1/planning.py
"""
Planning overview - API v1

Endpoints:
    GET /  → Upcoming sessions, trainer workload, substitutes and record counts
"""

from fastapi import APIRouter, Depends

from ...api.dependencies.services import get_planning_service
from ...schemas.planning import PlanningOverviewResponse
from ...services.planning_service import PlanningService

router = APIRouter(tags=["planning-v1"])


@router.get("", response_model=PlanningOverviewResponse)
def planning_overview(service: PlanningService = Depends(get_planning_service)) -> PlanningOverviewResponse:
    return service.overview()
