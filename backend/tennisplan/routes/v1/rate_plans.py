# backend/tennisplan/routes/v1/rate_plans.py
"""
Rate plan routes - API v1

Endpoints:
    GET /                  → List rate plans
    POST /                 → Create rate plan
    GET /{rate_plan_id}    → Get rate plan
    PATCH /{rate_plan_id}  → Update rate plan
    DELETE /{rate_plan_id} → Delete rate plan (sessions keep existing without a plan)
"""

import logging

from fastapi import APIRouter, Depends, Path, Response, status

from ...api.dependencies.services import get_rate_plan_service
from ...core.exceptions import DomainException
from ...schemas.rate_plan import RatePlanCreate, RatePlanListResponse, RatePlanResponse, RatePlanUpdate
from ...services.rate_plan_service import RatePlanService
from ..utils import ULID_PATH_PATTERN, handle_domain_exception

logger = logging.getLogger(__name__)

router = APIRouter(tags=["rate-plans-v1"])


@router.get("", response_model=RatePlanListResponse)
def list_rate_plans(service: RatePlanService = Depends(get_rate_plan_service)) -> RatePlanListResponse:
    plans = service.list_rate_plans()
    return RatePlanListResponse(items=[RatePlanResponse.model_validate(p) for p in plans], total=len(plans))


@router.post("", response_model=RatePlanResponse, status_code=status.HTTP_201_CREATED)
def create_rate_plan(
    payload: RatePlanCreate,
    service: RatePlanService = Depends(get_rate_plan_service),
) -> RatePlanResponse:
    try:
        return RatePlanResponse.model_validate(service.create_rate_plan(payload))
    except DomainException as e:
        handle_domain_exception(e)


@router.get("/{rate_plan_id}", response_model=RatePlanResponse)
def get_rate_plan(
    rate_plan_id: str = Path(..., pattern=ULID_PATH_PATTERN),
    service: RatePlanService = Depends(get_rate_plan_service),
) -> RatePlanResponse:
    try:
        return RatePlanResponse.model_validate(service.get_rate_plan(rate_plan_id))
    except DomainException as e:
        handle_domain_exception(e)


@router.patch("/{rate_plan_id}", response_model=RatePlanResponse)
def update_rate_plan(
    payload: RatePlanUpdate,
    rate_plan_id: str = Path(..., pattern=ULID_PATH_PATTERN),
    service: RatePlanService = Depends(get_rate_plan_service),
) -> RatePlanResponse:
    try:
        return RatePlanResponse.model_validate(service.update_rate_plan(rate_plan_id, payload))
    except DomainException as e:
        handle_domain_exception(e)


@router.delete("/{rate_plan_id}", status_code=status.HTTP_204_NO_CONTENT)
def delete_rate_plan(
    rate_plan_id: str = Path(..., pattern=ULID_PATH_PATTERN),
    service: RatePlanService = Depends(get_rate_plan_service),
) -> Response:
    try:
        service.delete_rate_plan(rate_plan_id)
    except DomainException as e:
        handle_domain_exception(e)
    return Response(status_code=status.HTTP_204_NO_CONTENT)
