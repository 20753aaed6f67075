# backend/tennisplan/routes/v1/trainings.py
"""
Training session routes - API v1

Endpoints:
    GET /                           → List sessions (from/to/status filters)
    POST /                          → Create a session or a weekly series
    GET /upcoming                   → Sessions from today on
    POST /price-preview             → Price of an unsaved session
    GET /{session_id}               → Get session
    PATCH /{session_id}             → Update session (scope single/following)
    POST /{session_id}/complete     → Mark a planned session completed
    DELETE /{session_id}            → Delete session (scope single/following)
    PUT /{session_id}/substitute    → Assign or replace the substitute trainer
    DELETE /{session_id}/substitute → Remove the substitute trainer
"""

from datetime import date
import logging
from typing import List, Optional

from fastapi import APIRouter, Depends, Path, Query, Response, status

from ...api.dependencies.services import (
    get_pricing_service,
    get_substitute_service,
    get_training_service,
)
from ...core.constants import UPCOMING_SESSIONS_LIMIT
from ...core.exceptions import DomainException, NotFoundException
from ...models.enums import SessionStatus, UpdateScope
from ...schemas.substitute import SubstituteAssignRequest, SubstituteResponse
from ...schemas.training import (
    CompleteSessionResponse,
    DeleteSessionsResponse,
    PricePreviewRequest,
    PricePreviewResponse,
    TrainingSessionCreate,
    TrainingSessionListResponse,
    TrainingSessionResponse,
    TrainingSessionUpdate,
)
from ...services.pricing_service import PricingService, format_euro, round2
from ...services.substitute_service import SubstituteService
from ...services.training_service import TrainingService
from ..utils import ULID_PATH_PATTERN, handle_domain_exception

logger = logging.getLogger(__name__)

router = APIRouter(tags=["trainings-v1"])


def _list_response(sessions: List) -> TrainingSessionListResponse:
    return TrainingSessionListResponse(
        items=[TrainingSessionResponse.from_session(s) for s in sessions],
        total=len(sessions),
    )


@router.get("", response_model=TrainingSessionListResponse)
def list_sessions(
    date_from: Optional[date] = Query(None, alias="from"),
    date_to: Optional[date] = Query(None, alias="to"),
    session_status: Optional[SessionStatus] = Query(None, alias="status"),
    service: TrainingService = Depends(get_training_service),
) -> TrainingSessionListResponse:
    return _list_response(service.list_sessions(date_from=date_from, date_to=date_to, status=session_status))


@router.post("", response_model=TrainingSessionListResponse, status_code=status.HTTP_201_CREATED)
def create_sessions(
    payload: TrainingSessionCreate,
    service: TrainingService = Depends(get_training_service),
) -> TrainingSessionListResponse:
    """Create one session, or one per week through ``repeat_until`` when ``repeat_weekly`` is set."""
    try:
        sessions = service.create_sessions(payload)
    except DomainException as e:
        handle_domain_exception(e)
    return _list_response(sessions)


@router.get("/upcoming", response_model=TrainingSessionListResponse)
def upcoming_sessions(
    limit: int = Query(UPCOMING_SESSIONS_LIMIT, ge=1, le=200),
    service: TrainingService = Depends(get_training_service),
) -> TrainingSessionListResponse:
    return _list_response(service.upcoming(limit=limit))


@router.post("/price-preview", response_model=PricePreviewResponse)
def price_preview(
    payload: PricePreviewRequest,
    service: PricingService = Depends(get_pricing_service),
) -> PricePreviewResponse:
    try:
        price = service.preview(payload.rate_plan_id, payload.start_time, payload.end_time, payload.player_count)
    except DomainException as e:
        handle_domain_exception(e)
    return PricePreviewResponse(
        duration_minutes=price.duration_minutes,
        total=round2(price.total),
        per_player=round2(price.per_player),
        total_label=format_euro(price.total),
        per_player_label=format_euro(price.per_player),
    )


@router.get("/{session_id}", response_model=TrainingSessionResponse)
def get_session(
    session_id: str = Path(..., pattern=ULID_PATH_PATTERN),
    service: TrainingService = Depends(get_training_service),
) -> TrainingSessionResponse:
    try:
        return TrainingSessionResponse.from_session(service.get_session(session_id))
    except DomainException as e:
        handle_domain_exception(e)


@router.patch("/{session_id}", response_model=TrainingSessionListResponse)
def update_session(
    payload: TrainingSessionUpdate,
    session_id: str = Path(..., pattern=ULID_PATH_PATTERN),
    service: TrainingService = Depends(get_training_service),
) -> TrainingSessionListResponse:
    """Returns every session the edit was applied to."""
    try:
        sessions = service.update_session(session_id, payload)
    except DomainException as e:
        handle_domain_exception(e)
    return _list_response(sessions)


@router.post("/{session_id}/complete", response_model=CompleteSessionResponse)
def complete_session(
    session_id: str = Path(..., pattern=ULID_PATH_PATTERN),
    service: TrainingService = Depends(get_training_service),
) -> CompleteSessionResponse:
    try:
        session, changed = service.complete_session(session_id)
    except DomainException as e:
        handle_domain_exception(e)
    return CompleteSessionResponse(session=TrainingSessionResponse.from_session(session), changed=changed)


@router.delete("/{session_id}", response_model=DeleteSessionsResponse)
def delete_sessions(
    session_id: str = Path(..., pattern=ULID_PATH_PATTERN),
    scope: UpdateScope = Query(UpdateScope.SINGLE),
    service: TrainingService = Depends(get_training_service),
) -> DeleteSessionsResponse:
    try:
        deleted = service.delete_sessions(session_id, scope)
    except DomainException as e:
        handle_domain_exception(e)
    return DeleteSessionsResponse(deleted=deleted, scope=scope)


@router.put("/{session_id}/substitute", response_model=SubstituteResponse)
def assign_substitute(
    payload: SubstituteAssignRequest,
    session_id: str = Path(..., pattern=ULID_PATH_PATTERN),
    service: SubstituteService = Depends(get_substitute_service),
) -> SubstituteResponse:
    try:
        assignment = service.assign(session_id, payload.substitute_trainer_id, payload.reason)
    except DomainException as e:
        handle_domain_exception(e)
    return SubstituteResponse.from_assignment(assignment)


@router.delete("/{session_id}/substitute", status_code=status.HTTP_204_NO_CONTENT)
def remove_substitute(
    session_id: str = Path(..., pattern=ULID_PATH_PATTERN),
    service: SubstituteService = Depends(get_substitute_service),
) -> Response:
    try:
        removed = service.remove(session_id)
        if not removed:
            raise NotFoundException(
                "No substitute assigned to this session",
                code="SUBSTITUTE_NOT_FOUND",
                details={"session_id": session_id},
            )
    except DomainException as e:
        handle_domain_exception(e)
    return Response(status_code=status.HTTP_204_NO_CONTENT)
