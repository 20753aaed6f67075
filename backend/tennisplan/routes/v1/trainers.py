# backend/tennisplan/routes/v1/trainers.py
"""
Trainer routes - API v1

Endpoints:
    GET /                  → List trainers
    POST /                 → Create trainer
    GET /{trainer_id}      → Get trainer
    PATCH /{trainer_id}    → Update trainer
    DELETE /{trainer_id}   → Delete trainer (409 while sessions exist)
"""

import logging

from fastapi import APIRouter, Depends, Path, Query, Response, status

from ...api.dependencies.services import get_trainer_service
from ...core.exceptions import DomainException
from ...schemas.trainer import TrainerCreate, TrainerListResponse, TrainerResponse, TrainerUpdate
from ...services.trainer_service import TrainerService
from ..utils import ULID_PATH_PATTERN, handle_domain_exception

logger = logging.getLogger(__name__)

router = APIRouter(tags=["trainers-v1"])


@router.get("", response_model=TrainerListResponse)
def list_trainers(
    include_inactive: bool = Query(True, description="Include deactivated trainers"),
    service: TrainerService = Depends(get_trainer_service),
) -> TrainerListResponse:
    trainers = service.list_trainers(include_inactive=include_inactive)
    return TrainerListResponse(items=[TrainerResponse.model_validate(t) for t in trainers], total=len(trainers))


@router.post("", response_model=TrainerResponse, status_code=status.HTTP_201_CREATED)
def create_trainer(
    payload: TrainerCreate,
    service: TrainerService = Depends(get_trainer_service),
) -> TrainerResponse:
    try:
        return TrainerResponse.model_validate(service.create_trainer(payload))
    except DomainException as e:
        handle_domain_exception(e)


@router.get("/{trainer_id}", response_model=TrainerResponse)
def get_trainer(
    trainer_id: str = Path(..., pattern=ULID_PATH_PATTERN),
    service: TrainerService = Depends(get_trainer_service),
) -> TrainerResponse:
    try:
        return TrainerResponse.model_validate(service.get_trainer(trainer_id))
    except DomainException as e:
        handle_domain_exception(e)


@router.patch("/{trainer_id}", response_model=TrainerResponse)
def update_trainer(
    payload: TrainerUpdate,
    trainer_id: str = Path(..., pattern=ULID_PATH_PATTERN),
    service: TrainerService = Depends(get_trainer_service),
) -> TrainerResponse:
    try:
        return TrainerResponse.model_validate(service.update_trainer(trainer_id, payload))
    except DomainException as e:
        handle_domain_exception(e)


@router.delete("/{trainer_id}", status_code=status.HTTP_204_NO_CONTENT)
def delete_trainer(
    trainer_id: str = Path(..., pattern=ULID_PATH_PATTERN),
    service: TrainerService = Depends(get_trainer_service),
) -> Response:
    try:
        service.delete_trainer(trainer_id)
    except DomainException as e:
        handle_domain_exception(e)
    return Response(status_code=status.HTTP_204_NO_CONTENT)
