# backend/tennisplan/routes/v1/registrations.py
"""
Training registration routes - API v1

The POST endpoint backs the public registration form; the rest is staff
facing.

Endpoints:
    POST /                            → Submit a registration (public)
    GET /?status=                     → List registrations
    GET /{registration_id}            → Get registration
    POST /{registration_id}/accept    → Accept and create a player
    POST /{registration_id}/decline   → Decline
"""

import logging
from typing import Optional

from fastapi import APIRouter, Depends, Path, Query, status

from ...api.dependencies.services import get_registration_service
from ...core.exceptions import DomainException
from ...models.enums import RegistrationStatus
from ...schemas.intake import RegistrationCreate, RegistrationListResponse, RegistrationResponse
from ...services.registration_service import RegistrationService
from ..utils import ULID_PATH_PATTERN, handle_domain_exception

logger = logging.getLogger(__name__)

router = APIRouter(tags=["registrations-v1"])


@router.post("", response_model=RegistrationResponse, status_code=status.HTTP_201_CREATED)
def submit_registration(
    payload: RegistrationCreate,
    service: RegistrationService = Depends(get_registration_service),
) -> RegistrationResponse:
    try:
        return RegistrationResponse.model_validate(service.submit(payload))
    except DomainException as e:
        handle_domain_exception(e)


@router.get("", response_model=RegistrationListResponse)
def list_registrations(
    registration_status: Optional[RegistrationStatus] = Query(None, alias="status"),
    service: RegistrationService = Depends(get_registration_service),
) -> RegistrationListResponse:
    registrations = service.list_registrations(registration_status)
    return RegistrationListResponse(
        items=[RegistrationResponse.model_validate(r) for r in registrations],
        total=len(registrations),
    )


@router.get("/{registration_id}", response_model=RegistrationResponse)
def get_registration(
    registration_id: str = Path(..., pattern=ULID_PATH_PATTERN),
    service: RegistrationService = Depends(get_registration_service),
) -> RegistrationResponse:
    try:
        return RegistrationResponse.model_validate(service.get_registration(registration_id))
    except DomainException as e:
        handle_domain_exception(e)


@router.post("/{registration_id}/accept", response_model=RegistrationResponse)
def accept_registration(
    registration_id: str = Path(..., pattern=ULID_PATH_PATTERN),
    service: RegistrationService = Depends(get_registration_service),
) -> RegistrationResponse:
    try:
        return RegistrationResponse.model_validate(service.accept(registration_id))
    except DomainException as e:
        handle_domain_exception(e)


@router.post("/{registration_id}/decline", response_model=RegistrationResponse)
def decline_registration(
    registration_id: str = Path(..., pattern=ULID_PATH_PATTERN),
    service: RegistrationService = Depends(get_registration_service),
) -> RegistrationResponse:
    try:
        return RegistrationResponse.model_validate(service.decline(registration_id))
    except DomainException as e:
        handle_domain_exception(e)
