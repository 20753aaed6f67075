# backend/tennisplan/routes/v1/sepa_mandates.py
"""
SEPA direct-debit mandate routes - API v1

Endpoints:
    POST /                     → Submit a signed mandate (public)
    GET /                      → List mandates
    GET /{mandate_id}          → Get mandate
    PATCH /{mandate_id}/player → Link or unlink a player
"""

import logging

from fastapi import APIRouter, Depends, Path, status

from ...api.dependencies.services import get_sepa_mandate_service
from ...core.exceptions import DomainException
from ...schemas.intake import (
    SepaMandateCreate,
    SepaMandateLinkRequest,
    SepaMandateListResponse,
    SepaMandateResponse,
)
from ...services.sepa_mandate_service import SepaMandateService
from ..utils import ULID_PATH_PATTERN, handle_domain_exception

logger = logging.getLogger(__name__)

router = APIRouter(tags=["sepa-mandates-v1"])


@router.post("", response_model=SepaMandateResponse, status_code=status.HTTP_201_CREATED)
def submit_mandate(
    payload: SepaMandateCreate,
    service: SepaMandateService = Depends(get_sepa_mandate_service),
) -> SepaMandateResponse:
    try:
        return SepaMandateResponse.from_mandate(service.submit(payload))
    except DomainException as e:
        handle_domain_exception(e)


@router.get("", response_model=SepaMandateListResponse)
def list_mandates(service: SepaMandateService = Depends(get_sepa_mandate_service)) -> SepaMandateListResponse:
    mandates = service.list_mandates()
    return SepaMandateListResponse(items=[SepaMandateResponse.from_mandate(m) for m in mandates], total=len(mandates))


@router.get("/{mandate_id}", response_model=SepaMandateResponse)
def get_mandate(
    mandate_id: str = Path(..., pattern=ULID_PATH_PATTERN),
    service: SepaMandateService = Depends(get_sepa_mandate_service),
) -> SepaMandateResponse:
    try:
        return SepaMandateResponse.from_mandate(service.get_mandate(mandate_id))
    except DomainException as e:
        handle_domain_exception(e)


@router.patch("/{mandate_id}/player", response_model=SepaMandateResponse)
def link_player(
    payload: SepaMandateLinkRequest,
    mandate_id: str = Path(..., pattern=ULID_PATH_PATTERN),
    service: SepaMandateService = Depends(get_sepa_mandate_service),
) -> SepaMandateResponse:
    try:
        return SepaMandateResponse.from_mandate(service.link_player(mandate_id, payload.player_id))
    except DomainException as e:
        handle_domain_exception(e)
