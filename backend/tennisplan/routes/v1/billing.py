# backend/tennisplan/routes/v1/billing.py
"""
Monthly billing routes - API v1

Endpoints:
    GET /{month}                                  → Monthly summary per player and trainer
    GET /{month}/players/{player_id}/payment      → Payment state of one player
    POST /{month}/players/{player_id}/paid        → Record a payment
    DELETE /{month}/players/{player_id}/paid      → Mark open again
    POST /{month}/players/{player_id}/toggle      → Flip paid/open (cash)
    GET /{month}/players/{player_id}/invoice      → Invoice as HTML
"""

import logging
from typing import Optional

from fastapi import APIRouter, Body, Depends, Path
from fastapi.responses import HTMLResponse

from ...api.dependencies.services import get_billing_service
from ...core.exceptions import DomainException
from ...schemas.billing import MarkPaidRequest, MonthlyBillingResponse, PaymentStatusResponse
from ...services.billing_service import BillingService
from ..utils import MONTH_PATH_PATTERN, ULID_PATH_PATTERN, handle_domain_exception

logger = logging.getLogger(__name__)

router = APIRouter(tags=["billing-v1"])


@router.get("/{month}", response_model=MonthlyBillingResponse)
def monthly_summary(
    month: str = Path(..., pattern=MONTH_PATH_PATTERN, description="YYYY-MM"),
    service: BillingService = Depends(get_billing_service),
) -> MonthlyBillingResponse:
    try:
        return service.monthly_summary(month)
    except DomainException as e:
        handle_domain_exception(e)


@router.get("/{month}/players/{player_id}/payment", response_model=PaymentStatusResponse)
def payment_status(
    month: str = Path(..., pattern=MONTH_PATH_PATTERN),
    player_id: str = Path(..., pattern=ULID_PATH_PATTERN),
    service: BillingService = Depends(get_billing_service),
) -> PaymentStatusResponse:
    try:
        return service.get_payment_status(month, player_id)
    except DomainException as e:
        handle_domain_exception(e)


@router.post("/{month}/players/{player_id}/paid", response_model=PaymentStatusResponse)
def mark_paid(
    month: str = Path(..., pattern=MONTH_PATH_PATTERN),
    player_id: str = Path(..., pattern=ULID_PATH_PATTERN),
    payload: Optional[MarkPaidRequest] = Body(None),
    service: BillingService = Depends(get_billing_service),
) -> PaymentStatusResponse:
    """Record the payment; the amount defaults to the player's sum for the month."""
    payload = payload or MarkPaidRequest()
    try:
        return service.mark_paid(
            month,
            player_id,
            method=payload.method,
            amount=payload.amount,
            note=payload.note,
        )
    except DomainException as e:
        handle_domain_exception(e)


@router.delete("/{month}/players/{player_id}/paid", response_model=PaymentStatusResponse)
def mark_open(
    month: str = Path(..., pattern=MONTH_PATH_PATTERN),
    player_id: str = Path(..., pattern=ULID_PATH_PATTERN),
    service: BillingService = Depends(get_billing_service),
) -> PaymentStatusResponse:
    try:
        return service.mark_open(month, player_id)
    except DomainException as e:
        handle_domain_exception(e)


@router.post("/{month}/players/{player_id}/toggle", response_model=PaymentStatusResponse)
def toggle_paid(
    month: str = Path(..., pattern=MONTH_PATH_PATTERN),
    player_id: str = Path(..., pattern=ULID_PATH_PATTERN),
    service: BillingService = Depends(get_billing_service),
) -> PaymentStatusResponse:
    try:
        return service.toggle_paid(month, player_id)
    except DomainException as e:
        handle_domain_exception(e)


@router.get("/{month}/players/{player_id}/invoice", response_class=HTMLResponse)
def invoice(
    month: str = Path(..., pattern=MONTH_PATH_PATTERN),
    player_id: str = Path(..., pattern=ULID_PATH_PATTERN),
    service: BillingService = Depends(get_billing_service),
) -> HTMLResponse:
    try:
        html = service.invoice_html(month, player_id)
    except DomainException as e:
        handle_domain_exception(e)
    return HTMLResponse(content=html)
