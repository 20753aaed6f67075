# backend/tennisplan/routes/v1/newsletter.py
"""
Newsletter routes - API v1

Endpoints:
    GET /recipients  → Default recipient list (players with an email)
    POST /send       → Send the newsletter one mail at a time
"""

import logging
from typing import List

from fastapi import APIRouter, Depends

from ...api.dependencies.services import get_newsletter_service
from ...core.exceptions import DomainException
from ...schemas.newsletter import NewsletterRequest, NewsletterResponse
from ...services.newsletter_service import NewsletterService
from ..utils import handle_domain_exception

logger = logging.getLogger(__name__)

router = APIRouter(tags=["newsletter-v1"])


@router.get("/recipients", response_model=List[str])
def default_recipients(service: NewsletterService = Depends(get_newsletter_service)) -> List[str]:
    return service.default_recipients()


@router.post("/send", response_model=NewsletterResponse)
def send_newsletter(
    payload: NewsletterRequest,
    service: NewsletterService = Depends(get_newsletter_service),
) -> NewsletterResponse:
    try:
        return service.send(payload)
    except DomainException as e:
        handle_domain_exception(e)
