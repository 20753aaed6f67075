"""
Newsletter Service for the Tennisplan backend.

Sends a plain-text newsletter to players one recipient at a time, so a
single bad address does not stop the rest of the mail-out.
"""

import logging
from typing import List, Optional

from sqlalchemy.orm import Session

from ..core.config import settings
from ..core.exceptions import ServiceException, ValidationException
from ..repositories.factory import RepositoryFactory
from ..schemas.newsletter import NewsletterRequest, NewsletterResponse
from .base import BaseService
from .email import EmailService, get_email_service
from .template_service import TemplateRegistry, TemplateService

logger = logging.getLogger(__name__)


class NewsletterService(BaseService):
    def __init__(
        self,
        db: Session,
        email_service: Optional[EmailService] = None,
        template_service: Optional[TemplateService] = None,
    ):
        super().__init__(db)
        self.player_repository = RepositoryFactory.create_player_repository(db)
        self.template_service = template_service or TemplateService(db)
        self._email_service = email_service

    @property
    def email_service(self) -> EmailService:
        if self._email_service is None:
            self._email_service = get_email_service(self.db)
        return self._email_service

    def default_recipients(self) -> List[str]:
        """Contact emails of all players, de-duplicated case-insensitively."""
        seen = set()
        recipients = []
        for player in self.player_repository.with_email():
            address = (player.contact_email or "").strip()
            if address and address.lower() not in seen:
                seen.add(address.lower())
                recipients.append(address)
        return recipients

    @BaseService.measure_operation("send_newsletter")
    def send(self, request: NewsletterRequest) -> NewsletterResponse:
        """
        Send the newsletter.

        Raises:
            ValidationException: no recipients
            ServiceException: every single send failed
        """
        if request.to is None:
            recipients = self.default_recipients()
        else:
            recipients = list(dict.fromkeys(address.strip() for address in request.to if address and address.strip()))
        if not recipients:
            raise ValidationException("No recipients", code="NO_RECIPIENTS")

        from_name = request.from_name or settings.school_name
        html_content = self.template_service.render_template(
            TemplateRegistry.NEWSLETTER,
            context={"subject": request.subject, "body": request.body, "from_name": from_name},
        )

        sent = 0
        errors: List[str] = []
        for recipient in recipients:
            try:
                self.email_service.send_email(
                    to_email=recipient,
                    subject=request.subject,
                    html_content=html_content,
                    text_content=request.body,
                    from_name=from_name,
                    kind="newsletter",
                )
                sent += 1
            except ServiceException as e:
                errors.append(f"{recipient}: {e.__cause__ or e.message}")

        self.log_operation("send_newsletter", recipients=len(recipients), sent=sent, failed=len(errors))

        if sent == 0:
            raise ServiceException(
                "Newsletter could not be sent to any recipient",
                code="NEWSLETTER_FAILED",
                details={"errors": errors},
            )
        return NewsletterResponse(sent=sent, failed=len(errors), errors=errors)
