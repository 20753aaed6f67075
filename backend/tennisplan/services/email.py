# backend/tennisplan/services/email.py
"""
Email Service for the Tennisplan backend.

Sends email through the Resend API. Development setups use the console
provider, which logs the message instead of sending it. Which one is used
is decided by ``settings.email_provider``.
"""

import logging
import re
from typing import Any, Dict, Optional

import resend
from sqlalchemy.orm import Session

from ..core.config import settings
from ..core.exceptions import ServiceException
from ..models.intake import RegistrationRequest, SepaMandate
from ..monitoring.prometheus_metrics import prometheus_metrics
from ..schemas.intake import mask_iban
from .base import BaseService
from .email_subjects import EmailSubject
from .template_service import TemplateRegistry, TemplateService

logger = logging.getLogger(__name__)

SENDER_ADDRESS_REGEX = re.compile(r"<([^>]+)>")


def html_to_text(html_content: str) -> str:
    """Convert HTML content to plain text for the text part of a mail."""
    text = re.sub(r"<[^>]+>", "", html_content)
    text = re.sub(r"\s+", " ", text)
    return text.strip()


def sender_address(from_email: str) -> str:
    """``Name <addr>`` -> ``addr``."""
    match = SENDER_ADDRESS_REGEX.search(from_email)
    return match.group(1).strip() if match else from_email.strip()


class EmailService(BaseService):
    """
    Service for sending emails using Resend API.

    Subclasses override ``_deliver`` only; building the sender, the text part,
    logging and metrics are shared.
    """

    provider = "resend"

    def __init__(self, db: Optional[Session] = None, template_service: Optional[TemplateService] = None):
        super().__init__(db)
        self.template_service = template_service or TemplateService(db)
        self.from_email = settings.from_email
        self.reply_to = settings.email_reply_to
        self._configure()

    def _configure(self) -> None:
        api_key = settings.resend_api_key.get_secret_value() if settings.resend_api_key else ""
        if not api_key:
            raise ServiceException("Resend API key not configured", code="EMAIL_NOT_CONFIGURED")
        resend.api_key = api_key

    def _deliver(self, email_data: Dict[str, Any]) -> Dict[str, Any]:
        return resend.Emails.send(email_data)

    @BaseService.measure_operation("send_email")
    def send_email(
        self,
        to_email: str,
        subject: str,
        html_content: str,
        text_content: Optional[str] = None,
        from_name: Optional[str] = None,
        kind: str = "generic",
    ) -> Dict[str, Any]:
        """
        Send a single email.

        Raises:
            ServiceException: If email sending fails
        """
        sender = f"{from_name} <{sender_address(self.from_email)}>" if from_name else self.from_email
        email_data: Dict[str, Any] = {
            "from": sender,
            "to": [to_email],
            "subject": subject,
            "html": html_content,
            "text": text_content or html_to_text(html_content),
        }
        if self.reply_to:
            email_data["reply_to"] = self.reply_to

        try:
            response = self._deliver(email_data)
        except Exception as e:
            error_msg = str(e) or type(e).__name__
            self.logger.error(f"Failed to send email to {to_email}: {error_msg}")
            prometheus_metrics.inc_email(kind, "error")
            raise ServiceException(f"Email sending failed: {error_msg}", code="EMAIL_SEND_FAILED") from e

        prometheus_metrics.inc_email(kind, "sent")
        self.log_operation("email_sent", to_email=to_email, subject=subject, provider=self.provider, kind=kind)
        return response if isinstance(response, dict) else {"id": getattr(response, "id", None)}

    @BaseService.measure_operation("send_registration_notification")
    def send_registration_notification(self, registration: RegistrationRequest) -> bool:
        """Tell the school about a new registration. Failures are logged, not raised."""
        try:
            html_content = self.template_service.render_template(
                TemplateRegistry.REGISTRATION_NOTIFICATION,
                context={"registration": registration},
            )
            self.send_email(
                to_email=settings.school_email,
                subject=EmailSubject.registration_notification(registration.name),
                html_content=html_content,
                kind="registration",
            )
            return True
        except ServiceException:
            return False

    @BaseService.measure_operation("send_sepa_mandate_confirmation")
    def send_sepa_mandate_confirmation(self, mandate: SepaMandate) -> bool:
        """Send the mandate reference to the account holder. Failures are logged, not raised."""
        try:
            html_content = self.template_service.render_template(
                TemplateRegistry.SEPA_MANDATE_CONFIRMATION,
                context={"mandate": mandate, "iban_masked": mask_iban(mandate.iban)},
            )
            self.send_email(
                to_email=mandate.email,
                subject=EmailSubject.sepa_mandate_confirmation(mandate.mandate_reference),
                html_content=html_content,
                kind="sepa_mandate",
            )
            return True
        except ServiceException:
            return False


class ConsoleEmailService(EmailService):
    """Email service that logs messages instead of sending them."""

    provider = "console"

    def _configure(self) -> None:
        self.logger.info("Console email provider active; emails are logged, not sent")

    def _deliver(self, email_data: Dict[str, Any]) -> Dict[str, Any]:
        self.logger.info(
            "[console email] from=%s to=%s subject=%s\n%s",
            email_data["from"],
            ", ".join(email_data["to"]),
            email_data["subject"],
            email_data["text"],
        )
        return {"id": None, "provider": self.provider}


def get_email_service(db: Optional[Session] = None) -> EmailService:
    """Build the email service for the configured provider."""
    if settings.email_provider == "resend":
        return EmailService(db)
    return ConsoleEmailService(db)
