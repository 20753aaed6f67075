# backend/tennisplan/services/template_service.py
"""
Template rendering service for the Tennisplan backend.

Provides centralized template rendering using Jinja2 for invoice pages
and email bodies. Common context (school name and contact details) is
merged into every render.
"""

from datetime import date, datetime
import logging
from pathlib import Path
from typing import Any, Dict, Optional

from jinja2 import Environment, FileSystemLoader, TemplateNotFound
from sqlalchemy.orm import Session

from ..core.config import settings
from ..utils.money import format_euro
from .base import BaseService

logger = logging.getLogger(__name__)

TEMPLATE_DIR = Path(__file__).parent.parent / "templates"


class TemplateRegistry:
    """Template paths relative to the templates directory."""

    INVOICE = "invoice.html"
    NEWSLETTER = "email/newsletter.html"
    REGISTRATION_NOTIFICATION = "email/registration_notification.html"
    SEPA_MANDATE_CONFIRMATION = "email/sepa_mandate_confirmation.html"


class TemplateService(BaseService):
    """
    Centralized template rendering service using Jinja2.

    Does not touch the database; ``db`` is accepted so the service can be
    built the same way as every other service.
    """

    def __init__(self, db: Optional[Session] = None):
        super().__init__(db)

        self.env = Environment(
            loader=FileSystemLoader(TEMPLATE_DIR),
            autoescape=True,
            trim_blocks=True,
            lstrip_blocks=True,
        )
        self._register_custom_filters()

    def _register_custom_filters(self) -> None:
        self.env.filters["euro"] = format_euro

        def format_date(value: Any, format_str: str = "%d.%m.%Y") -> str:
            """Format a date the German way."""
            if isinstance(value, (date, datetime)):
                return value.strftime(format_str)
            return str(value or "")

        self.env.filters["format_date"] = format_date

        def format_time(value: Any) -> str:
            if hasattr(value, "strftime"):
                return value.strftime("%H:%M")
            return str(value or "")

        self.env.filters["format_time"] = format_time

        def paragraphs(value: str) -> list[str]:
            """Split plain text on blank lines."""
            blocks = [block.strip() for block in (value or "").replace("\r\n", "\n").split("\n\n")]
            return [block for block in blocks if block]

        self.env.filters["paragraphs"] = paragraphs

    def get_common_context(self) -> Dict[str, Any]:
        return {
            "school_name": settings.school_name,
            "school_address": settings.school_address,
            "school_email": settings.school_email,
            "school_iban": settings.school_iban,
            "current_year": datetime.now().year,
        }

    @BaseService.measure_operation("render_template")
    def render_template(self, template_name: str, context: Optional[Dict[str, Any]] = None, **kwargs: Any) -> str:
        """
        Render a template with the given context.

        Raises:
            TemplateNotFound: If template doesn't exist
        """
        try:
            template = self.env.get_template(template_name)
        except TemplateNotFound:
            self.logger.error(f"Template not found: {template_name}")
            raise

        full_context = self.get_common_context()
        if context:
            full_context.update(context)
        full_context.update(kwargs)

        rendered = template.render(full_context)
        self.logger.debug(f"Successfully rendered template: {template_name}")
        return rendered
