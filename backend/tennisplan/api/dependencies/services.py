# backend/tennisplan/api/dependencies/services.py
"""
Service layer dependencies for dependency injection.

This module provides factory functions that create service instances
with their required dependencies properly injected.
"""

import logging

from fastapi import Depends
from sqlalchemy.orm import Session

from ...database import get_db
from ...services.billing_service import BillingService
from ...services.calendar_service import CalendarService
from ...services.data_admin_service import DataAdminService
from ...services.email import EmailService
from ...services.email import get_email_service as build_email_service
from ...services.newsletter_service import NewsletterService
from ...services.planning_service import PlanningService
from ...services.player_service import PlayerService
from ...services.pricing_service import PricingService
from ...services.rate_plan_service import RatePlanService
from ...services.registration_service import RegistrationService
from ...services.sepa_mandate_service import SepaMandateService
from ...services.substitute_service import SubstituteService
from ...services.template_service import TemplateService
from ...services.trainer_service import TrainerService
from ...services.training_service import TrainingService

logger = logging.getLogger(__name__)


def get_template_service() -> TemplateService:
    return TemplateService()


def get_email_service(
    db: Session = Depends(get_db), template_service: TemplateService = Depends(get_template_service)
) -> EmailService:
    """Email service for the configured provider (Resend or console)."""
    service = build_email_service(db)
    service.template_service = template_service
    return service


def get_trainer_service(db: Session = Depends(get_db)) -> TrainerService:
    return TrainerService(db)


def get_player_service(db: Session = Depends(get_db)) -> PlayerService:
    return PlayerService(db)


def get_rate_plan_service(db: Session = Depends(get_db)) -> RatePlanService:
    return RatePlanService(db)


def get_pricing_service(db: Session = Depends(get_db)) -> PricingService:
    return PricingService(db)


def get_training_service(db: Session = Depends(get_db)) -> TrainingService:
    return TrainingService(db)


def get_substitute_service(db: Session = Depends(get_db)) -> SubstituteService:
    return SubstituteService(db)


def get_calendar_service(db: Session = Depends(get_db)) -> CalendarService:
    return CalendarService(db)


def get_planning_service(db: Session = Depends(get_db)) -> PlanningService:
    return PlanningService(db)


def get_billing_service(
    db: Session = Depends(get_db), template_service: TemplateService = Depends(get_template_service)
) -> BillingService:
    return BillingService(db, template_service=template_service)


def get_registration_service(
    db: Session = Depends(get_db), email_service: EmailService = Depends(get_email_service)
) -> RegistrationService:
    return RegistrationService(db, email_service=email_service)


def get_sepa_mandate_service(
    db: Session = Depends(get_db), email_service: EmailService = Depends(get_email_service)
) -> SepaMandateService:
    return SepaMandateService(db, email_service=email_service)


def get_newsletter_service(
    db: Session = Depends(get_db),
    email_service: EmailService = Depends(get_email_service),
    template_service: TemplateService = Depends(get_template_service),
) -> NewsletterService:
    return NewsletterService(db, email_service=email_service, template_service=template_service)


def get_data_admin_service(db: Session = Depends(get_db)) -> DataAdminService:
    return DataAdminService(db)
