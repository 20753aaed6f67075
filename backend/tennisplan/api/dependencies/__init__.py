"""
Central export point for all dependencies.

This module re-exports the dependencies from submodules
for convenient access throughout the application.
"""

from ...database import get_db
from .services import (
    get_billing_service,
    get_calendar_service,
    get_data_admin_service,
    get_email_service,
    get_newsletter_service,
    get_planning_service,
    get_player_service,
    get_pricing_service,
    get_rate_plan_service,
    get_registration_service,
    get_sepa_mandate_service,
    get_substitute_service,
    get_template_service,
    get_trainer_service,
    get_training_service,
)

__all__ = [
    # Database
    "get_db",
    # Services
    "get_billing_service",
    "get_calendar_service",
    "get_data_admin_service",
    "get_email_service",
    "get_newsletter_service",
    "get_planning_service",
    "get_player_service",
    "get_pricing_service",
    "get_rate_plan_service",
    "get_registration_service",
    "get_sepa_mandate_service",
    "get_substitute_service",
    "get_template_service",
    "get_trainer_service",
    "get_training_service",
]
