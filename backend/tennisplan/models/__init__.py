"""
Database models for the Tennisplan backend.

The models are organized by functionality:
- Master data: trainers, players, rate plans
- Scheduling: training sessions, substitute assignments
- Billing: monthly payments
- Intake: registration requests, SEPA mandates
"""

from .enums import BillingMode, PaymentMethod, RegistrationStatus, SessionStatus, UpdateScope
from .intake import RegistrationRequest, SepaMandate
from .payment import MonthlyPayment
from .player import Player
from .rate_plan import RatePlan
from .trainer import Trainer
from .training import SubstituteAssignment, TrainingSession, training_session_players

__all__ = [
    "BillingMode",
    "MonthlyPayment",
    "PaymentMethod",
    "Player",
    "RatePlan",
    "RegistrationRequest",
    "RegistrationStatus",
    "SepaMandate",
    "SessionStatus",
    "SubstituteAssignment",
    "Trainer",
    "TrainingSession",
    "UpdateScope",
    "training_session_players",
]
