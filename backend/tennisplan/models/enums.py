# backend/tennisplan/models/enums.py
"""Enumerations stored as plain strings in the database."""

from enum import Enum


class BillingMode(str, Enum):
    """How a rate plan turns a session into money."""

    PER_TRAINING = "per_training"  # session price split among players
    PER_PLAYER = "per_player"  # every player pays the full session price
    MONTHLY_FLAT = "monthly_flat"  # fixed fee per player and month


class SessionStatus(str, Enum):
    """Training session lifecycle statuses."""

    PLANNED = "planned"
    COMPLETED = "completed"
    CANCELLED = "cancelled"


class PaymentMethod(str, Enum):
    CASH = "cash"
    TRANSFER = "transfer"
    SEPA = "sepa"

    @property
    def is_cash(self) -> bool:
        return self is PaymentMethod.CASH


class RegistrationStatus(str, Enum):
    NEW = "new"
    ACCEPTED = "accepted"
    DECLINED = "declined"


class UpdateScope(str, Enum):
    """Which sessions of a weekly series an edit applies to."""

    SINGLE = "single"
    FOLLOWING = "following"


STATUS_LABELS = {
    SessionStatus.PLANNED: "offen",
    SessionStatus.COMPLETED: "durchgeführt",
    SessionStatus.CANCELLED: "abgesagt",
}
