# backend/tennisplan/repositories/__init__.py
"""
Repository Pattern Implementation for the Tennisplan backend.

This package provides the repository layer for data access,
separating business logic from database queries.

Usage:
    from tennisplan.repositories import RepositoryFactory

    # In a service:
    repository = RepositoryFactory.create_training_repository(db)
    sessions = repository.get_in_range(week_start, week_end)
"""

from .base_repository import BaseRepository, IRepository
from .factory import RepositoryFactory
from .intake_repository import RegistrationRepository, SepaMandateRepository
from .payment_repository import PaymentRepository
from .player_repository import PlayerRepository
from .rate_plan_repository import RatePlanRepository
from .substitute_repository import SubstituteRepository
from .trainer_repository import TrainerRepository
from .training_repository import TrainingRepository

__all__ = [
    "BaseRepository",
    "IRepository",
    "PaymentRepository",
    "PlayerRepository",
    "RatePlanRepository",
    "RegistrationRepository",
    "RepositoryFactory",
    "SepaMandateRepository",
    "SubstituteRepository",
    "TrainerRepository",
    "TrainingRepository",
]
