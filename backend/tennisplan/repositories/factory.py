# backend/tennisplan/repositories/factory.py
"""
Repository Factory for the Tennisplan backend.

Provides centralized creation of repository instances,
ensuring consistent initialization and dependency injection.
"""

from typing import TYPE_CHECKING

from sqlalchemy.orm import Session

from .base_repository import BaseRepository

# Avoid circular imports
if TYPE_CHECKING:
    from .intake_repository import RegistrationRepository, SepaMandateRepository
    from .payment_repository import PaymentRepository
    from .player_repository import PlayerRepository
    from .rate_plan_repository import RatePlanRepository
    from .substitute_repository import SubstituteRepository
    from .trainer_repository import TrainerRepository
    from .training_repository import TrainingRepository


class RepositoryFactory:
    """
    Factory class for creating repository instances.

    Centralizes repository creation so services never construct
    repositories with ad-hoc arguments.
    """

    @staticmethod
    def create_base_repository(db: Session, model) -> BaseRepository:
        return BaseRepository(db, model)

    @staticmethod
    def create_trainer_repository(db: Session) -> "TrainerRepository":
        from .trainer_repository import TrainerRepository

        return TrainerRepository(db)

    @staticmethod
    def create_player_repository(db: Session) -> "PlayerRepository":
        from .player_repository import PlayerRepository

        return PlayerRepository(db)

    @staticmethod
    def create_rate_plan_repository(db: Session) -> "RatePlanRepository":
        from .rate_plan_repository import RatePlanRepository

        return RatePlanRepository(db)

    @staticmethod
    def create_training_repository(db: Session) -> "TrainingRepository":
        from .training_repository import TrainingRepository

        return TrainingRepository(db)

    @staticmethod
    def create_substitute_repository(db: Session) -> "SubstituteRepository":
        from .substitute_repository import SubstituteRepository

        return SubstituteRepository(db)

    @staticmethod
    def create_payment_repository(db: Session) -> "PaymentRepository":
        from .payment_repository import PaymentRepository

        return PaymentRepository(db)

    @staticmethod
    def create_registration_repository(db: Session) -> "RegistrationRepository":
        from .intake_repository import RegistrationRepository

        return RegistrationRepository(db)

    @staticmethod
    def create_sepa_mandate_repository(db: Session) -> "SepaMandateRepository":
        from .intake_repository import SepaMandateRepository

        return SepaMandateRepository(db)
