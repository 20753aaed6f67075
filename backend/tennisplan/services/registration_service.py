"""
Registration Service for the Tennisplan backend.

Handles training registrations submitted through the public form and
their review by staff. Accepting a registration creates the player.
"""

import logging
from typing import List, Optional

from sqlalchemy.orm import Session

from ..core.exceptions import BusinessRuleException, NotFoundException
from ..core.timezone_utils import utc_now
from ..models.enums import RegistrationStatus
from ..models.intake import RegistrationRequest
from ..models.player import Player
from ..repositories.factory import RepositoryFactory
from ..schemas.intake import RegistrationCreate
from .base import BaseService
from .email import EmailService, get_email_service

logger = logging.getLogger(__name__)


def _player_notes(registration: RegistrationRequest) -> Optional[str]:
    parts = []
    if registration.experience_level:
        parts.append(f"Spielstärke: {registration.experience_level}")
    if registration.age_years is not None:
        parts.append(f"Alter: {registration.age_years}")
    if registration.preferred_time:
        parts.append(f"Wunschzeit: {registration.preferred_time}")
    if registration.message:
        parts.append(registration.message)
    return "\n".join(parts) or None


class RegistrationService(BaseService):
    def __init__(self, db: Session, email_service: Optional[EmailService] = None):
        super().__init__(db)
        self.registration_repository = RepositoryFactory.create_registration_repository(db)
        self.player_repository = RepositoryFactory.create_player_repository(db)
        self._email_service = email_service

    @property
    def email_service(self) -> EmailService:
        if self._email_service is None:
            self._email_service = get_email_service(self.db)
        return self._email_service

    @BaseService.measure_operation("submit_registration")
    def submit(self, data: RegistrationCreate) -> RegistrationRequest:
        """Store a registration from the public form and notify the school."""
        self.log_operation("submit_registration", email=data.email)
        with self.transaction():
            registration = self.registration_repository.create(
                **data.model_dump(), status=RegistrationStatus.NEW.value
            )
        self.email_service.send_registration_notification(registration)
        return registration

    @BaseService.measure_operation("list_registrations")
    def list_registrations(self, status: Optional[RegistrationStatus] = None) -> List[RegistrationRequest]:
        return self.registration_repository.list_recent(status)

    def get_registration(self, registration_id: str) -> RegistrationRequest:
        registration = self.registration_repository.get_by_id(registration_id)
        if not registration:
            raise NotFoundException(
                "Registration not found",
                code="REGISTRATION_NOT_FOUND",
                details={"registration_id": registration_id},
            )
        return registration

    def _require_new(self, registration: RegistrationRequest) -> None:
        if registration.status != RegistrationStatus.NEW.value:
            raise BusinessRuleException(
                f"Registration was already {registration.status}",
                code="REGISTRATION_ALREADY_PROCESSED",
                details={"registration_id": registration.id, "status": registration.status},
            )

    @BaseService.measure_operation("accept_registration")
    def accept(self, registration_id: str) -> RegistrationRequest:
        """Create a player from the registration and mark it accepted."""
        registration = self.get_registration(registration_id)
        self._require_new(registration)
        self.log_operation("accept_registration", registration_id=registration_id)
        with self.transaction():
            player: Player = self.player_repository.create(
                name=registration.name,
                contact_email=registration.email,
                contact_phone=registration.phone,
                notes=_player_notes(registration),
            )
            registration.player = player
            registration.status = RegistrationStatus.ACCEPTED.value
            registration.processed_at = utc_now()
            self.db.flush()
        return registration

    @BaseService.measure_operation("decline_registration")
    def decline(self, registration_id: str) -> RegistrationRequest:
        registration = self.get_registration(registration_id)
        self._require_new(registration)
        self.log_operation("decline_registration", registration_id=registration_id)
        with self.transaction():
            registration.status = RegistrationStatus.DECLINED.value
            registration.processed_at = utc_now()
            self.db.flush()
        return registration
