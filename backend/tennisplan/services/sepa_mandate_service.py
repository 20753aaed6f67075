"""
SEPA Mandate Service for the Tennisplan backend.

Stores direct-debit mandates submitted through the public form. The IBAN
is stored normalized (no spaces, upper case) and never returned in full.
"""

import logging
import secrets
import string
from typing import List, Optional

from sqlalchemy.orm import Session

from ..core.exceptions import NotFoundException, ServiceException
from ..core.timezone_utils import get_school_today
from ..models.intake import SepaMandate
from ..repositories.factory import RepositoryFactory
from ..schemas.intake import SepaMandateCreate
from .base import BaseService
from .email import EmailService, get_email_service

logger = logging.getLogger(__name__)

REFERENCE_ALPHABET = string.ascii_uppercase + string.digits
REFERENCE_SUFFIX_LENGTH = 6
MAX_REFERENCE_ATTEMPTS = 10


def generate_mandate_reference(signature_date) -> str:
    """``SEPA-YYYYMMDD-XXXXXX`` with six random base-36 characters."""
    suffix = "".join(secrets.choice(REFERENCE_ALPHABET) for _ in range(REFERENCE_SUFFIX_LENGTH))
    return f"SEPA-{signature_date.strftime('%Y%m%d')}-{suffix}"


class SepaMandateService(BaseService):
    def __init__(self, db: Session, email_service: Optional[EmailService] = None):
        super().__init__(db)
        self.mandate_repository = RepositoryFactory.create_sepa_mandate_repository(db)
        self.player_repository = RepositoryFactory.create_player_repository(db)
        self._email_service = email_service

    @property
    def email_service(self) -> EmailService:
        if self._email_service is None:
            self._email_service = get_email_service(self.db)
        return self._email_service

    def _unique_reference(self, signature_date) -> str:
        for _ in range(MAX_REFERENCE_ATTEMPTS):
            reference = generate_mandate_reference(signature_date)
            if not self.mandate_repository.reference_exists(reference):
                return reference
        raise ServiceException("Could not generate a unique mandate reference", code="REFERENCE_EXHAUSTED")

    @BaseService.measure_operation("submit_sepa_mandate")
    def submit(self, data: SepaMandateCreate) -> SepaMandate:
        """
        Store a mandate signed today and send the reference to the account holder.

        Raises:
            NotFoundException: ``player_id`` given but unknown
        """
        if data.player_id and not self.player_repository.get_by_id(data.player_id):
            raise NotFoundException("Player not found", code="PLAYER_NOT_FOUND", details={"player_id": data.player_id})

        signature_date = get_school_today()
        values = data.model_dump(exclude={"consent"})
        if not data.is_minor:
            values["guardian_name"] = None

        with self.transaction():
            mandate = self.mandate_repository.create(
                **values,
                mandate_reference=self._unique_reference(signature_date),
                signature_date=signature_date,
            )
        self.log_operation("submit_sepa_mandate", mandate_reference=mandate.mandate_reference)
        self.email_service.send_sepa_mandate_confirmation(mandate)
        return mandate

    @BaseService.measure_operation("list_sepa_mandates")
    def list_mandates(self) -> List[SepaMandate]:
        return self.mandate_repository.list_recent()

    def get_mandate(self, mandate_id: str) -> SepaMandate:
        mandate = self.mandate_repository.get_by_id(mandate_id)
        if not mandate:
            raise NotFoundException(
                "SEPA mandate not found", code="SEPA_MANDATE_NOT_FOUND", details={"mandate_id": mandate_id}
            )
        return mandate

    @BaseService.measure_operation("link_sepa_mandate")
    def link_player(self, mandate_id: str, player_id: Optional[str]) -> SepaMandate:
        """Attach the mandate to a player, or detach it with ``None``."""
        mandate = self.get_mandate(mandate_id)
        if player_id and not self.player_repository.get_by_id(player_id):
            raise NotFoundException("Player not found", code="PLAYER_NOT_FOUND", details={"player_id": player_id})
        with self.transaction():
            mandate.player_id = player_id
            self.db.flush()
        return mandate
