# backend/tennisplan/repositories/intake_repository.py
"""Data access for registration requests and SEPA mandates."""

from typing import List, Optional

from sqlalchemy.orm import Session

from ..models.enums import RegistrationStatus
from ..models.intake import RegistrationRequest, SepaMandate
from .base_repository import BaseRepository


class RegistrationRepository(BaseRepository[RegistrationRequest]):
    def __init__(self, db: Session):
        super().__init__(db, RegistrationRequest)

    def list_recent(self, status: Optional[RegistrationStatus] = None) -> List[RegistrationRequest]:
        query = self._build_query()
        if status is not None:
            query = query.filter(RegistrationRequest.status == status.value)
        return self._execute_query(
            query.order_by(RegistrationRequest.created_at.desc(), RegistrationRequest.id.desc())
        )


class SepaMandateRepository(BaseRepository[SepaMandate]):
    def __init__(self, db: Session):
        super().__init__(db, SepaMandate)

    def list_recent(self) -> List[SepaMandate]:
        return self._execute_query(self._build_query().order_by(SepaMandate.created_at.desc(), SepaMandate.id.desc()))

    def reference_exists(self, reference: str) -> bool:
        return self._build_query().filter(SepaMandate.mandate_reference == reference).first() is not None
