# backend/tennisplan/repositories/payment_repository.py
from typing import Dict, List, Optional

from sqlalchemy.orm import Session

from ..models.payment import MonthlyPayment
from .base_repository import BaseRepository


class PaymentRepository(BaseRepository[MonthlyPayment]):
    def __init__(self, db: Session):
        super().__init__(db, MonthlyPayment)

    def get_for_month(self, billing_month: str) -> List[MonthlyPayment]:
        return self.find_by(billing_month=billing_month)

    def get_by_player_for_month(self, billing_month: str) -> Dict[str, MonthlyPayment]:
        return {payment.player_id: payment for payment in self.get_for_month(billing_month)}

    def get_for_player_month(self, player_id: str, billing_month: str) -> Optional[MonthlyPayment]:
        return self.find_one_by(player_id=player_id, billing_month=billing_month)

    def list_all(self) -> List[MonthlyPayment]:
        query = self._build_query().order_by(MonthlyPayment.billing_month, MonthlyPayment.player_id)
        return self._execute_query(query)
