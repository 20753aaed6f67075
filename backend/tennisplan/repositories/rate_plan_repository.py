# backend/tennisplan/repositories/rate_plan_repository.py
from typing import List

from sqlalchemy.orm import Session

from ..models.rate_plan import RatePlan
from .base_repository import BaseRepository


class RatePlanRepository(BaseRepository[RatePlan]):
    def __init__(self, db: Session):
        super().__init__(db, RatePlan)

    def list_ordered(self) -> List[RatePlan]:
        return self._execute_query(self._build_query().order_by(RatePlan.name, RatePlan.id))
