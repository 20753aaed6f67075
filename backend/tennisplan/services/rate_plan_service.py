"""Rate plan (tariff) management."""

import logging
from typing import List

from sqlalchemy.orm import Session

from ..core.exceptions import NotFoundException, ValidationException
from ..models.enums import BillingMode
from ..models.rate_plan import RatePlan
from ..repositories.factory import RepositoryFactory
from ..schemas.rate_plan import RatePlanCreate, RatePlanUpdate
from .base import BaseService

logger = logging.getLogger(__name__)


class RatePlanService(BaseService):
    def __init__(self, db: Session, rate_plan_repository=None):
        super().__init__(db)
        self.rate_plan_repository = rate_plan_repository or RepositoryFactory.create_rate_plan_repository(db)
        self.training_repository = RepositoryFactory.create_training_repository(db)

    @BaseService.measure_operation("list_rate_plans")
    def list_rate_plans(self) -> List[RatePlan]:
        return self.rate_plan_repository.list_ordered()

    def get_rate_plan(self, rate_plan_id: str) -> RatePlan:
        rate_plan = self.rate_plan_repository.get_by_id(rate_plan_id)
        if not rate_plan:
            raise NotFoundException(
                "Rate plan not found", code="RATE_PLAN_NOT_FOUND", details={"rate_plan_id": rate_plan_id}
            )
        return rate_plan

    @BaseService.measure_operation("create_rate_plan")
    def create_rate_plan(self, data: RatePlanCreate) -> RatePlan:
        values = data.model_dump()
        values["billing_mode"] = data.billing_mode.value
        self.log_operation("create_rate_plan", rate_plan_name=data.name, billing_mode=values["billing_mode"])
        with self.transaction():
            return self.rate_plan_repository.create(**values)

    @BaseService.measure_operation("update_rate_plan")
    def update_rate_plan(self, rate_plan_id: str, data: RatePlanUpdate) -> RatePlan:
        rate_plan = self.get_rate_plan(rate_plan_id)
        changes = {key: value for key, value in data.model_dump(exclude_unset=True).items()}
        for required in ("name", "price_per_hour", "billing_mode"):
            if required in changes and changes[required] is None:
                changes.pop(required)
        if "billing_mode" in changes:
            changes["billing_mode"] = BillingMode(changes["billing_mode"]).value

        mode = BillingMode(changes.get("billing_mode", rate_plan.billing_mode))
        monthly_fee = changes["monthly_fee"] if "monthly_fee" in changes else rate_plan.monthly_fee
        if mode is BillingMode.MONTHLY_FLAT and monthly_fee is None:
            raise ValidationException(
                "monthly_fee is required for monthly_flat rate plans", code="MONTHLY_FEE_REQUIRED"
            )

        with self.transaction():
            return self.rate_plan_repository.update(rate_plan_id, **changes)

    @BaseService.measure_operation("delete_rate_plan")
    def delete_rate_plan(self, rate_plan_id: str) -> None:
        """Delete a rate plan; sessions using it keep existing without a plan."""
        self.get_rate_plan(rate_plan_id)
        self.log_operation("delete_rate_plan", rate_plan_id=rate_plan_id)
        with self.transaction():
            for session in self.training_repository.get_by_rate_plan(rate_plan_id):
                session.rate_plan = None
            self.rate_plan_repository.delete(rate_plan_id)
