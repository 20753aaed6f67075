"""Planning overview schemas."""

from typing import List

from .base import StandardizedModel
from .substitute import SubstituteResponse
from .training import TrainingSessionResponse


class TrainerWorkload(StandardizedModel):
    trainer_id: str
    trainer_name: str
    session_count: int


class RecordCounts(StandardizedModel):
    trainers: int
    players: int
    rate_plans: int
    sessions: int


class PlanningOverviewResponse(StandardizedModel):
    upcoming: List[TrainingSessionResponse]
    workload: List[TrainerWorkload]
    substitutes: List[SubstituteResponse]
    counts: RecordCounts
