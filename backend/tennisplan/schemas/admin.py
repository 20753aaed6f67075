"""Schemas for backup export, import and data reset."""

from typing import Any, Dict, List

from pydantic import Field

from .base import StandardizedModel

BACKUP_FORMAT = "tennisplan-backup"
BACKUP_VERSION = 1


class ImportResultResponse(StandardizedModel):
    source: str = Field(description="'backup' or 'legacy'")
    trainers: int
    players: int
    rate_plans: int
    sessions: int
    substitutes: int
    payments: int
    dropped_player_refs: int = Field(0, description="Player references that pointed to unknown players")
    warnings: List[str] = Field(default_factory=list)


class DataStatsResponse(StandardizedModel):
    trainers: int
    players: int
    rate_plans: int
    sessions: int
    sessions_by_status: Dict[str, int]
    substitutes: int
    payments: int
    registrations: int
    sepa_mandates: int


class ResetResponse(StandardizedModel):
    deleted: Dict[str, int]


BackupDocument = Dict[str, Any]
