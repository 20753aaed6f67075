"""
Player Service for the Tennisplan backend.

Deleting a player removes them from every session they were booked on;
the sessions themselves stay.
"""

import logging
from typing import List, Optional

from sqlalchemy.orm import Session

from ..core.exceptions import NotFoundException
from ..models.player import Player
from ..repositories.factory import RepositoryFactory
from ..schemas.player import PlayerCreate, PlayerUpdate
from .base import BaseService

logger = logging.getLogger(__name__)


class PlayerService(BaseService):
    def __init__(self, db: Session, player_repository=None):
        super().__init__(db)
        self.player_repository = player_repository or RepositoryFactory.create_player_repository(db)

    @BaseService.measure_operation("list_players")
    def list_players(self, search: Optional[str] = None) -> List[Player]:
        return self.player_repository.search(search)

    def get_player(self, player_id: str) -> Player:
        player = self.player_repository.get_by_id(player_id)
        if not player:
            raise NotFoundException("Player not found", code="PLAYER_NOT_FOUND", details={"player_id": player_id})
        return player

    @BaseService.measure_operation("create_player")
    def create_player(self, data: PlayerCreate) -> Player:
        self.log_operation("create_player", player_name=data.name)
        with self.transaction():
            return self.player_repository.create(**data.model_dump())

    @BaseService.measure_operation("update_player")
    def update_player(self, player_id: str, data: PlayerUpdate) -> Player:
        self.get_player(player_id)
        changes = data.model_dump(exclude_unset=True)
        if "name" in changes and changes["name"] is None:
            changes.pop("name")
        with self.transaction():
            return self.player_repository.update(player_id, **changes)

    @BaseService.measure_operation("delete_player")
    def delete_player(self, player_id: str) -> None:
        player = self.get_player(player_id)
        session_count = len(player.training_sessions)
        self.log_operation("delete_player", player_id=player_id, session_count=session_count)
        with self.transaction():
            for session in list(player.training_sessions):
                session.players.remove(player)
            self.player_repository.delete(player_id)
