# backend/tennisplan/repositories/player_repository.py
"""Data access for players."""

from typing import List, Optional

from sqlalchemy import func, or_
from sqlalchemy.orm import Session

from ..models.player import Player
from .base_repository import BaseRepository


class PlayerRepository(BaseRepository[Player]):
    def __init__(self, db: Session):
        super().__init__(db, Player)

    def search(self, term: Optional[str] = None) -> List[Player]:
        """
        List players ordered by name, optionally filtered by a search term.

        The term matches name, email, phone and billing address case-insensitively.
        """
        query = self._build_query()
        needle = (term or "").strip().lower()
        if needle:
            pattern = f"%{needle}%"
            query = query.filter(
                or_(
                    func.lower(Player.name).like(pattern),
                    func.lower(func.coalesce(Player.contact_email, "")).like(pattern),
                    func.lower(func.coalesce(Player.contact_phone, "")).like(pattern),
                    func.lower(func.coalesce(Player.billing_address, "")).like(pattern),
                )
            )
        return self._execute_query(query.order_by(Player.name, Player.id))

    def with_email(self) -> List[Player]:
        query = self._build_query().filter(Player.contact_email.isnot(None), Player.contact_email != "")
        return self._execute_query(query.order_by(Player.name))
