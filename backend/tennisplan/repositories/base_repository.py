# backend/tennisplan/repositories/base_repository.py
"""
Generic repository for the Tennisplan models.

Repositories flush but never commit; the service layer owns the
transaction. Every SQLAlchemy failure is logged and re-raised as
``RepositoryException`` so services never see driver errors.
"""

from abc import ABC, abstractmethod
from contextlib import contextmanager
import logging
from typing import Generic, Iterator, List, Optional, Type, TypeVar

from sqlalchemy.exc import IntegrityError, SQLAlchemyError
from sqlalchemy.orm import Query, Session

from ..core.exceptions import RepositoryException

T = TypeVar("T")

logger = logging.getLogger(__name__)


class IRepository(ABC, Generic[T]):
    """Data access contract shared by all repositories."""

    @abstractmethod
    def get_by_id(self, id: str) -> Optional[T]:
        ...

    @abstractmethod
    def create(self, **kwargs) -> T:
        ...

    @abstractmethod
    def update(self, id: str, **kwargs) -> Optional[T]:
        ...

    @abstractmethod
    def delete(self, id: str) -> bool:
        ...


class BaseRepository(IRepository[T]):
    def __init__(self, db: Session, model: Type[T]):
        self.db = db
        self.model = model
        self.logger = logging.getLogger(f"{__name__}.{model.__name__}")

    @contextmanager
    def _guard(self, action: str) -> Iterator[None]:
        """Translate database errors raised inside the block."""
        name = self.model.__name__
        try:
            yield
        except IntegrityError as e:
            self.logger.error(f"Constraint violated while trying to {action} {name}: {str(e)}")
            raise RepositoryException(f"Integrity constraint violated ({action} {name}): {str(e)}") from e
        except SQLAlchemyError as e:
            self.logger.error(f"Failed to {action} {name}: {str(e)}")
            raise RepositoryException(f"Failed to {action} {name}: {str(e)}") from e

    # Reads

    def get_by_id(self, id: str) -> Optional[T]:
        with self._guard("get"):
            return self._build_query().filter(self.model.id == id).first()

    def get_by_ids(self, ids: List[str]) -> List[T]:
        """Records for the given ids, in no particular order; unknown ids are skipped."""
        if not ids:
            return []
        with self._guard("get"):
            return self._build_query().filter(self.model.id.in_(list(ids))).all()

    def find_by(self, **kwargs) -> List[T]:
        with self._guard("find"):
            return self._build_query().filter_by(**kwargs).all()

    def find_one_by(self, **kwargs) -> Optional[T]:
        with self._guard("find"):
            return self._build_query().filter_by(**kwargs).first()

    def count(self, **kwargs) -> int:
        with self._guard("count"):
            return self.db.query(self.model).filter_by(**kwargs).count()

    # Writes (flush only)

    def create(self, **kwargs) -> T:
        with self._guard("create"):
            entity = self.model(**kwargs)
            self.db.add(entity)
            self.db.flush()
            return entity

    def update(self, id: str, **kwargs) -> Optional[T]:
        """Set the given attributes; unknown attribute names are ignored."""
        entity = self.get_by_id(id)
        if entity is None:
            return None
        with self._guard("update"):
            for key, value in kwargs.items():
                if hasattr(entity, key):
                    setattr(entity, key, value)
            self.db.flush()
        return entity

    def delete(self, id: str) -> bool:
        entity = self.get_by_id(id)
        if entity is None:
            return False
        with self._guard("delete"):
            self.db.delete(entity)
            self.db.flush()
        return True

    def delete_all(self) -> int:
        """
        Delete every row through the ORM.

        Row by row so relationship cascades (session players, substitutes)
        are applied; returns the number of deleted rows.
        """
        with self._guard("delete all"):
            rows = self._build_query().all()
            for row in rows:
                self.db.delete(row)
            self.db.flush()
        return len(rows)

    # Helpers for subclasses

    def _build_query(self) -> Query:
        return self.db.query(self.model)

    def _execute_query(self, query: Query) -> List[T]:
        with self._guard("query"):
            return query.all()
