# backend/tennisplan/services/base.py
"""
Base class of the Tennisplan services.

Services own the unit of work: repositories only flush, a service commits
through ``transaction()``. Public operations are wrapped in
``measure_operation`` so their duration and outcome end up in Prometheus.
"""

from contextlib import contextmanager
from functools import wraps
import logging
import time
from typing import Any, Callable, Iterator, TypeVar, cast

from sqlalchemy.exc import SQLAlchemyError
from sqlalchemy.orm import Session

from ..core.exceptions import RepositoryException, ServiceException
from ..monitoring.prometheus_metrics import prometheus_metrics

logger = logging.getLogger(__name__)

F = TypeVar("F", bound=Callable[..., Any])

SLOW_OPERATION_SECONDS = 1.0

# LogRecord attributes; logging raises KeyError when `extra` reuses one
RESERVED_LOG_KEYS = frozenset(logging.makeLogRecord({}).__dict__) | {"message", "asctime"}


class BaseService:
    def __init__(self, db: Session):
        self.db = db
        self.logger = logging.getLogger(f"tennisplan.services.{self.__class__.__name__}")

    @contextmanager
    def transaction(self) -> Iterator[Session]:
        """
        Commit everything done inside the block, or roll all of it back.

        Database failures leave as ``ServiceException`` (code DATABASE_ERROR);
        domain exceptions raised inside the block pass through unchanged.

        Usage:
            with self.transaction():
                self.player_repository.create(name="Anna")
        """
        try:
            yield self.db
            self.db.commit()
        except (SQLAlchemyError, RepositoryException) as e:
            self.db.rollback()
            self.logger.error(f"Transaction rolled back: {str(e)}")
            raise ServiceException(f"Database operation failed: {str(e)}", code="DATABASE_ERROR")
        except Exception:
            self.db.rollback()
            raise

    @staticmethod
    def measure_operation(operation_name: str) -> Callable[[F], F]:
        """
        Record duration and outcome of a service method.

        Usage:
            @BaseService.measure_operation("monthly_summary")
            def monthly_summary(self, month):
                ...
        """

        def decorator(func: F) -> F:
            @wraps(func)
            def wrapper(self, *args, **kwargs):
                started = time.perf_counter()
                error_type = None
                try:
                    return func(self, *args, **kwargs)
                except Exception as e:
                    error_type = type(e).__name__
                    raise
                finally:
                    elapsed = time.perf_counter() - started
                    if elapsed > SLOW_OPERATION_SECONDS:
                        self.logger.warning(f"Slow operation: {operation_name} took {elapsed:.2f}s")
                    prometheus_metrics.record_service_operation(
                        service=self.__class__.__name__,
                        operation=operation_name,
                        duration=elapsed,
                        status="error" if error_type else "success",
                        error_type=error_type,
                    )

            return cast(F, wrapper)

        return decorator

    def log_operation(self, operation: str, **context: Any) -> None:
        """
        Info log line with the operation and its context as structured ``extra``.

        Context keys that clash with LogRecord attributes get a ``ctx_`` prefix.
        """
        extra = {"operation": operation}
        for key, value in context.items():
            extra[f"ctx_{key}" if key in RESERVED_LOG_KEYS else key] = value
        self.logger.info(f"Operation: {operation}", extra=extra)
