# backend/tennisplan/core/exceptions.py
"""
Exceptions raised by the Tennisplan services.

Each domain exception carries a human readable message, a stable
upper-case ``code`` the front end can switch on, and optional ``details``.
Routes turn them into ``HTTPException``s; ``errors.py`` renders those as
problem documents.

    ValidationException       400  bad input the schemas could not catch
    NotFoundException         404  unknown record
    ConflictException         409  clashing data (overlapping sessions, ...)
    BusinessRuleException     422  operation not allowed in the current state
    ServiceException          500  infrastructure failure (database, mail)
"""

from typing import Any, Dict, Optional

from fastapi import HTTPException, status


class DomainException(Exception):
    status_code: int = status.HTTP_500_INTERNAL_SERVER_ERROR

    def __init__(
        self,
        message: str,
        code: Optional[str] = None,
        details: Optional[Dict[str, Any]] = None,
    ) -> None:
        self.message = message
        self.code = code or self.__class__.__name__
        self.details = details or {}
        super().__init__(self.message)

    def to_http_exception(self) -> HTTPException:
        return HTTPException(
            status_code=self.status_code,
            detail={"message": self.message, "code": self.code, "details": self.details},
        )


class ValidationException(DomainException):
    status_code = status.HTTP_400_BAD_REQUEST


class NotFoundException(DomainException):
    status_code = status.HTTP_404_NOT_FOUND


class ConflictException(DomainException):
    status_code = status.HTTP_409_CONFLICT


class BusinessRuleException(DomainException):
    status_code = 422


class ServiceException(DomainException):
    status_code = status.HTTP_500_INTERNAL_SERVER_ERROR


class SessionConflictException(ConflictException):
    """A trainer would run two overlapping sessions."""

    def __init__(self, message: Optional[str] = None, *, details: Optional[Dict[str, Any]] = None):
        super().__init__(
            message or "The trainer already has a session at this time",
            code="SESSION_CONFLICT",
            details=details,
        )


class RepositoryException(Exception):
    """Data access failure below the service layer (query error, constraint violation)."""
