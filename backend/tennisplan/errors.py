"""
Problem-details error responses.

Every error leaves the API as ``application/problem+json``:

    {"type": "about:blank", "title": "Not Found", "status": 404,
     "detail": "Trainer not found", "instance": "/api/v1/trainers/01H...",
     "code": "TRAINER_NOT_FOUND", "errors": {"trainer_id": "01H..."}}

``code`` and ``errors`` are only present when known. Request validation
failures use code ``validation_error`` with pydantic's error list.
"""

from http import HTTPStatus
import logging
from typing import Any, Dict, Optional, Tuple

from fastapi import FastAPI, Request
from fastapi.encoders import jsonable_encoder
from fastapi.exceptions import RequestValidationError
from fastapi.responses import JSONResponse
from starlette.exceptions import HTTPException as StarletteHTTPException

from .core.exceptions import DomainException, RepositoryException

logger = logging.getLogger(__name__)

PROBLEM_MEDIA_TYPE = "application/problem+json"


def status_title(status_code: int) -> str:
    try:
        return HTTPStatus(status_code).phrase
    except ValueError:
        return "Error"


def split_detail(detail: Any) -> Tuple[Optional[str], Optional[str], Any]:
    """
    Pull message, code and extra details out of an ``HTTPException.detail``.

    Domain exceptions put ``{"message", "code", "details"}`` there; plain
    FastAPI errors put a string.
    """
    if isinstance(detail, dict):
        message = detail.get("message") or detail.get("detail")
        code = detail.get("code")
        return (
            message if isinstance(message, str) else None,
            code if isinstance(code, str) else None,
            detail.get("details") or detail.get("errors"),
        )
    if detail is None:
        return None, None, None
    return str(detail), None, None


def problem_response(
    request: Request,
    status_code: int,
    detail: Optional[str] = None,
    code: Optional[str] = None,
    errors: Any = None,
    headers: Optional[Dict[str, str]] = None,
) -> JSONResponse:
    body: Dict[str, Any] = {
        "type": "about:blank",
        "title": status_title(status_code),
        "status": status_code,
        "detail": detail or "",
        "instance": request.url.path,
    }
    if code:
        body["code"] = code
    if errors:
        body["errors"] = jsonable_encoder(errors)
    return JSONResponse(body, status_code=status_code, media_type=PROBLEM_MEDIA_TYPE, headers=headers)


def register_error_handlers(app: FastAPI) -> None:
    # fastapi.HTTPException subclasses the starlette one, so this covers both
    @app.exception_handler(StarletteHTTPException)
    async def http_exception_handler(request: Request, exc: StarletteHTTPException) -> JSONResponse:
        message, code, errors = split_detail(exc.detail)
        return problem_response(request, exc.status_code, message, code, errors, headers=exc.headers)

    @app.exception_handler(DomainException)
    async def domain_exception_handler(request: Request, exc: DomainException) -> JSONResponse:
        return problem_response(request, exc.status_code, exc.message, exc.code, exc.details)

    @app.exception_handler(RepositoryException)
    async def repository_exception_handler(request: Request, exc: RepositoryException) -> JSONResponse:
        logger.error(f"Repository error on {request.url.path}: {exc}")
        return problem_response(request, 500, "A database error occurred", "REPOSITORY_ERROR")

    @app.exception_handler(RequestValidationError)
    async def request_validation_exception_handler(request: Request, exc: RequestValidationError) -> JSONResponse:
        return problem_response(
            request,
            422,
            "Request validation failed",
            "validation_error",
            exc.errors(),
        )
