# backend/tennisplan/routes/v1/admin.py
"""
Data administration routes - API v1

Endpoints:
    GET /export         → Full JSON backup
    POST /import        → Restore a backup or import a legacy planner export
    POST /import/legacy → Import a legacy planner export explicitly
    GET /stats          → Record counts
    POST /reset         → Delete all data
"""

import logging
from typing import Any, Dict

from fastapi import APIRouter, Body, Depends
from fastapi.responses import JSONResponse

from ...api.dependencies.services import get_data_admin_service
from ...core.exceptions import DomainException
from ...core.timezone_utils import get_school_today
from ...schemas.admin import DataStatsResponse, ImportResultResponse, ResetResponse
from ...services.data_admin_service import DataAdminService
from ..utils import handle_domain_exception

logger = logging.getLogger(__name__)

router = APIRouter(tags=["admin-v1"])


@router.get("/export")
def export_data(service: DataAdminService = Depends(get_data_admin_service)) -> JSONResponse:
    document = service.export()
    filename = f"tennisplan-backup-{get_school_today().isoformat()}.json"
    return JSONResponse(
        content=document,
        headers={"Content-Disposition": f'attachment; filename="{filename}"'},
    )


@router.post("/import", response_model=ImportResultResponse)
def import_data(
    document: Dict[str, Any] = Body(...),
    service: DataAdminService = Depends(get_data_admin_service),
) -> ImportResultResponse:
    try:
        return service.import_data(document)
    except DomainException as e:
        handle_domain_exception(e)


@router.post("/import/legacy", response_model=ImportResultResponse)
def import_legacy(
    state: Dict[str, Any] = Body(...),
    service: DataAdminService = Depends(get_data_admin_service),
) -> ImportResultResponse:
    try:
        return service.import_legacy(state)
    except DomainException as e:
        handle_domain_exception(e)


@router.get("/stats", response_model=DataStatsResponse)
def data_stats(service: DataAdminService = Depends(get_data_admin_service)) -> DataStatsResponse:
    return service.stats()


@router.post("/reset", response_model=ResetResponse)
def reset_data(service: DataAdminService = Depends(get_data_admin_service)) -> ResetResponse:
    logger.warning("Data reset requested via API")
    return service.reset()
