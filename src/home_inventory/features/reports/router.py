import logging
from fastapi import APIRouter, Depends, Query, Request, Response
from fastapi.responses import JSONResponse
from sqlalchemy.ext.asyncio import AsyncSession
from typing import Annotated, List, Optional

from ...core.database import get_async_session
from ..auth.models import User as AuthUser
from ..auth.security import get_current_active_user
from .exceptions import ReportError
from .schemas import (
    ApiResponse, CategoryBreakdown, InventoryStatistics, ReportQueryParams
)
from . import service as report_service

logger = logging.getLogger(__name__)

router = APIRouter(
    prefix="/reports",
    tags=["Reports"],
    # Apply auth dependency to all routes in this router
    dependencies=[Depends(get_current_active_user)],
)


async def report_error_handler(request: Request, exc: ReportError) -> JSONResponse:
    """Turns any report failure into the standard error envelope."""
    body = ApiResponse[None](success=False, message=exc.message, error=exc.error)
    return JSONResponse(status_code=exc.status_code, content=body.model_dump())


@router.get("/inventory")
async def get_inventory_report(
    current_user: Annotated[AuthUser, Depends(get_current_active_user)],
    db: Annotated[AsyncSession, Depends(get_async_session)],
    params: ReportQueryParams = Depends(),
):
    request = report_service.parse_report_request(params.model_dump())
    rendered = await report_service.export_inventory_report(db, current_user, request)

    headers = {}
    if rendered.filename:
        headers["Content-Disposition"] = f'attachment; filename="{rendered.filename}"'
    return Response(content=rendered.content, media_type=rendered.media_type, headers=headers)


@router.get("/inventory/statistics", response_model=ApiResponse[InventoryStatistics])
async def get_inventory_statistics(
    current_user: Annotated[AuthUser, Depends(get_current_active_user)],
    db: Annotated[AsyncSession, Depends(get_async_session)],
    inventory_id: Optional[str] = Query(None, description="Limit statistics to one inventory"),
):
    statistics = await report_service.generate_statistics_report(db, current_user, inventory_id)
    return ApiResponse[InventoryStatistics](success=True, data=statistics)


@router.get("/inventory/categories", response_model=ApiResponse[List[CategoryBreakdown]])
async def get_inventory_categories(
    current_user: Annotated[AuthUser, Depends(get_current_active_user)],
    db: Annotated[AsyncSession, Depends(get_async_session)],
    inventory_id: Optional[str] = Query(None, description="Limit the breakdown to one inventory"),
):
    breakdown = await report_service.generate_category_report(db, current_user, inventory_id)
    return ApiResponse[List[CategoryBreakdown]](success=True, data=breakdown)
