"""yp_earnings REST API: the caller's earnings history."""

from typing import Annotated

from fastapi import APIRouter, Depends, Query
from sqlalchemy.ext.asyncio import AsyncSession

from src.yp_common.database import get_db_session
from src.yp_common.response import ApiResponse, success_response
from src.yp_earnings.application.service import EarningsApplicationService
from src.yp_gateway.auth.dependencies import get_current_user_id

router = APIRouter(prefix="/earnings", tags=["earnings"])
_service = EarningsApplicationService()


@router.get("")
async def list_earnings(
    user_id: Annotated[str, Depends(get_current_user_id)],
    db: Annotated[AsyncSession, Depends(get_db_session)],
    cursor: str | None = Query(None, description="Pagination cursor (opaque Base64)"),
    limit: int = Query(30, ge=1, le=100, description="Items per page"),
) -> ApiResponse:
    data = await _service.list_earnings(db, user_id, cursor, limit)
    return success_response(data.model_dump())


@router.get("/summary")
async def earnings_summary(
    user_id: Annotated[str, Depends(get_current_user_id)],
    db: Annotated[AsyncSession, Depends(get_db_session)],
) -> ApiResponse:
    data = await _service.get_summary(db, user_id)
    return success_response(data.model_dump())
