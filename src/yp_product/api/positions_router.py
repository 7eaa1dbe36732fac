"""Positions REST API: the caller's purchased products."""

from typing import Annotated

from fastapi import APIRouter, Depends, Query
from sqlalchemy.ext.asyncio import AsyncSession

from src.yp_common.database import get_db_session
from src.yp_common.response import ApiResponse, success_response
from src.yp_gateway.auth.dependencies import get_current_user_id
from src.yp_product.application.service import ProductApplicationService

router = APIRouter(prefix="/positions", tags=["positions"])
_service = ProductApplicationService()


@router.get("")
async def list_positions(
    user_id: Annotated[str, Depends(get_current_user_id)],
    db: Annotated[AsyncSession, Depends(get_db_session)],
    active_only: bool = Query(False, description="Only positions still accruing"),
) -> ApiResponse:
    items = await _service.list_positions(db, user_id, active_only)
    return success_response({"items": [i.model_dump() for i in items]})
