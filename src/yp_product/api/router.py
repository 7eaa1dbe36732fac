"""yp_product REST API: catalogue listing and purchase."""

from typing import Annotated

from fastapi import APIRouter, Depends, Request
from sqlalchemy.ext.asyncio import AsyncSession

from src.yp_common.database import get_db_session
from src.yp_common.response import ApiResponse, success_response
from src.yp_gateway.auth.dependencies import get_current_user_id
from src.yp_product.application.service import ProductApplicationService

router = APIRouter(prefix="/products", tags=["products"])

_service = ProductApplicationService()


@router.get("")
async def list_products(
    _user_id: Annotated[str, Depends(get_current_user_id)],
    db: Annotated[AsyncSession, Depends(get_db_session)],
) -> ApiResponse:
    items = await _service.list_products(db)
    return success_response({"items": [i.model_dump() for i in items]})


@router.post("/{product_id}/purchase")
async def purchase_product(
    product_id: str,
    user_id: Annotated[str, Depends(get_current_user_id)],
    db: Annotated[AsyncSession, Depends(get_db_session)],
    request: Request,
) -> ApiResponse:
    data = await _service.purchase(db, user_id, product_id)
    resp = success_response(data.model_dump())
    resp.request_id = getattr(request.state, "request_id", resp.request_id)
    return resp
