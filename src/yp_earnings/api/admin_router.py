"""Admin REST API for the daily earnings batch.

POST /admin/earnings/run takes no parameters: the accrual day is today's UTC
date. Status code: 200 all positions credited, 207 partial success (see
errors), 500 the scan failed and nothing was processed.
"""
from datetime import date
from typing import Annotated

from fastapi import APIRouter, Depends, Query
from fastapi.responses import JSONResponse
from sqlalchemy.ext.asyncio import AsyncSession

from src.yp_common.database import get_db_session
from src.yp_common.datetime_utils import utc_today
from src.yp_common.response import ApiResponse, success_response
from src.yp_earnings.application.accrual_service import DailyAccrualService
from src.yp_earnings.application.service import EarningsApplicationService
from src.yp_earnings.infrastructure.run_lock import RedisRunLock
from src.yp_gateway.auth.dependencies import require_admin

router = APIRouter(prefix="/admin/earnings", tags=["admin"])
_accrual = DailyAccrualService(run_lock=RedisRunLock())
_service = EarningsApplicationService()


@router.post("/run")
async def run_daily_earnings(
    _admin_id: Annotated[str, Depends(require_admin)],
    db: Annotated[AsyncSession, Depends(get_db_session)],
) -> JSONResponse:
    report = await _accrual.run(db)
    resp = ApiResponse(code=report.error_code, message=report.message, data=report.model_dump())
    return JSONResponse(status_code=report.http_status, content=resp.model_dump())


@router.get("/summary")
async def daily_summary(
    _admin_id: Annotated[str, Depends(require_admin)],
    db: Annotated[AsyncSession, Depends(get_db_session)],
    earning_date: date | None = Query(None, description="YYYY-MM-DD, defaults to today (UTC)"),
) -> ApiResponse:
    data = await _service.get_daily_summary(db, earning_date or utc_today())
    return success_response(data.model_dump())
