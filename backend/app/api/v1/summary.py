import uuid
from datetime import date
from typing import Optional

from fastapi import APIRouter, Depends, Query
from sqlalchemy.ext.asyncio import AsyncSession

from app.core.database import get_db
from app.core.deps import CurrentUser
from app.schemas.common import ApiResponse, success_response
from app.schemas.summary import DashboardSummary, SummaryPeriod, SummaryReport
from app.services.summary_service import summary_service

# Registrato prima del router /sales per non essere catturato da /sales/{id}
router = APIRouter(prefix="/sales/summary", tags=["Riepiloghi"])


@router.get("", response_model=ApiResponse[SummaryReport])
async def get_summary(
    current_user: CurrentUser,
    start_date: Optional[date] = Query(None, alias="startDate"),
    end_date: Optional[date] = Query(None, alias="endDate"),
    period: SummaryPeriod = Query(SummaryPeriod.DAY),
    store_id: Optional[uuid.UUID] = Query(None, alias="storeId"),
    db: AsyncSession = Depends(get_db),
):
    """Riepilogo per periodo e punto vendita su un intervallo a scelta."""
    report = await summary_service.summarize(db, start_date, end_date, period, store_id)
    return success_response(report)


@router.get("/monthly", response_model=ApiResponse[SummaryReport])
async def get_monthly_summary(
    current_user: CurrentUser,
    year: Optional[int] = Query(None, ge=2000, le=2100),
    month: Optional[int] = Query(None, ge=1, le=12),
    store_id: Optional[uuid.UUID] = Query(None, alias="storeId"),
    db: AsyncSession = Depends(get_db),
):
    """Incassi aggregati per mese e punto vendita."""
    report = await summary_service.monthly(db, year, month, store_id)
    return success_response(report)


@router.get("/yearly", response_model=ApiResponse[SummaryReport])
async def get_yearly_summary(
    current_user: CurrentUser,
    year: Optional[int] = Query(None, ge=2000, le=2100),
    store_id: Optional[uuid.UUID] = Query(None, alias="storeId"),
    db: AsyncSession = Depends(get_db),
):
    """Incassi aggregati per anno e punto vendita."""
    report = await summary_service.yearly(db, year, store_id)
    return success_response(report)


@router.get("/dashboard", response_model=ApiResponse[DashboardSummary])
async def get_dashboard_summary(
    current_user: CurrentUser,
    start_date: Optional[date] = Query(None, alias="startDate"),
    end_date: Optional[date] = Query(None, alias="endDate"),
    store_id: Optional[uuid.UUID] = Query(None, alias="storeId"),
    db: AsyncSession = Depends(get_db),
):
    """Totali per punto vendita, totale generale e andamento degli ultimi giorni."""
    summary = await summary_service.dashboard(db, start_date, end_date, store_id)
    return success_response(summary)
