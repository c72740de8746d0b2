"""
Router per gli incassi giornalieri
Progetto: Northpalm CC (Incassi Giornalieri)

Tutti gli endpoint richiedono autenticazione; la riapertura è riservata
agli amministratori.
"""

import logging
import uuid
from datetime import date
from typing import List, Optional

from fastapi import APIRouter, Depends, Query, status
from sqlalchemy.ext.asyncio import AsyncSession

from app.core.database import get_db
from app.core.deps import AdminUser, CurrentUser
from app.schemas.common import ApiResponse, success_response
from app.schemas.sales import (
    ClosingHistoryRead,
    ReopenRequest,
    SalesRecordCreate,
    SalesRecordRead,
    SalesRecordUpdate,
)
from app.services.sales_service import sales_service

logger = logging.getLogger(__name__)

router = APIRouter(
    prefix="/sales",
    tags=["Incassi"],
)


@router.get("/", response_model=ApiResponse[List[SalesRecordRead]])
async def get_sales(
    current_user: CurrentUser,
    start_date: Optional[date] = Query(None, alias="startDate"),
    end_date: Optional[date] = Query(None, alias="endDate"),
    store_id: Optional[uuid.UUID] = Query(None, alias="storeId"),
    is_closed: Optional[bool] = Query(None, alias="isClosed"),
    db: AsyncSession = Depends(get_db),
):
    """Elenco incassi filtrato per intervallo di date, punto vendita e stato."""
    records = await sales_service.get_all(db, start_date, end_date, store_id, is_closed)
    return success_response([SalesRecordRead.model_validate(r) for r in records])


@router.get("/{id}", response_model=ApiResponse[SalesRecordRead])
async def get_sale(
    id: uuid.UUID,
    current_user: CurrentUser,
    db: AsyncSession = Depends(get_db),
):
    """Dettaglio di un incasso."""
    record = await sales_service.get_by_id(db, id)
    return success_response(SalesRecordRead.model_validate(record))


@router.get("/{id}/history", response_model=ApiResponse[List[ClosingHistoryRead]])
async def get_sale_history(
    id: uuid.UUID,
    current_user: CurrentUser,
    db: AsyncSession = Depends(get_db),
):
    """Storico chiusure e riaperture di un incasso."""
    entries = await sales_service.get_history(db, id)
    return success_response([ClosingHistoryRead.model_validate(e) for e in entries])


@router.post(
    "/",
    response_model=ApiResponse[SalesRecordRead],
    status_code=status.HTTP_201_CREATED,
)
async def create_sale(
    data: SalesRecordCreate,
    current_user: CurrentUser,
    db: AsyncSession = Depends(get_db),
):
    """Registra l'incasso di un punto vendita per una data."""
    record = await sales_service.create(db, data, current_user)
    await db.commit()
    return success_response(SalesRecordRead.model_validate(record), "Incasso registrato")


@router.put("/{id}", response_model=ApiResponse[SalesRecordRead])
async def update_sale(
    id: uuid.UUID,
    data: SalesRecordUpdate,
    current_user: CurrentUser,
    db: AsyncSession = Depends(get_db),
):
    """Modifica un incasso aperto."""
    record = await sales_service.update(db, id, data)
    await db.commit()
    return success_response(SalesRecordRead.model_validate(record), "Incasso modificato")


@router.delete("/{id}", response_model=ApiResponse[None])
async def delete_sale(
    id: uuid.UUID,
    current_user: CurrentUser,
    db: AsyncSession = Depends(get_db),
):
    """Elimina un incasso aperto."""
    await sales_service.delete(db, id)
    await db.commit()
    return success_response(None, "Incasso eliminato")


@router.post("/{id}/close", response_model=ApiResponse[SalesRecordRead])
async def close_sale(
    id: uuid.UUID,
    current_user: CurrentUser,
    db: AsyncSession = Depends(get_db),
):
    """Chiude un incasso: da questo momento non è più modificabile."""
    record = await sales_service.close(db, id, current_user)
    await db.commit()
    return success_response(SalesRecordRead.model_validate(record), "Incasso chiuso")


@router.post("/{id}/reopen", response_model=ApiResponse[SalesRecordRead])
async def reopen_sale(
    id: uuid.UUID,
    admin: AdminUser,
    data: Optional[ReopenRequest] = None,
    db: AsyncSession = Depends(get_db),
):
    """Riapre un incasso chiuso. Solo admin, motivo obbligatorio."""
    reason = data.reason if data else None
    record = await sales_service.reopen(db, id, admin, reason)
    await db.commit()
    return success_response(SalesRecordRead.model_validate(record), "Incasso riaperto")
