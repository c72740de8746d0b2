from typing import List

from fastapi import APIRouter, Depends
from sqlalchemy.ext.asyncio import AsyncSession

from app.core.database import get_db
from app.core.deps import CurrentUser
from app.schemas.common import ApiResponse, success_response
from app.schemas.store import StoreRead
from app.services.store_service import StoreService

router = APIRouter(prefix="/stores", tags=["Punti vendita"])


@router.get("/", response_model=ApiResponse[List[StoreRead]])
async def get_stores(
    current_user: CurrentUser,
    db: AsyncSession = Depends(get_db),
):
    """Punti vendita attivi ordinati per ordine di visualizzazione."""
    stores = await StoreService.get_active(db)
    return success_response([StoreRead.model_validate(s) for s in stores])
