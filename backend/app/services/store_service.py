from typing import List

from sqlalchemy import select
from sqlalchemy.ext.asyncio import AsyncSession

from app.models.store import Store


class StoreService:
    @staticmethod
    async def get_active(db: AsyncSession) -> List[Store]:
        """Punti vendita attivi in ordine di visualizzazione."""
        stmt = select(Store).where(Store.is_active == True).order_by(Store.display_order)
        result = await db.execute(stmt)
        return list(result.scalars().all())
