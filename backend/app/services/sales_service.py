"""
Service Layer per gli incassi giornalieri
Progetto: Northpalm CC (Incassi Giornalieri)

Definisce la logica di business per registrazione, modifica, cancellazione,
chiusura e riapertura degli incassi. I commit restano al router: il
servizio lavora con flush all'interno della transazione della richiesta.
"""

import logging
import uuid
from datetime import date
from typing import List, Optional

from sqlalchemy import select
from sqlalchemy.exc import IntegrityError
from sqlalchemy.ext.asyncio import AsyncSession
from sqlalchemy.orm import selectinload

from app.core.exceptions import BusinessValidationError, DuplicateError, NotFoundError
from app.models.sales import ClosingHistory, SalesRecord
from app.models.store import Store
from app.models.user import User
from app.schemas.sales import SalesRecordCreate, SalesRecordUpdate
from app.services.lifecycle import (
    apply_reopen,
    close_record,
    ensure_open,
    validate_reopen_request,
)

logger = logging.getLogger(__name__)


class SalesService:
    """
    Service per la gestione degli incassi giornalieri.
    """

    async def get_all(
        self,
        db: AsyncSession,
        start_date: Optional[date] = None,
        end_date: Optional[date] = None,
        store_id: Optional[uuid.UUID] = None,
        is_closed: Optional[bool] = None,
    ) -> List[SalesRecord]:
        """
        Elenco filtrato degli incassi.

        Gli estremi dell'intervallo sono inclusi. Ordinamento: data
        decrescente, poi ordine di visualizzazione del punto vendita.
        """
        if start_date and end_date and start_date > end_date:
            raise BusinessValidationError("La data di inizio è successiva alla data di fine")

        query = (
            select(SalesRecord)
            .join(Store, SalesRecord.store_id == Store.id)
            .options(
                selectinload(SalesRecord.store),
                selectinload(SalesRecord.created_by),
                selectinload(SalesRecord.closed_by),
            )
        )
        if start_date:
            query = query.where(SalesRecord.sale_date >= start_date)
        if end_date:
            query = query.where(SalesRecord.sale_date <= end_date)
        if store_id:
            query = query.where(SalesRecord.store_id == store_id)
        if is_closed is not None:
            query = query.where(SalesRecord.is_closed == is_closed)

        query = query.order_by(SalesRecord.sale_date.desc(), Store.display_order)
        result = await db.execute(query)
        return list(result.scalars().all())

    async def get_by_id(
        self, db: AsyncSession, id: uuid.UUID, for_update: bool = False
    ) -> SalesRecord:
        """
        Recupera un incasso con punto vendita e utenti collegati.

        Con for_update=True la riga viene bloccata fino alla fine della
        transazione, così controllo e modifica avvengono come unità unica.
        """
        query = (
            select(SalesRecord)
            .where(SalesRecord.id == id)
            .options(
                selectinload(SalesRecord.store),
                selectinload(SalesRecord.created_by),
                selectinload(SalesRecord.closed_by),
            )
            .execution_options(populate_existing=True)
        )
        if for_update:
            query = query.with_for_update(of=SalesRecord)

        result = await db.execute(query)
        record = result.scalar_one_or_none()

        if not record:
            raise NotFoundError(f"Incasso {id} non trovato", error_code="SALES_RECORD_NOT_FOUND")

        return record

    async def find_by_date_and_store(
        self, db: AsyncSession, sale_date: date, store_id: uuid.UUID
    ) -> Optional[SalesRecord]:
        query = select(SalesRecord).where(
            SalesRecord.sale_date == sale_date,
            SalesRecord.store_id == store_id,
        )
        result = await db.execute(query)
        return result.scalar_one_or_none()

    async def create(
        self, db: AsyncSession, data: SalesRecordCreate, user: User
    ) -> SalesRecord:
        """
        Registra un nuovo incasso.

        Raises:
            NotFoundError: se il punto vendita non esiste o non è attivo
            DuplicateError: se esiste già un incasso per la stessa data e punto vendita
        """
        store_result = await db.execute(
            select(Store).where(Store.id == data.store_id, Store.is_active == True)
        )
        if not store_result.scalar_one_or_none():
            raise NotFoundError(
                f"Punto vendita {data.store_id} non trovato",
                error_code="STORE_NOT_FOUND",
            )

        existing = await self.find_by_date_and_store(db, data.sale_date, data.store_id)
        if existing:
            raise DuplicateError(
                "Esiste già un incasso per questa data e questo punto vendita",
                extra={"existing_id": str(existing.id)},
            )

        record = SalesRecord(
            sale_date=data.sale_date,
            store_id=data.store_id,
            amount=data.amount,
            memo=data.memo,
            weather=data.weather.value if data.weather else None,
            is_closed=False,
            closed_at=None,
            closed_by_id=None,
            created_by_id=user.id,
        )
        db.add(record)

        try:
            await db.flush()
        except IntegrityError:
            # Inserimento concorrente sulla stessa coppia: vince il vincolo unique
            await db.rollback()
            raise DuplicateError(
                "Esiste già un incasso per questa data e questo punto vendita"
            )

        logger.info(
            "Incasso registrato: %s %s importo=%s da %s",
            record.sale_date, record.store_id, record.amount, user.username,
        )
        return await self.get_by_id(db, record.id)

    async def update(
        self, db: AsyncSession, id: uuid.UUID, data: SalesRecordUpdate
    ) -> SalesRecord:
        """
        Aggiorna importo, nota o meteo di un incasso aperto.

        Raises:
            NotFoundError: se l'incasso non esiste
            AuthorizationError: se l'incasso è chiuso
        """
        record = await self.get_by_id(db, id, for_update=True)
        ensure_open(record, "modificato")

        update_data = data.model_dump(exclude_unset=True)
        for k, v in update_data.items():
            if k == "weather" and v is not None:
                v = v.value
            setattr(record, k, v)

        await db.flush()
        return await self.get_by_id(db, record.id)

    async def delete(self, db: AsyncSession, id: uuid.UUID) -> None:
        """
        Elimina un incasso aperto; lo storico viene eliminato a cascata.

        Raises:
            NotFoundError: se l'incasso non esiste
            AuthorizationError: se l'incasso è chiuso
        """
        record = await self.get_by_id(db, id, for_update=True)
        ensure_open(record, "eliminato")

        await db.delete(record)
        await db.flush()
        logger.info("Incasso %s eliminato", id)

    async def close(self, db: AsyncSession, id: uuid.UUID, user: User) -> SalesRecord:
        """
        Chiude un incasso e registra l'evento nello storico.

        Raises:
            NotFoundError: se l'incasso non esiste
            ConflictError: se l'incasso è già chiuso
        """
        record = await self.get_by_id(db, id, for_update=True)
        entry = close_record(record, user)
        db.add(entry)

        await db.flush()
        return await self.get_by_id(db, record.id)

    async def reopen(
        self, db: AsyncSession, id: uuid.UUID, user: User, reason: Optional[str]
    ) -> SalesRecord:
        """
        Riapre un incasso chiuso (solo admin, motivo obbligatorio).

        Ruolo e motivo vengono verificati prima ancora di cercare il record.

        Raises:
            AuthorizationError: se l'utente non è admin
            BusinessValidationError: se il motivo manca
            NotFoundError: se l'incasso non esiste
            ConflictError: se l'incasso non è chiuso
        """
        cleaned_reason = validate_reopen_request(user, reason)

        record = await self.get_by_id(db, id, for_update=True)
        entry = apply_reopen(record, user, cleaned_reason)
        db.add(entry)

        await db.flush()
        return await self.get_by_id(db, record.id)

    async def get_history(self, db: AsyncSession, id: uuid.UUID) -> List[ClosingHistory]:
        """Storico chiusure/riaperture di un incasso in ordine cronologico."""
        await self.get_by_id(db, id)

        query = (
            select(ClosingHistory)
            .where(ClosingHistory.sales_record_id == id)
            .options(selectinload(ClosingHistory.performed_by))
            .order_by(ClosingHistory.performed_at)
        )
        result = await db.execute(query)
        return list(result.scalars().all())


sales_service = SalesService()
