"""
Schemas Pydantic per gli incassi giornalieri
Progetto: Northpalm CC (Incassi Giornalieri)

I corpi delle richieste accettano sia camelCase (saleDate, storeId),
usato dal frontend, sia snake_case.
"""

import datetime
import uuid
from decimal import Decimal
from typing import Optional

from pydantic import BaseModel, ConfigDict, Field, field_validator
from pydantic.alias_generators import to_camel

from app.core.config import settings
from app.models.sales import ClosingAction, RecordState, Weather


def _check_amount_upper_bound(v: Optional[Decimal]) -> Optional[Decimal]:
    if v is not None and v >= settings.max_sale_amount:
        raise ValueError(
            f"L'importo deve essere compreso tra 0 e {settings.max_sale_amount:,} (escluso)"
        )
    return v


class _RequestModel(BaseModel):
    model_config = ConfigDict(
        alias_generator=to_camel,
        populate_by_name=True,
        str_strip_whitespace=True,
    )


class SalesRecordCreate(_RequestModel):
    sale_date: datetime.date = Field(..., description="Data dell'incasso (YYYY-MM-DD)")
    store_id: uuid.UUID = Field(..., description="Punto vendita")
    amount: Decimal = Field(..., ge=0, decimal_places=2, description="Importo lordo")
    memo: Optional[str] = Field(None, max_length=1000, description="Nota libera")
    weather: Optional[Weather] = Field(None, description="Meteo della giornata")

    @field_validator("amount")
    @classmethod
    def validate_amount(cls, v: Decimal) -> Decimal:
        return _check_amount_upper_bound(v)


class SalesRecordUpdate(_RequestModel):
    """Aggiornamento parziale: sono modificabili solo importo, nota e meteo."""

    amount: Optional[Decimal] = Field(None, ge=0, decimal_places=2)
    memo: Optional[str] = Field(None, max_length=1000)
    weather: Optional[Weather] = None

    @field_validator("amount")
    @classmethod
    def validate_amount(cls, v: Optional[Decimal]) -> Optional[Decimal]:
        if v is None:
            raise ValueError("L'importo non può essere nullo")
        return _check_amount_upper_bound(v)


class ReopenRequest(_RequestModel):
    """
    Richiesta di riapertura.

    reason è opzionale nello schema perché la sua assenza deve produrre
    un errore di validazione applicativo (400) anche per richieste vuote.
    """

    reason: Optional[str] = Field(None, max_length=1000, description="Motivo della riapertura")


class SalesRecordRead(BaseModel):
    model_config = ConfigDict(from_attributes=True)

    id: uuid.UUID
    sale_date: datetime.date
    store_id: uuid.UUID
    store_code: Optional[str] = None
    store_name: Optional[str] = None
    amount: Decimal
    memo: Optional[str] = None
    weather: Optional[Weather] = None
    is_closed: bool
    state: RecordState
    closed_at: Optional[datetime.datetime] = None
    closed_by_id: Optional[uuid.UUID] = None
    closed_by_name: Optional[str] = None
    created_by_id: uuid.UUID
    created_by_name: Optional[str] = None
    created_at: Optional[datetime.datetime] = None
    updated_at: Optional[datetime.datetime] = None


class ClosingHistoryRead(BaseModel):
    model_config = ConfigDict(from_attributes=True)

    id: uuid.UUID
    sales_record_id: uuid.UUID
    action: ClosingAction
    performed_by_id: uuid.UUID
    performed_by_name: Optional[str] = None
    performed_at: datetime.datetime
    reason: Optional[str] = None
