"""
Schemas Pydantic per i riepiloghi degli incassi
Progetto: Northpalm CC (Incassi Giornalieri)

Tutti i valori sono calcolati al volo: nessuno di questi schemi
corrisponde a una tabella.
"""

import datetime
import uuid
from decimal import Decimal
from enum import Enum
from typing import List, Optional

from pydantic import BaseModel, Field


class SummaryPeriod(str, Enum):
    """Granularità temporale del raggruppamento."""
    DAY = "day"
    MONTH = "month"
    YEAR = "year"


class DateRange(BaseModel):
    start: datetime.date
    end: datetime.date


class SummaryTotals(BaseModel):
    """Totali di un gruppo; un gruppo vuoto ha tutti i valori a zero."""

    sales_count: int = Field(0, description="Numero di incassi")
    total_amount: Decimal = Field(Decimal("0"), description="Somma lorda")
    avg_amount: Decimal = Field(Decimal("0"), description="Media lorda")
    min_amount: Decimal = Field(Decimal("0"), description="Incasso minimo")
    max_amount: Decimal = Field(Decimal("0"), description="Incasso massimo")
    net_amount: Decimal = Field(Decimal("0"), description="Imponibile (lordo / divisore)")
    tax_amount: Decimal = Field(Decimal("0"), description="Imposta (lordo - imponibile)")


class SummaryRow(SummaryTotals):
    """Totali per coppia (periodo, punto vendita)."""

    period: str = Field(..., description="Chiave del periodo (YYYY, YYYY-MM o YYYY-MM-DD)")
    store_id: uuid.UUID
    store_code: str
    store_name: str


class SummaryReport(BaseModel):
    period: SummaryPeriod
    date_range: Optional[DateRange] = None
    store_id: Optional[uuid.UUID] = None
    rows: List[SummaryRow] = Field(default_factory=list)
    totals: SummaryTotals = Field(default_factory=SummaryTotals)


class StoreTotal(SummaryTotals):
    store_id: uuid.UUID
    store_code: str
    store_name: str


class DailyTrendPoint(BaseModel):
    sale_date: datetime.date
    daily_total: Decimal = Decimal("0")
    sales_count: int = 0


class DashboardSummary(BaseModel):
    date_range: Optional[DateRange] = None
    store_totals: List[StoreTotal] = Field(default_factory=list)
    grand_total: SummaryTotals = Field(default_factory=SummaryTotals)
    daily_trend: List[DailyTrendPoint] = Field(default_factory=list)
