"""
Service per i riepiloghi degli incassi
Progetto: Northpalm CC (Incassi Giornalieri)

Recupera le righe (data, punto vendita, importo) di un intervallo e le
aggrega in Python per punto vendita e per periodo (giorno, mese, anno).
Oltre a conteggio, somma, media, minimo e massimo calcola lo scorporo
imponibile/imposta: imponibile = round(lordo / divisore), imposta = lordo - imponibile.

Le funzioni di aggregazione sono pure e non toccano il database.
"""

import calendar
import logging
import uuid
from collections import OrderedDict
from datetime import date, timedelta
from decimal import ROUND_HALF_UP, Decimal
from typing import Dict, Iterable, List, NamedTuple, Optional, Sequence, Tuple

from sqlalchemy import extract, select
from sqlalchemy.ext.asyncio import AsyncSession

from app.core.config import settings
from app.core.exceptions import BusinessValidationError
from app.models.sales import SalesRecord
from app.models.store import Store
from app.schemas.summary import (
    DailyTrendPoint,
    DashboardSummary,
    DateRange,
    StoreTotal,
    SummaryPeriod,
    SummaryReport,
    SummaryRow,
    SummaryTotals,
)

logger = logging.getLogger(__name__)

ZERO = Decimal("0")
UNIT = Decimal("1")
CENT = Decimal("0.01")


class SalesRow(NamedTuple):
    """Riga minima necessaria all'aggregazione."""
    sale_date: date
    store_id: uuid.UUID
    store_code: str
    store_name: str
    display_order: int
    amount: Decimal


# ------------------------------------------------------------
# Funzioni pure
# ------------------------------------------------------------
def split_net_tax(gross: Decimal, divisor: Optional[Decimal] = None) -> Tuple[Decimal, Decimal]:
    """
    Scorpora l'imposta da un importo lordo (imposta inclusa).

    Example:
        >>> split_net_tax(Decimal("1100000"))
        (Decimal('1000000'), Decimal('100000'))
    """
    divisor = divisor if divisor is not None else settings.tax_divisor
    net = (Decimal(gross) / divisor).quantize(UNIT, rounding=ROUND_HALF_UP)
    return net, Decimal(gross) - net


def compute_totals(amounts: Iterable[Decimal], divisor: Optional[Decimal] = None) -> SummaryTotals:
    """Totali di un gruppo di importi; un gruppo vuoto restituisce zeri."""
    values = [Decimal(a) for a in amounts]
    if not values:
        return SummaryTotals()

    total = sum(values, ZERO)
    net, tax = split_net_tax(total, divisor)
    return SummaryTotals(
        sales_count=len(values),
        total_amount=total,
        avg_amount=(total / len(values)).quantize(CENT, rounding=ROUND_HALF_UP),
        min_amount=min(values),
        max_amount=max(values),
        net_amount=net,
        tax_amount=tax,
    )


def period_key(d: date, period: SummaryPeriod) -> str:
    if period is SummaryPeriod.YEAR:
        return f"{d.year:04d}"
    if period is SummaryPeriod.MONTH:
        return f"{d.year:04d}-{d.month:02d}"
    return d.isoformat()


def filter_rows(rows: Iterable[SalesRow], start: Optional[date], end: Optional[date]) -> List[SalesRow]:
    """Righe comprese nell'intervallo, estremi inclusi."""
    return [
        r for r in rows
        if (start is None or r.sale_date >= start) and (end is None or r.sale_date <= end)
    ]


def aggregate_rows(
    rows: Iterable[SalesRow],
    period: SummaryPeriod,
    divisor: Optional[Decimal] = None,
) -> List[SummaryRow]:
    """
    Raggruppa per (periodo, punto vendita).

    Ordinamento: periodo decrescente, poi ordine di visualizzazione del
    punto vendita.
    """
    groups: Dict[Tuple[str, uuid.UUID], List[SalesRow]] = {}
    for row in rows:
        groups.setdefault((period_key(row.sale_date, period), row.store_id), []).append(row)

    result = []
    for (key, store_id), members in groups.items():
        first = members[0]
        totals = compute_totals((m.amount for m in members), divisor)
        result.append((
            key,
            first.display_order,
            SummaryRow(
                period=key,
                store_id=store_id,
                store_code=first.store_code,
                store_name=first.store_name,
                **totals.model_dump(),
            ),
        ))

    result.sort(key=lambda item: item[1])
    result.sort(key=lambda item: item[0], reverse=True)
    return [item[2] for item in result]


def build_store_totals(
    rows: Iterable[SalesRow],
    stores: Sequence[Store],
    divisor: Optional[Decimal] = None,
) -> List[StoreTotal]:
    """
    Totali per punto vendita.

    Compaiono tutti i punti vendita indicati, anche senza incassi, più
    quelli non indicati (ad esempio disattivati) che hanno incassi nelle
    righe: la somma dei totali coincide sempre con il totale generale.
    """
    by_store: Dict[uuid.UUID, List[Decimal]] = {}
    labels: Dict[uuid.UUID, Tuple[int, str, str]] = {
        store.id: (store.display_order, store.code, store.name) for store in stores
    }
    for row in rows:
        by_store.setdefault(row.store_id, []).append(row.amount)
        labels.setdefault(row.store_id, (row.display_order, row.store_code, row.store_name))

    ordered = sorted(labels.items(), key=lambda item: (item[1][0], item[1][1]))
    return [
        StoreTotal(
            store_id=store_id,
            store_code=code,
            store_name=name,
            **compute_totals(by_store.get(store_id, []), divisor).model_dump(),
        )
        for store_id, (_, code, name) in ordered
    ]


def build_daily_trend(rows: Iterable[SalesRow], start: date, end: date) -> List[DailyTrendPoint]:
    """Totale per giorno da start a end inclusi; i giorni senza incassi valgono zero."""
    days: "OrderedDict[date, DailyTrendPoint]" = OrderedDict()
    current = start
    while current <= end:
        days[current] = DailyTrendPoint(sale_date=current)
        current += timedelta(days=1)

    for row in rows:
        point = days.get(row.sale_date)
        if point is not None:
            point.daily_total += row.amount
            point.sales_count += 1

    return list(days.values())


def month_range(year: int, month: int) -> Tuple[date, date]:
    last_day = calendar.monthrange(year, month)[1]
    return date(year, month, 1), date(year, month, last_day)


# ------------------------------------------------------------
# Service
# ------------------------------------------------------------
class SummaryService:
    """Riepiloghi in sola lettura per dashboard e report."""

    async def _fetch_rows(
        self,
        db: AsyncSession,
        start: Optional[date],
        end: Optional[date],
        store_id: Optional[uuid.UUID] = None,
        month: Optional[int] = None,
    ) -> List[SalesRow]:
        query = (
            select(
                SalesRecord.sale_date,
                SalesRecord.store_id,
                Store.code,
                Store.name,
                Store.display_order,
                SalesRecord.amount,
            )
            .join(Store, SalesRecord.store_id == Store.id)
        )
        if start:
            query = query.where(SalesRecord.sale_date >= start)
        if end:
            query = query.where(SalesRecord.sale_date <= end)
        if store_id:
            query = query.where(SalesRecord.store_id == store_id)
        if month:
            query = query.where(extract("month", SalesRecord.sale_date) == month)

        result = await db.execute(query)
        return [SalesRow(*row) for row in result.all()]

    async def _active_stores(
        self, db: AsyncSession, store_id: Optional[uuid.UUID] = None
    ) -> List[Store]:
        query = select(Store).where(Store.is_active == True).order_by(Store.display_order)
        if store_id:
            query = query.where(Store.id == store_id)
        result = await db.execute(query)
        return list(result.scalars().all())

    @staticmethod
    def _check_range(start: Optional[date], end: Optional[date]) -> None:
        if start and end and start > end:
            raise BusinessValidationError("La data di inizio è successiva alla data di fine")

    async def summarize(
        self,
        db: AsyncSession,
        start: Optional[date],
        end: Optional[date],
        period: SummaryPeriod = SummaryPeriod.MONTH,
        store_id: Optional[uuid.UUID] = None,
        month: Optional[int] = None,
    ) -> SummaryReport:
        """
        Riepilogo per periodo e punto vendita su un intervallo (estremi inclusi).

        Con `month` vengono considerati solo gli incassi di quel mese
        dell'anno, in qualsiasi anno. Un intervallo senza incassi
        restituisce righe vuote e totali a zero.
        """
        self._check_range(start, end)
        rows = await self._fetch_rows(db, start, end, store_id, month)
        divisor = settings.tax_divisor

        return SummaryReport(
            period=period,
            date_range=DateRange(start=start, end=end) if start and end else None,
            store_id=store_id,
            rows=aggregate_rows(rows, period, divisor),
            totals=compute_totals((r.amount for r in rows), divisor),
        )

    async def monthly(
        self,
        db: AsyncSession,
        year: Optional[int] = None,
        month: Optional[int] = None,
        store_id: Optional[uuid.UUID] = None,
    ) -> SummaryReport:
        """
        Riepilogo mensile.

        - anno e mese: solo quel mese
        - solo anno: i dodici mesi dell'anno
        - solo mese: quel mese in tutti gli anni (es. ogni giugno)
        - nessuno dei due: tutto lo storico
        """
        if year is not None and month is not None:
            start, end = month_range(year, month)
            return await self.summarize(db, start, end, SummaryPeriod.MONTH, store_id)
        if year is not None:
            start, end = date(year, 1, 1), date(year, 12, 31)
            return await self.summarize(db, start, end, SummaryPeriod.MONTH, store_id)
        return await self.summarize(db, None, None, SummaryPeriod.MONTH, store_id, month=month)

    async def yearly(
        self,
        db: AsyncSession,
        year: Optional[int] = None,
        store_id: Optional[uuid.UUID] = None,
    ) -> SummaryReport:
        """Riepilogo annuale; senza anno copre tutto lo storico."""
        start: Optional[date] = None
        end: Optional[date] = None
        if year is not None:
            start, end = date(year, 1, 1), date(year, 12, 31)
        return await self.summarize(db, start, end, SummaryPeriod.YEAR, store_id)

    async def dashboard(
        self,
        db: AsyncSession,
        start: Optional[date] = None,
        end: Optional[date] = None,
        store_id: Optional[uuid.UUID] = None,
        today: Optional[date] = None,
    ) -> DashboardSummary:
        """
        Dati aggregati per la dashboard.

        - Intervallo di default: ultimi `dashboard_default_days` giorni fino ad oggi
        - Totali per ogni punto vendita attivo (anche a zero) e per quelli
          disattivati che hanno incassi nell'intervallo
        - Totale generale
        - Andamento giornaliero da end - `dashboard_trend_days` a end
        """
        end = end or today or date.today()
        start = start or end - timedelta(days=settings.dashboard_default_days)
        self._check_range(start, end)

        trend_start = end - timedelta(days=settings.dashboard_trend_days)
        rows = await self._fetch_rows(db, min(start, trend_start), end, store_id)
        stores = await self._active_stores(db, store_id)
        divisor = settings.tax_divisor

        in_range = filter_rows(rows, start, end)

        return DashboardSummary(
            date_range=DateRange(start=start, end=end),
            store_totals=build_store_totals(in_range, stores, divisor),
            grand_total=compute_totals((r.amount for r in in_range), divisor),
            daily_trend=build_daily_trend(filter_rows(rows, trend_start, end), trend_start, end),
        )


summary_service = SummaryService()
