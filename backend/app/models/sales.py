"""
Modelli SQLAlchemy per gli incassi giornalieri
Progetto: Northpalm CC (Incassi Giornalieri)

Contiene:
- SalesRecord: un incasso per coppia (data, punto vendita)
- ClosingHistory: storico append-only di chiusure e riaperture
"""

from __future__ import annotations
import datetime
import uuid
from decimal import Decimal
from enum import Enum
from typing import TYPE_CHECKING, List, Optional

from sqlalchemy import (
    Boolean,
    CheckConstraint,
    Date,
    DateTime,
    ForeignKey,
    Index,
    Numeric,
    String,
    Text,
    UniqueConstraint,
    Uuid,
)
from sqlalchemy.orm import Mapped, mapped_column, relationship
from sqlalchemy.sql import func

from app.models import Base
from app.models.mixins import TimestampMixin, UUIDMixin

if TYPE_CHECKING:
    from app.models.store import Store
    from app.models.user import User


class RecordState(str, Enum):
    """Stato del ciclo di vita di un incasso."""
    OPEN = "open"
    CLOSED = "closed"


class ClosingAction(str, Enum):
    """Azioni registrate nello storico chiusure."""
    CLOSE = "close"
    REOPEN = "reopen"


class Weather(str, Enum):
    """Condizioni meteo annotabili su un incasso."""
    CLEAR = "clear"
    OVERCAST = "overcast"
    RAIN = "rain"
    SNOW = "snow"
    CLOSED_FOR_WEATHER = "closed_for_weather"


class SalesRecord(Base, UUIDMixin, TimestampMixin):
    """
    Incasso giornaliero di un punto vendita.

    Esiste al massimo un incasso per coppia (sale_date, store_id): il
    vincolo unique a livello database è la garanzia reale, il controllo
    applicativo in SalesService serve a restituire un errore leggibile.

    Una volta chiuso (is_closed=True) l'incasso non è più modificabile né
    eliminabile finché un amministratore non lo riapre indicando un motivo.

    Attributes:
        sale_date: Data dell'incasso
        store_id: Punto vendita
        amount: Importo lordo (0 <= amount < 100.000.000)
        memo: Nota libera
        weather: Condizioni meteo della giornata
        is_closed: Flag di chiusura
        closed_at / closed_by_id: Valorizzati insieme alla chiusura
        created_by_id: Utente che ha registrato l'incasso
    """

    __tablename__ = "daily_sales"

    sale_date: Mapped[datetime.date] = mapped_column(
        Date,
        nullable=False,
        doc="Data dell'incasso",
    )

    store_id: Mapped[uuid.UUID] = mapped_column(
        Uuid,
        ForeignKey("stores.id", ondelete="RESTRICT"),
        nullable=False,
        doc="Punto vendita",
    )

    amount: Mapped[Decimal] = mapped_column(
        Numeric(12, 2),
        nullable=False,
        default=Decimal("0.00"),
        doc="Importo lordo incassato",
    )

    memo: Mapped[Optional[str]] = mapped_column(Text, nullable=True)

    weather: Mapped[Optional[str]] = mapped_column(
        String(30),
        nullable=True,
        doc="Meteo della giornata (vedi Weather)",
    )

    is_closed: Mapped[bool] = mapped_column(
        Boolean,
        nullable=False,
        default=False,
        doc="True se l'incasso è chiuso e bloccato alle modifiche",
    )

    closed_at: Mapped[Optional[datetime.datetime]] = mapped_column(
        DateTime(timezone=True),
        nullable=True,
    )

    closed_by_id: Mapped[Optional[uuid.UUID]] = mapped_column(
        Uuid,
        ForeignKey("users.id", ondelete="RESTRICT"),
        nullable=True,
    )

    created_by_id: Mapped[uuid.UUID] = mapped_column(
        Uuid,
        ForeignKey("users.id", ondelete="RESTRICT"),
        nullable=False,
    )

    # Relationships
    store: Mapped["Store"] = relationship("Store", lazy="selectin")

    created_by: Mapped["User"] = relationship(
        "User",
        foreign_keys=[created_by_id],
        lazy="selectin",
    )

    closed_by: Mapped[Optional["User"]] = relationship(
        "User",
        foreign_keys=[closed_by_id],
        lazy="selectin",
    )

    history: Mapped[List["ClosingHistory"]] = relationship(
        "ClosingHistory",
        back_populates="sales_record",
        cascade="all, delete-orphan",
        passive_deletes=True,
        lazy="raise",
    )

    __table_args__ = (
        UniqueConstraint("sale_date", "store_id", name="uq_daily_sales_date_store"),
        CheckConstraint(
            "amount >= 0 AND amount < 100000000",
            name="ck_daily_sales_amount_range",
        ),
        CheckConstraint(
            "(is_closed AND closed_at IS NOT NULL AND closed_by_id IS NOT NULL)"
            " OR (NOT is_closed AND closed_at IS NULL AND closed_by_id IS NULL)",
            name="ck_daily_sales_closed_fields",
        ),
        Index("ix_daily_sales_sale_date", "sale_date"),
        Index("ix_daily_sales_store_date", "store_id", "sale_date"),
    )

    @property
    def state(self) -> RecordState:
        return RecordState.CLOSED if self.is_closed else RecordState.OPEN

    @property
    def store_code(self) -> Optional[str]:
        return self.store.code if self.store is not None else None

    @property
    def store_name(self) -> Optional[str]:
        return self.store.name if self.store is not None else None

    @property
    def created_by_name(self) -> Optional[str]:
        return self.created_by.name if self.created_by is not None else None

    @property
    def closed_by_name(self) -> Optional[str]:
        return self.closed_by.name if self.closed_by is not None else None

    def __repr__(self) -> str:
        return (
            f"<SalesRecord(id={self.id}, sale_date={self.sale_date}, "
            f"store_id={self.store_id}, amount={self.amount}, is_closed={self.is_closed})>"
        )


class ClosingHistory(Base, UUIDMixin):
    """
    Voce dello storico chiusure di un incasso.

    Append-only: viene creata ad ogni chiusura o riapertura e non viene
    mai modificata; sparisce solo con la cancellazione (a cascata)
    dell'incasso, possibile esclusivamente mentre è aperto.
    """

    __tablename__ = "closing_history"

    sales_record_id: Mapped[uuid.UUID] = mapped_column(
        Uuid,
        ForeignKey("daily_sales.id", ondelete="CASCADE"),
        nullable=False,
        index=True,
    )

    action: Mapped[str] = mapped_column(String(10), nullable=False)

    performed_by_id: Mapped[uuid.UUID] = mapped_column(
        Uuid,
        ForeignKey("users.id", ondelete="RESTRICT"),
        nullable=False,
    )

    performed_at: Mapped[datetime.datetime] = mapped_column(
        DateTime(timezone=True),
        nullable=False,
        server_default=func.now(),
    )

    reason: Mapped[Optional[str]] = mapped_column(Text, nullable=True)

    sales_record: Mapped["SalesRecord"] = relationship(
        "SalesRecord",
        back_populates="history",
        lazy="raise",
    )

    performed_by: Mapped["User"] = relationship("User", lazy="selectin")

    __table_args__ = (
        CheckConstraint(
            "action IN ('close', 'reopen')",
            name="ck_closing_history_action",
        ),
        CheckConstraint(
            "action <> 'reopen' OR (reason IS NOT NULL AND reason <> '')",
            name="ck_closing_history_reopen_reason",
        ),
    )

    @property
    def performed_by_name(self) -> Optional[str]:
        return self.performed_by.name if self.performed_by is not None else None

    def __repr__(self) -> str:
        return (
            f"<ClosingHistory(sales_record_id={self.sales_record_id}, "
            f"action={self.action}, performed_at={self.performed_at})>"
        )
