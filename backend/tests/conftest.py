"""
Pytest configuration and fixtures per i test degli incassi.

Le sessioni database sono mock (AsyncMock); utenti, punti vendita e
incassi sono istanze reali dei modelli, mai salvate.
"""

import uuid
from datetime import date
from decimal import Decimal
from unittest.mock import AsyncMock, MagicMock

import pytest
from sqlalchemy.ext.asyncio import AsyncSession

from app.models.sales import SalesRecord
from app.models.store import Store
from app.models.user import User, UserRole


# ============================================================
# Helper per risultati di query
# ============================================================


def result_of(value):
    """Mock del Result restituito da AsyncSession.execute."""
    items = value if isinstance(value, list) else [value]
    result = MagicMock()
    result.scalar_one_or_none.return_value = None if isinstance(value, list) else value
    result.scalars.return_value.all.return_value = items
    result.all.return_value = items
    return result


def queue_results(db, *values):
    """
    Configura db.execute per restituire i valori indicati, uno per chiamata.

    Un valore callable viene valutato al momento della chiamata.
    """
    pending = list(values)

    async def execute(*args, **kwargs):
        value = pending.pop(0)
        if callable(value):
            value = value()
        return result_of(value)

    db.execute = AsyncMock(side_effect=execute)
    return db


# ============================================================
# Fixtures per AsyncSession Mock
# ============================================================


@pytest.fixture
def mock_db():
    """Crea un mock di AsyncSession."""
    db = AsyncMock(spec=AsyncSession)
    db.execute = AsyncMock()
    db.add = MagicMock()
    db.commit = AsyncMock()
    db.rollback = AsyncMock()
    db.flush = AsyncMock()
    db.refresh = AsyncMock()
    db.delete = AsyncMock()
    return db


# ============================================================
# Fixtures per utenti e punti vendita
# ============================================================


def make_user(**kwargs) -> User:
    return User(
        id=kwargs.get("id", uuid.uuid4()),
        username=kwargs.get("username", "staff1"),
        hashed_password=kwargs.get("hashed_password", "not-a-real-hash"),
        name=kwargs.get("name", "Operatore 1"),
        role=kwargs.get("role", UserRole.STAFF.value),
        is_active=kwargs.get("is_active", True),
    )


def make_store(**kwargs) -> Store:
    return Store(
        id=kwargs.get("id", uuid.uuid4()),
        code=kwargs.get("code", "clubhouse"),
        name=kwargs.get("name", "클럽하우스"),
        display_order=kwargs.get("display_order", 1),
        is_active=kwargs.get("is_active", True),
    )


def make_record(store: Store, user: User, **kwargs) -> SalesRecord:
    record = SalesRecord(
        id=kwargs.get("id", uuid.uuid4()),
        sale_date=kwargs.get("sale_date", date(2024, 6, 1)),
        store_id=store.id,
        amount=kwargs.get("amount", Decimal("1250000")),
        memo=kwargs.get("memo"),
        weather=kwargs.get("weather"),
        is_closed=False,
        closed_at=None,
        closed_by_id=None,
        created_by_id=user.id,
    )
    record.store = store
    record.created_by = user
    return record


@pytest.fixture
def staff_user():
    """Utente staff attivo."""
    return make_user()


@pytest.fixture
def admin_user():
    """Utente admin attivo."""
    return make_user(username="admin", name="Amministratore", role=UserRole.ADMIN.value)


@pytest.fixture
def clubhouse():
    return make_store()


@pytest.fixture
def stores():
    """I quattro punti vendita del circolo in ordine di visualizzazione."""
    return [
        make_store(code="clubhouse", name="클럽하우스", display_order=1),
        make_store(code="starthouse", name="스타트하우스", display_order=2),
        make_store(code="east_shade", name="동그늘집", display_order=3),
        make_store(code="west_shade", name="서그늘집", display_order=4),
    ]


@pytest.fixture
def open_record(clubhouse, staff_user):
    """Incasso aperto del 2024-06-01 alla clubhouse."""
    return make_record(clubhouse, staff_user)
