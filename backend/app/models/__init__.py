"""
Modelli Database SQLAlchemy
Progetto: Northpalm CC (Incassi Giornalieri)

Import centralizzato di tutti i modelli per create_all e usage generico.

Modelli:
- User: Utenti del sistema (admin, staff)
- Store: Punti vendita del circolo (dati di riferimento)
- SalesRecord: Incasso giornaliero per punto vendita
- ClosingHistory: Storico chiusure/riaperture degli incassi
"""

# SQLAlchemy 2.0 Base declarativa
# Importato qui per essere disponibile per tutti i modelli
from sqlalchemy.orm import DeclarativeBase


class Base(DeclarativeBase):
    """Base class per tutti i modelli SQLAlchemy."""
    pass


from app.models.user import User, UserRole
from app.models.store import Store
from app.models.sales import ClosingAction, ClosingHistory, RecordState, SalesRecord, Weather

__all__ = [
    "Base",
    "User",
    "UserRole",
    "Store",
    "SalesRecord",
    "RecordState",
    "Weather",
    "ClosingHistory",
    "ClosingAction",
]
