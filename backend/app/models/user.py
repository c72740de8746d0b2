"""
Modello SQLAlchemy per l'entità User
Progetto: Northpalm CC (Incassi Giornalieri)

Modello per l'autenticazione e gestione utenti del sistema.
"""

from __future__ import annotations
from enum import Enum

from sqlalchemy import Index, String
from sqlalchemy.orm import Mapped, mapped_column

from app.models import Base
from app.models.mixins import ActiveFlagMixin, TimestampMixin, UUIDMixin


class UserRole(str, Enum):
    """Ruoli utente nel sistema."""
    ADMIN = "admin"
    STAFF = "staff"


class User(Base, UUIDMixin, TimestampMixin, ActiveFlagMixin):
    """
    Modello per gli utenti del sistema.

    Gli utenti staff registrano e chiudono gli incassi; solo gli admin
    possono riaprire un incasso chiuso e creare nuovi utenti.

    Attributes:
        id: UUID primary key, generato automaticamente
        username: Nome utente univoco usato per il login
        hashed_password: Password hashata (bcrypt)
        name: Nome visualizzato
        role: Ruolo dell'utente (admin, staff)
        is_active: Indica se l'utente è attivo
        created_at: Data/ora creazione record
        updated_at: Data/ora ultimo aggiornamento
    """

    __tablename__ = "users"

    username: Mapped[str] = mapped_column(
        String(50),
        unique=True,
        nullable=False,
        doc="Nome utente univoco",
    )

    hashed_password: Mapped[str] = mapped_column(
        String(255),
        nullable=False,
        doc="Password hashata",
    )

    name: Mapped[str] = mapped_column(
        String(100),
        nullable=False,
        doc="Nome visualizzato dell'utente",
    )

    role: Mapped[str] = mapped_column(
        String(20),
        nullable=False,
        default=UserRole.STAFF.value,
        doc="Ruolo dell'utente",
    )

    __table_args__ = (
        Index("ix_users_role", "role"),
    )

    @property
    def is_admin(self) -> bool:
        return self.role == UserRole.ADMIN.value

    def __repr__(self) -> str:
        return f"<User(id={self.id}, username={self.username}, role={self.role})>"
