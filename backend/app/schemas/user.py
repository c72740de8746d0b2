"""
Schemas Pydantic per l'entità User
Progetto: Northpalm CC (Incassi Giornalieri)

Schemas per validazione e serializzazione dati utente.
"""

from datetime import datetime
from typing import Optional
from uuid import UUID

from pydantic import BaseModel, ConfigDict, Field
from pydantic.alias_generators import to_camel

from app.models.user import UserRole


class UserCreate(BaseModel):
    """
    Schema per la creazione di un nuovo utente (solo admin).

    Attributes:
        username: Nome utente (deve essere univoco)
        password: Password in chiaro (min 4, max 100 caratteri)
        name: Nome visualizzato
        role: Ruolo dell'utente (default: staff)
    """

    username: str = Field(
        min_length=3,
        max_length=50,
        pattern=r"^[A-Za-z0-9_.-]+$",
        description="Nome utente univoco",
    )
    password: str = Field(
        min_length=4,
        max_length=100,
        description="Password in chiaro (min 4, max 100 caratteri)",
    )
    name: str = Field(
        min_length=1,
        max_length=100,
        description="Nome visualizzato",
    )
    role: UserRole = Field(
        default=UserRole.STAFF,
        description="Ruolo dell'utente",
    )


class UserLogin(BaseModel):
    """
    Schema per il login utente.

    I campi sono opzionali a livello di schema: l'assenza viene segnalata
    dal servizio con un errore 400 leggibile.
    """

    username: Optional[str] = Field(None, description="Nome utente")
    password: Optional[str] = Field(None, description="Password in chiaro")


class PasswordChange(BaseModel):
    """Schema per il cambio password dell'utente corrente."""

    model_config = ConfigDict(alias_generator=to_camel, populate_by_name=True)

    current_password: Optional[str] = Field(None, description="Password attuale")
    new_password: Optional[str] = Field(None, description="Nuova password")


class UserResponse(BaseModel):
    """
    Schema per la risposta contenente dati utente.

    Non espone mai l'hash della password.
    """

    model_config = ConfigDict(from_attributes=True)

    id: UUID = Field(..., description="UUID dell'utente")
    username: str = Field(..., description="Nome utente")
    name: str = Field(..., description="Nome visualizzato")
    role: UserRole = Field(..., description="Ruolo dell'utente")
    is_active: bool = Field(..., description="Indica se l'utente è attivo")
    created_at: Optional[datetime] = Field(None, description="Data/ora di creazione")


# Export degli schemas
__all__ = [
    "UserCreate",
    "UserLogin",
    "PasswordChange",
    "UserResponse",
]
