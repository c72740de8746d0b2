"""
Schemas Pydantic per l'autenticazione JWT
Progetto: Northpalm CC (Incassi Giornalieri)

Schemas per token JWT e relativi payload.
"""

from datetime import datetime

from pydantic import BaseModel, ConfigDict, Field
from pydantic.alias_generators import to_camel

from app.schemas.user import UserResponse


class LoginResponse(BaseModel):
    """
    Schema per la risposta al login.

    Attributes:
        token: Token di accesso JWT (anche impostato come cookie HttpOnly)
        refresh_token: Token di refresh JWT
        token_type: Tipo di token (default: bearer)
        user: Dati dell'utente autenticato
    """

    token: str = Field(..., description="Token di accesso JWT")
    refresh_token: str = Field(..., description="Token di refresh JWT")
    token_type: str = Field(
        default="bearer",
        description="Tipo di token",
    )
    user: UserResponse


class TokenRefresh(BaseModel):
    """
    Schema per la richiesta di refresh token.

    Attributes:
        refresh_token: Token di refresh JWT
    """

    model_config = ConfigDict(alias_generator=to_camel, populate_by_name=True)

    refresh_token: str = Field(..., description="Token di refresh JWT")


class TokenPayload(BaseModel):
    """
    Schema per il payload contenuto nei token JWT.

    Attributes:
        sub: Subject - ID dell'utente come stringa
        username: Username dell'utente
        role: Ruolo dell'utente
        exp: Expiration - Data/ora di scadenza
        type: Tipo di token ("access" o "refresh")
    """

    sub: str = Field(..., min_length=1, description="ID utente")
    username: str = Field(..., description="Username dell'utente")
    role: str = Field(..., description="Ruolo dell'utente")
    exp: datetime = Field(..., description="Data/ora di scadenza")
    type: str = Field(..., description="Tipo di token (access/refresh)")


# Export degli schemas
__all__ = [
    "LoginResponse",
    "TokenRefresh",
    "TokenPayload",
]
