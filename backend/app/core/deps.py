"""
Dependency Injection per autenticazione
Progetto: Northpalm CC (Incassi Giornalieri)

Funzioni di dependency injection per autenticazione e autorizzazione.
Il token viene letto dall'header Authorization (Bearer) oppure, in
mancanza, dal cookie impostato al login.
"""

from typing import Annotated, Optional
from uuid import UUID

from fastapi import Depends, Request
from fastapi.security import OAuth2PasswordBearer
from sqlalchemy import select
from sqlalchemy.ext.asyncio import AsyncSession

from app.core.config import settings
from app.core.database import get_db
from app.core.exceptions import AuthenticationError, AuthorizationError
from app.core.security import ACCESS_TOKEN_TYPE, decode_token
from app.models.user import User

# OAuth2 scheme - estrae il token dall'header Authorization
oauth2_scheme = OAuth2PasswordBearer(
    tokenUrl="/api/v1/auth/login",
    auto_error=False,
)


def extract_token(request: Request, header_token: Optional[str]) -> Optional[str]:
    """Token dall'header Bearer, altrimenti dal cookie di autenticazione."""
    if header_token:
        return header_token
    return request.cookies.get(settings.auth_cookie_name) or None


async def get_current_user(
    request: Request,
    token: Optional[str] = Depends(oauth2_scheme),
    db: AsyncSession = Depends(get_db),
) -> User:
    """
    Dependency per ottenere l'utente corrente dal token JWT.

    Args:
        request: Richiesta HTTP (per il cookie)
        token: Token JWT estratto dall'header Authorization
        db: Sessione database

    Returns:
        L'utente corrente

    Raises:
        AuthenticationError: Se il token manca, è invalido, scaduto o l'utente non è attivo
    """
    raw_token = extract_token(request, token)
    if not raw_token:
        raise AuthenticationError(
            "Token di autenticazione non fornito, effettua il login",
            error_code="TOKEN_MISSING",
        )

    token_data = decode_token(raw_token)

    if token_data.type != ACCESS_TOKEN_TYPE:
        raise AuthenticationError("Token di refresh non valido per questa operazione")

    try:
        user_id = UUID(token_data.sub)
    except ValueError:
        raise AuthenticationError("ID utente invalido nel token")

    result = await db.execute(
        select(User).where(User.id == user_id)
    )
    user = result.scalar_one_or_none()

    if not user:
        raise AuthenticationError("Utente non trovato")

    if not user.is_active:
        raise AuthenticationError("Utente disattivato")

    return user


def require_role(*allowed_roles: str):
    """
    Factory function per creare una dependency che verifica il ruolo.

    Args:
        allowed_roles: Ruoli permessi per l'endpoint

    Returns:
        Dependency che verifica il ruolo dell'utente

    Example:
        @router.post("/admin-only")
        async def admin_endpoint(admin: User = Depends(require_role("admin"))):
            ...
    """
    async def role_checker(
        current_user: Annotated[User, Depends(get_current_user)]
    ) -> User:
        """
        Verifica che l'utente abbia uno dei ruoli permessi.

        Raises:
            AuthorizationError: Se l'utente non ha i permessi necessari (403)
        """
        if current_user.role not in allowed_roles:
            raise AuthorizationError(
                f"Accesso negato. Ruolo richiesto: {', '.join(allowed_roles)}"
            )
        return current_user

    return role_checker


# Type aliases per uso comune
CurrentUser = Annotated[User, Depends(get_current_user)]
AdminUser = Annotated[User, Depends(require_role("admin"))]


# Export
__all__ = [
    "extract_token",
    "get_current_user",
    "require_role",
    "oauth2_scheme",
    "CurrentUser",
    "AdminUser",
]
