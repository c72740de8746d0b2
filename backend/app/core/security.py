"""
Modulo di sicurezza per autenticazione JWT
Progetto: Northpalm CC (Incassi Giornalieri)

Funzioni per hashing password e gestione token JWT.
La firma dei token è delegata a python-jose, l'hashing a passlib (bcrypt).
"""

from datetime import datetime, timedelta, timezone
from typing import Optional

from jose import ExpiredSignatureError, JWTError, jwt
from passlib.context import CryptContext
from pydantic import ValidationError as PydanticValidationError

from app.core.config import settings
from app.core.exceptions import AuthenticationError
from app.schemas.token import TokenPayload

# Context per hashing password
pwd_context = CryptContext(schemes=["bcrypt"], deprecated="auto")

ACCESS_TOKEN_TYPE = "access"
REFRESH_TOKEN_TYPE = "refresh"


def hash_password(password: str) -> str:
    """
    Hasha una password in chiaro.

    Args:
        password: Password in chiaro

    Returns:
        Password hashata
    """
    return pwd_context.hash(password)


def verify_password(plain_password: str, hashed_password: str) -> bool:
    """
    Verifica una password in chiaro contro una hashata.

    Args:
        plain_password: Password in chiaro
        hashed_password: Password hashata

    Returns:
        True se la password corrisponde, False altrimenti
    """
    return pwd_context.verify(plain_password, hashed_password)


def _create_token(
    user_id: str,
    username: str,
    role: str,
    token_type: str,
    expires_delta: timedelta,
    now: Optional[datetime] = None,
) -> str:
    """Costruisce e firma il payload comune ai due tipi di token."""
    issued_at = now or datetime.now(timezone.utc)
    payload = {
        "sub": user_id,
        "username": username,
        "role": role,
        "exp": issued_at + expires_delta,
        "type": token_type,
    }
    return jwt.encode(
        payload,
        settings.secret_key,
        algorithm=settings.jwt_algorithm,
    )


def create_access_token(
    user_id: str, username: str, role: str, now: Optional[datetime] = None
) -> str:
    """
    Crea un token di accesso JWT.

    Args:
        user_id: ID dell'utente
        username: Username dell'utente
        role: Ruolo dell'utente
        now: Istante di emissione (default: adesso, UTC)

    Returns:
        Token JWT codificato
    """
    return _create_token(
        user_id,
        username,
        role,
        ACCESS_TOKEN_TYPE,
        timedelta(minutes=settings.access_token_expire_minutes),
        now,
    )


def create_refresh_token(
    user_id: str, username: str, role: str, now: Optional[datetime] = None
) -> str:
    """
    Crea un token di refresh JWT.

    Args:
        user_id: ID dell'utente
        username: Username dell'utente
        role: Ruolo dell'utente
        now: Istante di emissione (default: adesso, UTC)

    Returns:
        Token JWT codificato
    """
    return _create_token(
        user_id,
        username,
        role,
        REFRESH_TOKEN_TYPE,
        timedelta(days=settings.refresh_token_expire_days),
        now,
    )


def decode_token(token: str) -> TokenPayload:
    """
    Decodifica e valida un token JWT.

    Args:
        token: Token JWT da decodificare

    Returns:
        TokenPayload con i dati del token

    Raises:
        AuthenticationError: Se il token è malformato, invalido o scaduto
    """
    try:
        payload = jwt.decode(
            token,
            settings.secret_key,
            algorithms=[settings.jwt_algorithm],
        )
    except ExpiredSignatureError:
        raise AuthenticationError(
            "Token scaduto, effettua nuovamente il login",
            error_code="TOKEN_EXPIRED",
        )
    except JWTError:
        raise AuthenticationError(
            "Token non valido",
            error_code="TOKEN_INVALID",
        )

    try:
        token_data = TokenPayload(
            sub=payload.get("sub"),
            username=payload.get("username"),
            role=payload.get("role"),
            exp=datetime.fromtimestamp(payload.get("exp"), tz=timezone.utc),
            type=payload.get("type"),
        )
    except (PydanticValidationError, TypeError):
        raise AuthenticationError(
            "Token non valido: payload incompleto",
            error_code="TOKEN_INVALID",
        )

    return token_data


# Export delle funzioni
__all__ = [
    "ACCESS_TOKEN_TYPE",
    "REFRESH_TOKEN_TYPE",
    "hash_password",
    "verify_password",
    "create_access_token",
    "create_refresh_token",
    "decode_token",
]
