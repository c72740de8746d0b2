"""
Servizio per l'autenticazione
Progetto: Northpalm CC (Incassi Giornalieri)

Business logic per login, refresh token, cambio password e creazione utenti.
"""

import logging
from uuid import UUID

from sqlalchemy import select
from sqlalchemy.ext.asyncio import AsyncSession

from app.core.config import settings
from app.core.exceptions import (
    AuthenticationError,
    BusinessValidationError,
    DuplicateError,
    NotFoundError,
)
from app.core.security import (
    REFRESH_TOKEN_TYPE,
    create_access_token,
    create_refresh_token,
    decode_token,
    hash_password,
    verify_password,
)
from app.models.user import User
from app.schemas.token import LoginResponse
from app.schemas.user import PasswordChange, UserCreate, UserLogin, UserResponse

logger = logging.getLogger(__name__)

INVALID_CREDENTIALS = "Nome utente o password non corretti"


class AuthService:
    """Servizio per la gestione dell'autenticazione."""

    @staticmethod
    def _issue_tokens(user: User) -> LoginResponse:
        return LoginResponse(
            token=create_access_token(str(user.id), user.username, user.role),
            refresh_token=create_refresh_token(str(user.id), user.username, user.role),
            token_type="bearer",
            user=UserResponse.model_validate(user),
        )

    async def _get_active_user(self, db: AsyncSession, user_id: UUID) -> User:
        result = await db.execute(select(User).where(User.id == user_id))
        user = result.scalar_one_or_none()

        if not user:
            raise AuthenticationError("Utente non trovato")
        if not user.is_active:
            raise AuthenticationError("Utente disattivato")
        return user

    async def register(self, db: AsyncSession, data: UserCreate) -> User:
        """
        Crea un nuovo utente.

        Args:
            db: Sessione database
            data: Dati per la creazione dell'utente

        Returns:
            L'utente creato

        Raises:
            DuplicateError: Se lo username è già registrato
        """
        result = await db.execute(
            select(User).where(User.username == data.username)
        )
        if result.scalar_one_or_none():
            raise DuplicateError(f"Lo username {data.username} è già registrato")

        user = User(
            username=data.username,
            hashed_password=hash_password(data.password),
            name=data.name,
            role=data.role.value,
            is_active=True,
        )

        db.add(user)
        await db.flush()
        await db.refresh(user)

        logger.info("Creato utente %s con ruolo %s", user.username, user.role)
        return user

    async def login(self, db: AsyncSession, data: UserLogin) -> LoginResponse:
        """
        Autentica un utente e restituisce i token JWT.

        Raises:
            BusinessValidationError: Se username o password mancano
            AuthenticationError: Se le credenziali sono invalide o l'utente è disattivato
        """
        if not data.username or not data.password:
            raise BusinessValidationError("Inserisci nome utente e password")

        result = await db.execute(
            select(User).where(User.username == data.username)
        )
        user = result.scalar_one_or_none()

        # Stesso messaggio per utente inesistente e password errata
        if not user or not verify_password(data.password, user.hashed_password):
            logger.warning("Login fallito per %s", data.username)
            raise AuthenticationError(INVALID_CREDENTIALS, error_code="INVALID_CREDENTIALS")

        if not user.is_active:
            raise AuthenticationError("Utente disattivato")

        logger.info("Login eseguito: %s", user.username)
        return self._issue_tokens(user)

    async def refresh(self, db: AsyncSession, refresh_token: str) -> LoginResponse:
        """
        Emette una nuova coppia di token a partire da un refresh token.

        Raises:
            AuthenticationError: Se il refresh token è invalido o scaduto
        """
        token_data = decode_token(refresh_token)

        if token_data.type != REFRESH_TOKEN_TYPE:
            raise AuthenticationError("Token di accesso non valido per il refresh")

        try:
            user_id = UUID(token_data.sub)
        except ValueError:
            raise AuthenticationError("ID utente invalido nel token")

        user = await self._get_active_user(db, user_id)
        return self._issue_tokens(user)

    async def change_password(
        self, db: AsyncSession, user: User, data: PasswordChange
    ) -> None:
        """
        Cambia la password dell'utente corrente.

        Raises:
            BusinessValidationError: Se mancano i campi o la nuova password è troppo corta
            AuthenticationError: Se la password attuale non è corretta
        """
        if not data.current_password or not data.new_password:
            raise BusinessValidationError("Inserisci la password attuale e la nuova password")

        if len(data.new_password) < settings.min_password_length:
            raise BusinessValidationError(
                f"La nuova password deve contenere almeno {settings.min_password_length} caratteri"
            )

        if not verify_password(data.current_password, user.hashed_password):
            raise AuthenticationError("La password attuale non è corretta")

        user.hashed_password = hash_password(data.new_password)
        await db.flush()
        logger.info("Password aggiornata per %s", user.username)

    async def get_user_by_id(self, db: AsyncSession, user_id: UUID) -> User:
        """
        Ottiene un utente per ID.

        Raises:
            NotFoundError: Se l'utente non esiste
        """
        result = await db.execute(
            select(User).where(User.id == user_id)
        )
        user = result.scalar_one_or_none()

        if not user:
            raise NotFoundError(f"Utente con ID {user_id} non trovato")

        return user


def get_auth_service() -> AuthService:
    """
    Factory per ottenere un'istanza del servizio di autenticazione.

    Returns:
        Istanza di AuthService
    """
    return AuthService()


# Export
__all__ = [
    "AuthService",
    "get_auth_service",
]
