"""
Router per l'autenticazione
Progetto: Northpalm CC (Incassi Giornalieri)

Endpoints per login, logout, refresh token, profilo utente,
cambio password e creazione utenti.
"""

from fastapi import APIRouter, Depends, Response, status
from sqlalchemy.ext.asyncio import AsyncSession

from app.core.config import settings
from app.core.database import get_db
from app.core.deps import AdminUser, CurrentUser
from app.schemas.common import ApiResponse, success_response
from app.schemas.token import LoginResponse, TokenRefresh
from app.schemas.user import PasswordChange, UserCreate, UserLogin, UserResponse
from app.services.auth_service import AuthService, get_auth_service

router = APIRouter(
    prefix="/auth",
    tags=["Authentication"],
)


async def get_service() -> AuthService:
    """Dependency per ottenere il servizio di autenticazione."""
    return get_auth_service()


def _set_auth_cookie(response: Response, token: str) -> None:
    response.set_cookie(
        key=settings.auth_cookie_name,
        value=token,
        max_age=settings.access_token_expire_minutes * 60,
        httponly=True,
        secure=settings.auth_cookie_secure,
        samesite="strict",
    )


@router.post(
    "/login",
    response_model=ApiResponse[LoginResponse],
    summary="Effettua il login",
)
async def login(
    data: UserLogin,
    response: Response,
    db: AsyncSession = Depends(get_db),
    service: AuthService = Depends(get_service),
):
    """
    Effettua il login e restituisce il token JWT.

    Il token viene anche impostato come cookie HttpOnly.
    """
    result = await service.login(db, data)
    _set_auth_cookie(response, result.token)
    return success_response(result, "Login effettuato")


@router.post(
    "/logout",
    response_model=ApiResponse[None],
    summary="Effettua il logout",
)
async def logout(response: Response):
    """Elimina il cookie di autenticazione; i token sono stateless."""
    response.delete_cookie(settings.auth_cookie_name)
    return success_response(None, "Logout effettuato")


@router.post(
    "/refresh",
    response_model=ApiResponse[LoginResponse],
    summary="Aggiorna i token",
)
async def refresh(
    data: TokenRefresh,
    response: Response,
    db: AsyncSession = Depends(get_db),
    service: AuthService = Depends(get_service),
):
    """Emette una nuova coppia di token a partire dal refresh token."""
    result = await service.refresh(db, data.refresh_token)
    _set_auth_cookie(response, result.token)
    return success_response(result)


@router.get(
    "/me",
    response_model=ApiResponse[UserResponse],
    summary="Ottieni il profilo utente corrente",
)
async def get_me(current_user: CurrentUser):
    """Restituisce i dati dell'utente corrente."""
    return success_response(UserResponse.model_validate(current_user))


@router.post(
    "/change-password",
    response_model=ApiResponse[None],
    summary="Cambia la password dell'utente corrente",
)
async def change_password(
    data: PasswordChange,
    current_user: CurrentUser,
    db: AsyncSession = Depends(get_db),
    service: AuthService = Depends(get_service),
):
    await service.change_password(db, current_user, data)
    await db.commit()
    return success_response(None, "Password aggiornata")


@router.post(
    "/register",
    response_model=ApiResponse[UserResponse],
    status_code=status.HTTP_201_CREATED,
    summary="Crea un nuovo utente (solo admin)",
)
async def register(
    data: UserCreate,
    admin: AdminUser,
    db: AsyncSession = Depends(get_db),
    service: AuthService = Depends(get_service),
):
    """Crea un nuovo utente. Riservato agli amministratori."""
    user = await service.register(db, data)
    await db.commit()
    return success_response(UserResponse.model_validate(user), "Utente creato")


# Export
__all__ = ["router"]
