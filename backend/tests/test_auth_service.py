"""
Unit tests per AuthService.

Sessione database mock; le password sono hashate davvero con bcrypt.
"""

import pytest

from conftest import make_user, queue_results
from app.core.exceptions import AuthenticationError, BusinessValidationError, DuplicateError
from app.core.security import (
    ACCESS_TOKEN_TYPE,
    REFRESH_TOKEN_TYPE,
    create_access_token,
    create_refresh_token,
    decode_token,
    hash_password,
    verify_password,
)
from app.models.user import User, UserRole
from app.schemas.user import PasswordChange, UserCreate, UserLogin
from app.services.auth_service import AuthService

pytestmark = pytest.mark.asyncio


@pytest.fixture
def service():
    return AuthService()


@pytest.fixture
def admin_with_password():
    """Admin con password 'admin'."""
    return make_user(
        username="admin",
        name="Amministratore",
        role=UserRole.ADMIN.value,
        hashed_password=hash_password("admin"),
    )


# ============================================================
# Login
# ============================================================


class TestLogin:
    """Tests per il login."""

    async def test_login_success(self, service, mock_db, admin_with_password):
        """Test login corretto: coppia di token e dati utente."""
        queue_results(mock_db, admin_with_password)

        result = await service.login(mock_db, UserLogin(username="admin", password="admin"))

        assert result.token_type == "bearer"
        assert result.user.username == "admin"
        assert result.user.role == UserRole.ADMIN
        access = decode_token(result.token)
        assert access.type == ACCESS_TOKEN_TYPE
        assert access.sub == str(admin_with_password.id)
        assert decode_token(result.refresh_token).type == REFRESH_TOKEN_TYPE

    async def test_login_wrong_password(self, service, mock_db, admin_with_password):
        """Test password errata: 401 INVALID_CREDENTIALS."""
        queue_results(mock_db, admin_with_password)

        with pytest.raises(AuthenticationError) as exc_info:
            await service.login(mock_db, UserLogin(username="admin", password="wrong"))

        assert exc_info.value.status_code == 401
        assert exc_info.value.error_code == "INVALID_CREDENTIALS"

    async def test_login_unknown_user(self, service, mock_db):
        """Test utente inesistente: stesso errore della password errata."""
        queue_results(mock_db, None)

        with pytest.raises(AuthenticationError) as exc_info:
            await service.login(mock_db, UserLogin(username="ghost", password="x"))

        assert exc_info.value.error_code == "INVALID_CREDENTIALS"

    async def test_login_inactive_user(self, service, mock_db, admin_with_password):
        admin_with_password.is_active = False
        queue_results(mock_db, admin_with_password)

        with pytest.raises(AuthenticationError):
            await service.login(mock_db, UserLogin(username="admin", password="admin"))

    @pytest.mark.parametrize("username,password", [(None, "admin"), ("admin", None), ("", "")])
    async def test_login_missing_fields(self, service, mock_db, username, password):
        with pytest.raises(BusinessValidationError):
            await service.login(mock_db, UserLogin(username=username, password=password))

        mock_db.execute.assert_not_called()


# ============================================================
# Refresh
# ============================================================


class TestRefresh:
    """Tests per il rinnovo dei token."""

    async def test_refresh_success(self, service, mock_db, staff_user):
        queue_results(mock_db, staff_user)
        token = create_refresh_token(str(staff_user.id), staff_user.username, staff_user.role)

        result = await service.refresh(mock_db, token)

        assert decode_token(result.token).sub == str(staff_user.id)
        assert result.user.id == staff_user.id

    async def test_refresh_rejects_access_token(self, service, mock_db, staff_user):
        """Test access token usato come refresh: 401 senza interrogare il database."""
        token = create_access_token(str(staff_user.id), staff_user.username, staff_user.role)

        with pytest.raises(AuthenticationError):
            await service.refresh(mock_db, token)

        mock_db.execute.assert_not_called()

    async def test_refresh_inactive_user(self, service, mock_db, staff_user):
        staff_user.is_active = False
        queue_results(mock_db, staff_user)
        token = create_refresh_token(str(staff_user.id), staff_user.username, staff_user.role)

        with pytest.raises(AuthenticationError):
            await service.refresh(mock_db, token)


# ============================================================
# Cambio password
# ============================================================


class TestChangePassword:
    """Tests per il cambio password."""

    async def test_change_password(self, service, mock_db, admin_with_password):
        await service.change_password(
            mock_db,
            admin_with_password,
            PasswordChange(current_password="admin", new_password="n3w-pass"),
        )

        assert verify_password("n3w-pass", admin_with_password.hashed_password)
        mock_db.flush.assert_awaited_once()

    async def test_wrong_current_password(self, service, mock_db, admin_with_password):
        """Test password attuale errata: 401, hash invariato."""
        old_hash = admin_with_password.hashed_password

        with pytest.raises(AuthenticationError):
            await service.change_password(
                mock_db,
                admin_with_password,
                PasswordChange(current_password="nope", new_password="n3w-pass"),
            )

        assert admin_with_password.hashed_password == old_hash
        mock_db.flush.assert_not_called()

    async def test_new_password_too_short(self, service, mock_db, admin_with_password):
        """Test nuova password sotto la lunghezza minima: 400."""
        with pytest.raises(BusinessValidationError) as exc_info:
            await service.change_password(
                mock_db,
                admin_with_password,
                PasswordChange(current_password="admin", new_password="abc"),
            )

        assert exc_info.value.status_code == 400

    async def test_camel_case_body(self):
        data = PasswordChange.model_validate({"currentPassword": "a", "newPassword": "bcde"})
        assert data.current_password == "a"
        assert data.new_password == "bcde"


# ============================================================
# Creazione utenti
# ============================================================


class TestRegister:
    """Tests per la creazione di utenti."""

    async def test_register(self, service, mock_db):
        queue_results(mock_db, None)

        user = await service.register(
            mock_db, UserCreate(username="staff2", password="pass", name="Operatore 2")
        )

        assert isinstance(user, User)
        assert user.role == UserRole.STAFF.value
        assert verify_password("pass", user.hashed_password)
        mock_db.add.assert_called_once_with(user)

    async def test_register_duplicate_username(self, service, mock_db, staff_user):
        """Test username già registrato: 409."""
        queue_results(mock_db, staff_user)

        with pytest.raises(DuplicateError) as exc_info:
            await service.register(
                mock_db, UserCreate(username="staff1", password="pass", name="Altro")
            )

        assert exc_info.value.status_code == 409
        mock_db.add.assert_not_called()
