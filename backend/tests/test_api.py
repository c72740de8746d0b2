"""
Tests degli endpoint HTTP: busta di risposta, codici di stato e routing.

Database e utente corrente sono sostituiti tramite dependency_overrides.
"""

import pytest
from fastapi.testclient import TestClient

from conftest import queue_results
from app.core.database import get_db
from app.core.deps import get_current_user
from app.core.security import create_access_token, create_refresh_token, hash_password
from app.main import app


@pytest.fixture
def client(mock_db):
    app.dependency_overrides[get_db] = lambda: mock_db
    yield TestClient(app)
    app.dependency_overrides.clear()


def login_as(user):
    app.dependency_overrides[get_current_user] = lambda: user


# ============================================================
# Sistema e autenticazione
# ============================================================


class TestSystem:

    def test_health(self, client):
        response = client.get("/health")
        assert response.status_code == 200
        assert response.json()["status"] == "healthy"

    def test_missing_token(self, client):
        """Test richiesta senza token: 401 nella busta standard."""
        response = client.get("/api/v1/stores/")

        assert response.status_code == 401
        body = response.json()
        assert body["success"] is False
        assert body["error_code"] == "TOKEN_MISSING"
        assert body["message"]
        assert response.headers["www-authenticate"] == "Bearer"

    def test_invalid_bearer_token(self, client):
        response = client.get(
            "/api/v1/sales/", headers={"Authorization": "Bearer not-a-jwt"}
        )
        assert response.status_code == 401
        assert response.json()["error_code"] == "TOKEN_INVALID"

    def test_logout_clears_cookie(self, client):
        response = client.post("/api/v1/auth/logout")
        assert response.status_code == 200
        body = response.json()
        assert body["success"] is True
        assert body["data"] is None
        assert body["message"] == "Logout effettuato"
        assert "auth_token" in response.headers.get("set-cookie", "")

    def test_login_missing_fields(self, client):
        response = client.post("/api/v1/auth/login", json={"username": "admin"})
        assert response.status_code == 400
        assert response.json()["success"] is False

    def test_register_requires_admin(self, client, staff_user):
        login_as(staff_user)
        response = client.post(
            "/api/v1/auth/register",
            json={"username": "staff2", "password": "pass", "name": "Operatore 2"},
        )
        assert response.status_code == 403


# ============================================================
# Autenticazione via cookie
# ============================================================


class TestCookieAuth:

    def test_login_sets_http_only_cookie(self, client, mock_db, staff_user):
        staff_user.hashed_password = hash_password("staff1")
        queue_results(mock_db, staff_user)

        response = client.post(
            "/api/v1/auth/login", json={"username": "staff1", "password": "staff1"}
        )

        assert response.status_code == 200
        cookie = response.headers["set-cookie"]
        assert cookie.startswith("auth_token=")
        assert "HttpOnly" in cookie
        assert response.json()["data"]["user"]["username"] == "staff1"

    def test_cookie_only_authentication(self, client, mock_db, staff_user):
        """Test richiesta con il solo cookie auth_token, senza header Authorization."""
        token = create_access_token(str(staff_user.id), staff_user.username, staff_user.role)
        queue_results(mock_db, staff_user)
        client.cookies.set("auth_token", token)

        response = client.get("/api/v1/auth/me")

        assert response.status_code == 200
        assert response.json()["data"]["username"] == "staff1"

    def test_refresh_token_in_cookie_is_rejected(self, client, staff_user):
        token = create_refresh_token(str(staff_user.id), staff_user.username, staff_user.role)
        client.cookies.set("auth_token", token)

        response = client.get("/api/v1/auth/me")

        assert response.status_code == 401


# ============================================================
# Incassi
# ============================================================


class TestSalesEndpoints:

    def test_negative_amount_is_400(self, client, staff_user, clubhouse):
        """Test importo negativo: 400, non 422."""
        login_as(staff_user)
        response = client.post(
            "/api/v1/sales/",
            json={"saleDate": "2024-06-01", "storeId": str(clubhouse.id), "amount": -1},
        )

        assert response.status_code == 400
        body = response.json()
        assert body["success"] is False
        assert body["error_code"] == "VALIDATION_ERROR"

    def test_duplicate_is_409(self, client, mock_db, staff_user, clubhouse, open_record):
        login_as(staff_user)
        queue_results(mock_db, clubhouse, open_record)

        response = client.post(
            "/api/v1/sales/",
            json={"saleDate": "2024-06-01", "storeId": str(clubhouse.id), "amount": 1000},
        )

        assert response.status_code == 409
        assert response.json()["data"] == {"existing_id": str(open_record.id)}
        mock_db.commit.assert_not_called()

    def test_get_record(self, client, mock_db, staff_user, open_record):
        login_as(staff_user)
        queue_results(mock_db, open_record)

        response = client.get(f"/api/v1/sales/{open_record.id}")

        assert response.status_code == 200
        data = response.json()["data"]
        assert data["id"] == str(open_record.id)
        assert data["state"] == "open"
        assert data["is_closed"] is False
        assert data["store_code"] == "clubhouse"

    def test_edit_closed_record_is_403(self, client, mock_db, staff_user, open_record):
        login_as(staff_user)
        open_record.is_closed = True
        queue_results(mock_db, open_record)

        response = client.put(f"/api/v1/sales/{open_record.id}", json={"amount": 1300000})

        assert response.status_code == 403
        assert response.json()["error_code"] == "SALES_RECORD_CLOSED"
        mock_db.commit.assert_not_called()

    def test_reopen_by_staff_is_403(self, client, staff_user, open_record):
        login_as(staff_user)
        response = client.post(
            f"/api/v1/sales/{open_record.id}/reopen", json={"reason": "correction"}
        )
        assert response.status_code == 403

    def test_reopen_without_reason_is_400(self, client, mock_db, admin_user, open_record):
        login_as(admin_user)

        response = client.post(f"/api/v1/sales/{open_record.id}/reopen")

        assert response.status_code == 400
        assert response.json()["error_code"] == "REOPEN_REASON_REQUIRED"
        mock_db.execute.assert_not_called()


# ============================================================
# Riepiloghi
# ============================================================


class TestSummaryEndpoints:

    def test_dashboard_route_is_not_a_record_id(self, client, mock_db, staff_user, stores):
        login_as(staff_user)
        queue_results(mock_db, [], stores)

        response = client.get(
            "/api/v1/sales/summary/dashboard",
            params={"startDate": "2024-06-01", "endDate": "2024-06-30"},
        )

        assert response.status_code == 200
        data = response.json()["data"]
        assert len(data["store_totals"]) == 4
        assert data["grand_total"]["sales_count"] == 0
        assert len(data["daily_trend"]) == 8

    def test_monthly_summary_empty(self, client, mock_db, staff_user):
        login_as(staff_user)
        queue_results(mock_db, [])

        response = client.get(
            "/api/v1/sales/summary/monthly", params={"year": 2030, "month": 1}
        )

        assert response.status_code == 200
        data = response.json()["data"]
        assert data["rows"] == []
        assert data["date_range"] == {"start": "2030-01-01", "end": "2030-01-31"}


# ============================================================
# Elenco incassi
# ============================================================


class TestSalesList:

    def test_query_aliases_become_filters(self, client, mock_db, staff_user, clubhouse, open_record):
        """Test startDate, endDate, storeId e isClosed applicati alla query, con ordinamento."""
        login_as(staff_user)
        queue_results(mock_db, [open_record])

        response = client.get(
            "/api/v1/sales/",
            params={
                "startDate": "2024-06-01",
                "endDate": "2024-06-30",
                "storeId": str(clubhouse.id),
                "isClosed": "false",
            },
        )

        assert response.status_code == 200
        assert [r["id"] for r in response.json()["data"]] == [str(open_record.id)]
        query = str(mock_db.execute.call_args.args[0])
        assert "daily_sales.sale_date >=" in query
        assert "daily_sales.sale_date <=" in query
        assert "daily_sales.store_id =" in query
        assert "daily_sales.is_closed" in query
        assert "ORDER BY daily_sales.sale_date DESC, stores.display_order" in query

    def test_no_filters(self, client, mock_db, staff_user):
        login_as(staff_user)
        queue_results(mock_db, [])

        response = client.get("/api/v1/sales/")

        assert response.status_code == 200
        assert response.json()["data"] == []
        query = str(mock_db.execute.call_args.args[0])
        assert "daily_sales.is_closed" not in query
        assert "daily_sales.sale_date >=" not in query

    def test_inverted_range_is_400(self, client, mock_db, staff_user):
        login_as(staff_user)

        response = client.get(
            "/api/v1/sales/", params={"startDate": "2024-06-30", "endDate": "2024-06-01"}
        )

        assert response.status_code == 400
        mock_db.execute.assert_not_called()
