"""
Schemas Pydantic per il progetto Northpalm CC

Questo modulo contiene tutti gli schemi Pydantic utilizzati per la validazione
e serializzazione delle richieste e delle risposte API.
"""

# Import degli schemi per renderli disponibili tramite import diretto
# es: from app.schemas import SalesRecordRead, StoreRead, etc.

from app.schemas.common import ApiResponse, error_response, success_response
from app.schemas.user import PasswordChange, UserCreate, UserLogin, UserResponse
from app.schemas.token import LoginResponse, TokenPayload, TokenRefresh
from app.schemas.store import StoreRead
from app.schemas.sales import (
    ClosingHistoryRead,
    ReopenRequest,
    SalesRecordCreate,
    SalesRecordRead,
    SalesRecordUpdate,
)
from app.schemas.summary import (
    DailyTrendPoint,
    DashboardSummary,
    DateRange,
    StoreTotal,
    SummaryPeriod,
    SummaryReport,
    SummaryRow,
    SummaryTotals,
)

__all__ = [
    "ApiResponse",
    "success_response",
    "error_response",
    "UserCreate",
    "UserLogin",
    "PasswordChange",
    "UserResponse",
    "LoginResponse",
    "TokenPayload",
    "TokenRefresh",
    "StoreRead",
    "SalesRecordCreate",
    "SalesRecordUpdate",
    "SalesRecordRead",
    "ReopenRequest",
    "ClosingHistoryRead",
    "SummaryPeriod",
    "DateRange",
    "SummaryTotals",
    "SummaryRow",
    "SummaryReport",
    "StoreTotal",
    "DailyTrendPoint",
    "DashboardSummary",
]
