"""
API v1 Routes
Progetto: Northpalm CC (Incassi Giornalieri)

Router versione 1 dell'API.
"""

from fastapi import APIRouter

from app.api.v1 import auth, sales, stores, summary

# Router aggregato per v1
api_v1_router = APIRouter(prefix="/api/v1")

# Includi i router dei moduli
api_v1_router.include_router(auth.router)
api_v1_router.include_router(stores.router)
# summary prima di sales: /sales/summary/* non deve finire su /sales/{id}
api_v1_router.include_router(summary.router)
api_v1_router.include_router(sales.router)

# Esportazione
__all__ = ["api_v1_router"]
