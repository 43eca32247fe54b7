"""
API v1 Routes
Progetto: Sales Manager (Gestione Vendite)

Router versione 1 dell'API.
"""

from fastapi import APIRouter

from sales_manager.api.v1 import (
    customers, dashboard, employees, invoices, payments, quotes, reminders, reports, search
)

# Router aggregato per v1
api_v1_router = APIRouter(prefix="/api/v1")

# Includi i router dei moduli
api_v1_router.include_router(invoices.router)
api_v1_router.include_router(customers.router)
api_v1_router.include_router(quotes.router)
api_v1_router.include_router(payments.router)
api_v1_router.include_router(reminders.router)
api_v1_router.include_router(dashboard.router)
api_v1_router.include_router(reports.router)
api_v1_router.include_router(search.router)
api_v1_router.include_router(employees.router)

# Esportazione
__all__ = ["api_v1_router"]
