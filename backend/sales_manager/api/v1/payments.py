"""
Router FastAPI per il registro pagamenti
Progetto: Sales Manager (Gestione Vendite)

L'incasso avviene su /invoices/{invoice_id}/payments; qui storico e statistiche.
"""

from datetime import datetime
from typing import Optional

from fastapi import APIRouter, Depends, Query

from sales_manager.core.deps import get_payment_service
from sales_manager.models import PaymentRecord
from sales_manager.schemas.payment import PaymentStatistics
from sales_manager.services.payment_service import PaymentService

router = APIRouter(
    prefix="/payments",
    tags=["Pagamenti"],
)


@router.get(
    "/",
    name="pagamenti_storico",
    summary="Storico pagamenti",
    description="Registro pagamenti dal più recente, con filtri opzionali.",
    response_model=list[PaymentRecord],
)
async def payment_history(
    start_date: Optional[datetime] = Query(None, description="Dalla data (inclusa)"),
    end_date: Optional[datetime] = Query(None, description="Alla data (inclusa)"),
    method: Optional[str] = Query(None, description="cash | bank_transfer | stripe | paypal"),
    customer_id: Optional[str] = Query(None, description="ID cliente"),
    service: PaymentService = Depends(get_payment_service),
) -> list[PaymentRecord]:
    return service.get_payment_history(start_date, end_date, method, customer_id)


@router.get(
    "/statistics",
    name="pagamenti_statistiche",
    summary="Statistiche pagamenti",
    response_model=PaymentStatistics,
)
async def payment_statistics(
    service: PaymentService = Depends(get_payment_service),
) -> PaymentStatistics:
    return service.get_payment_statistics()
