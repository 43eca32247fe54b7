"""
Schemas Pydantic per i Pagamenti
Progetto: Sales Manager (Gestione Vendite)
"""

from datetime import datetime
from decimal import Decimal
from typing import Dict, Optional

from pydantic import BaseModel, Field, field_validator

from sales_manager.core.dates import ensure_aware
from sales_manager.models import Invoice, PaymentRecord, PaymentTransaction


class PaymentCreate(BaseModel):
    """
    Richiesta di pagamento su una fattura.

    Il metodo è una stringa libera validata dal service, così che un
    metodo sconosciuto produca InvalidPaymentMethodError.
    """

    method: str = Field(..., min_length=1, description="cash | bank_transfer | stripe | paypal")
    amount: Decimal = Field(..., description="Importo del pagamento")
    expected_version: Optional[int] = Field(
        None,
        ge=1,
        description="Versione della fattura letta dal client",
    )


class PaymentReceipt(BaseModel):
    """Esito di un pagamento riuscito."""

    invoice: Invoice
    transaction: PaymentTransaction
    record: PaymentRecord


class MethodStatistics(BaseModel):
    count: int = 0
    amount: Decimal = Decimal("0.00")


class PaymentStatistics(BaseModel):
    """Statistiche aggregate del registro pagamenti."""

    total_count: int
    total_amount: Decimal
    by_method: Dict[str, MethodStatistics]
    this_month_count: int
    this_month_amount: Decimal


class PaymentHistoryQuery(BaseModel):
    """Filtri dello storico pagamenti."""

    start_date: Optional[datetime] = None
    end_date: Optional[datetime] = None
    method: Optional[str] = None
    customer_id: Optional[str] = None

    @field_validator("start_date", "end_date")
    @classmethod
    def make_aware(cls, v: Optional[datetime]) -> Optional[datetime]:
        return ensure_aware(v) if v is not None else v
