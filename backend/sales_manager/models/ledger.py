"""
Registri globali
Progetto: Sales Manager (Gestione Vendite)

Contiene:
- PaymentRecord: voce del registro pagamenti (append-only)
- Reminder: voce del registro promemoria (append-only)
"""

from datetime import datetime
from decimal import Decimal
from typing import Optional

from pydantic import BaseModel, Field, field_validator

from sales_manager.core.dates import ensure_aware, utcnow
from sales_manager.models.enums import Channel, PaymentMethod, ReminderTrigger, TransactionStatus
from sales_manager.models.invoice import new_id


class PaymentRecord(BaseModel):
    """
    Voce del registro pagamenti.

    Contiene una copia dei campi identificativi di fattura e cliente,
    indipendente dalla lista transazioni della fattura.
    """

    id: str = Field(..., description="ID della transazione")
    invoice_id: str
    invoice_number: str
    customer_id: Optional[str] = None
    customer_name: str
    amount: Decimal
    method: PaymentMethod
    status: TransactionStatus = TransactionStatus.COMPLETED
    timestamp: datetime = Field(default_factory=utcnow)

    @field_validator("timestamp")
    @classmethod
    def make_aware(cls, v: datetime) -> datetime:
        return ensure_aware(v)


class Reminder(BaseModel):
    """Voce del registro promemoria."""

    id: str = Field(default_factory=new_id)
    invoice_id: str
    invoice_number: str
    customer_name: str
    customer_email: str = ""
    customer_phone: str = ""
    amount: Decimal = Field(..., description="Importo residuo al momento dell'invio")
    due_date: datetime
    trigger: ReminderTrigger
    channel: Channel
    status: str = "sent"
    message: str
    sent_at: datetime = Field(default_factory=utcnow)

    @field_validator("due_date", "sent_at")
    @classmethod
    def make_aware(cls, v: datetime) -> datetime:
        return ensure_aware(v)
