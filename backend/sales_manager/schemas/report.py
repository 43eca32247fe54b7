"""
Schemas Pydantic per i Report
Progetto: Sales Manager (Gestione Vendite)
"""

from datetime import datetime
from decimal import Decimal
from typing import List, Optional

from pydantic import BaseModel, Field


class AgingInvoice(BaseModel):
    """Fattura scaduta all'interno di una fascia."""

    id: str
    number: str
    customer_name: str
    due_date: datetime
    days_overdue: int
    outstanding: Decimal


class AgingBucket(BaseModel):
    """Fascia di anzianità crediti (es. 31-60 giorni)."""

    label: str
    min_days: int
    max_days: Optional[int] = Field(None, description="None per l'ultima fascia aperta")
    count: int = 0
    amount: Decimal = Decimal("0.00")
    invoices: List[AgingInvoice] = Field(default_factory=list)


class AgingReport(BaseModel):
    generated_at: datetime
    buckets: List[AgingBucket]
    total_count: int
    total_amount: Decimal


class MonthlySalesRow(BaseModel):
    number: str
    customer_name: str
    date: datetime
    total: Decimal
    paid_amount: Decimal
    payment_status: str


class MonthlySalesReport(BaseModel):
    """Report vendite di un mese di calendario."""

    year: int
    month: int
    label: str
    invoice_count: int
    sales: Decimal = Field(..., description="Σ totale fatture saldate")
    revenue: Decimal = Field(..., description="Σ incassato")
    invoiced: Decimal = Field(..., description="Σ totale di tutte le fatture emesse")
    rows: List[MonthlySalesRow]
