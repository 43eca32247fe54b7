"""
Schemas Pydantic per la Dashboard
Progetto: Sales Manager (Gestione Vendite)
"""

from datetime import datetime
from decimal import Decimal
from typing import Dict, List

from pydantic import BaseModel, Field


class DashboardKPIs(BaseModel):
    """
    Indicatori calcolati sulla collezione fatture.

    Attributes:
        total_sales: Σ totale delle fatture saldate
        total_revenue: Σ incassato su tutte le fatture (inclusi parziali)
        outstanding_amount: Σ residuo delle fatture non saldate
        overdue_amount: Σ residuo delle fatture scadute
        sales_growth: Variazione % vendite mese corrente vs precedente
        payment_methods: Fatture per metodo di pagamento (tutte, non solo saldate)
    """

    total_sales: Decimal
    total_revenue: Decimal
    outstanding_amount: Decimal
    overdue_amount: Decimal
    overdue_count: int
    this_month_sales: Decimal
    last_month_sales: Decimal
    sales_growth: Decimal
    new_customers: int
    avg_invoice_value: Decimal
    payment_methods: Dict[str, int]
    total_invoices: int
    paid_invoices: int
    unpaid_invoices: int
    total_customers: int


class MonthlyPoint(BaseModel):
    """Valori di un mese di calendario."""

    label: str = Field(..., description="Mese nel formato YYYY-MM")
    sales: Decimal = Field(..., description="Σ totale fatture saldate emesse nel mese")
    revenue: Decimal = Field(..., description="Σ incassato sulle fatture emesse nel mese")


class MonthlySeries(BaseModel):
    months: List[MonthlyPoint]


class DashboardSnapshot(BaseModel):
    """Ultimo stato calcolato della dashboard."""

    kpis: DashboardKPIs
    monthly: MonthlySeries
    status_distribution: Dict[str, int]
    computed_at: datetime
