"""
Service Layer per la Dashboard
Progetto: Sales Manager (Gestione Vendite)

Motore di aggregazione: KPI, serie mensile e distribuzione degli stati
calcolati come funzioni pure sulla collezione fatture. Il DashboardService
conserva l'ultimo snapshot e lo ricalcola dopo ogni mutazione e ad ogni
tick periodico.
"""

import logging
from collections import Counter
from datetime import datetime
from typing import Dict, Iterable, List, Optional, Sequence

from sales_manager.core.dates import month_label, resolve_now, same_month, shift_month, start_of_month
from sales_manager.core.money import ZERO, percentage_change, sum_money, to_money
from sales_manager.models import Customer, Invoice, PaymentMethod, PaymentStatus
from sales_manager.schemas.dashboard import (
    DashboardKPIs,
    DashboardSnapshot,
    MonthlyPoint,
    MonthlySeries,
)
from sales_manager.services.repository import SalesRepository

# Logger per questo modulo
logger = logging.getLogger(__name__)


def _paid_sales_between(invoices: Iterable[Invoice], start: datetime, end: datetime) -> List[Invoice]:
    return [inv for inv in invoices if inv.is_paid() and start <= inv.date < end]


def calculate_kpis(
    invoices: Sequence[Invoice],
    customers: Sequence[Customer],
    now: Optional[datetime] = None,
) -> DashboardKPIs:
    """
    Calcola i KPI della dashboard.

    Funzione pura e indipendente dall'ordine delle collezioni.

    Args:
        invoices: Tutte le fatture
        customers: Tutti i clienti
        now: Istante di riferimento (default: adesso)

    Returns:
        DashboardKPIs
    """
    now = resolve_now(now)
    month_start = start_of_month(now)
    last_month_start = shift_month(month_start, -1)

    paid = [inv for inv in invoices if inv.is_paid()]
    unpaid = [inv for inv in invoices if not inv.is_paid()]
    overdue = [inv for inv in unpaid if inv.is_overdue(now)]

    total_sales = sum_money(inv.total for inv in paid)
    this_month_sales = sum_money(inv.total for inv in _paid_sales_between(invoices, month_start, now))
    last_month_sales = sum_money(
        inv.total for inv in _paid_sales_between(invoices, last_month_start, month_start)
    )

    method_counts = Counter(inv.payment_method.value for inv in invoices)

    return DashboardKPIs(
        total_sales=total_sales,
        total_revenue=sum_money(inv.paid_amount for inv in invoices),
        outstanding_amount=sum_money(inv.remaining_amount for inv in unpaid),
        overdue_amount=sum_money(inv.remaining_amount for inv in overdue),
        overdue_count=len(overdue),
        this_month_sales=this_month_sales,
        last_month_sales=last_month_sales,
        sales_growth=percentage_change(this_month_sales, last_month_sales),
        new_customers=sum(1 for c in customers if c.created_at >= month_start),
        avg_invoice_value=to_money(total_sales / len(paid)) if paid else ZERO,
        payment_methods={method.value: method_counts.get(method.value, 0) for method in PaymentMethod},
        total_invoices=len(invoices),
        paid_invoices=len(paid),
        unpaid_invoices=len(unpaid),
        total_customers=len(customers),
    )


def get_monthly_data(
    invoices: Sequence[Invoice],
    months: int = 6,
    now: Optional[datetime] = None,
) -> MonthlySeries:
    """
    Serie degli ultimi `months` mesi di calendario, dal più vecchio al corrente.

    Per ogni mese: vendite saldate e incassato delle fatture emesse nel mese.
    """
    now = resolve_now(now)
    points = []
    for offset in range(months - 1, -1, -1):
        month = shift_month(start_of_month(now), -offset)
        in_month = [inv for inv in invoices if same_month(inv.date, month.year, month.month)]
        points.append(
            MonthlyPoint(
                label=month_label(month),
                sales=sum_money(inv.total for inv in in_month if inv.is_paid()),
                revenue=sum_money(inv.paid_amount for inv in in_month),
            )
        )
    return MonthlySeries(months=points)


def status_distribution(invoices: Sequence[Invoice]) -> Dict[str, int]:
    """Numero di fatture per stato di pagamento."""
    counts = Counter(inv.payment_status.value for inv in invoices)
    return {status.value: counts.get(status.value, 0) for status in PaymentStatus}


class DashboardService:
    """
    Conserva l'ultimo snapshot calcolato della dashboard.

    Si registra sul repository per ricalcolare dopo ogni salvataggio.
    """

    def __init__(self, repository: SalesRepository, months: int = 6) -> None:
        self.repository = repository
        self.months = months
        self._snapshot: Optional[DashboardSnapshot] = None
        repository.subscribe(self._on_change)

    async def _on_change(self) -> None:
        self.refresh()

    def refresh(self, now: Optional[datetime] = None) -> DashboardSnapshot:
        """Ricalcola KPI, serie mensile e distribuzione stati."""
        now = resolve_now(now)
        invoices = self.repository.invoices
        self._snapshot = DashboardSnapshot(
            kpis=calculate_kpis(invoices, self.repository.customers, now),
            monthly=get_monthly_data(invoices, self.months, now),
            status_distribution=status_distribution(invoices),
            computed_at=now,
        )
        logger.debug("Dashboard aggiornata (%d fatture)", len(invoices))
        return self._snapshot

    async def tick(self) -> None:
        self.refresh()

    @property
    def snapshot(self) -> DashboardSnapshot:
        if self._snapshot is None:
            return self.refresh()
        return self._snapshot
