"""
Unit tests per il motore di aggregazione della dashboard.
"""

import random
from datetime import datetime, timedelta, timezone
from decimal import Decimal

from sales_manager.models import Customer, PaymentMethod
from sales_manager.services.dashboard_service import (
    calculate_kpis,
    get_monthly_data,
    status_distribution,
)


async def _seed(make_invoice, now):
    """
    Quattro fatture:
    - marzo, saldata (2975.00)
    - marzo, pagata 1000 su 2975 (parziale)
    - febbraio, saldata (2975.00)
    - gennaio, non pagata e scaduta
    """
    paid_march = await make_invoice(issued_at=now - timedelta(days=2))
    paid_march.apply_payment(paid_march.total, PaymentMethod.STRIPE, "STRIPE-1-a", now)

    partial = await make_invoice(issued_at=now - timedelta(days=1))
    partial.apply_payment(Decimal("1000"), PaymentMethod.CASH, "CASH-1-b", now)

    paid_feb = await make_invoice(issued_at=datetime(2025, 2, 10, tzinfo=timezone.utc))
    paid_feb.apply_payment(paid_feb.total, PaymentMethod.PAYPAL, "PAYPAL-1-c", now)

    overdue = await make_invoice(
        issued_at=datetime(2025, 1, 5, tzinfo=timezone.utc),
        due_date=datetime(2025, 2, 4, tzinfo=timezone.utc),
    )
    return paid_march, partial, paid_feb, overdue


class TestCalculateKpis:
    """Tests per calculate_kpis."""

    async def test_kpis(self, make_invoice, repository, now):
        await _seed(make_invoice, now)
        customers = [
            Customer(name="Nuovo", created_at=now - timedelta(days=3)),
            Customer(name="Vecchio", created_at=now - timedelta(days=60)),
        ]

        kpis = calculate_kpis(repository.invoices, customers, now)

        assert kpis.total_sales == Decimal("5950.00")
        assert kpis.total_revenue == Decimal("6950.00")
        assert kpis.outstanding_amount == Decimal("1975.00") + Decimal("2975.00")
        assert kpis.overdue_count == 1
        assert kpis.overdue_amount == Decimal("2975.00")
        assert kpis.this_month_sales == Decimal("2975.00")
        assert kpis.last_month_sales == Decimal("2975.00")
        assert kpis.sales_growth == Decimal("0.0")
        assert kpis.new_customers == 1
        assert kpis.avg_invoice_value == Decimal("2975.00")
        assert kpis.total_invoices == 4
        assert kpis.paid_invoices == 2
        assert kpis.unpaid_invoices == 2
        assert kpis.total_customers == 2

    async def test_payment_method_histogram_counts_all_invoices(self, make_invoice, repository, now):
        await _seed(make_invoice, now)

        kpis = calculate_kpis(repository.invoices, [], now)

        assert kpis.payment_methods == {"cash": 2, "bank_transfer": 0, "stripe": 1, "paypal": 1}

    async def test_order_invariant(self, make_invoice, repository, now):
        await _seed(make_invoice, now)
        expected = calculate_kpis(repository.invoices, [], now)

        shuffled = list(repository.invoices)
        random.Random(42).shuffle(shuffled)

        assert calculate_kpis(shuffled, [], now) == expected

    def test_empty_collections(self, now):
        kpis = calculate_kpis([], [], now)

        assert kpis.total_sales == Decimal("0.00")
        assert kpis.avg_invoice_value == Decimal("0.00")
        assert kpis.sales_growth == Decimal("0.0")

    async def test_growth_against_previous_month(self, make_invoice, repository, now):
        this_month = await make_invoice(issued_at=now - timedelta(days=1))
        this_month.apply_payment(this_month.total, PaymentMethod.CASH, "CASH-1-a", now)
        feb = await make_invoice(
            issued_at=datetime(2025, 2, 3, tzinfo=timezone.utc),
            items=[this_month.items[1]],
        )
        feb.apply_payment(feb.total, PaymentMethod.CASH, "CASH-1-b", now)

        kpis = calculate_kpis(repository.invoices, [], now)

        # 2975 vs 595 -> +400%
        assert kpis.sales_growth == Decimal("400.0")


class TestMonthlyData:
    async def test_last_six_months(self, make_invoice, repository, now):
        await _seed(make_invoice, now)

        series = get_monthly_data(repository.invoices, 6, now)

        assert [p.label for p in series.months] == [
            "2024-10", "2024-11", "2024-12", "2025-01", "2025-02", "2025-03",
        ]
        march = series.months[-1]
        assert march.sales == Decimal("2975.00")
        assert march.revenue == Decimal("3975.00")
        assert series.months[-2].sales == Decimal("2975.00")
        assert series.months[-3].sales == Decimal("0.00")


class TestDashboardService:
    async def test_status_distribution(self, make_invoice, repository, now):
        await _seed(make_invoice, now)

        assert status_distribution(repository.invoices) == {"unpaid": 1, "partial": 1, "paid": 2}

    async def test_snapshot_refreshed_after_mutation(self, dashboard_service, make_invoice):
        assert dashboard_service.snapshot.kpis.total_invoices == 0

        await make_invoice()

        assert dashboard_service.snapshot.kpis.total_invoices == 1

    async def test_tick_recomputes(self, dashboard_service, repository, make_invoice):
        await make_invoice()
        before = dashboard_service.snapshot.computed_at

        await dashboard_service.tick()

        assert dashboard_service.snapshot.computed_at >= before
