"""
Unit tests per InvoiceService.

Verificano numerazione, totali, scadenze di default, aggiornamenti con
controllo di versione e aggiornamento dei totali cliente.
"""

from datetime import timedelta
from decimal import Decimal

import pytest

from sales_manager.models import CustomerSnapshot, InvoiceStatus, LineItem, PaymentMethod, PaymentStatus
from sales_manager.schemas.customer import CustomerCreate
from sales_manager.schemas.invoice import InvoiceCreate, InvoiceUpdate


# ============================================================
# Tests per la creazione
# ============================================================


class TestAddInvoice:
    """Tests per add_invoice."""

    async def test_creates_invoice_with_totals(self, invoice_service, sample_customer, sample_items, now):
        result = await invoice_service.add_invoice(
            InvoiceCreate(customer=sample_customer, items=sample_items),
            now=now,
        )

        assert result.success is True
        invoice = result.data
        assert invoice.number == "202503-001"
        assert invoice.total == Decimal("2975.00")
        assert invoice.payment_status == PaymentStatus.UNPAID
        assert invoice.status == InvoiceStatus.DRAFT

    async def test_default_due_date_uses_payment_terms(self, invoice_service, sample_customer, sample_items, now):
        result = await invoice_service.add_invoice(
            InvoiceCreate(customer=sample_customer, items=sample_items),
            now=now,
        )

        assert result.data.due_date == now + timedelta(days=30)

    async def test_numbers_are_sequential_per_month(self, make_invoice, now):
        first = await make_invoice()
        second = await make_invoice()
        april = await make_invoice(issued_at=now + timedelta(days=20))

        assert first.number == "202503-001"
        assert second.number == "202503-002"
        assert april.number == "202504-001"

    async def test_number_follows_highest_sequence(self, make_invoice, repository):
        first = await make_invoice()
        await make_invoice()
        repository.invoices.remove(first)

        third = await make_invoice()

        assert third.number == "202503-003"

    async def test_missing_items_fails(self, invoice_service, sample_customer, now):
        result = await invoice_service.add_invoice(InvoiceCreate(customer=sample_customer), now=now)

        assert result.success is False
        assert result.error_code == "BUSINESS_VALIDATION_ERROR"
        assert "riga" in result.error

    async def test_missing_customer_fails(self, invoice_service, sample_items, now):
        result = await invoice_service.add_invoice(InvoiceCreate(items=sample_items), now=now)

        assert result.success is False
        assert result.error == "Il cliente è obbligatorio"

    async def test_blank_customer_name_fails(self, invoice_service, sample_items, now):
        result = await invoice_service.add_invoice(
            InvoiceCreate(customer=CustomerSnapshot(name="   "), items=sample_items),
            now=now,
        )

        assert result.success is False

    async def test_unknown_customer_id_fails(self, invoice_service, sample_items, now):
        result = await invoice_service.add_invoice(
            InvoiceCreate(customer_id="missing", items=sample_items),
            now=now,
        )

        assert result.success is False
        assert result.error_code == "RESOURCE_NOT_FOUND"

    async def test_due_date_before_default_issue_date_fails(
        self, invoice_service, sample_customer, sample_items, repository, days, now
    ):
        result = await invoice_service.add_invoice(
            InvoiceCreate(customer=sample_customer, items=sample_items, due_date=days(-5)),
            now=now,
        )

        assert result.success is False
        assert result.error_code == "BUSINESS_VALIDATION_ERROR"
        assert repository.invoices == []

    async def test_customer_totals_are_updated(self, invoice_service, customer_service, sample_items, now):
        customer = (await customer_service.add_customer(CustomerCreate(name="Amina Saidi"))).data

        result = await invoice_service.add_invoice(
            InvoiceCreate(customer_id=customer.id, items=sample_items),
            now=now,
        )

        assert result.data.customer.id == customer.id
        assert customer.total_purchases == Decimal("2975.00")
        assert customer.invoice_count == 1

    async def test_invoice_is_persisted(self, make_invoice, storage):
        invoice = await make_invoice()

        blob = await storage.load("invoices")

        assert [raw["id"] for raw in blob] == [invoice.id]
        assert blob[0]["total"] == "2975.00"

    def test_paid_status_cannot_be_set_manually(self, sample_customer, sample_items):
        with pytest.raises(ValueError):
            InvoiceCreate(customer=sample_customer, items=sample_items, status=InvoiceStatus.PAID)


# ============================================================
# Tests per la modifica
# ============================================================


class TestUpdateInvoice:
    """Tests per update_invoice."""

    async def test_items_change_recomputes_totals(self, invoice_service, make_invoice, now):
        invoice = await make_invoice()

        result = await invoice_service.update_invoice(
            invoice.id,
            InvoiceUpdate(items=[LineItem(description="Nuova", quantity=1, price=Decimal("100"))]),
            now=now,
        )

        assert result.success is True
        assert result.data.total == Decimal("119.00")
        assert result.data.version == 2

    async def test_version_mismatch_conflicts(self, invoice_service, make_invoice):
        invoice = await make_invoice()

        result = await invoice_service.update_invoice(
            invoice.id,
            InvoiceUpdate(notes="nota", version=5),
        )

        assert result.success is False
        assert result.error_code == "CONFLICT_STATE"
        assert result.exception.extra == {"current_version": 1}

    async def test_matching_version_is_accepted(self, invoice_service, make_invoice):
        invoice = await make_invoice()

        result = await invoice_service.update_invoice(
            invoice.id,
            InvoiceUpdate(notes="ok", version=1),
        )

        assert result.success is True
        assert result.data.notes == "ok"

    async def test_total_below_paid_amount_rejected(self, invoice_service, make_invoice, repository, now):
        invoice = await make_invoice()
        invoice.apply_payment(Decimal("2000"), PaymentMethod.CASH, "CASH-1-abc", now)

        result = await invoice_service.update_invoice(
            invoice.id,
            InvoiceUpdate(items=[LineItem(description="Piccola", quantity=1, price=Decimal("10"))]),
        )

        assert result.success is False
        stored = repository.get_invoice(invoice.id)
        assert stored.total == Decimal("2975.00")
        assert stored.version == 2

    async def test_update_moves_customer_totals(self, invoice_service, customer_service, sample_items, now):
        first = (await customer_service.add_customer(CustomerCreate(name="Primo"))).data
        second = (await customer_service.add_customer(CustomerCreate(name="Secondo"))).data
        invoice = (
            await invoice_service.add_invoice(
                InvoiceCreate(customer_id=first.id, items=sample_items),
                now=now,
            )
        ).data

        await invoice_service.update_invoice(invoice.id, InvoiceUpdate(customer_id=second.id))

        assert first.invoice_count == 0
        assert first.total_purchases == Decimal("0.00")
        assert second.invoice_count == 1
        assert second.total_purchases == Decimal("2975.00")

    async def test_unknown_invoice(self, invoice_service):
        result = await invoice_service.update_invoice("missing", InvoiceUpdate(notes="x"))

        assert result.success is False
        assert result.error_code == "RESOURCE_NOT_FOUND"

    def test_empty_update_rejected(self):
        with pytest.raises(ValueError):
            InvoiceUpdate(version=1)


# ============================================================
# Tests per cancellazione e lettura
# ============================================================


class TestDeleteAndList:
    async def test_delete_removes_invoice_and_adjusts_customer(
        self, invoice_service, customer_service, sample_items, repository, now
    ):
        customer = (await customer_service.add_customer(CustomerCreate(name="Cliente"))).data
        invoice = (
            await invoice_service.add_invoice(
                InvoiceCreate(customer_id=customer.id, items=sample_items),
                now=now,
            )
        ).data

        result = await invoice_service.delete_invoice(invoice.id)

        assert result.success is True
        assert repository.invoices == []
        assert customer.invoice_count == 0
        assert customer.total_purchases == Decimal("0.00")

    async def test_delete_unknown(self, invoice_service):
        result = await invoice_service.delete_invoice("missing")

        assert result.success is False

    async def test_get_invoice(self, invoice_service, make_invoice):
        invoice = await make_invoice()

        result = await invoice_service.get_invoice(invoice.id)

        assert result.data is invoice

    async def test_list_newest_first(self, invoice_service, make_invoice, now):
        older = await make_invoice(issued_at=now - timedelta(days=5))
        newer = await make_invoice()

        assert invoice_service.list_invoices() == [newer, older]
