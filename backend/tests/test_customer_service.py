"""
Unit tests per CustomerService.
"""

from decimal import Decimal

import pytest

from sales_manager.schemas.customer import CustomerCreate, CustomerUpdate
from sales_manager.schemas.invoice import InvoiceCreate


class TestCustomerCrud:
    async def test_add_normalizes_contacts(self, customer_service):
        result = await customer_service.add_customer(
            CustomerCreate(name="  Yacine Haddad ", email=" Yacine@Example.COM ", phone="+213 555 12 34")
        )

        customer = result.data
        assert customer.name == "Yacine Haddad"
        assert customer.email == "yacine@example.com"
        assert customer.phone == "+2135551234"
        assert customer.total_purchases == Decimal("0.00")

    def test_invalid_phone_rejected(self):
        with pytest.raises(ValueError):
            CustomerCreate(name="Cliente", phone="abc-123")

    def test_blank_name_rejected(self):
        with pytest.raises(ValueError):
            CustomerCreate(name="   ")

    async def test_update(self, customer_service):
        customer = (await customer_service.add_customer(CustomerCreate(name="Vecchio Nome"))).data

        result = await customer_service.update_customer(customer.id, CustomerUpdate(name="Nuovo Nome"))

        assert result.data.name == "Nuovo Nome"

    async def test_update_keeps_invoice_snapshot(self, customer_service, invoice_service, sample_items, now):
        customer = (await customer_service.add_customer(CustomerCreate(name="Originale"))).data
        invoice = (
            await invoice_service.add_invoice(InvoiceCreate(customer_id=customer.id, items=sample_items), now=now)
        ).data

        await customer_service.update_customer(customer.id, CustomerUpdate(name="Rinominato"))

        assert invoice.customer.name == "Originale"

    async def test_delete_and_not_found(self, customer_service, repository):
        customer = (await customer_service.add_customer(CustomerCreate(name="Da eliminare"))).data

        await customer_service.delete_customer(customer.id)
        result = await customer_service.get_customer(customer.id)

        assert repository.customers == []
        assert result.error_code == "RESOURCE_NOT_FOUND"

    async def test_list_sorted_by_name(self, customer_service):
        for name in ["zeta", "Alfa", "beta"]:
            await customer_service.add_customer(CustomerCreate(name=name))

        assert [c.name for c in customer_service.list_customers()] == ["Alfa", "beta", "zeta"]

    def test_empty_update_rejected(self):
        with pytest.raises(ValueError):
            CustomerUpdate()


class TestReconcileTotals:
    async def test_drifted_totals_are_corrected(self, customer_service, invoice_service, sample_items, now):
        customer = (await customer_service.add_customer(CustomerCreate(name="Cliente"))).data
        await invoice_service.add_invoice(InvoiceCreate(customer_id=customer.id, items=sample_items), now=now)
        customer.total_purchases = Decimal("1.00")
        customer.invoice_count = 7

        result = await customer_service.reconcile_totals()

        assert result.data == [customer]
        assert customer.total_purchases == Decimal("2975.00")
        assert customer.invoice_count == 1

    async def test_consistent_totals_untouched(self, customer_service, invoice_service, sample_items, now):
        customer = (await customer_service.add_customer(CustomerCreate(name="Cliente"))).data
        await invoice_service.add_invoice(InvoiceCreate(customer_id=customer.id, items=sample_items), now=now)

        result = await customer_service.reconcile_totals()

        assert result.data == []
