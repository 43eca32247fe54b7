"""
Unit tests per PaymentService e per i gateway di pagamento.
"""

import asyncio
import logging
import re
from datetime import timedelta
from decimal import Decimal
from unittest.mock import AsyncMock

import pytest

from sales_manager.models import PaymentMethod, PaymentStatus
from sales_manager.services.payment_gateway import (
    GatewayResult,
    PayPalGateway,
    StripeGateway,
    build_gateways,
    generate_transaction_id,
)
from sales_manager.services.payment_service import PaymentService, parse_payment_method


# ============================================================
# Tests per process_payment
# ============================================================


class TestProcessPayment:
    """Tests per l'incasso di una fattura."""

    async def test_full_payment(self, payment_service, make_invoice, repository, now):
        invoice = await make_invoice()

        result = await payment_service.process_payment(invoice.id, "cash", Decimal("2975.00"), now=now)

        assert result.success is True
        receipt = result.data
        assert receipt.invoice.payment_status == PaymentStatus.PAID
        assert receipt.invoice.is_overdue(now + timedelta(days=60)) is False
        assert receipt.transaction.id.startswith("CASH-")
        assert repository.payments == [receipt.record]
        assert receipt.record.invoice_number == invoice.number

    async def test_payment_is_persisted(self, payment_service, make_invoice, storage, now):
        invoice = await make_invoice()

        await payment_service.process_payment(invoice.id, "bank_transfer", Decimal("100"), now=now)

        payments = await storage.load("payments")
        invoices = await storage.load("invoices")
        assert payments[0]["method"] == "bank_transfer"
        assert invoices[0]["paid_amount"] == "100.00"

    async def test_overpayment_rejected(self, payment_service, make_invoice, repository, now):
        invoice = await make_invoice()

        result = await payment_service.process_payment(invoice.id, "cash", Decimal("3000"), now=now)

        assert result.success is False
        assert result.error_code == "OVERPAYMENT"
        assert invoice.paid_amount == Decimal("0.00")
        assert repository.payments == []

    async def test_non_positive_amount_rejected(self, payment_service, make_invoice):
        invoice = await make_invoice()

        result = await payment_service.process_payment(invoice.id, "cash", Decimal("0"))

        assert result.success is False
        assert result.error_code == "BUSINESS_VALIDATION_ERROR"

    async def test_unknown_method(self, payment_service, make_invoice):
        invoice = await make_invoice()

        result = await payment_service.process_payment(invoice.id, "bitcoin", Decimal("10"))

        assert result.success is False
        assert result.error_code == "INVALID_PAYMENT_METHOD"
        assert result.exception.extra["allowed"] == ["cash", "bank_transfer", "stripe", "paypal"]

    async def test_unknown_invoice(self, payment_service):
        result = await payment_service.process_payment("missing", "cash", Decimal("10"))

        assert result.success is False
        assert result.error_code == "RESOURCE_NOT_FOUND"

    async def test_stale_version_conflicts(self, payment_service, make_invoice):
        invoice = await make_invoice()
        await payment_service.process_payment(invoice.id, "cash", Decimal("10"), expected_version=1)

        result = await payment_service.process_payment(
            invoice.id, "cash", Decimal("10"), expected_version=1
        )

        assert result.success is False
        assert result.error_code == "CONFLICT_STATE"
        assert invoice.paid_amount == Decimal("10.00")

    async def test_gateway_decline(self, make_invoice, repository, test_settings):
        gateways = build_gateways(test_settings)
        gateways[PaymentMethod.STRIPE] = StripeGateway(enabled=False, credential="")
        service = PaymentService(repository, gateways)
        invoice = await make_invoice()

        result = await service.process_payment(invoice.id, "stripe", Decimal("100"))

        assert result.success is False
        assert result.error_code == "PAYMENT_DECLINED"
        assert invoice.paid_amount == Decimal("0.00")
        assert invoice.transactions == []

    async def test_gateway_not_called_when_amount_invalid(self, make_invoice, repository, test_settings):
        gateways = build_gateways(test_settings)
        charge = AsyncMock(return_value=GatewayResult(success=True, transaction_id="X"))
        gateways[PaymentMethod.PAYPAL].charge = charge
        service = PaymentService(repository, gateways)
        invoice = await make_invoice()

        await service.process_payment(invoice.id, "paypal", Decimal("5000"))

        charge.assert_not_awaited()

    async def test_concurrent_payments_never_overpay(self, payment_service, make_invoice):
        invoice = await make_invoice()

        results = await asyncio.gather(
            payment_service.process_payment(invoice.id, "cash", Decimal("2000")),
            payment_service.process_payment(invoice.id, "stripe", Decimal("2000")),
        )

        assert sorted(r.success for r in results) == [False, True]
        assert invoice.paid_amount == Decimal("2000.00")
        assert len(invoice.transactions) == 1


# ============================================================
# Tests per storico e statistiche
# ============================================================


class TestHistoryAndStatistics:
    async def test_history_newest_first_and_filters(self, payment_service, make_invoice, now):
        invoice = await make_invoice()
        await payment_service.process_payment(invoice.id, "cash", Decimal("100"), now=now - timedelta(days=40))
        await payment_service.process_payment(invoice.id, "paypal", Decimal("200"), now=now)

        history = payment_service.get_payment_history()
        assert [r.amount for r in history] == [Decimal("200.00"), Decimal("100.00")]

        recent = payment_service.get_payment_history(start_date=now - timedelta(days=1))
        assert [r.method for r in recent] == [PaymentMethod.PAYPAL]

        cash = payment_service.get_payment_history(method="cash")
        assert [r.amount for r in cash] == [Decimal("100.00")]

    async def test_history_rejects_unknown_method(self, payment_service):
        with pytest.raises(ValueError):
            payment_service.get_payment_history(method="cheque")

    async def test_statistics(self, payment_service, make_invoice, now):
        invoice = await make_invoice()
        await payment_service.process_payment(invoice.id, "cash", Decimal("100"), now=now - timedelta(days=40))
        await payment_service.process_payment(invoice.id, "stripe", Decimal("250"), now=now)

        stats = payment_service.get_payment_statistics(now)

        assert stats.total_count == 2
        assert stats.total_amount == Decimal("350.00")
        assert stats.by_method["stripe"].amount == Decimal("250.00")
        assert stats.by_method["paypal"].count == 0
        assert stats.this_month_count == 1
        assert stats.this_month_amount == Decimal("250.00")


# ============================================================
# Tests per gateway e id transazione
# ============================================================


class TestGateways:
    def test_transaction_id_format(self, now):
        tx_id = generate_transaction_id(PaymentMethod.BANK_TRANSFER, now)

        assert re.fullmatch(r"BANK-\d{13}-[0-9a-f]{12}", tx_id)
        assert tx_id.split("-")[1] == str(int(now.timestamp() * 1000))

    def test_transaction_ids_unique(self, now):
        ids = {generate_transaction_id(PaymentMethod.CASH, now) for _ in range(100)}
        assert len(ids) == 100

    def test_every_method_has_gateway(self, test_settings):
        gateways = build_gateways(test_settings)
        assert set(gateways) == set(PaymentMethod)

    def test_missing_gateway_rejected(self, repository, test_settings):
        gateways = build_gateways(test_settings)
        del gateways[PaymentMethod.PAYPAL]

        with pytest.raises(RuntimeError):
            PaymentService(repository, gateways)

    @pytest.mark.parametrize(
        "credential, expected",
        [("pk_live_51abc", "live"), ("pk_test_placeholder", "test"), ("", "test")],
    )
    def test_stripe_environment_from_key(self, credential, expected):
        assert StripeGateway(enabled=True, credential=credential).environment == expected

    async def test_paypal_charge_logs_mode(self, make_invoice, caplog):
        caplog.set_level(logging.INFO, logger="sales_manager.services.payment_gateway")
        invoice = await make_invoice()
        gateway = PayPalGateway(enabled=True, credential="client-id", mode="live")

        result = await gateway.charge(invoice, Decimal("100.00"))

        assert result.success is True
        assert result.transaction_id.startswith("PAYPAL-")
        assert "PayPal simulato (live)" in caplog.text

    def test_parse_payment_method(self):
        assert parse_payment_method("stripe") == PaymentMethod.STRIPE
