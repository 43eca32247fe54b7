"""
Unit tests per ReminderService: policy, deduplica giornaliera,
invio manuale e consegna in background.
"""

from datetime import timedelta
from decimal import Decimal

import pytest

from sales_manager.models import Channel, CustomerSnapshot, PaymentMethod, ReminderTrigger
from sales_manager.services.notifier import Notifier
from sales_manager.services.reminder_service import ReminderService, calendar_diff_days


class FailingNotifier(Notifier):
    """Notifier che fallisce sempre la consegna."""

    def __init__(self):
        self.calls = 0

    async def deliver(self, reminder):
        self.calls += 1
        raise RuntimeError("provider non raggiungibile")


@pytest.fixture
def auto_settings(test_settings):
    return test_settings.model_copy(update={"reminders_auto_send": True})


# ============================================================
# Tests per la policy
# ============================================================


class TestPolicy:
    """Tests per trigger_for e calendar_diff_days."""

    def test_calendar_diff_ignores_time_of_day(self, now):
        due = now.replace(hour=23) + timedelta(days=2)
        assert calendar_diff_days(due, now) == 2
        assert calendar_diff_days(now.replace(hour=0), now) == 0

    @pytest.mark.parametrize("offset, expected", [
        (7, True), (3, True), (1, True), (2, False), (0, False),
        (-1, True), (-7, True), (-14, True), (-30, True), (-2, False), (-31, False),
    ])
    async def test_trigger_days(self, reminder_service, make_invoice, days, offset, expected):
        invoice = await make_invoice(issued_at=days(-60), due_date=days(offset))

        assert reminder_service.trigger_for(invoice, days(0)) is expected

    async def test_paid_invoice_never_triggers(self, reminder_service, make_invoice, days, now):
        invoice = await make_invoice(due_date=days(3))
        invoice.apply_payment(invoice.total, PaymentMethod.CASH, "CASH-1-a", now)

        assert reminder_service.trigger_for(invoice, now) is False


# ============================================================
# Tests per la valutazione automatica
# ============================================================


class TestEvaluate:
    async def test_before_due_reminder_once_per_day(self, reminder_service, make_invoice, days, now):
        invoice = await make_invoice(due_date=days(3))

        first = await reminder_service.evaluate(now)
        second = await reminder_service.evaluate(now + timedelta(hours=5))

        assert [r.invoice_id for r in first] == [invoice.id]
        assert first[0].trigger == ReminderTrigger.AUTO
        assert second == []
        await reminder_service.drain()

    async def test_after_due_reminder(self, reminder_service, make_invoice, days, now):
        invoice = await make_invoice(issued_at=days(-37), due_date=days(-7))

        emitted = await reminder_service.evaluate(now)

        assert [r.invoice_number for r in emitted] == [invoice.number]
        assert "scaduta da 7 giorni" in emitted[0].message
        await reminder_service.drain()

    async def test_no_reminder_on_other_days(self, reminder_service, make_invoice, days, now):
        await make_invoice(due_date=days(2))
        await make_invoice(due_date=days(0))

        assert await reminder_service.evaluate(now) == []

    async def test_reminders_are_persisted(self, reminder_service, make_invoice, storage, days, now):
        await make_invoice(due_date=days(7))

        await reminder_service.evaluate(now)

        blob = await storage.load("reminders")
        assert len(blob) == 1
        assert blob[0]["trigger"] == "auto"
        await reminder_service.drain()

    async def test_delivery_runs_in_background(self, reminder_service, make_invoice, notifier, days, now):
        await make_invoice(due_date=days(1))

        await reminder_service.evaluate(now)
        await reminder_service.drain()

        assert notifier.delivered == 1
        assert reminder_service.pending_deliveries == 0

    async def test_failed_delivery_keeps_record(self, repository, test_settings, make_invoice, days, now):
        notifier = FailingNotifier()
        service = ReminderService(repository, notifier, test_settings)
        await make_invoice(due_date=days(3))

        emitted = await service.evaluate(now)
        await service.drain()

        assert notifier.calls == 1
        assert service.get_history() == emitted

    async def test_tick_disabled_without_auto_send(self, reminder_service, make_invoice, days, now):
        await make_invoice(due_date=days(3))

        assert await reminder_service.tick(now) == []
        assert reminder_service.get_history() == []

    async def test_tick_with_auto_send(self, repository, notifier, auto_settings, make_invoice, days, now):
        service = ReminderService(repository, notifier, auto_settings)
        await make_invoice(due_date=days(3))

        emitted = await service.tick(now)
        await service.drain()

        assert len(emitted) == 1


# ============================================================
# Tests per l'invio manuale
# ============================================================


class TestSendReminder:
    async def test_manual_reminder_ignores_schedule(self, reminder_service, make_invoice, days, now):
        invoice = await make_invoice(due_date=days(20))

        result = await reminder_service.send_reminder(invoice.id, now=now)

        assert result.success is True
        assert result.data.trigger == ReminderTrigger.MANUAL
        assert result.data.channel == Channel.EMAIL
        assert result.data.amount == Decimal("2975.00")
        await reminder_service.drain()

    async def test_same_day_repeat_conflicts(self, reminder_service, make_invoice, days, now):
        invoice = await make_invoice(due_date=days(20))
        await reminder_service.send_reminder(invoice.id, now=now)

        result = await reminder_service.send_reminder(invoice.id, now=now + timedelta(hours=1))

        assert result.success is False
        assert result.error_code == "CONFLICT_STATE"
        await reminder_service.drain()

    async def test_next_day_allowed(self, reminder_service, make_invoice, days, now):
        invoice = await make_invoice(due_date=days(20))
        await reminder_service.send_reminder(invoice.id, now=now)

        result = await reminder_service.send_reminder(invoice.id, now=now + timedelta(days=1))

        assert result.success is True
        assert len(reminder_service.get_history(invoice.id)) == 2
        await reminder_service.drain()

    async def test_auto_evaluation_skips_after_manual(self, reminder_service, make_invoice, days, now):
        invoice = await make_invoice(due_date=days(3))
        await reminder_service.send_reminder(invoice.id, now=now)

        assert await reminder_service.evaluate(now) == []
        await reminder_service.drain()

    async def test_paid_invoice_rejected(self, reminder_service, make_invoice, now):
        invoice = await make_invoice()
        invoice.apply_payment(invoice.total, PaymentMethod.CASH, "CASH-1-a", now)

        result = await reminder_service.send_reminder(invoice.id, now=now)

        assert result.success is False
        assert result.error_code == "INVOICE_ALREADY_PAID"

    async def test_unknown_invoice(self, reminder_service):
        result = await reminder_service.send_reminder("missing")

        assert result.success is False
        assert result.error_code == "RESOURCE_NOT_FOUND"


# ============================================================
# Tests per canale, messaggio e consultazione
# ============================================================


class TestChannelAndMessage:
    async def test_channel_fallback(self, repository, notifier, test_settings, make_invoice):
        whatsapp = test_settings.model_copy(update={"whatsapp_enabled": True})
        service = ReminderService(repository, notifier, whatsapp)
        phone_only = await make_invoice(customer=CustomerSnapshot(name="Solo telefono", phone="+213"))
        nothing = await make_invoice(customer=CustomerSnapshot(name="Nessun contatto"))
        with_email = await make_invoice()

        assert service.choose_channel(with_email) == Channel.EMAIL
        assert service.choose_channel(phone_only) == Channel.WHATSAPP
        assert service.choose_channel(nothing) == Channel.SYSTEM

    async def test_whatsapp_disabled_falls_back_to_system(self, reminder_service, make_invoice):
        invoice = await make_invoice(customer=CustomerSnapshot(name="Solo telefono", phone="+213"))

        assert reminder_service.choose_channel(invoice) == Channel.SYSTEM

    async def test_before_due_message(self, reminder_service, make_invoice, days, now):
        invoice = await make_invoice(due_date=days(1))

        message = reminder_service.render_message(invoice, now)

        assert message.startswith("Gentile Karim Benali,")
        assert "scade tra 1 giorno" in message
        assert "2,975.00 DZD" in message
        assert "16/03/2025" in message

    async def test_history_and_queries(self, reminder_service, make_invoice, days, now):
        overdue = await make_invoice(issued_at=days(-40), due_date=days(-10))
        upcoming = await make_invoice(due_date=days(5))
        await make_invoice(due_date=days(20))

        await reminder_service.send_reminder(overdue.id, now=now - timedelta(days=1))
        await reminder_service.send_reminder(overdue.id, now=now)
        await reminder_service.drain()

        history = reminder_service.get_history()
        assert [r.sent_at for r in history] == [now, now - timedelta(days=1)]
        assert reminder_service.get_last_reminder(overdue.id).sent_at == now
        assert reminder_service.get_last_reminder(upcoming.id) is None
        assert reminder_service.get_overdue_invoices(now) == [overdue]
        assert reminder_service.get_upcoming_due_invoices(now, days=7) == [upcoming]
