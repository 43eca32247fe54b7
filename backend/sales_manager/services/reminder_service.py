"""
Service Layer per i Promemoria di pagamento
Progetto: Sales Manager (Gestione Vendite)

Valutatore della policy promemoria:
- prima della scadenza, ai giorni configurati (default 7, 3, 1)
- dopo la scadenza, ai giorni configurati (default 1, 7, 14, 30)
- al massimo un promemoria per fattura per giorno di calendario

La consegna avviene in background tramite il Notifier: un errore di
consegna viene registrato nei log ma il promemoria resta nel registro.
"""

import asyncio
import logging
from datetime import datetime
from typing import List, Optional, Set

from sales_manager.core.config import Settings, settings as default_settings
from sales_manager.core.dates import resolve_now, same_day, start_of_day
from sales_manager.core.exceptions import ConflictError, InvoiceAlreadyPaidError
from sales_manager.core.money import format_currency
from sales_manager.core.results import operation
from sales_manager.core.templating import build_environment
from sales_manager.models import Channel, Invoice, Reminder, ReminderTrigger
from sales_manager.services.notifier import Notifier
from sales_manager.services.repository import SalesRepository

# Logger per questo modulo
logger = logging.getLogger(__name__)


def calendar_diff_days(due_date: datetime, now: datetime) -> int:
    """
    Giorni tra oggi e la scadenza, entrambi troncati a mezzanotte.

    Positivo prima della scadenza, negativo dopo.
    """
    return (start_of_day(due_date) - start_of_day(now)).days


class ReminderService:
    """
    Service per la generazione e l'invio dei promemoria.

    Args:
        repository: Repository delle collezioni (registro promemoria incluso)
        notifier: Canale di consegna
        settings: Offset, canali abilitati e flag di invio automatico
    """

    def __init__(
        self,
        repository: SalesRepository,
        notifier: Notifier,
        settings: Settings = default_settings,
    ) -> None:
        self.repository = repository
        self.notifier = notifier
        self.settings = settings
        self.env = build_environment(settings.default_currency)
        self._deliveries: Set[asyncio.Task] = set()

    # ------------------------------------------------------------
    # Policy
    # ------------------------------------------------------------
    def trigger_for(self, invoice: Invoice, now: Optional[datetime] = None) -> bool:
        """True se oggi è un giorno di promemoria per la fattura."""
        if invoice.is_paid():
            return False
        diff_days = calendar_diff_days(invoice.due_date, resolve_now(now))
        if diff_days > 0:
            return diff_days in self.settings.reminder_days_before_due
        if diff_days < 0:
            return -diff_days in self.settings.reminder_days_after_due
        return False

    def sent_today(self, invoice_id: str, now: Optional[datetime] = None) -> bool:
        now = resolve_now(now)
        return any(
            r.invoice_id == invoice_id and same_day(r.sent_at, now)
            for r in self.repository.reminders
        )

    def choose_channel(self, invoice: Invoice) -> Channel:
        """Email se possibile, poi WhatsApp, altrimenti notifica di sistema."""
        if self.settings.email_enabled and invoice.customer.email:
            return Channel.EMAIL
        if self.settings.whatsapp_enabled and invoice.customer.phone:
            return Channel.WHATSAPP
        return Channel.SYSTEM

    def render_message(self, invoice: Invoice, now: Optional[datetime] = None) -> str:
        now = resolve_now(now)
        if invoice.is_overdue(now):
            template = self.env.get_template("reminder_after_due.txt")
            days = invoice.days_overdue(now)
        else:
            template = self.env.get_template("reminder_before_due.txt")
            days = max(invoice.due_delta_days(now), 0)
        return template.render(
            customer_name=invoice.customer.name,
            invoice_number=invoice.number,
            days=days,
            amount=format_currency(invoice.remaining_amount, self.settings.default_currency),
            due_date=invoice.due_date.strftime("%d/%m/%Y"),
        )

    async def evaluate(self, now: Optional[datetime] = None) -> List[Reminder]:
        """
        Valuta tutte le fatture ed emette i promemoria dovuti oggi.

        Returns:
            I promemoria emessi in questa valutazione
        """
        now = resolve_now(now)
        due = [
            inv
            for inv in self.repository.invoices
            if self.trigger_for(inv, now) and not self.sent_today(inv.id, now)
        ]
        emitted = [self._build(inv, ReminderTrigger.AUTO, now) for inv in due]
        if emitted:
            self.repository.reminders.extend(emitted)
            await self.repository.save("reminders")
            for reminder in emitted:
                self._schedule_delivery(reminder)
            logger.info("%d promemoria automatici emessi", len(emitted))
        return emitted

    async def tick(self, now: Optional[datetime] = None) -> List[Reminder]:
        """Controllo periodico: nessuna azione se l'invio automatico è disattivato."""
        if not self.settings.reminders_auto_send:
            return []
        return await self.evaluate(now)

    # ------------------------------------------------------------
    # Invio manuale
    # ------------------------------------------------------------
    @operation("send_reminder")
    async def send_reminder(
        self,
        invoice_id: str,
        trigger: ReminderTrigger = ReminderTrigger.MANUAL,
        now: Optional[datetime] = None,
    ) -> Reminder:
        """
        Invia subito un promemoria, ignorando i giorni configurati.

        Raises:
            NotFoundError: Fattura non trovata
            InvoiceAlreadyPaidError: Fattura già saldata
            ConflictError: Promemoria già inviato oggi per la fattura
        """
        now = resolve_now(now)
        invoice = self.repository.get_invoice(invoice_id)
        if invoice.is_paid():
            raise InvoiceAlreadyPaidError(f"La fattura {invoice.number} è già saldata")
        if self.sent_today(invoice.id, now):
            raise ConflictError(f"Promemoria già inviato oggi per la fattura {invoice.number}")

        reminder = self._build(invoice, trigger, now)
        self.repository.reminders.append(reminder)
        await self.repository.save("reminders")
        self._schedule_delivery(reminder)
        logger.info("Promemoria %s inviato per la fattura %s", reminder.channel.value, invoice.number)
        return reminder

    def _build(self, invoice: Invoice, trigger: ReminderTrigger, now: datetime) -> Reminder:
        return Reminder(
            invoice_id=invoice.id,
            invoice_number=invoice.number,
            customer_name=invoice.customer.name,
            customer_email=invoice.customer.email,
            customer_phone=invoice.customer.phone,
            amount=invoice.remaining_amount,
            due_date=invoice.due_date,
            trigger=trigger,
            channel=self.choose_channel(invoice),
            message=self.render_message(invoice, now),
            sent_at=now,
        )

    # ------------------------------------------------------------
    # Consegna in background
    # ------------------------------------------------------------
    def _schedule_delivery(self, reminder: Reminder) -> None:
        task = asyncio.create_task(self._deliver(reminder))
        self._deliveries.add(task)
        task.add_done_callback(self._deliveries.discard)

    async def _deliver(self, reminder: Reminder) -> None:
        try:
            delivered = await self.notifier.deliver(reminder)
        except Exception:
            logger.exception("Consegna del promemoria %s fallita", reminder.id)
            return
        if not delivered:
            logger.warning("Promemoria %s non consegnato via %s", reminder.id, reminder.channel.value)

    @property
    def pending_deliveries(self) -> int:
        return len(self._deliveries)

    async def drain(self) -> None:
        """Attende la fine delle consegne in corso."""
        if self._deliveries:
            await asyncio.gather(*self._deliveries, return_exceptions=True)

    async def shutdown(self) -> None:
        """Annulla le consegne ancora in corso."""
        for task in self._deliveries:
            task.cancel()
        await self.drain()

    # ------------------------------------------------------------
    # Consultazione
    # ------------------------------------------------------------
    def get_last_reminder(self, invoice_id: str) -> Optional[Reminder]:
        reminders = [r for r in self.repository.reminders if r.invoice_id == invoice_id]
        return max(reminders, key=lambda r: r.sent_at, default=None)

    def get_history(self, invoice_id: Optional[str] = None) -> List[Reminder]:
        """Registro promemoria dal più recente, opzionalmente per fattura."""
        reminders = [
            r for r in self.repository.reminders if invoice_id is None or r.invoice_id == invoice_id
        ]
        return sorted(reminders, key=lambda r: r.sent_at, reverse=True)

    def get_overdue_invoices(self, now: Optional[datetime] = None) -> List[Invoice]:
        """Fatture scadute, dalla più in ritardo."""
        now = resolve_now(now)
        overdue = [inv for inv in self.repository.invoices if inv.is_overdue(now)]
        return sorted(overdue, key=lambda inv: inv.due_date)

    def get_upcoming_due_invoices(self, now: Optional[datetime] = None, days: int = 7) -> List[Invoice]:
        """Fatture non saldate in scadenza nei prossimi `days` giorni."""
        now = resolve_now(now)
        upcoming = [
            inv
            for inv in self.repository.invoices
            if not inv.is_paid() and not inv.is_overdue(now) and inv.due_delta_days(now) <= days
        ]
        return sorted(upcoming, key=lambda inv: inv.due_date)
