"""
Router FastAPI per i Promemoria
Progetto: Sales Manager (Gestione Vendite)
"""

from typing import Optional

from fastapi import APIRouter, Depends, Query, status

from sales_manager.core.deps import get_reminder_service
from sales_manager.models import Reminder
from sales_manager.schemas.invoice import InvoiceRead
from sales_manager.services.reminder_service import ReminderService

router = APIRouter(
    prefix="/reminders",
    tags=["Promemoria"],
)


@router.get(
    "/",
    name="promemoria_storico",
    summary="Storico promemoria",
    response_model=list[Reminder],
)
async def reminder_history(
    invoice_id: Optional[str] = Query(None, description="Solo i promemoria di questa fattura"),
    service: ReminderService = Depends(get_reminder_service),
) -> list[Reminder]:
    return service.get_history(invoice_id)


@router.get(
    "/overdue",
    name="promemoria_scadute",
    summary="Fatture scadute",
    response_model=list[InvoiceRead],
)
async def overdue_invoices(
    service: ReminderService = Depends(get_reminder_service),
) -> list[InvoiceRead]:
    return [InvoiceRead.from_invoice(inv) for inv in service.get_overdue_invoices()]


@router.get(
    "/upcoming",
    name="promemoria_in_scadenza",
    summary="Fatture in scadenza",
    response_model=list[InvoiceRead],
)
async def upcoming_invoices(
    days: int = Query(7, ge=0, le=365, description="Orizzonte in giorni"),
    service: ReminderService = Depends(get_reminder_service),
) -> list[InvoiceRead]:
    return [InvoiceRead.from_invoice(inv) for inv in service.get_upcoming_due_invoices(days=days)]


@router.post(
    "/run",
    name="promemoria_valuta",
    summary="Valuta i promemoria",
    description="Esegue subito la valutazione della policy promemoria su tutte le fatture.",
    response_model=list[Reminder],
)
async def run_reminders(
    service: ReminderService = Depends(get_reminder_service),
) -> list[Reminder]:
    return await service.evaluate()


@router.post(
    "/invoices/{invoice_id}",
    name="promemoria_invia",
    summary="Invia promemoria",
    description="Invia un promemoria manuale per la fattura (massimo uno al giorno).",
    response_model=Reminder,
    status_code=status.HTTP_201_CREATED,
)
async def send_reminder(
    invoice_id: str,
    service: ReminderService = Depends(get_reminder_service),
) -> Reminder:
    result = await service.send_reminder(invoice_id)
    return result.unwrap()
