"""
Dependency Injection per i service
Progetto: Sales Manager (Gestione Vendite)

Funzioni di dependency injection che recuperano i service costruiti
nel lifespan dell'applicazione (app.state.container).
"""

from fastapi import Request

from sales_manager.services.container import ServiceContainer
from sales_manager.services.customer_service import CustomerService
from sales_manager.services.dashboard_service import DashboardService
from sales_manager.services.employee_service import EmployeeService
from sales_manager.services.invoice_service import InvoiceService
from sales_manager.services.payment_service import PaymentService
from sales_manager.services.pdf_service import PdfService
from sales_manager.services.quote_service import QuoteService
from sales_manager.services.reminder_service import ReminderService
from sales_manager.services.report_service import ReportService
from sales_manager.services.search_service import SearchService


def get_container(request: Request) -> ServiceContainer:
    """
    Restituisce il container dei service.

    Raises:
        RuntimeError: Se l'applicazione non è stata avviata tramite lifespan
    """
    container = getattr(request.app.state, "container", None)
    if container is None:
        raise RuntimeError("Service non inizializzati: lifespan non eseguito")
    return container


def get_invoice_service(request: Request) -> InvoiceService:
    return get_container(request).invoices


def get_customer_service(request: Request) -> CustomerService:
    return get_container(request).customers


def get_quote_service(request: Request) -> QuoteService:
    return get_container(request).quotes


def get_payment_service(request: Request) -> PaymentService:
    return get_container(request).payments


def get_dashboard_service(request: Request) -> DashboardService:
    return get_container(request).dashboard


def get_report_service(request: Request) -> ReportService:
    return get_container(request).reports


def get_pdf_service(request: Request) -> PdfService:
    return get_container(request).pdf


def get_reminder_service(request: Request) -> ReminderService:
    return get_container(request).reminders


def get_search_service(request: Request) -> SearchService:
    return get_container(request).search


def get_employee_service(request: Request) -> EmployeeService:
    return get_container(request).employees
