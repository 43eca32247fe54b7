"""
Composizione dei service
Progetto: Sales Manager (Gestione Vendite)

Costruisce tutti i service attorno a un unico SalesRepository.
L'applicazione FastAPI ne conserva un'istanza in `app.state.container`.
"""

from typing import Optional

from sales_manager.core.config import Settings
from sales_manager.services.customer_service import CustomerService
from sales_manager.services.dashboard_service import DashboardService
from sales_manager.services.employee_service import EmployeeService
from sales_manager.services.invoice_service import InvoiceService
from sales_manager.services.notifier import LoggingNotifier, Notifier
from sales_manager.services.payment_gateway import build_gateways
from sales_manager.services.payment_service import PaymentService
from sales_manager.services.pdf_service import PdfService
from sales_manager.services.quote_service import QuoteService
from sales_manager.services.reminder_service import ReminderService
from sales_manager.services.report_service import ReportService
from sales_manager.services.repository import SalesRepository
from sales_manager.services.search_service import SearchService


class ServiceContainer:
    """
    Tutti i service dell'applicazione.

    Args:
        repository: Repository condiviso
        settings: Configurazione
        notifier: Canale di consegna promemoria (default: LoggingNotifier)
    """

    def __init__(
        self,
        repository: SalesRepository,
        settings: Settings,
        notifier: Optional[Notifier] = None,
    ) -> None:
        self.repository = repository
        self.settings = settings
        self.invoices = InvoiceService(repository, settings)
        self.customers = CustomerService(repository)
        self.quotes = QuoteService(repository, self.invoices, settings)
        self.payments = PaymentService(repository, build_gateways(settings))
        self.dashboard = DashboardService(repository, settings.dashboard_months)
        self.reports = ReportService(repository, settings)
        self.pdf = PdfService(settings)
        self.reminders = ReminderService(
            repository,
            notifier or LoggingNotifier(settings.notification_latency_seconds),
            settings,
        )
        self.search = SearchService(repository, settings)
        self.employees = EmployeeService(repository, settings)
