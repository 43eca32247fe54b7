"""
Pytest configuration and fixtures.

I service lavorano su un SalesRepository con storage in memoria e su
impostazioni di test (nessuna latenza simulata). Tutte le operazioni
dipendenti dal tempo ricevono un `now` fisso.
"""

from datetime import datetime, timedelta, timezone
from decimal import Decimal

import pytest

from sales_manager.core.config import Settings
from sales_manager.core.storage import InMemoryStorage
from sales_manager.models import CustomerSnapshot, LineItem
from sales_manager.services.container import ServiceContainer
from sales_manager.services.notifier import LoggingNotifier
from sales_manager.services.repository import SalesRepository

# Istante di riferimento per i test: metà marzo, a metà mattina
NOW = datetime(2025, 3, 15, 10, 0, tzinfo=timezone.utc)


# ============================================================
# Fixtures di configurazione e repository
# ============================================================


@pytest.fixture
def now():
    return NOW


@pytest.fixture
def test_settings():
    """Impostazioni di test: storage in memoria, nessuna latenza."""
    return Settings(
        _env_file=None,
        app_env="testing",
        storage_backend="memory",
        gateway_latency_seconds=0,
        notification_latency_seconds=0,
    )


@pytest.fixture
def storage(test_settings):
    return InMemoryStorage(test_settings.storage_prefix, test_settings.storage_version)


@pytest.fixture
def repository(storage):
    return SalesRepository(storage)


@pytest.fixture
def notifier():
    return LoggingNotifier(latency=0)


@pytest.fixture
def container(repository, test_settings, notifier):
    return ServiceContainer(repository, test_settings, notifier)


# ============================================================
# Fixtures per i service
# ============================================================


@pytest.fixture
def invoice_service(container):
    return container.invoices


@pytest.fixture
def customer_service(container):
    return container.customers


@pytest.fixture
def quote_service(container):
    return container.quotes


@pytest.fixture
def payment_service(container):
    return container.payments


@pytest.fixture
def dashboard_service(container):
    return container.dashboard


@pytest.fixture
def report_service(container):
    return container.reports


@pytest.fixture
def reminder_service(container):
    return container.reminders


@pytest.fixture
def search_service(container):
    return container.search


@pytest.fixture
def employee_service(container):
    return container.employees


# ============================================================
# Dati di esempio
# ============================================================


@pytest.fixture
def sample_items():
    """Righe: 2 x 1000 + 1 x 500 = 2500 di imponibile."""
    return [
        LineItem(description="Consulenza", quantity=2, price=Decimal("1000")),
        LineItem(description="Licenza annuale", quantity=1, price=Decimal("500")),
    ]


@pytest.fixture
def sample_customer():
    return CustomerSnapshot(
        name="Karim Benali",
        email="karim@example.com",
        phone="+213555000111",
        address="Rue des Oliviers 12, Zeralda",
    )


@pytest.fixture
def make_invoice(invoice_service, sample_customer, sample_items, now):
    """
    Factory di fatture salvate nel repository.

    Accetta gli stessi argomenti di InvoiceService.create_invoice;
    i default producono una fattura da 2975.00 emessa adesso.
    """

    async def _make(**kwargs):
        kwargs.setdefault("customer", sample_customer)
        kwargs.setdefault("items", sample_items)
        kwargs.setdefault("now", now)
        return await invoice_service.create_invoice(**kwargs)

    return _make


@pytest.fixture
def days():
    """Scorciatoia per costruire date relative a NOW."""

    def _days(n: float) -> datetime:
        return NOW + timedelta(days=n)

    return _days
