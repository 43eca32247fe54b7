"""
Modelli
Progetto: Sales Manager (Gestione Vendite)

Le entità di dominio (fatture, clienti, preventivi, registri) sono modelli
Pydantic salvati come blob JSON dell'intera collezione. L'unica tabella
SQLAlchemy è quella che ospita i blob (StorageBlob).
"""

# SQLAlchemy 2.0 Base declarativa
# Importato qui per essere disponibile per tutti i modelli
from sqlalchemy.orm import DeclarativeBase


class Base(DeclarativeBase):
    """Base class per tutti i modelli SQLAlchemy."""
    pass


# Import modelli implementati
from sales_manager.models.storage_blob import StorageBlob
from sales_manager.models.enums import (
    Channel,
    Department,
    EmployeeStatus,
    InvoiceStatus,
    PaymentMethod,
    PaymentStatus,
    QuoteStatus,
    ReminderTrigger,
    TransactionStatus,
)
from sales_manager.models.invoice import CustomerSnapshot, Invoice, LineItem, PaymentTransaction
from sales_manager.models.customer import Customer
from sales_manager.models.quote import Quote
from sales_manager.models.ledger import PaymentRecord, Reminder
from sales_manager.models.search import InvoiceFilters, SavedSearch
from sales_manager.models.employee import Employee

__all__ = [
    "Base",
    "StorageBlob",
    "Channel",
    "Department",
    "EmployeeStatus",
    "InvoiceStatus",
    "PaymentMethod",
    "PaymentStatus",
    "QuoteStatus",
    "ReminderTrigger",
    "TransactionStatus",
    "CustomerSnapshot",
    "Invoice",
    "LineItem",
    "PaymentTransaction",
    "Customer",
    "Quote",
    "PaymentRecord",
    "Reminder",
    "InvoiceFilters",
    "SavedSearch",
    "Employee",
]
