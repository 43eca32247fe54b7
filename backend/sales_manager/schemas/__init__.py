"""
Schemas Pydantic per il progetto Sales Manager

Questo modulo contiene gli schemi Pydantic utilizzati per la validazione
dei payload e la serializzazione delle risposte API.
"""

from sales_manager.schemas.invoice import InvoiceCreate, InvoiceRead, InvoiceUpdate
from sales_manager.schemas.customer import CustomerCreate, CustomerUpdate
from sales_manager.schemas.quote import QuoteCreate, QuoteStatusUpdate, QuoteUpdate
from sales_manager.schemas.payment import (
    MethodStatistics,
    PaymentCreate,
    PaymentHistoryQuery,
    PaymentReceipt,
    PaymentStatistics,
)
from sales_manager.schemas.dashboard import (
    DashboardKPIs,
    DashboardSnapshot,
    MonthlyPoint,
    MonthlySeries,
)
from sales_manager.schemas.report import (
    AgingBucket,
    AgingInvoice,
    AgingReport,
    MonthlySalesReport,
    MonthlySalesRow,
)
from sales_manager.schemas.search import SavedSearchCreate, SearchResults
from sales_manager.schemas.employee import (
    EmployeeCreate,
    EmployeeList,
    EmployeeQuery,
    EmployeeStats,
    EmployeeUpdate,
)

__all__ = [
    "InvoiceCreate",
    "InvoiceRead",
    "InvoiceUpdate",
    "CustomerCreate",
    "CustomerUpdate",
    "QuoteCreate",
    "QuoteStatusUpdate",
    "QuoteUpdate",
    "MethodStatistics",
    "PaymentCreate",
    "PaymentHistoryQuery",
    "PaymentReceipt",
    "PaymentStatistics",
    "DashboardKPIs",
    "DashboardSnapshot",
    "MonthlyPoint",
    "MonthlySeries",
    "AgingBucket",
    "AgingInvoice",
    "AgingReport",
    "MonthlySalesReport",
    "MonthlySalesRow",
    "SavedSearchCreate",
    "SearchResults",
    "EmployeeCreate",
    "EmployeeList",
    "EmployeeQuery",
    "EmployeeStats",
    "EmployeeUpdate",
]
