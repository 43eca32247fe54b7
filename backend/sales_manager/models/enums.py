"""
Enum di dominio
Progetto: Sales Manager (Gestione Vendite)

Stati, metodi di pagamento e canali come varianti tipizzate.
"""

from enum import Enum


class InvoiceStatus(str, Enum):
    """Stato del ciclo di vita della fattura."""
    DRAFT = "draft"
    SENT = "sent"
    PAID = "paid"
    OVERDUE = "overdue"       # Mai scritto dal sistema: vedi Invoice.is_overdue
    CANCELLED = "cancelled"


class PaymentStatus(str, Enum):
    """Stato di pagamento, funzione di (paid_amount, total)."""
    UNPAID = "unpaid"
    PARTIAL = "partial"
    PAID = "paid"


class PaymentMethod(str, Enum):
    """Metodi di pagamento supportati."""
    CASH = "cash"
    BANK_TRANSFER = "bank_transfer"
    STRIPE = "stripe"
    PAYPAL = "paypal"

    @property
    def transaction_prefix(self) -> str:
        """Prefisso degli id transazione per famiglia di metodo."""
        return _TRANSACTION_PREFIXES[self]


_TRANSACTION_PREFIXES = {
    PaymentMethod.CASH: "CASH",
    PaymentMethod.BANK_TRANSFER: "BANK",
    PaymentMethod.STRIPE: "STRIPE",
    PaymentMethod.PAYPAL: "PAYPAL",
}


class TransactionStatus(str, Enum):
    COMPLETED = "completed"
    FAILED = "failed"


class QuoteStatus(str, Enum):
    """Stato del preventivo."""
    DRAFT = "draft"
    SENT = "sent"
    ACCEPTED = "accepted"
    REJECTED = "rejected"
    EXPIRED = "expired"


class ReminderTrigger(str, Enum):
    """Origine del promemoria."""
    AUTO = "auto"
    MANUAL = "manual"


class Channel(str, Enum):
    """Canale di consegna dei promemoria."""
    EMAIL = "email"
    WHATSAPP = "whatsapp"
    SYSTEM = "system"


class Department(str, Enum):
    """Reparti dell'anagrafica dipendenti."""
    IT = "it"
    HR = "hr"
    FINANCE = "finance"
    MARKETING = "marketing"
    SALES = "sales"
    OPERATIONS = "operations"
    SUPPORT = "support"

    @property
    def display_name(self) -> str:
        return _DEPARTMENT_NAMES[self]


_DEPARTMENT_NAMES = {
    Department.IT: "Tecnologia dell'informazione",
    Department.HR: "Risorse umane",
    Department.FINANCE: "Finanza",
    Department.MARKETING: "Marketing",
    Department.SALES: "Vendite",
    Department.OPERATIONS: "Operazioni",
    Department.SUPPORT: "Supporto tecnico",
}


class EmployeeStatus(str, Enum):
    """Stato del dipendente."""
    ACTIVE = "active"
    VACATION = "vacation"
    TRAINING = "training"
    REMOTE = "remote"
    INACTIVE = "inactive"
