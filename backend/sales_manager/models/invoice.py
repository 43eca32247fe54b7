"""
Modello di dominio per la Fatturazione
Progetto: Sales Manager (Gestione Vendite)

Contiene:
- LineItem: Riga della fattura (descrizione, quantità, prezzo)
- CustomerSnapshot: Copia dei dati cliente al momento dell'emissione
- PaymentTransaction: Transazione registrata sulla fattura
- Invoice: Fattura con totali, stato di pagamento e scadenza
"""

import uuid
from datetime import datetime, timedelta
from decimal import Decimal
from typing import List, Optional

from pydantic import BaseModel, Field, computed_field, field_validator

from sales_manager.core.dates import ceil_days, ensure_aware, resolve_now, utcnow
from sales_manager.core.exceptions import OverpaymentError, ValidationError
from sales_manager.core.money import ZERO, sum_money, to_money
from sales_manager.models.enums import (
    InvoiceStatus,
    PaymentMethod,
    PaymentStatus,
    TransactionStatus,
)


def new_id() -> str:
    """Identificativo opaco univoco (UUID4)."""
    return str(uuid.uuid4())


# -------------------------------------------------------------------
# Righe e snapshot
# -------------------------------------------------------------------

class LineItem(BaseModel):
    """Riga della fattura o del preventivo."""

    description: str = Field(
        ...,
        min_length=1,
        max_length=500,
        description="Descrizione della riga",
    )
    quantity: int = Field(..., gt=0, description="Quantità (intero positivo)")
    price: Decimal = Field(..., ge=0, description="Prezzo unitario")

    @field_validator("price")
    @classmethod
    def round_price(cls, v: Decimal) -> Decimal:
        return to_money(v)

    @computed_field
    @property
    def line_total(self) -> Decimal:
        """Imponibile della riga (quantità × prezzo)."""
        return to_money(self.price * self.quantity)


class CustomerSnapshot(BaseModel):
    """Dati del cliente denormalizzati nel documento."""

    id: Optional[str] = Field(None, description="ID del cliente in anagrafica")
    name: str = Field(..., min_length=1, max_length=255)
    email: str = Field("", max_length=255)
    phone: str = Field("", max_length=50)
    address: str = Field("", max_length=500)


class PaymentTransaction(BaseModel):
    """Transazione di pagamento registrata sulla fattura (append-only)."""

    id: str
    amount: Decimal
    method: PaymentMethod
    timestamp: datetime
    status: TransactionStatus = TransactionStatus.COMPLETED


# -------------------------------------------------------------------
# Documento base (fattura / preventivo)
# -------------------------------------------------------------------

class SalesDocument(BaseModel):
    """
    Campi comuni a fatture e preventivi.

    Invarianti:
        subtotal = Σ(quantity × price)
        tax = subtotal × tax_rate
        total = subtotal + tax
    """

    id: str = Field(default_factory=new_id)
    number: str = Field(..., min_length=1, max_length=30)
    date: datetime = Field(default_factory=utcnow, description="Data emissione")
    customer: CustomerSnapshot
    items: List[LineItem] = Field(default_factory=list)
    subtotal: Decimal = ZERO
    tax: Decimal = ZERO
    total: Decimal = ZERO
    notes: str = ""
    created_at: datetime = Field(default_factory=utcnow)

    @field_validator("date", "created_at")
    @classmethod
    def make_aware(cls, v: datetime) -> datetime:
        return ensure_aware(v)

    def compute_totals(self, tax_rate: Decimal) -> None:
        """
        Ricalcola subtotale, IVA e totale dalle righe.

        Idempotente: da rieseguire dopo ogni modifica delle righe.
        """
        self.subtotal = sum_money(item.line_total for item in self.items)
        self.tax = to_money(self.subtotal * tax_rate)
        self.total = to_money(self.subtotal + self.tax)


class Invoice(SalesDocument):
    """
    Fattura.

    Lo stato "scaduta" è un predicato derivato (is_overdue) e non viene mai
    salvato in `status`: lo status viene sincronizzato solo con lo stato di
    pagamento (PAID quando saldata).

    Attributes:
        due_date: Data scadenza pagamento
        status: Stato del ciclo di vita
        payment_method: Ultimo metodo di pagamento usato
        payment_status: Stato di pagamento (unpaid | partial | paid)
        paid_amount: Importo incassato finora
        transactions: Transazioni di pagamento (append-only)
        updated_at: Data/ora ultimo aggiornamento
        version: Contatore per il controllo di concorrenza ottimistico
    """

    due_date: datetime
    status: InvoiceStatus = InvoiceStatus.DRAFT
    payment_method: PaymentMethod = PaymentMethod.CASH
    payment_status: PaymentStatus = PaymentStatus.UNPAID
    paid_amount: Decimal = ZERO
    transactions: List[PaymentTransaction] = Field(default_factory=list)
    updated_at: datetime = Field(default_factory=utcnow)
    version: int = 1

    @field_validator("due_date", "updated_at")
    @classmethod
    def make_due_aware(cls, v: datetime) -> datetime:
        return ensure_aware(v)

    # ------------------------------------------------------------
    # Properties Calcolate
    # ------------------------------------------------------------
    @computed_field
    @property
    def remaining_amount(self) -> Decimal:
        """Importo residuo da incassare."""
        return to_money(self.total - self.paid_amount)

    def is_paid(self) -> bool:
        return self.payment_status == PaymentStatus.PAID

    def is_overdue(self, now: Optional[datetime] = None) -> bool:
        """True se la scadenza è passata e la fattura non è saldata."""
        return resolve_now(now) > self.due_date and not self.is_paid()

    def due_delta_days(self, now: Optional[datetime] = None) -> int:
        """
        Distanza con segno dalla scadenza, in giorni interi.

        Positiva = giorni alla scadenza, negativa = giorni di ritardo.
        Il valore assoluto è arrotondato per eccesso in entrambe le direzioni.
        """
        delta = self.due_date - resolve_now(now)
        days = ceil_days(abs(delta))
        return days if delta >= timedelta(0) else -days

    def days_overdue(self, now: Optional[datetime] = None) -> int:
        """Giorni di ritardo, 0 se la fattura non è scaduta."""
        if not self.is_overdue(now):
            return 0
        return -self.due_delta_days(now)

    # ------------------------------------------------------------
    # Metodi
    # ------------------------------------------------------------
    def refresh_payment_status(self) -> None:
        """
        Ricalcola lo stato di pagamento da (paid_amount, total).

        Sincronizza anche `status`: PAID quando saldata, e riporta a SENT una
        fattura PAID il cui totale è cresciuto oltre l'incassato.
        """
        if self.paid_amount >= self.total:
            self.payment_status = PaymentStatus.PAID
        elif self.paid_amount > 0:
            self.payment_status = PaymentStatus.PARTIAL
        else:
            self.payment_status = PaymentStatus.UNPAID

        if self.payment_status == PaymentStatus.PAID:
            self.status = InvoiceStatus.PAID
        elif self.status == InvoiceStatus.PAID:
            self.status = InvoiceStatus.SENT

    def touch(self, now: Optional[datetime] = None) -> None:
        """Aggiorna updated_at e incrementa la versione."""
        self.updated_at = resolve_now(now)
        self.version += 1

    def apply_payment(
        self,
        amount: Decimal,
        method: PaymentMethod,
        transaction_id: str,
        now: Optional[datetime] = None,
    ) -> PaymentTransaction:
        """
        Applica un pagamento alla fattura.

        Args:
            amount: Importo del pagamento
            method: Metodo di pagamento
            transaction_id: ID della transazione
            now: Istante del pagamento (default: adesso)

        Returns:
            La transazione registrata

        Raises:
            ValidationError: Se l'importo non è positivo
            OverpaymentError: Se l'importo supera il residuo (fattura invariata)
        """
        amount = to_money(amount)
        if amount <= 0:
            raise ValidationError("L'importo del pagamento deve essere positivo")
        if amount > self.remaining_amount:
            raise OverpaymentError(
                f"L'importo {amount} supera il residuo {self.remaining_amount} "
                f"della fattura {self.number}",
                extra={"remaining_amount": str(self.remaining_amount)},
            )

        now = resolve_now(now)
        transaction = PaymentTransaction(
            id=transaction_id,
            amount=amount,
            method=method,
            timestamp=now,
        )
        self.paid_amount = to_money(self.paid_amount + amount)
        self.payment_method = method
        self.refresh_payment_status()
        self.transactions.append(transaction)
        self.touch(now)
        return transaction

    def __repr__(self) -> str:
        return f"<Invoice(id={self.id}, number={self.number}, total={self.total})>"
