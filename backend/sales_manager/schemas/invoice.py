"""
Schemas Pydantic per la Fatturazione
Progetto: Sales Manager (Gestione Vendite)

Contiene:
- InvoiceCreate / InvoiceUpdate: payload di creazione e modifica
- InvoiceRead: fattura con i campi derivati dalla scadenza
"""

from datetime import datetime
from typing import List, Optional

from pydantic import BaseModel, ConfigDict, Field, field_validator, model_validator

from sales_manager.core.dates import ensure_aware, resolve_now
from sales_manager.core.exceptions import BusinessValidationError
from sales_manager.models import (
    CustomerSnapshot,
    Invoice,
    InvoiceStatus,
    LineItem,
    PaymentMethod,
)

# Stati impostabili manualmente: "paid" deriva dai pagamenti, "overdue" dalla scadenza
EDITABLE_STATUSES = (InvoiceStatus.DRAFT, InvoiceStatus.SENT, InvoiceStatus.CANCELLED)


def _check_editable_status(status: Optional[InvoiceStatus]) -> Optional[InvoiceStatus]:
    if status is not None and status not in EDITABLE_STATUSES:
        raise BusinessValidationError(
            f"Lo stato '{status.value}' non può essere impostato manualmente"
        )
    return status


class InvoiceCreate(BaseModel):
    """
    Schema per la creazione di una fattura.

    Il cliente si indica con `customer_id` (anagrafica) oppure con i dati
    diretti in `customer`. La validazione di cliente e righe obbligatori
    avviene nel service.
    """

    customer_id: Optional[str] = Field(None, description="ID del cliente in anagrafica")
    customer: Optional[CustomerSnapshot] = Field(None, description="Dati cliente diretti")
    items: List[LineItem] = Field(default_factory=list, description="Righe della fattura")
    date: Optional[datetime] = Field(None, description="Data emissione (default: adesso)")
    due_date: Optional[datetime] = Field(
        None,
        description="Data scadenza (default: emissione + giorni di pagamento)",
    )
    status: InvoiceStatus = Field(InvoiceStatus.DRAFT)
    payment_method: PaymentMethod = Field(PaymentMethod.CASH)
    notes: str = Field("", max_length=2000)

    @field_validator("date", "due_date")
    @classmethod
    def make_aware(cls, v: Optional[datetime]) -> Optional[datetime]:
        return ensure_aware(v) if v is not None else v

    @field_validator("status")
    @classmethod
    def validate_status(cls, v: InvoiceStatus) -> InvoiceStatus:
        return _check_editable_status(v)

    @model_validator(mode="after")
    def validate_dates(self) -> "InvoiceCreate":
        if self.date and self.due_date and self.due_date < self.date:
            raise BusinessValidationError("La scadenza non può precedere la data di emissione")
        return self


class InvoiceUpdate(BaseModel):
    """
    Schema per l'aggiornamento di una fattura.

    I campi a None non vengono modificati. `version`, se indicato, deve
    coincidere con la versione corrente della fattura.
    """

    customer_id: Optional[str] = None
    customer: Optional[CustomerSnapshot] = None
    items: Optional[List[LineItem]] = None
    due_date: Optional[datetime] = None
    status: Optional[InvoiceStatus] = None
    payment_method: Optional[PaymentMethod] = None
    notes: Optional[str] = Field(None, max_length=2000)
    version: Optional[int] = Field(None, ge=1, description="Versione letta dal client")

    @field_validator("due_date")
    @classmethod
    def make_aware(cls, v: Optional[datetime]) -> Optional[datetime]:
        return ensure_aware(v) if v is not None else v

    @field_validator("status")
    @classmethod
    def validate_status(cls, v: Optional[InvoiceStatus]) -> Optional[InvoiceStatus]:
        return _check_editable_status(v)

    @field_validator("items")
    @classmethod
    def validate_items(cls, v: Optional[List[LineItem]]) -> Optional[List[LineItem]]:
        if v is not None and not v:
            raise BusinessValidationError("La fattura deve contenere almeno una riga")
        return v

    @model_validator(mode="after")
    def validate_update(self) -> "InvoiceUpdate":
        """Valida che almeno un campo sia stato modificato."""
        fields = self.model_dump(exclude={"version"}, exclude_none=True)
        if not fields:
            raise BusinessValidationError("È necessario modificare almeno un campo")
        return self


class InvoiceRead(Invoice):
    """Fattura con i campi derivati calcolati all'istante della lettura."""

    model_config = ConfigDict(from_attributes=True)

    is_overdue_now: bool = Field(False, serialization_alias="is_overdue")
    days_overdue_now: int = Field(0, serialization_alias="days_overdue")
    due_in_days: int = Field(0, description="Giorni alla scadenza (negativo se scaduta)")

    @classmethod
    def from_invoice(cls, invoice: Invoice, now: Optional[datetime] = None) -> "InvoiceRead":
        now = resolve_now(now)
        return cls(
            **invoice.model_dump(exclude={"remaining_amount"}),
            is_overdue_now=invoice.is_overdue(now),
            days_overdue_now=invoice.days_overdue(now),
            due_in_days=invoice.due_delta_days(now),
        )
