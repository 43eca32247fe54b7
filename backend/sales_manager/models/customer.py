"""
Modello di dominio per l'anagrafica clienti
Progetto: Sales Manager (Gestione Vendite)
"""

from datetime import datetime
from decimal import Decimal

from pydantic import BaseModel, Field, field_validator

from sales_manager.core.dates import ensure_aware, utcnow
from sales_manager.core.money import ZERO
from sales_manager.models.invoice import CustomerSnapshot, new_id


class Customer(BaseModel):
    """
    Cliente.

    I totali progressivi (total_purchases, invoice_count) sono aggiornati
    in modo eventualmente consistente ad ogni creazione, modifica o
    cancellazione di fattura; CustomerService.reconcile_totals li ricalcola
    dalle fatture.
    """

    id: str = Field(default_factory=new_id)
    name: str = Field(..., min_length=1, max_length=255)
    email: str = Field("", max_length=255)
    phone: str = Field("", max_length=50)
    address: str = Field("", max_length=500)
    company: str = Field("", max_length=255)
    tax_id: str = Field("", max_length=50)
    total_purchases: Decimal = ZERO
    invoice_count: int = 0
    created_at: datetime = Field(default_factory=utcnow)

    @field_validator("created_at")
    @classmethod
    def make_aware(cls, v: datetime) -> datetime:
        return ensure_aware(v)

    def snapshot(self) -> CustomerSnapshot:
        """Copia dei dati di contatto da incorporare nei documenti."""
        return CustomerSnapshot(
            id=self.id,
            name=self.name,
            email=self.email,
            phone=self.phone,
            address=self.address,
        )
