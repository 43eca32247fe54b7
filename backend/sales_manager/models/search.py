"""
Filtri e ricerche salvate
Progetto: Sales Manager (Gestione Vendite)
"""

from datetime import datetime
from decimal import Decimal
from typing import Optional

from pydantic import BaseModel, Field, field_validator, model_validator

from sales_manager.core.dates import ensure_aware, utcnow

# Valore che disattiva un filtro a scelta
ALL = "all"


class InvoiceFilters(BaseModel):
    """
    Filtri applicabili all'elenco fatture.

    Un filtro a None (o "all" per i campi a scelta) non viene applicato.
    """

    date_from: Optional[datetime] = Field(None, description="Data emissione minima (inclusa)")
    date_to: Optional[datetime] = Field(None, description="Data emissione massima (inclusa)")
    payment_status: str = Field(ALL, description="unpaid | partial | paid | all")
    payment_method: str = Field(ALL, description="cash | bank_transfer | stripe | paypal | all")
    min_amount: Optional[Decimal] = Field(None, ge=0)
    max_amount: Optional[Decimal] = Field(None, ge=0)
    customer_id: str = Field(ALL)

    @field_validator("date_from", "date_to")
    @classmethod
    def make_aware(cls, v: Optional[datetime]) -> Optional[datetime]:
        return ensure_aware(v) if v is not None else v

    @model_validator(mode="after")
    def check_ranges(self) -> "InvoiceFilters":
        if self.date_from and self.date_to and self.date_from > self.date_to:
            raise ValueError("date_from deve precedere date_to")
        if (
            self.min_amount is not None
            and self.max_amount is not None
            and self.min_amount > self.max_amount
        ):
            raise ValueError("min_amount non può superare max_amount")
        return self


class SavedSearch(BaseModel):
    """Ricerca salvata dall'utente."""

    name: str = Field(..., min_length=1, max_length=100)
    filters: InvoiceFilters = Field(default_factory=InvoiceFilters)
    created_at: datetime = Field(default_factory=utcnow)
