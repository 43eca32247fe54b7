"""
Schemas Pydantic per i Preventivi
Progetto: Sales Manager (Gestione Vendite)
"""

from datetime import datetime
from typing import List, Optional

from pydantic import BaseModel, Field, field_validator, model_validator

from sales_manager.core.dates import ensure_aware
from sales_manager.core.exceptions import BusinessValidationError
from sales_manager.models import CustomerSnapshot, LineItem, QuoteStatus


class QuoteCreate(BaseModel):
    """Schema per la creazione di un preventivo."""

    customer_id: Optional[str] = None
    customer: Optional[CustomerSnapshot] = None
    items: List[LineItem] = Field(default_factory=list)
    date: Optional[datetime] = None
    valid_until: Optional[datetime] = Field(
        None,
        description="Fine validità (default: emissione + giorni di validità)",
    )
    status: QuoteStatus = QuoteStatus.DRAFT
    notes: str = Field("", max_length=2000)

    @field_validator("date", "valid_until")
    @classmethod
    def make_aware(cls, v: Optional[datetime]) -> Optional[datetime]:
        return ensure_aware(v) if v is not None else v

    @field_validator("status")
    @classmethod
    def validate_status(cls, v: QuoteStatus) -> QuoteStatus:
        if v not in (QuoteStatus.DRAFT, QuoteStatus.SENT):
            raise BusinessValidationError("Un nuovo preventivo può essere solo draft o sent")
        return v


class QuoteUpdate(BaseModel):
    """Schema per l'aggiornamento di un preventivo."""

    customer_id: Optional[str] = None
    customer: Optional[CustomerSnapshot] = None
    items: Optional[List[LineItem]] = None
    valid_until: Optional[datetime] = None
    notes: Optional[str] = Field(None, max_length=2000)

    @field_validator("valid_until")
    @classmethod
    def make_aware(cls, v: Optional[datetime]) -> Optional[datetime]:
        return ensure_aware(v) if v is not None else v

    @field_validator("items")
    @classmethod
    def validate_items(cls, v: Optional[List[LineItem]]) -> Optional[List[LineItem]]:
        if v is not None and not v:
            raise BusinessValidationError("Il preventivo deve contenere almeno una riga")
        return v

    @model_validator(mode="after")
    def validate_update(self) -> "QuoteUpdate":
        if not self.model_dump(exclude_none=True):
            raise BusinessValidationError("È necessario modificare almeno un campo")
        return self


class QuoteStatusUpdate(BaseModel):
    status: QuoteStatus
