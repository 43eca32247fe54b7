"""
Modello di dominio per i Preventivi
Progetto: Sales Manager (Gestione Vendite)
"""

from datetime import datetime
from typing import Optional

from pydantic import field_validator

from sales_manager.core.dates import ensure_aware, resolve_now
from sales_manager.models.enums import QuoteStatus
from sales_manager.models.invoice import SalesDocument


class Quote(SalesDocument):
    """
    Preventivo.

    Stessa struttura della fattura senza i campi di pagamento, con una
    finestra di validità (valid_until).
    """

    valid_until: datetime
    status: QuoteStatus = QuoteStatus.DRAFT

    @field_validator("valid_until")
    @classmethod
    def make_valid_until_aware(cls, v: datetime) -> datetime:
        return ensure_aware(v)

    def is_expired(self, now: Optional[datetime] = None) -> bool:
        """True se la validità è scaduta e il preventivo è ancora aperto."""
        open_statuses = (QuoteStatus.DRAFT, QuoteStatus.SENT)
        return self.status in open_statuses and resolve_now(now) > self.valid_until

    def can_convert(self) -> bool:
        """Solo i preventivi aperti; un preventivo accettato è già stato convertito."""
        return self.status in (QuoteStatus.DRAFT, QuoteStatus.SENT)

    def __repr__(self) -> str:
        return f"<Quote(id={self.id}, number={self.number}, status={self.status.value})>"
