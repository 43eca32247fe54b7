"""
Service Layer per i Preventivi
Progetto: Sales Manager (Gestione Vendite)

CRUD preventivi, scadenza della validità e conversione in fattura.
"""

import logging
from datetime import datetime
from typing import List, Optional

from sales_manager.core.config import Settings, settings as default_settings
from sales_manager.core.dates import add_days, resolve_now
from sales_manager.core.exceptions import BusinessValidationError, ConflictError
from sales_manager.core.results import operation
from sales_manager.models import Invoice, Quote, QuoteStatus
from sales_manager.schemas.quote import QuoteCreate, QuoteUpdate
from sales_manager.services.invoice_service import InvoiceService
from sales_manager.services.repository import SalesRepository

# Logger per questo modulo
logger = logging.getLogger(__name__)

# Transizioni di stato consentite
ALLOWED_TRANSITIONS = {
    QuoteStatus.DRAFT: {QuoteStatus.SENT, QuoteStatus.ACCEPTED, QuoteStatus.REJECTED, QuoteStatus.EXPIRED},
    QuoteStatus.SENT: {QuoteStatus.ACCEPTED, QuoteStatus.REJECTED, QuoteStatus.EXPIRED},
    QuoteStatus.ACCEPTED: set(),
    QuoteStatus.REJECTED: set(),
    QuoteStatus.EXPIRED: set(),
}


class QuoteService:
    """
    Service per la gestione dei preventivi.

    La conversione in fattura passa dall'InvoiceService per riusare
    numerazione e aggiornamento dei totali cliente.
    """

    def __init__(
        self,
        repository: SalesRepository,
        invoice_service: InvoiceService,
        settings: Settings = default_settings,
    ) -> None:
        self.repository = repository
        self.invoice_service = invoice_service
        self.settings = settings

    @operation("add_quote")
    async def add_quote(self, data: QuoteCreate, now: Optional[datetime] = None) -> Quote:
        """
        Crea un nuovo preventivo.

        Raises:
            NotFoundError: customer_id sconosciuto
            BusinessValidationError: cliente mancante o nessuna riga
        """
        customer = self.invoice_service.resolve_customer(data.customer_id, data.customer)
        if not data.items:
            raise BusinessValidationError("Il preventivo deve contenere almeno una riga")

        now = resolve_now(now)
        issued_at = data.date or now
        valid_until = data.valid_until or add_days(issued_at, self.settings.quote_validity_days)
        if valid_until < issued_at:
            raise BusinessValidationError("La validità non può precedere la data di emissione")

        quote = Quote(
            number=self.repository.next_quote_number(issued_at),
            date=issued_at,
            valid_until=valid_until,
            customer=customer,
            items=data.items,
            status=data.status,
            notes=data.notes,
            created_at=now,
        )
        quote.compute_totals(self.settings.tax_rate)
        self.repository.quotes.append(quote)
        await self.repository.save("quotes")
        logger.info("Preventivo %s creato (totale %s)", quote.number, quote.total)
        return quote

    @operation("update_quote")
    async def update_quote(self, quote_id: str, data: QuoteUpdate) -> Quote:
        """
        Aggiorna un preventivo ancora aperto (draft o sent).

        Raises:
            NotFoundError: Preventivo non trovato
            ConflictError: Preventivo già chiuso
        """
        quote = self.repository.get_quote(quote_id)
        if quote.status not in (QuoteStatus.DRAFT, QuoteStatus.SENT):
            raise ConflictError(f"Il preventivo {quote.number} è {quote.status.value}: non modificabile")
        if data.valid_until is not None and data.valid_until < quote.date:
            raise BusinessValidationError("La validità non può precedere la data di emissione")

        if data.customer_id is not None or data.customer is not None:
            quote.customer = self.invoice_service.resolve_customer(data.customer_id, data.customer)
        if data.items is not None:
            quote.items = data.items
            quote.compute_totals(self.settings.tax_rate)
        if data.valid_until is not None:
            quote.valid_until = data.valid_until
        if data.notes is not None:
            quote.notes = data.notes

        await self.repository.save("quotes")
        return quote

    @operation("delete_quote")
    async def delete_quote(self, quote_id: str) -> Quote:
        quote = self.repository.get_quote(quote_id)
        self.repository.quotes.remove(quote)
        await self.repository.save("quotes")
        logger.info("Preventivo %s eliminato", quote.number)
        return quote

    @operation("get_quote")
    async def get_quote(self, quote_id: str) -> Quote:
        return self.repository.get_quote(quote_id)

    def list_quotes(self) -> List[Quote]:
        return sorted(self.repository.quotes, key=lambda q: q.date, reverse=True)

    @operation("set_quote_status")
    async def set_status(self, quote_id: str, status: QuoteStatus) -> Quote:
        """
        Cambia lo stato di un preventivo.

        Raises:
            NotFoundError: Preventivo non trovato
            ConflictError: Transizione non consentita
        """
        quote = self.repository.get_quote(quote_id)
        if status == quote.status:
            return quote
        if status not in ALLOWED_TRANSITIONS[quote.status]:
            raise ConflictError(
                f"Transizione {quote.status.value} -> {status.value} non consentita "
                f"per il preventivo {quote.number}"
            )
        quote.status = status
        await self.repository.save("quotes")
        return quote

    async def expire_quotes(self, now: Optional[datetime] = None) -> List[Quote]:
        """
        Marca come scaduti i preventivi aperti oltre la validità.

        Returns:
            I preventivi scaduti in questa chiamata
        """
        now = resolve_now(now)
        expired = [q for q in self.repository.quotes if q.is_expired(now)]
        for quote in expired:
            quote.status = QuoteStatus.EXPIRED
        if expired:
            await self.repository.save("quotes")
            logger.info("%d preventivi scaduti", len(expired))
        return expired

    @operation("convert_quote")
    async def convert_to_invoice(self, quote_id: str, now: Optional[datetime] = None) -> Invoice:
        """
        Converte un preventivo in fattura.

        Copia cliente, righe e totali; le note riportano la provenienza.
        Il preventivo convertito diventa "accepted".

        Raises:
            NotFoundError: Preventivo non trovato
            ConflictError: Preventivo già convertito, rifiutato o scaduto
        """
        now = resolve_now(now)
        quote = self.repository.get_quote(quote_id)
        if quote.is_expired(now):
            quote.status = QuoteStatus.EXPIRED
            await self.repository.save("quotes")
        if not quote.can_convert():
            raise ConflictError(
                f"Il preventivo {quote.number} è {quote.status.value}: conversione non consentita"
            )

        invoice = await self.invoice_service.create_invoice(
            customer=quote.customer.model_copy(),
            items=quote.items,
            totals=(quote.subtotal, quote.tax, quote.total),
            notes=f"Converted from Quote {quote.number}",
            now=now,
        )
        quote.status = QuoteStatus.ACCEPTED
        await self.repository.save("quotes")
        logger.info("Preventivo %s convertito nella fattura %s", quote.number, invoice.number)
        return invoice
