"""
Service Layer per la Fatturazione
Progetto: Sales Manager (Gestione Vendite)

Definisce la logica di business per la gestione delle fatture:
creazione con numerazione progressiva, modifica, cancellazione e
aggiornamento dei totali progressivi dei clienti.
"""

import logging
from datetime import datetime
from decimal import Decimal
from typing import List, Optional

from sales_manager.core.config import Settings, settings as default_settings
from sales_manager.core.dates import add_days, resolve_now
from sales_manager.core.exceptions import BusinessValidationError, ConflictError
from sales_manager.core.money import to_money
from sales_manager.core.results import operation
from sales_manager.models import CustomerSnapshot, Invoice, InvoiceStatus, LineItem, PaymentMethod
from sales_manager.schemas.invoice import InvoiceCreate, InvoiceUpdate
from sales_manager.services.repository import SalesRepository

# Logger per questo modulo
logger = logging.getLogger(__name__)


class InvoiceService:
    """
    Service per la gestione delle operazioni sulle fatture.

    Le operazioni pubbliche restituiscono un OperationResult: gli errori
    di dominio non vengono propagati al chiamante.

    Implementa:
    - Numerazione progressiva per anno+mese (YYYYMM-NNN)
    - Calcolo automatico dei totali
    - Scadenza di default (emissione + payment_terms_days)
    - Aggiornamento eventualmente consistente dei totali cliente
    """

    def __init__(self, repository: SalesRepository, settings: Settings = default_settings) -> None:
        self.repository = repository
        self.settings = settings

    # ------------------------------------------------------------
    # Operazioni
    # ------------------------------------------------------------
    @operation("add_invoice")
    async def add_invoice(self, data: InvoiceCreate, now: Optional[datetime] = None) -> Invoice:
        """
        Crea una nuova fattura.

        Args:
            data: Dati della fattura
            now: Istante corrente (default: adesso)

        Returns:
            Invoice: La fattura creata

        Raises:
            NotFoundError: customer_id sconosciuto
            BusinessValidationError: cliente mancante o nessuna riga
        """
        customer = self.resolve_customer(data.customer_id, data.customer)
        return await self.create_invoice(
            customer=customer,
            items=data.items,
            issued_at=data.date,
            due_date=data.due_date,
            status=data.status,
            payment_method=data.payment_method,
            notes=data.notes,
            now=now,
        )

    async def create_invoice(
        self,
        customer: CustomerSnapshot,
        items: List[LineItem],
        issued_at: Optional[datetime] = None,
        due_date: Optional[datetime] = None,
        status: InvoiceStatus = InvoiceStatus.DRAFT,
        payment_method: PaymentMethod = PaymentMethod.CASH,
        notes: str = "",
        totals: Optional[tuple] = None,
        now: Optional[datetime] = None,
    ) -> Invoice:
        """
        Costruisce, numera e salva una fattura.

        Usato da add_invoice e dalla conversione dei preventivi. Se `totals`
        (subtotal, tax, total) è indicato viene copiato invece di ricalcolato.

        Raises:
            BusinessValidationError: cliente senza nome o nessuna riga, scadenza anteriore all'emissione
        """
        if not customer.name.strip():
            raise BusinessValidationError("Il cliente è obbligatorio")
        if not items:
            raise BusinessValidationError("La fattura deve contenere almeno una riga")

        now = resolve_now(now)
        issued_at = issued_at or now
        if due_date is not None and due_date < issued_at:
            raise BusinessValidationError("La scadenza non può precedere la data di emissione")
        invoice = Invoice(
            number=self.repository.next_invoice_number(issued_at),
            date=issued_at,
            due_date=due_date or add_days(issued_at, self.settings.payment_terms_days),
            customer=customer,
            items=[item.model_copy() for item in items],
            status=status,
            payment_method=payment_method,
            notes=notes,
            created_at=now,
            updated_at=now,
        )
        if totals is None:
            invoice.compute_totals(self.settings.tax_rate)
        else:
            invoice.subtotal, invoice.tax, invoice.total = (to_money(v) for v in totals)
        invoice.refresh_payment_status()

        self.repository.invoices.append(invoice)
        self._adjust_customer(invoice.customer.id, invoice.total, 1)
        await self.repository.save("invoices", "customers")

        logger.info("Fattura %s creata (totale %s)", invoice.number, invoice.total)
        return invoice

    @operation("update_invoice")
    async def update_invoice(
        self,
        invoice_id: str,
        data: InvoiceUpdate,
        now: Optional[datetime] = None,
    ) -> Invoice:
        """
        Aggiorna una fattura.

        Le righe modificate comportano il ricalcolo dei totali; lo stato di
        pagamento viene sempre riallineato e la versione incrementata.

        Raises:
            NotFoundError: Fattura o cliente non trovati
            ConflictError: La versione indicata non coincide
            BusinessValidationError: Il nuovo totale è inferiore all'incassato
        """
        async with self.repository.invoice_lock(invoice_id):
            invoice = self.repository.get_invoice(invoice_id)
            if data.version is not None and data.version != invoice.version:
                raise ConflictError(
                    f"La fattura {invoice.number} è stata modificata "
                    f"(versione {invoice.version}, attesa {data.version})",
                    extra={"current_version": invoice.version},
                )

            # Copia di lavoro: la fattura originale resta invariata in caso di errore
            updated = invoice.model_copy(deep=True)
            if data.customer_id is not None or data.customer is not None:
                updated.customer = self.resolve_customer(data.customer_id, data.customer)
            if data.items is not None:
                updated.items = data.items
                updated.compute_totals(self.settings.tax_rate)
            if data.due_date is not None:
                if data.due_date < updated.date:
                    raise BusinessValidationError(
                        "La scadenza non può precedere la data di emissione"
                    )
                updated.due_date = data.due_date
            if data.status is not None:
                updated.status = data.status
            if data.payment_method is not None:
                updated.payment_method = data.payment_method
            if data.notes is not None:
                updated.notes = data.notes

            if updated.paid_amount > updated.total:
                raise BusinessValidationError(
                    f"Il nuovo totale {updated.total} è inferiore all'importo "
                    f"già incassato {updated.paid_amount}"
                )
            updated.refresh_payment_status()
            updated.touch(now)

            # Totali cliente: rimuove il vecchio contributo e aggiunge il nuovo
            self._adjust_customer(invoice.customer.id, -invoice.total, -1)
            self._adjust_customer(updated.customer.id, updated.total, 1)

            index = self.repository.invoices.index(invoice)
            self.repository.invoices[index] = updated
            await self.repository.save("invoices", "customers")

        logger.info("Fattura %s aggiornata (versione %d)", updated.number, updated.version)
        return updated

    @operation("delete_invoice")
    async def delete_invoice(self, invoice_id: str) -> Invoice:
        """
        Elimina una fattura e riallinea i totali del cliente.

        Returns:
            Invoice: La fattura eliminata

        Raises:
            NotFoundError: Fattura non trovata
        """
        async with self.repository.invoice_lock(invoice_id):
            invoice = self.repository.get_invoice(invoice_id)
            self.repository.invoices.remove(invoice)
            self._adjust_customer(invoice.customer.id, -invoice.total, -1)
            await self.repository.save("invoices", "customers")
        self.repository.drop_invoice_lock(invoice_id)

        logger.info("Fattura %s eliminata", invoice.number)
        return invoice

    @operation("get_invoice")
    async def get_invoice(self, invoice_id: str) -> Invoice:
        return self.repository.get_invoice(invoice_id)

    def list_invoices(self) -> List[Invoice]:
        """Fatture dalla più recente alla meno recente."""
        return sorted(self.repository.invoices, key=lambda inv: inv.date, reverse=True)

    # ------------------------------------------------------------
    # Helper
    # ------------------------------------------------------------
    def resolve_customer(
        self,
        customer_id: Optional[str],
        snapshot: Optional[CustomerSnapshot],
    ) -> CustomerSnapshot:
        """
        Determina lo snapshot cliente da incorporare nel documento.

        Raises:
            NotFoundError: customer_id sconosciuto
            BusinessValidationError: nessun cliente indicato
        """
        if customer_id is not None:
            return self.repository.get_customer(customer_id).snapshot()
        if snapshot is None or not snapshot.name.strip():
            raise BusinessValidationError("Il cliente è obbligatorio")
        return snapshot

    def _adjust_customer(self, customer_id: Optional[str], amount: Decimal, count: int) -> None:
        """Aggiorna i totali progressivi del cliente, se presente in anagrafica."""
        customer = self.repository.find_customer(customer_id)
        if customer is None:
            return
        customer.total_purchases = max(to_money(customer.total_purchases + amount), Decimal("0.00"))
        customer.invoice_count = max(customer.invoice_count + count, 0)
