"""
Repository delle collezioni di vendita
Progetto: Sales Manager (Gestione Vendite)

Il SalesRepository possiede tutte le collezioni in memoria (fatture,
clienti, preventivi, registro pagamenti, registro promemoria, ricerche
salvate, dipendenti) e le persiste per intero tramite lo StorageBackend.
Viene passato esplicitamente a tutti i service: nessuno stato globale.
"""

import asyncio
import logging
import re
from datetime import datetime
from typing import Any, Awaitable, Callable, Dict, List, Optional, Type

from pydantic import BaseModel
from pydantic import ValidationError as PydanticValidationError

from sales_manager.core.exceptions import NotFoundError
from sales_manager.core.storage import StorageBackend
from sales_manager.models import (
    Customer,
    Employee,
    Invoice,
    PaymentRecord,
    Quote,
    Reminder,
    SavedSearch,
)

# Logger per questo modulo
logger = logging.getLogger(__name__)

ChangeListener = Callable[[], Awaitable[None]]

# Chiave di storage -> (attributo del repository, modello)
COLLECTIONS: Dict[str, Type[BaseModel]] = {
    "invoices": Invoice,
    "customers": Customer,
    "quotes": Quote,
    "payments": PaymentRecord,
    "reminders": Reminder,
    "saved_searches": SavedSearch,
    "employees": Employee,
}


class SalesRepository:
    """
    Proprietario delle collezioni in memoria.

    Le mutazioni di una stessa fattura sono serializzate da un asyncio.Lock
    per id (vedi `invoice_lock`). Dopo ogni salvataggio vengono notificati
    i listener registrati (es. refresh della dashboard).

    Args:
        storage: Backend chiave/valore per la persistenza
    """

    def __init__(self, storage: StorageBackend) -> None:
        self.storage = storage
        self.invoices: List[Invoice] = []
        self.customers: List[Customer] = []
        self.quotes: List[Quote] = []
        self.payments: List[PaymentRecord] = []
        self.reminders: List[Reminder] = []
        self.saved_searches: List[SavedSearch] = []
        self.employees: List[Employee] = []
        self._invoice_locks: Dict[str, asyncio.Lock] = {}
        self._listeners: List[ChangeListener] = []

    # ------------------------------------------------------------
    # Persistenza
    # ------------------------------------------------------------
    async def load(self) -> None:
        """
        Carica tutte le collezioni dallo storage.

        Le voci non valide vengono scartate con un warning; una versione
        salvata diversa da quella corrente viene segnalata nei log.
        """
        stored_version = await self.storage.stored_version()
        if stored_version is None:
            await self.storage.write_version()
        elif stored_version != self.storage.version:
            logger.warning(
                "Versione dati salvati %s diversa dalla versione corrente %s",
                stored_version,
                self.storage.version,
            )

        for key, model in COLLECTIONS.items():
            blob = await self.storage.load(key)
            setattr(self, key, self._parse_collection(key, model, blob))

        logger.info(
            "Repository caricato: %d fatture, %d clienti, %d preventivi",
            len(self.invoices),
            len(self.customers),
            len(self.quotes),
        )

    @staticmethod
    def _parse_collection(key: str, model: Type[BaseModel], blob: Any) -> List[Any]:
        if blob is None:
            return []
        if not isinstance(blob, list):
            logger.error("Blob '%s' non è una lista: ignorato", key)
            return []
        items = []
        for raw in blob:
            try:
                items.append(model.model_validate(raw))
            except PydanticValidationError as e:
                logger.warning("Voce non valida in '%s' scartata: %s", key, e.errors()[:1])
        return items

    async def save(self, *keys: str) -> bool:
        """
        Persiste le collezioni indicate (intere) e notifica i listener.

        Returns:
            True se tutti i salvataggi sono riusciti
        """
        ok = True
        for key in keys:
            if key not in COLLECTIONS:
                raise KeyError(f"Collezione sconosciuta: {key}")
            blob = [item.model_dump(mode="json") for item in getattr(self, key)]
            if not await self.storage.save(key, blob):
                logger.warning("Salvataggio della collezione '%s' non riuscito", key)
                ok = False
        await self._notify()
        return ok

    async def clear(self) -> bool:
        """Svuota le collezioni e rimuove tutte le chiavi dallo storage."""
        for key in COLLECTIONS:
            setattr(self, key, [])
        self._invoice_locks.clear()
        ok = await self.storage.clear_all()
        await self.storage.write_version()
        await self._notify()
        return ok

    # ------------------------------------------------------------
    # Listener
    # ------------------------------------------------------------
    def subscribe(self, listener: ChangeListener) -> None:
        self._listeners.append(listener)

    async def _notify(self) -> None:
        for listener in self._listeners:
            await listener()

    # ------------------------------------------------------------
    # Lock per fattura
    # ------------------------------------------------------------
    def invoice_lock(self, invoice_id: str) -> asyncio.Lock:
        """Lock che serializza le mutazioni della fattura indicata."""
        lock = self._invoice_locks.get(invoice_id)
        if lock is None:
            lock = asyncio.Lock()
            self._invoice_locks[invoice_id] = lock
        return lock

    def drop_invoice_lock(self, invoice_id: str) -> None:
        self._invoice_locks.pop(invoice_id, None)

    # ------------------------------------------------------------
    # Lookup
    # ------------------------------------------------------------
    def find_invoice(self, invoice_id: str) -> Optional[Invoice]:
        return next((inv for inv in self.invoices if inv.id == invoice_id), None)

    def get_invoice(self, invoice_id: str) -> Invoice:
        """
        Raises:
            NotFoundError: Fattura non trovata
        """
        invoice = self.find_invoice(invoice_id)
        if invoice is None:
            raise NotFoundError(f"Fattura {invoice_id} non trovata")
        return invoice

    def find_customer(self, customer_id: Optional[str]) -> Optional[Customer]:
        if customer_id is None:
            return None
        return next((c for c in self.customers if c.id == customer_id), None)

    def get_customer(self, customer_id: str) -> Customer:
        customer = self.find_customer(customer_id)
        if customer is None:
            raise NotFoundError(f"Cliente {customer_id} non trovato")
        return customer

    def get_quote(self, quote_id: str) -> Quote:
        quote = next((q for q in self.quotes if q.id == quote_id), None)
        if quote is None:
            raise NotFoundError(f"Preventivo {quote_id} non trovato")
        return quote

    def get_employee(self, employee_id: int) -> Employee:
        employee = next((e for e in self.employees if e.id == employee_id), None)
        if employee is None:
            raise NotFoundError(f"Dipendente {employee_id} non trovato")
        return employee

    # ------------------------------------------------------------
    # Numerazione
    # ------------------------------------------------------------
    @staticmethod
    def _next_number(numbers: List[str], prefix: str) -> str:
        pattern = re.compile(rf"^{re.escape(prefix)}(\d+)$")
        sequences = [int(m.group(1)) for m in map(pattern.match, numbers) if m]
        next_sequence = max(sequences, default=0) + 1
        return f"{prefix}{next_sequence:03d}"

    def next_invoice_number(self, issued_at: datetime) -> str:
        """
        Numero fattura progressivo per anno+mese.

        Formato: YYYYMM-NNN (es. 202503-001)
        """
        prefix = f"{issued_at.year:04d}{issued_at.month:02d}-"
        return self._next_number([inv.number for inv in self.invoices], prefix)

    def next_quote_number(self, issued_at: datetime) -> str:
        """
        Numero preventivo progressivo per anno+mese.

        Formato: QUO-YYYYMM-NNN
        """
        prefix = f"QUO-{issued_at.year:04d}{issued_at.month:02d}-"
        return self._next_number([q.number for q in self.quotes], prefix)

    def next_employee_id(self) -> int:
        return max((e.id for e in self.employees), default=0) + 1
