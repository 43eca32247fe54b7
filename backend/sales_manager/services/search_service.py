"""
Service Layer per ricerca e filtri
Progetto: Sales Manager (Gestione Vendite)

Contiene:
- Ricerca testuale su fatture e clienti
- Filtri sull'elenco fatture
- Ordinamento
- Ricerche salvate
"""

import logging
from typing import Callable, Dict, List, Optional, Sequence

from sales_manager.core.config import Settings, settings as default_settings
from sales_manager.core.exceptions import NotFoundError
from sales_manager.core.results import operation
from sales_manager.models import Customer, Invoice, InvoiceFilters, SavedSearch
from sales_manager.models.search import ALL
from sales_manager.schemas.search import SavedSearchCreate, SearchResults
from sales_manager.services.repository import SalesRepository

# Logger per questo modulo
logger = logging.getLogger(__name__)

# Campo di ordinamento -> chiave
SORT_KEYS: Dict[str, Callable[[Invoice], object]] = {
    "number": lambda inv: inv.number,
    "date": lambda inv: inv.date,
    "customer": lambda inv: inv.customer.name.lower(),
    "total": lambda inv: inv.total,
    "status": lambda inv: inv.payment_status.value,
}


def _matches(query: str, *fields: str) -> bool:
    return any(query in (field or "").lower() for field in fields)


def filter_invoices(invoices: Sequence[Invoice], filters: InvoiceFilters) -> List[Invoice]:
    """Applica i filtri; i criteri a None o "all" vengono ignorati."""
    result = []
    for inv in invoices:
        if filters.date_from is not None and inv.date < filters.date_from:
            continue
        if filters.date_to is not None and inv.date > filters.date_to:
            continue
        if filters.payment_status != ALL and inv.payment_status.value != filters.payment_status:
            continue
        if filters.payment_method != ALL and inv.payment_method.value != filters.payment_method:
            continue
        if filters.min_amount is not None and inv.total < filters.min_amount:
            continue
        if filters.max_amount is not None and inv.total > filters.max_amount:
            continue
        if filters.customer_id != ALL and inv.customer.id != filters.customer_id:
            continue
        result.append(inv)
    return result


def sort_invoices(invoices: Sequence[Invoice], field: str, direction: str = "asc") -> List[Invoice]:
    """
    Ordina le fatture per campo.

    Un campo sconosciuto mantiene l'ordine originale.
    """
    key = SORT_KEYS.get(field)
    if key is None:
        return list(invoices)
    return sorted(invoices, key=key, reverse=direction == "desc")


class SearchService:
    """Service per ricerca testuale, filtri e ricerche salvate."""

    def __init__(self, repository: SalesRepository, settings: Settings = default_settings) -> None:
        self.repository = repository
        self.settings = settings

    def search(self, query: str) -> SearchResults:
        """
        Ricerca case-insensitive su fatture e clienti.

        Query vuota: tutto. Query più corta del minimo: nessun risultato.
        """
        term = query.strip().lower()
        if not term:
            return SearchResults(
                query=query,
                invoices=list(self.repository.invoices),
                customers=list(self.repository.customers),
            )
        if len(term) < self.settings.search_min_length:
            return SearchResults(query=query, invoices=[], customers=[])

        invoices = [
            inv
            for inv in self.repository.invoices
            if _matches(
                term,
                inv.number,
                inv.customer.name,
                inv.customer.email,
                inv.customer.phone,
            )
        ]
        customers: List[Customer] = [
            c
            for c in self.repository.customers
            if _matches(term, c.name, c.email, c.phone, c.company)
        ]
        logger.debug("Ricerca '%s': %d fatture, %d clienti", term, len(invoices), len(customers))
        return SearchResults(query=query, invoices=invoices, customers=customers)

    def apply_filters(
        self,
        filters: InvoiceFilters,
        sort_by: Optional[str] = None,
        direction: str = "asc",
    ) -> List[Invoice]:
        invoices = filter_invoices(self.repository.invoices, filters)
        if sort_by:
            invoices = sort_invoices(invoices, sort_by, direction)
        return invoices

    # ------------------------------------------------------------
    # Ricerche salvate
    # ------------------------------------------------------------
    @operation("save_search")
    async def save_search(self, data: SavedSearchCreate) -> SavedSearch:
        saved = SavedSearch(name=data.name, filters=data.filters)
        self.repository.saved_searches.append(saved)
        await self.repository.save("saved_searches")
        logger.info("Ricerca '%s' salvata", saved.name)
        return saved

    def list_saved_searches(self) -> List[SavedSearch]:
        return list(self.repository.saved_searches)

    @operation("delete_saved_search")
    async def delete_saved_search(self, index: int) -> SavedSearch:
        """
        Elimina una ricerca salvata per posizione.

        Raises:
            NotFoundError: Indice fuori intervallo
        """
        if not 0 <= index < len(self.repository.saved_searches):
            raise NotFoundError(f"Ricerca salvata {index} non trovata")
        saved = self.repository.saved_searches.pop(index)
        await self.repository.save("saved_searches")
        return saved
