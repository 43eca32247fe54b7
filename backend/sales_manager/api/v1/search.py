"""
Router FastAPI per ricerca e filtri
Progetto: Sales Manager (Gestione Vendite)
"""

from typing import Literal, Optional

from fastapi import APIRouter, Depends, Query, status

from sales_manager.core.deps import get_search_service
from sales_manager.models import InvoiceFilters, SavedSearch
from sales_manager.schemas.invoice import InvoiceRead
from sales_manager.schemas.search import SavedSearchCreate, SearchResults
from sales_manager.services.search_service import SearchService

router = APIRouter(
    prefix="/search",
    tags=["Ricerca"],
)


@router.get("/", name="ricerca", summary="Ricerca testuale", response_model=SearchResults)
async def search(
    q: str = Query("", max_length=100, description="Testo da cercare"),
    service: SearchService = Depends(get_search_service),
) -> SearchResults:
    return service.search(q)


@router.post(
    "/invoices",
    name="ricerca_filtri",
    summary="Filtra fatture",
    description="Applica i filtri all'elenco fatture con ordinamento opzionale.",
    response_model=list[InvoiceRead],
)
async def filter_invoices(
    filters: InvoiceFilters,
    sort_by: Optional[str] = Query(None, description="number | date | customer | total | status"),
    direction: Literal["asc", "desc"] = Query("asc"),
    service: SearchService = Depends(get_search_service),
) -> list[InvoiceRead]:
    invoices = service.apply_filters(filters, sort_by, direction)
    return [InvoiceRead.from_invoice(inv) for inv in invoices]


@router.get("/saved", name="ricerche_salvate", summary="Ricerche salvate", response_model=list[SavedSearch])
async def list_saved(
    service: SearchService = Depends(get_search_service),
) -> list[SavedSearch]:
    return service.list_saved_searches()


@router.post(
    "/saved",
    name="ricerca_salva",
    summary="Salva ricerca",
    response_model=SavedSearch,
    status_code=status.HTTP_201_CREATED,
)
async def save_search(
    data: SavedSearchCreate,
    service: SearchService = Depends(get_search_service),
) -> SavedSearch:
    result = await service.save_search(data)
    return result.unwrap()


@router.delete(
    "/saved/{index}",
    name="ricerca_elimina",
    summary="Elimina ricerca salvata",
    status_code=status.HTTP_204_NO_CONTENT,
)
async def delete_saved(
    index: int,
    service: SearchService = Depends(get_search_service),
) -> None:
    result = await service.delete_saved_search(index)
    result.unwrap()
