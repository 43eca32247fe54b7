"""
Router FastAPI per i Preventivi
Progetto: Sales Manager (Gestione Vendite)
"""

from fastapi import APIRouter, Depends, status

from sales_manager.core.deps import get_quote_service
from sales_manager.models import Quote
from sales_manager.schemas.invoice import InvoiceRead
from sales_manager.schemas.quote import QuoteCreate, QuoteStatusUpdate, QuoteUpdate
from sales_manager.services.quote_service import QuoteService

router = APIRouter(
    prefix="/quotes",
    tags=["Preventivi"],
)


@router.get("/", name="preventivi_lista", summary="Lista preventivi", response_model=list[Quote])
async def list_quotes(
    service: QuoteService = Depends(get_quote_service),
) -> list[Quote]:
    return service.list_quotes()


@router.get("/{quote_id}", name="preventivo_dettaglio", summary="Dettaglio preventivo", response_model=Quote)
async def get_quote(
    quote_id: str,
    service: QuoteService = Depends(get_quote_service),
) -> Quote:
    result = await service.get_quote(quote_id)
    return result.unwrap()


@router.post(
    "/",
    name="preventivo_crea",
    summary="Crea preventivo",
    response_model=Quote,
    status_code=status.HTTP_201_CREATED,
)
async def create_quote(
    data: QuoteCreate,
    service: QuoteService = Depends(get_quote_service),
) -> Quote:
    result = await service.add_quote(data)
    return result.unwrap()


@router.patch("/{quote_id}", name="preventivo_aggiorna", summary="Aggiorna preventivo", response_model=Quote)
async def update_quote(
    quote_id: str,
    data: QuoteUpdate,
    service: QuoteService = Depends(get_quote_service),
) -> Quote:
    result = await service.update_quote(quote_id, data)
    return result.unwrap()


@router.put(
    "/{quote_id}/status",
    name="preventivo_stato",
    summary="Cambia stato preventivo",
    response_model=Quote,
)
async def set_quote_status(
    quote_id: str,
    data: QuoteStatusUpdate,
    service: QuoteService = Depends(get_quote_service),
) -> Quote:
    result = await service.set_status(quote_id, data.status)
    return result.unwrap()


@router.post(
    "/{quote_id}/convert",
    name="preventivo_converti",
    summary="Converti in fattura",
    description="Crea una fattura dal preventivo e lo segna come accettato.",
    response_model=InvoiceRead,
    status_code=status.HTTP_201_CREATED,
)
async def convert_quote(
    quote_id: str,
    service: QuoteService = Depends(get_quote_service),
) -> InvoiceRead:
    result = await service.convert_to_invoice(quote_id)
    return InvoiceRead.from_invoice(result.unwrap())


@router.delete(
    "/{quote_id}",
    name="preventivo_elimina",
    summary="Elimina preventivo",
    status_code=status.HTTP_204_NO_CONTENT,
)
async def delete_quote(
    quote_id: str,
    service: QuoteService = Depends(get_quote_service),
) -> None:
    result = await service.delete_quote(quote_id)
    result.unwrap()
