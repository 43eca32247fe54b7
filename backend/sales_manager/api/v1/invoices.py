"""
Router FastAPI per la Fatturazione
Progetto: Sales Manager (Gestione Vendite)

Definisce gli endpoint API per la gestione delle fatture:
CRUD, stampa PDF e incasso dei pagamenti.
"""

import logging

from fastapi import APIRouter, Depends, Path, status
from fastapi.responses import Response

from sales_manager.core.deps import get_invoice_service, get_payment_service, get_pdf_service
from sales_manager.schemas.invoice import InvoiceCreate, InvoiceRead, InvoiceUpdate
from sales_manager.schemas.payment import PaymentCreate, PaymentReceipt
from sales_manager.services.invoice_service import InvoiceService
from sales_manager.services.payment_service import PaymentService
from sales_manager.services.pdf_service import PdfService

# Logger per questo modulo
logger = logging.getLogger(__name__)

# Router con prefix e tag
router = APIRouter(
    prefix="/invoices",
    tags=["Fatturazione"],
)


@router.get(
    "/",
    name="fatture_lista",
    summary="Lista fatture",
    description="Recupera tutte le fatture, dalla più recente.",
    response_model=list[InvoiceRead],
    status_code=status.HTTP_200_OK,
)
async def list_invoices(
    service: InvoiceService = Depends(get_invoice_service),
) -> list[InvoiceRead]:
    return [InvoiceRead.from_invoice(inv) for inv in service.list_invoices()]


@router.get(
    "/{invoice_id}",
    name="fattura_dettaglio",
    summary="Dettaglio fattura",
    response_model=InvoiceRead,
    status_code=status.HTTP_200_OK,
)
async def get_invoice(
    invoice_id: str = Path(..., description="ID della fattura"),
    service: InvoiceService = Depends(get_invoice_service),
) -> InvoiceRead:
    """
    Recupera i dettagli di una fattura per ID.

    Raises:
        NotFoundError: Se la fattura non esiste
    """
    result = await service.get_invoice(invoice_id)
    return InvoiceRead.from_invoice(result.unwrap())


@router.post(
    "/",
    name="fattura_crea",
    summary="Crea fattura",
    description="Crea una nuova fattura con numerazione progressiva e totali calcolati.",
    response_model=InvoiceRead,
    status_code=status.HTTP_201_CREATED,
)
async def create_invoice(
    data: InvoiceCreate,
    service: InvoiceService = Depends(get_invoice_service),
) -> InvoiceRead:
    result = await service.add_invoice(data)
    return InvoiceRead.from_invoice(result.unwrap())


@router.patch(
    "/{invoice_id}",
    name="fattura_aggiorna",
    summary="Aggiorna fattura",
    description="Aggiorna una fattura. Se viene indicata `version` deve coincidere con quella corrente.",
    response_model=InvoiceRead,
    status_code=status.HTTP_200_OK,
)
async def update_invoice(
    data: InvoiceUpdate,
    invoice_id: str = Path(..., description="ID della fattura"),
    service: InvoiceService = Depends(get_invoice_service),
) -> InvoiceRead:
    result = await service.update_invoice(invoice_id, data)
    return InvoiceRead.from_invoice(result.unwrap())


@router.delete(
    "/{invoice_id}",
    name="fattura_elimina",
    summary="Elimina fattura",
    status_code=status.HTTP_204_NO_CONTENT,
)
async def delete_invoice(
    invoice_id: str = Path(..., description="ID della fattura"),
    service: InvoiceService = Depends(get_invoice_service),
) -> None:
    result = await service.delete_invoice(invoice_id)
    result.unwrap()


@router.post(
    "/{invoice_id}/payments",
    name="fattura_pagamento",
    summary="Registra pagamento",
    description="Incassa un pagamento sulla fattura tramite il gateway del metodo scelto.",
    response_model=PaymentReceipt,
    status_code=status.HTTP_201_CREATED,
)
async def pay_invoice(
    data: PaymentCreate,
    invoice_id: str = Path(..., description="ID della fattura"),
    service: PaymentService = Depends(get_payment_service),
) -> PaymentReceipt:
    """
    Registra un pagamento.

    Raises:
        OverpaymentError: Importo superiore al residuo
        InvalidPaymentMethodError: Metodo sconosciuto
        ConflictError: Versione della fattura cambiata
        PaymentGatewayError: Addebito rifiutato
    """
    result = await service.process_payment(
        invoice_id,
        data.method,
        data.amount,
        expected_version=data.expected_version,
    )
    return result.unwrap()


@router.get(
    "/{invoice_id}/pdf",
    name="fattura_pdf",
    summary="PDF fattura",
    response_class=Response,
    status_code=status.HTTP_200_OK,
)
async def get_invoice_pdf(
    invoice_id: str = Path(..., description="ID della fattura"),
    service: InvoiceService = Depends(get_invoice_service),
    pdf_service: PdfService = Depends(get_pdf_service),
) -> Response:
    result = await service.get_invoice(invoice_id)
    invoice = result.unwrap()
    pdf_bytes = pdf_service.generate_invoice_pdf(invoice)
    return Response(
        content=pdf_bytes,
        media_type="application/pdf",
        headers={"Content-Disposition": f'attachment; filename="fattura_{invoice.number}.pdf"'},
    )
