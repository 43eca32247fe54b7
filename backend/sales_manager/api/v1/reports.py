"""
Router FastAPI per Report ed esportazioni
Progetto: Sales Manager (Gestione Vendite)
"""

from typing import Optional

from fastapi import APIRouter, Depends, Query
from fastapi.responses import Response

from sales_manager.core.dates import utcnow
from sales_manager.core.deps import get_pdf_service, get_report_service
from sales_manager.schemas.report import AgingReport, MonthlySalesReport
from sales_manager.services.pdf_service import PdfService
from sales_manager.services.report_service import ReportService

router = APIRouter(
    prefix="/reports",
    tags=["Report"],
)

XLSX_MEDIA_TYPE = "application/vnd.openxmlformats-officedocument.spreadsheetml.sheet"


def _attachment(content: bytes, media_type: str, filename: str) -> Response:
    return Response(
        content=content,
        media_type=media_type,
        headers={"Content-Disposition": f'attachment; filename="{filename}"'},
    )


@router.get(
    "/aging",
    name="report_anzianita",
    summary="Anzianità crediti",
    description="Fatture scadute suddivise per fasce di giorni di ritardo.",
    response_model=AgingReport,
)
async def aging_report(
    service: ReportService = Depends(get_report_service),
) -> AgingReport:
    return service.aging_report()


@router.get("/aging/pdf", name="report_anzianita_pdf", summary="Anzianità crediti (PDF)", response_class=Response)
async def aging_report_pdf(
    service: ReportService = Depends(get_report_service),
    pdf_service: PdfService = Depends(get_pdf_service),
) -> Response:
    report = service.aging_report()
    return _attachment(pdf_service.generate_aging_pdf(report), "application/pdf", "anzianita_crediti.pdf")


@router.get(
    "/monthly",
    name="report_mensile",
    summary="Vendite mensili",
    response_model=MonthlySalesReport,
)
async def monthly_report(
    year: Optional[int] = Query(None, ge=2000, le=2100, description="Anno (default: corrente)"),
    month: Optional[int] = Query(None, ge=1, le=12, description="Mese (default: corrente)"),
    service: ReportService = Depends(get_report_service),
) -> MonthlySalesReport:
    now = utcnow()
    return service.monthly_sales_report(year or now.year, month or now.month)


@router.get("/export/xlsx", name="export_excel", summary="Esporta fatture (Excel)", response_class=Response)
async def export_xlsx(
    service: ReportService = Depends(get_report_service),
) -> Response:
    return _attachment(service.export_invoices_xlsx(), XLSX_MEDIA_TYPE, "fatture.xlsx")


@router.get("/export/csv", name="export_csv", summary="Esporta fatture (CSV)", response_class=Response)
async def export_csv(
    service: ReportService = Depends(get_report_service),
) -> Response:
    return _attachment(service.export_invoices_csv(), "text/csv; charset=utf-8", "fatture.csv")
