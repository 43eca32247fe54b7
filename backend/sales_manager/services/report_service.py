"""
Service Layer per i Report
Progetto: Sales Manager (Gestione Vendite)

Contiene:
- Report di anzianità crediti (fasce 1-30, 31-60, 61-90, 90+)
- Report vendite mensile
- Esportazione fatture in Excel (openpyxl) e CSV
"""

import csv
import io
import logging
from datetime import datetime
from typing import List, Optional, Sequence

from sales_manager.core.config import Settings, settings as default_settings
from sales_manager.core.dates import month_label, resolve_now, same_month
from sales_manager.core.exceptions import BusinessValidationError
from sales_manager.core.money import sum_money
from sales_manager.models import Invoice
from sales_manager.schemas.report import (
    AgingBucket,
    AgingInvoice,
    AgingReport,
    MonthlySalesReport,
    MonthlySalesRow,
)
from sales_manager.services.repository import SalesRepository

# Logger per questo modulo
logger = logging.getLogger(__name__)

EXPORT_HEADERS = [
    "Numero",
    "Cliente",
    "Data",
    "Scadenza",
    "Imponibile",
    "IVA",
    "Totale",
    "Pagato",
    "Residuo",
    "Stato pagamento",
    "Metodo",
]


def build_buckets(bounds: Sequence[int]) -> List[AgingBucket]:
    """
    Fasce vuote a partire dai limiti superiori.

    Example:
        (30, 60, 90) -> 1-30, 31-60, 61-90, 90+
    """
    buckets = []
    lower = 1
    for upper in bounds:
        buckets.append(AgingBucket(label=f"{lower}-{upper}", min_days=lower, max_days=upper))
        lower = upper + 1
    buckets.append(AgingBucket(label=f"{bounds[-1]}+", min_days=lower, max_days=None))
    return buckets


def build_aging_report(
    invoices: Sequence[Invoice],
    now: Optional[datetime] = None,
    bounds: Sequence[int] = (30, 60, 90),
) -> AgingReport:
    """
    Ripartisce le fatture scadute per giorni di ritardo.

    Args:
        invoices: Tutte le fatture (le non scadute vengono ignorate)
        now: Istante di riferimento
        bounds: Limiti superiori delle fasce, strettamente crescenti

    Returns:
        AgingReport con elenco, conteggio e residuo per fascia
    """
    now = resolve_now(now)
    buckets = build_buckets(bounds)

    overdue = sorted(
        (inv for inv in invoices if inv.is_overdue(now)),
        key=lambda inv: inv.due_date,
    )
    for invoice in overdue:
        days = invoice.days_overdue(now)
        bucket = next(
            b for b in buckets if b.min_days <= days and (b.max_days is None or days <= b.max_days)
        )
        bucket.invoices.append(
            AgingInvoice(
                id=invoice.id,
                number=invoice.number,
                customer_name=invoice.customer.name,
                due_date=invoice.due_date,
                days_overdue=days,
                outstanding=invoice.remaining_amount,
            )
        )

    for bucket in buckets:
        bucket.count = len(bucket.invoices)
        bucket.amount = sum_money(i.outstanding for i in bucket.invoices)

    return AgingReport(
        generated_at=now,
        buckets=buckets,
        total_count=sum(b.count for b in buckets),
        total_amount=sum_money(b.amount for b in buckets),
    )


class ReportService:
    """Service per report ed esportazioni."""

    def __init__(self, repository: SalesRepository, settings: Settings = default_settings) -> None:
        self.repository = repository
        self.settings = settings

    def aging_report(self, now: Optional[datetime] = None) -> AgingReport:
        return build_aging_report(self.repository.invoices, now, self.settings.aging_bucket_bounds)

    def monthly_sales_report(self, year: int, month: int) -> MonthlySalesReport:
        """
        Report delle fatture emesse nel mese indicato.

        Raises:
            BusinessValidationError: Mese non valido
        """
        if not 1 <= month <= 12:
            raise BusinessValidationError(f"Mese non valido: {month}")

        invoices = sorted(
            (inv for inv in self.repository.invoices if same_month(inv.date, year, month)),
            key=lambda inv: inv.date,
        )
        return MonthlySalesReport(
            year=year,
            month=month,
            label=month_label(datetime(year, month, 1)),
            invoice_count=len(invoices),
            sales=sum_money(inv.total for inv in invoices if inv.is_paid()),
            revenue=sum_money(inv.paid_amount for inv in invoices),
            invoiced=sum_money(inv.total for inv in invoices),
            rows=[
                MonthlySalesRow(
                    number=inv.number,
                    customer_name=inv.customer.name,
                    date=inv.date,
                    total=inv.total,
                    paid_amount=inv.paid_amount,
                    payment_status=inv.payment_status.value,
                )
                for inv in invoices
            ],
        )

    # ------------------------------------------------------------
    # Esportazione
    # ------------------------------------------------------------
    def _export_rows(self, invoices: Optional[Sequence[Invoice]] = None) -> List[list]:
        if invoices is None:
            invoices = sorted(self.repository.invoices, key=lambda inv: inv.date)
        return [
            [
                inv.number,
                inv.customer.name,
                inv.date.strftime("%d/%m/%Y"),
                inv.due_date.strftime("%d/%m/%Y"),
                inv.subtotal,
                inv.tax,
                inv.total,
                inv.paid_amount,
                inv.remaining_amount,
                inv.payment_status.value,
                inv.payment_method.value,
            ]
            for inv in invoices
        ]

    def export_invoices_xlsx(self, invoices: Optional[Sequence[Invoice]] = None) -> bytes:
        """
        Esporta le fatture in un workbook Excel.

        Returns:
            bytes: Contenuto del file .xlsx
        """
        from openpyxl import Workbook
        from openpyxl.styles import Font

        wb = Workbook()
        sheet = wb.active
        sheet.title = "Fatture"
        sheet.append(EXPORT_HEADERS)
        for cell in sheet[1]:
            cell.font = Font(bold=True)

        rows = self._export_rows(invoices)
        for row in rows:
            sheet.append(row)
        # Colonne importi (E..I) con formato a due decimali
        for column in sheet.iter_cols(min_col=5, max_col=9, min_row=2):
            for cell in column:
                cell.number_format = "#,##0.00"

        buffer = io.BytesIO()
        wb.save(buffer)
        logger.info("Export Excel generato: %d fatture", len(rows))
        return buffer.getvalue()

    def export_invoices_csv(self, invoices: Optional[Sequence[Invoice]] = None) -> bytes:
        """
        Esporta le fatture in CSV (UTF-8 con BOM, leggibile da Excel).

        Returns:
            bytes: Contenuto del file .csv
        """
        buffer = io.StringIO()
        writer = csv.writer(buffer)
        writer.writerow(EXPORT_HEADERS)
        rows = self._export_rows(invoices)
        writer.writerows(rows)
        logger.info("Export CSV generato: %d fatture", len(rows))
        return buffer.getvalue().encode("utf-8-sig")
