"""
Service per la generazione di PDF con WeasyPrint + Jinja2.
Progetto: Sales Manager (Gestione Vendite)
"""

import logging
import os
from datetime import date

from sales_manager.core.config import Settings, settings as default_settings
from sales_manager.core.templating import TEMPLATES_DIR, build_environment
from sales_manager.models import Invoice
from sales_manager.schemas.report import AgingReport

logger = logging.getLogger(__name__)


# Import ritardato di weasyprint: le librerie native (pango/cairo) potrebbero mancare
def _get_weasyprint():
    """Importa weasyprint solo quando serve davvero generare un PDF."""
    try:
        from weasyprint import CSS, HTML
        return HTML, CSS
    except OSError as e:
        raise RuntimeError(
            "Dipendenze native di WeasyPrint non trovate (pango/cairo). "
            "Installare le librerie di sistema richieste."
        ) from e


class PdfService:
    """
    Genera PDF da template HTML/CSS usando WeasyPrint + Jinja2.

    La parte HTML (`render_*_html`) non richiede WeasyPrint ed è
    utilizzabile anche per l'anteprima.
    """

    def __init__(self, settings: Settings = default_settings, templates_dir: str = TEMPLATES_DIR):
        self.settings = settings
        self.templates_dir = templates_dir
        self.env = build_environment(settings.default_currency, templates_dir)

    def _base_context(self) -> dict:
        return {
            "company_name": self.settings.invoice_company_name,
            "oggi": date.today().strftime("%d/%m/%Y"),
        }

    def render_invoice_html(self, invoice: Invoice) -> str:
        template = self.env.get_template("invoice_template.html")
        context = self._base_context()
        context.update(
            invoice=invoice,
            tax_percent=(self.settings.tax_rate * 100).normalize(),
        )
        return template.render(context)

    def render_aging_html(self, report: AgingReport) -> str:
        template = self.env.get_template("aging_report.html")
        context = self._base_context()
        context["report"] = report
        return template.render(context)

    def _to_pdf(self, html_out: str) -> bytes:
        HTML, CSS = _get_weasyprint()
        css = CSS(filename=os.path.join(self.templates_dir, "invoice_style.css"))
        return HTML(string=html_out, base_url=self.templates_dir).write_pdf(stylesheets=[css])

    def generate_invoice_pdf(self, invoice: Invoice) -> bytes:
        """
        Genera il PDF di una fattura.

        Args:
            invoice: Fattura da stampare

        Returns:
            bytes: PDF binario pronto per il download
        """
        pdf_bytes = self._to_pdf(self.render_invoice_html(invoice))
        logger.info("PDF generato per la fattura %s", invoice.number)
        return pdf_bytes

    def generate_aging_pdf(self, report: AgingReport) -> bytes:
        """Genera il PDF del report di anzianità crediti."""
        return self._to_pdf(self.render_aging_html(report))
