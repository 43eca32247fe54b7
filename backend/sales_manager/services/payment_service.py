"""
Service Layer per i Pagamenti
Progetto: Sales Manager (Gestione Vendite)

Applicazione dei pagamenti alle fatture, registro pagamenti globale,
storico e statistiche.
"""

import logging
from datetime import datetime
from decimal import Decimal
from typing import Dict, List, Optional

from sales_manager.core.dates import ensure_aware, resolve_now, start_of_month
from sales_manager.core.exceptions import (
    ConflictError,
    InvalidPaymentMethodError,
    OverpaymentError,
    PaymentGatewayError,
    ValidationError,
)
from sales_manager.core.money import sum_money, to_money
from sales_manager.core.results import operation
from sales_manager.models import PaymentMethod, PaymentRecord
from sales_manager.schemas.payment import MethodStatistics, PaymentReceipt, PaymentStatistics
from sales_manager.services.payment_gateway import PaymentGateway, validate_gateways
from sales_manager.services.repository import SalesRepository

# Logger per questo modulo
logger = logging.getLogger(__name__)


def parse_payment_method(method: str) -> PaymentMethod:
    """
    Converte una stringa in PaymentMethod.

    Raises:
        InvalidPaymentMethodError: Metodo non riconosciuto
    """
    try:
        return PaymentMethod(method)
    except ValueError:
        raise InvalidPaymentMethodError(
            f"Metodo di pagamento '{method}' non valido",
            extra={"allowed": [m.value for m in PaymentMethod]},
        ) from None


class PaymentService:
    """
    Service per l'incasso delle fatture.

    Ogni pagamento su una fattura è serializzato dal lock per fattura del
    repository, mantenuto sia durante la chiamata al gateway sia durante
    la mutazione.

    Args:
        repository: Repository delle collezioni
        gateways: Gateway per ciascun metodo di pagamento
    """

    def __init__(self, repository: SalesRepository, gateways: Dict[PaymentMethod, PaymentGateway]) -> None:
        validate_gateways(gateways)
        self.repository = repository
        self.gateways = gateways

    @operation("process_payment")
    async def process_payment(
        self,
        invoice_id: str,
        method: str,
        amount: Decimal,
        expected_version: Optional[int] = None,
        now: Optional[datetime] = None,
    ) -> PaymentReceipt:
        """
        Incassa un pagamento su una fattura.

        Steps:
        1. Valida il metodo e acquisisce il lock della fattura
        2. Verifica versione attesa e importo (prima del gateway)
        3. Addebita tramite il gateway del metodo
        4. Applica il pagamento e registra la voce nel registro pagamenti
        5. Persiste fatture e registro

        Args:
            invoice_id: ID della fattura
            method: Metodo di pagamento (stringa)
            amount: Importo
            expected_version: Versione della fattura letta dal chiamante
            now: Istante del pagamento (default: adesso)

        Returns:
            PaymentReceipt: Fattura aggiornata, transazione e voce di registro

        Raises:
            NotFoundError: Fattura non trovata
            InvalidPaymentMethodError: Metodo sconosciuto
            ConflictError: Versione cambiata dopo la lettura
            ValidationError: Importo non positivo
            OverpaymentError: Importo superiore al residuo
            PaymentGatewayError: Addebito rifiutato dal gateway
        """
        payment_method = parse_payment_method(method)
        amount = to_money(amount)

        async with self.repository.invoice_lock(invoice_id):
            invoice = self.repository.get_invoice(invoice_id)
            if expected_version is not None and expected_version != invoice.version:
                raise ConflictError(
                    f"La fattura {invoice.number} è stata modificata "
                    f"(versione {invoice.version}, attesa {expected_version})",
                    extra={"current_version": invoice.version},
                )
            if amount <= 0:
                raise ValidationError("L'importo del pagamento deve essere positivo")
            if amount > invoice.remaining_amount:
                raise OverpaymentError(
                    f"L'importo {amount} supera il residuo {invoice.remaining_amount} "
                    f"della fattura {invoice.number}",
                    extra={"remaining_amount": str(invoice.remaining_amount)},
                )

            result = await self.gateways[payment_method].charge(invoice, amount)
            if not result.success:
                raise PaymentGatewayError(result.error or PaymentGatewayError.default_detail)

            now = resolve_now(now)
            transaction = invoice.apply_payment(amount, payment_method, result.transaction_id, now)
            record = PaymentRecord(
                id=transaction.id,
                invoice_id=invoice.id,
                invoice_number=invoice.number,
                customer_id=invoice.customer.id,
                customer_name=invoice.customer.name,
                amount=transaction.amount,
                method=payment_method,
                timestamp=now,
            )
            self.repository.payments.append(record)
            await self.repository.save("invoices", "payments")

        logger.info(
            "Pagamento %s di %s registrato sulla fattura %s (%s)",
            transaction.id,
            amount,
            invoice.number,
            invoice.payment_status.value,
        )
        return PaymentReceipt(invoice=invoice, transaction=transaction, record=record)

    def get_payment_history(
        self,
        start_date: Optional[datetime] = None,
        end_date: Optional[datetime] = None,
        method: Optional[str] = None,
        customer_id: Optional[str] = None,
    ) -> List[PaymentRecord]:
        """
        Storico del registro pagamenti, dal più recente.

        Raises:
            InvalidPaymentMethodError: Filtro metodo non valido
        """
        payment_method = parse_payment_method(method) if method else None
        start_date = ensure_aware(start_date) if start_date is not None else None
        end_date = ensure_aware(end_date) if end_date is not None else None
        records = [
            r
            for r in self.repository.payments
            if (start_date is None or r.timestamp >= start_date)
            and (end_date is None or r.timestamp <= end_date)
            and (payment_method is None or r.method == payment_method)
            and (customer_id is None or r.customer_id == customer_id)
        ]
        return sorted(records, key=lambda r: r.timestamp, reverse=True)

    def get_payment_statistics(self, now: Optional[datetime] = None) -> PaymentStatistics:
        """Totali del registro pagamenti, per metodo e per il mese corrente."""
        now = resolve_now(now)
        month_start = start_of_month(now)
        records = self.repository.payments

        by_method = {}
        for payment_method in PaymentMethod:
            method_records = [r for r in records if r.method == payment_method]
            by_method[payment_method.value] = MethodStatistics(
                count=len(method_records),
                amount=sum_money(r.amount for r in method_records),
            )

        this_month = [r for r in records if month_start <= r.timestamp <= now]
        return PaymentStatistics(
            total_count=len(records),
            total_amount=sum_money(r.amount for r in records),
            by_method=by_method,
            this_month_count=len(this_month),
            this_month_amount=sum_money(r.amount for r in this_month),
        )
