"""
Gateway di pagamento
Progetto: Sales Manager (Gestione Vendite)

Collaboratori di addebito per ciascun metodo di pagamento. Contanti e
bonifico vengono registrati direttamente; Stripe e PayPal sono simulati
(nessun addebito reale) e rifiutano l'operazione se disabilitati.
"""

import asyncio
import logging
import time
import uuid
from abc import ABC, abstractmethod
from datetime import datetime
from decimal import Decimal
from typing import Dict, Optional

from pydantic import BaseModel

from sales_manager.core.config import Settings
from sales_manager.models import Invoice, PaymentMethod

logger = logging.getLogger(__name__)


def generate_transaction_id(method: PaymentMethod, now: Optional[datetime] = None) -> str:
    """
    ID transazione: <PREFISSO>-<epoch ms>-<suffisso uuid4>.

    Example:
        CASH-1717171717171-3f2a9c1b7d4e
    """
    epoch_ms = int(now.timestamp() * 1000) if now is not None else int(time.time() * 1000)
    return f"{method.transaction_prefix}-{epoch_ms}-{uuid.uuid4().hex[:12]}"


class GatewayResult(BaseModel):
    """Esito di un addebito."""

    success: bool
    transaction_id: Optional[str] = None
    error: Optional[str] = None


class PaymentGateway(ABC):
    """Interfaccia di un gateway di addebito."""

    method: PaymentMethod

    @abstractmethod
    async def charge(self, invoice: Invoice, amount: Decimal) -> GatewayResult:
        ...


class CashGateway(PaymentGateway):
    """Incasso in contanti: sempre riuscito."""

    method = PaymentMethod.CASH

    async def charge(self, invoice: Invoice, amount: Decimal) -> GatewayResult:
        return GatewayResult(success=True, transaction_id=generate_transaction_id(self.method))


class BankTransferGateway(PaymentGateway):
    """Bonifico registrato manualmente: sempre riuscito."""

    method = PaymentMethod.BANK_TRANSFER

    async def charge(self, invoice: Invoice, amount: Decimal) -> GatewayResult:
        return GatewayResult(success=True, transaction_id=generate_transaction_id(self.method))


class SimulatedCardGateway(PaymentGateway):
    """
    Gateway esterno simulato.

    Args:
        enabled: Se False ogni addebito viene rifiutato
        credential: Chiave/ID cliente del provider
        latency: Latenza simulata in secondi
    """

    provider_name = "gateway"

    def __init__(self, enabled: bool, credential: str, latency: float = 0.0) -> None:
        self.enabled = enabled
        self.credential = credential
        self.latency = latency

    @property
    def environment(self) -> str:
        """Ambiente del provider dedotto dalla chiave: "live" o "test"."""
        return "live" if "_live_" in self.credential else "test"

    async def charge(self, invoice: Invoice, amount: Decimal) -> GatewayResult:
        if not self.enabled:
            logger.warning("%s disabilitato: addebito rifiutato per %s", self.provider_name, invoice.number)
            return GatewayResult(success=False, error=f"{self.provider_name} non è abilitato")
        if self.latency:
            await asyncio.sleep(self.latency)
        transaction_id = generate_transaction_id(self.method)
        logger.info(
            "Addebito %s simulato (%s): %s su fattura %s (%s)",
            self.provider_name,
            self.environment,
            amount,
            invoice.number,
            transaction_id,
        )
        return GatewayResult(success=True, transaction_id=transaction_id)


class StripeGateway(SimulatedCardGateway):
    method = PaymentMethod.STRIPE
    provider_name = "Stripe"


class PayPalGateway(SimulatedCardGateway):
    method = PaymentMethod.PAYPAL
    provider_name = "PayPal"

    def __init__(self, enabled: bool, credential: str, mode: str = "sandbox", latency: float = 0.0) -> None:
        super().__init__(enabled, credential, latency)
        self.mode = mode

    @property
    def environment(self) -> str:
        return self.mode


def build_gateways(settings: Settings) -> Dict[PaymentMethod, PaymentGateway]:
    """
    Mappa metodo -> gateway costruita dalla configurazione.

    Raises:
        RuntimeError: Se un metodo di pagamento non ha un gateway
    """
    gateways: Dict[PaymentMethod, PaymentGateway] = {
        PaymentMethod.CASH: CashGateway(),
        PaymentMethod.BANK_TRANSFER: BankTransferGateway(),
        PaymentMethod.STRIPE: StripeGateway(
            enabled=settings.stripe_enabled,
            credential=settings.stripe_publishable_key,
            latency=settings.gateway_latency_seconds,
        ),
        PaymentMethod.PAYPAL: PayPalGateway(
            enabled=settings.paypal_enabled,
            credential=settings.paypal_client_id,
            mode=settings.paypal_mode,
            latency=settings.gateway_latency_seconds,
        ),
    }
    validate_gateways(gateways)
    return gateways


def validate_gateways(gateways: Dict[PaymentMethod, PaymentGateway]) -> None:
    missing = [method.value for method in PaymentMethod if method not in gateways]
    if missing:
        raise RuntimeError(f"Metodi di pagamento senza gateway: {', '.join(missing)}")
