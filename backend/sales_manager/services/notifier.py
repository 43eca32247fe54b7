"""
Canale di notifica
Progetto: Sales Manager (Gestione Vendite)

Collaboratore che consegna i promemoria. Nessun provider reale:
LoggingNotifier simula la consegna scrivendo nei log.
"""

import asyncio
import logging
from abc import ABC, abstractmethod

from sales_manager.models import Reminder

logger = logging.getLogger(__name__)


class Notifier(ABC):
    """Interfaccia di consegna dei promemoria."""

    @abstractmethod
    async def deliver(self, reminder: Reminder) -> bool:
        """Consegna il promemoria; False se la consegna non è riuscita."""


class LoggingNotifier(Notifier):
    """
    Consegna simulata con latenza configurabile.

    Args:
        latency: Secondi di attesa prima della "consegna"
    """

    def __init__(self, latency: float = 0.0) -> None:
        self.latency = latency
        self.delivered = 0

    async def deliver(self, reminder: Reminder) -> bool:
        if self.latency:
            await asyncio.sleep(self.latency)
        self.delivered += 1
        logger.info(
            "Promemoria %s consegnato via %s (fattura %s)",
            reminder.id,
            reminder.channel.value,
            reminder.invoice_number,
        )
        return True
