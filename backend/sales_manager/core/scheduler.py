"""
Task periodici
Progetto: Sales Manager (Gestione Vendite)

Esecuzione a intervallo fisso con protezione dal rientro: se l'esecuzione
precedente è ancora in corso, il tick viene saltato.
"""

import asyncio
import logging
from typing import Awaitable, Callable, Optional, Set

logger = logging.getLogger(__name__)


class PeriodicTask:
    """
    Esegue una coroutine ogni `interval` secondi.

    Args:
        name: Nome del task (per i log)
        interval: Intervallo in secondi
        func: Coroutine function senza argomenti
        run_immediately: Esegue un primo tick all'avvio
    """

    def __init__(
        self,
        name: str,
        interval: float,
        func: Callable[[], Awaitable[object]],
        run_immediately: bool = False,
    ) -> None:
        self.name = name
        self.interval = interval
        self.func = func
        self.run_immediately = run_immediately
        self._lock = asyncio.Lock()
        self._task: Optional[asyncio.Task] = None
        self._ticks: Set[asyncio.Task] = set()
        self.skipped = 0

    @property
    def running(self) -> bool:
        return self._task is not None and not self._task.done()

    async def tick(self) -> bool:
        """
        Esegue un singolo tick.

        Returns:
            False se il tick è stato saltato perché il precedente è in corso
        """
        if self._lock.locked():
            self.skipped += 1
            logger.warning("Tick '%s' saltato: esecuzione precedente in corso", self.name)
            return False
        async with self._lock:
            try:
                await self.func()
            except asyncio.CancelledError:
                raise
            except Exception:
                # Un tick fallito non deve fermare la schedulazione
                logger.exception("Errore durante il tick '%s'", self.name)
        return True

    def _spawn_tick(self) -> None:
        # Il tick gira in un task separato: un tick lento non sposta l'intervallo
        task = asyncio.create_task(self.tick())
        self._ticks.add(task)
        task.add_done_callback(self._ticks.discard)

    async def _loop(self) -> None:
        if self.run_immediately:
            self._spawn_tick()
        while True:
            await asyncio.sleep(self.interval)
            self._spawn_tick()

    def start(self) -> None:
        if self.running:
            return
        self._task = asyncio.create_task(self._loop(), name=f"periodic:{self.name}")
        logger.info("Task periodico '%s' avviato (ogni %ss)", self.name, self.interval)

    async def stop(self) -> None:
        """Cancella il loop e attende la terminazione."""
        if self._task is None:
            return
        self._task.cancel()
        for task in list(self._ticks):
            task.cancel()
        await asyncio.gather(self._task, *self._ticks, return_exceptions=True)
        self._task = None
        self._ticks.clear()
        logger.info("Task periodico '%s' fermato", self.name)
