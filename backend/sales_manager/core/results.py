"""
Risultati delle operazioni
Progetto: Sales Manager (Gestione Vendite)

Le operazioni CRUD e di pagamento restituiscono un OperationResult
(flag di successo + payload, oppure flag di successo + errore) invece di
sollevare eccezioni verso il chiamante. Il decoratore `operation` segna il
confine: le AppException sollevate all'interno vengono loggate e convertite
in un risultato fallito. Le eccezioni inattese NON vengono catturate.
"""

import functools
import logging
from typing import Any, Awaitable, Callable, Generic, Optional, TypeVar

from pydantic import BaseModel, ConfigDict, Field

from sales_manager.core.exceptions import AppException

logger = logging.getLogger(__name__)

T = TypeVar("T")


class OperationResult(BaseModel, Generic[T]):
    """
    Esito di un'operazione di dominio.

    Attributes:
        success: True se l'operazione è andata a buon fine
        data: Payload dell'operazione (solo in caso di successo)
        error: Messaggio di errore leggibile (solo in caso di fallimento)
        error_code: Codice errore dell'eccezione catturata
        exception: Eccezione originale, esclusa dalla serializzazione
    """

    model_config = ConfigDict(arbitrary_types_allowed=True)

    success: bool
    data: Optional[T] = None
    error: Optional[str] = None
    error_code: Optional[str] = None
    exception: Optional[AppException] = Field(default=None, exclude=True, repr=False)

    @classmethod
    def ok(cls, data: Any = None) -> "OperationResult":
        """Costruisce un risultato di successo."""
        return cls(success=True, data=data)

    @classmethod
    def fail(cls, exc: AppException) -> "OperationResult":
        """Costruisce un risultato fallito a partire da un'eccezione di dominio."""
        return cls(
            success=False,
            error=exc.detail,
            error_code=exc.error_code,
            exception=exc,
        )

    def unwrap(self) -> Any:
        """
        Restituisce il payload o rilancia l'eccezione catturata.

        Usato dal layer API, responsabile della messaggistica verso l'utente:
        l'eccezione rilanciata viene resa dagli exception handler di FastAPI.
        """
        if self.success:
            return self.data
        if self.exception is not None:
            raise self.exception
        raise AppException(self.error, self.error_code)


def operation(name: str) -> Callable:
    """
    Decoratore per metodi async che rappresentano un'operazione di dominio.

    Args:
        name: Nome dell'operazione, usato nei log

    Returns:
        Il metodo decorato, che restituisce sempre un OperationResult
    """

    def decorator(func: Callable[..., Awaitable[Any]]) -> Callable[..., Awaitable[OperationResult]]:
        @functools.wraps(func)
        async def wrapper(*args, **kwargs) -> OperationResult:
            try:
                data = await func(*args, **kwargs)
            except AppException as exc:
                logger.warning("Operazione '%s' fallita: %s (%s)", name, exc.detail, exc.error_code)
                return OperationResult.fail(exc)
            return OperationResult.ok(data)

        return wrapper

    return decorator
