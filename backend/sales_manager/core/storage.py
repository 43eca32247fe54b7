"""
Storage chiave/valore
Progetto: Sales Manager (Gestione Vendite)

Interfaccia di persistenza a blob: ogni collezione viene salvata per intero
sotto una chiave prefissata. I fallimenti vengono loggati e riportati come
False/None, mai sollevati.

Backend disponibili:
- InMemoryStorage: dizionario in memoria (test, sviluppo)
- SqlStorage: tabella storage_blobs via SQLAlchemy async
"""

import json
import logging
from abc import ABC, abstractmethod
from typing import Any, Dict, Optional

from sqlalchemy import delete, select
from sqlalchemy.exc import SQLAlchemyError
from sqlalchemy.ext.asyncio import AsyncSession, async_sessionmaker

from sales_manager.models.storage_blob import StorageBlob

logger = logging.getLogger(__name__)

VERSION_KEY = "version"


class StorageBackend(ABC):
    """
    Store chiave/valore asincrono con prefisso sulle chiavi.

    Args:
        prefix: Prefisso applicato a tutte le chiavi
        version: Versione dello schema salvata sotto la chiave `version`
    """

    def __init__(self, prefix: str = "zeralda_sales_", version: str = "1.0.0") -> None:
        self.prefix = prefix
        self.version = version

    def full_key(self, key: str) -> str:
        return f"{self.prefix}{key}"

    async def save(self, key: str, blob: Any) -> bool:
        """Serializza e salva un blob. Restituisce False in caso di errore."""
        try:
            payload = json.dumps(blob, ensure_ascii=False)
        except (TypeError, ValueError) as e:
            logger.error("Errore serializzazione chiave '%s': %s", key, e)
            return False
        return await self._write(self.full_key(key), payload)

    async def load(self, key: str) -> Optional[Any]:
        """Carica un blob. Restituisce None se assente o illeggibile."""
        payload = await self._read(self.full_key(key))
        if payload is None:
            return None
        try:
            return json.loads(payload)
        except ValueError as e:
            logger.error("Blob corrotto per la chiave '%s': %s", key, e)
            return None

    async def remove(self, key: str) -> bool:
        return await self._delete(self.full_key(key))

    async def clear_all(self) -> bool:
        """Rimuove tutte le chiavi con il prefisso configurato."""
        return await self._delete_prefix(self.prefix)

    async def stored_version(self) -> Optional[str]:
        return await self.load(VERSION_KEY)

    async def write_version(self) -> bool:
        return await self.save(VERSION_KEY, self.version)

    # ------------------------------------------------------------
    # Primitive dei backend
    # ------------------------------------------------------------
    @abstractmethod
    async def _write(self, full_key: str, payload: str) -> bool:
        ...

    @abstractmethod
    async def _read(self, full_key: str) -> Optional[str]:
        ...

    @abstractmethod
    async def _delete(self, full_key: str) -> bool:
        ...

    @abstractmethod
    async def _delete_prefix(self, prefix: str) -> bool:
        ...


class InMemoryStorage(StorageBackend):
    """Store volatile basato su dizionario."""

    def __init__(self, prefix: str = "zeralda_sales_", version: str = "1.0.0") -> None:
        super().__init__(prefix, version)
        self._data: Dict[str, str] = {}

    async def _write(self, full_key: str, payload: str) -> bool:
        self._data[full_key] = payload
        return True

    async def _read(self, full_key: str) -> Optional[str]:
        return self._data.get(full_key)

    async def _delete(self, full_key: str) -> bool:
        self._data.pop(full_key, None)
        return True

    async def _delete_prefix(self, prefix: str) -> bool:
        for key in [k for k in self._data if k.startswith(prefix)]:
            del self._data[key]
        return True


class SqlStorage(StorageBackend):
    """
    Store persistente sulla tabella storage_blobs.

    Args:
        session_factory: Factory di sessioni async (vedi core.database)
    """

    def __init__(
        self,
        session_factory: async_sessionmaker[AsyncSession],
        prefix: str = "zeralda_sales_",
        version: str = "1.0.0",
    ) -> None:
        super().__init__(prefix, version)
        self.session_factory = session_factory

    async def _write(self, full_key: str, payload: str) -> bool:
        try:
            async with self.session_factory() as session:
                blob = await session.get(StorageBlob, full_key)
                if blob is None:
                    session.add(StorageBlob(key=full_key, value=payload))
                else:
                    blob.value = payload
                await session.commit()
            return True
        except SQLAlchemyError as e:
            logger.error("Errore salvataggio chiave '%s': %s", full_key, e)
            return False

    async def _read(self, full_key: str) -> Optional[str]:
        try:
            async with self.session_factory() as session:
                result = await session.execute(
                    select(StorageBlob.value).where(StorageBlob.key == full_key)
                )
                return result.scalar_one_or_none()
        except SQLAlchemyError as e:
            logger.error("Errore lettura chiave '%s': %s", full_key, e)
            return None

    async def _delete(self, full_key: str) -> bool:
        try:
            async with self.session_factory() as session:
                await session.execute(delete(StorageBlob).where(StorageBlob.key == full_key))
                await session.commit()
            return True
        except SQLAlchemyError as e:
            logger.error("Errore rimozione chiave '%s': %s", full_key, e)
            return False

    async def _delete_prefix(self, prefix: str) -> bool:
        try:
            async with self.session_factory() as session:
                await session.execute(
                    delete(StorageBlob).where(StorageBlob.key.startswith(prefix, autoescape=True))
                )
                await session.commit()
            return True
        except SQLAlchemyError as e:
            logger.error("Errore pulizia chiavi con prefisso '%s': %s", prefix, e)
            return False
