"""
Configurazione Database - SQLAlchemy 2.0 Async
Progetto: Sales Manager (Gestione Vendite)

Definisce engine e session factory usati dal backend di storage SQL.
"""

import logging
from typing import Any, Dict

from sqlalchemy import text
from sqlalchemy.ext.asyncio import (
    AsyncEngine,
    AsyncSession,
    async_sessionmaker,
    create_async_engine,
)

from sales_manager.core.config import settings

# Logger per questo modulo
logger = logging.getLogger(__name__)


def build_engine(database_url: str, echo: bool = False) -> AsyncEngine:
    """
    Crea un engine async per l'URL indicato.

    SQLite non supporta le opzioni del pool a dimensione fissa:
    pool_size/max_overflow vengono passati solo agli altri dialetti.

    Args:
        database_url: URL connessione (formato async)
        echo: Log delle query

    Returns:
        AsyncEngine configurato
    """
    options: Dict[str, Any] = {"echo": echo, "pool_pre_ping": True}
    if not database_url.startswith("sqlite"):
        options["pool_size"] = settings.db_pool_size
        options["max_overflow"] = settings.db_max_overflow
    return create_async_engine(database_url, **options)


def build_session_factory(bind: AsyncEngine) -> async_sessionmaker[AsyncSession]:
    return async_sessionmaker(
        bind=bind,
        class_=AsyncSession,
        expire_on_commit=False,
        autoflush=False,
    )


# ------------------------------------------------------------
# Engine Async SQLAlchemy 2.0
# ------------------------------------------------------------
engine: AsyncEngine = build_engine(settings.database_url, echo=settings.debug)


# ------------------------------------------------------------
# Session Factory
# ------------------------------------------------------------
AsyncSessionLocal = build_session_factory(engine)


async def init_db(bind: AsyncEngine = engine) -> None:
    """
    Inizializza il database.

    Verifica la connessione e crea la tabella dei blob se assente.
    """
    # Import locale: registra la tabella sul metadata
    from sales_manager.models import Base

    try:
        async with bind.begin() as conn:
            await conn.execute(text("SELECT 1"))
            await conn.run_sync(Base.metadata.create_all)
        logger.info("Connessione al database stabilita con successo")
    except Exception as e:
        logger.error("Errore connessione database: %s", e)
        raise


async def close_db(bind: AsyncEngine = engine) -> None:
    """
    Chiude le connessioni al database.

    Da chiamare durante lo shutdown dell'applicazione.
    """
    await bind.dispose()
    logger.info("Connessioni database chiuse")
