"""
Main Entry Point - FastAPI Application
Progetto: Sales Manager (Gestione Vendite)

Configura l'applicazione FastAPI con middleware, router, lifecycle
e task periodici (promemoria automatici, scadenza preventivi, dashboard).
"""

import logging
from contextlib import asynccontextmanager
from typing import Optional

from fastapi import FastAPI, Request
from fastapi.middleware.cors import CORSMiddleware
from fastapi.responses import JSONResponse

from sales_manager.api.v1 import api_v1_router
from sales_manager.core.config import Settings, settings as default_settings
from sales_manager.core.database import AsyncSessionLocal, close_db, init_db
from sales_manager.core.exceptions import AppException
from sales_manager.core.scheduler import PeriodicTask
from sales_manager.core.storage import InMemoryStorage, SqlStorage, StorageBackend
from sales_manager.services.container import ServiceContainer
from sales_manager.services.repository import SalesRepository

# ------------------------------------------------------------
# Configurazione Logging
# ------------------------------------------------------------
logging.basicConfig(
    level=default_settings.log_level,
    format="%(asctime)s - %(name)s - %(levelname)s - %(message)s",
)
logger = logging.getLogger(__name__)


def build_storage(settings: Settings) -> StorageBackend:
    """Backend di persistenza scelto in configurazione."""
    if settings.storage_backend == "sql":
        return SqlStorage(AsyncSessionLocal, settings.storage_prefix, settings.storage_version)
    return InMemoryStorage(settings.storage_prefix, settings.storage_version)


def build_periodic_tasks(container: ServiceContainer) -> list[PeriodicTask]:
    settings = container.settings
    return [
        PeriodicTask("promemoria", settings.reminder_check_interval, container.reminders.tick),
        PeriodicTask("scadenza-preventivi", settings.reminder_check_interval, container.quotes.expire_quotes),
        PeriodicTask(
            "dashboard",
            settings.dashboard_refresh_interval,
            container.dashboard.tick,
            run_immediately=True,
        ),
    ]


# ------------------------------------------------------------
# Exception Handlers
# ------------------------------------------------------------
async def app_exception_handler(request: Request, exc: AppException) -> JSONResponse:
    """
    Gestore per tutte le eccezioni di dominio.

    Lo status HTTP viene dalla classe dell'eccezione
    (404 NotFound, 409 Conflict, 422 Validation, 402 Gateway).
    """
    content = {"detail": exc.detail, "error_code": exc.error_code}
    if exc.extra:
        content["extra"] = exc.extra
    return JSONResponse(status_code=exc.status_code, content=content)


async def generic_exception_handler(request: Request, exc: Exception) -> JSONResponse:
    """
    Gestore generico per tutte le eccezioni non catturate.

    Converte l'eccezione in risposta HTTP 500 e logga l'errore.
    """
    logger.error("Eccezione non gestita: %s", exc, exc_info=True)
    return JSONResponse(
        status_code=500,
        content={"detail": "Errore interno del server"},
    )


def create_app(settings: Optional[Settings] = None) -> FastAPI:
    """
    Crea l'applicazione FastAPI.

    Args:
        settings: Configurazione (default: quella caricata dall'ambiente)
    """
    settings = settings or default_settings

    # ------------------------------------------------------------
    # Lifespan Handler
    # ------------------------------------------------------------
    @asynccontextmanager
    async def lifespan(app: FastAPI):
        """
        Gestisce il ciclo di vita dell'applicazione.

        - Startup: database, caricamento collezioni, service e task periodici
        - Shutdown: arresto task, consegne in corso e connessioni database
        """
        logger.info("Avvio %s v%s", settings.app_name, settings.app_version)
        if settings.storage_backend == "sql":
            await init_db()

        repository = SalesRepository(build_storage(settings))
        await repository.load()
        container = ServiceContainer(repository, settings)
        app.state.container = container

        tasks = build_periodic_tasks(container)
        for task in tasks:
            task.start()
        logger.info("Applicazione avviata con successo")

        yield

        logger.info("Arresto applicazione in corso...")
        for task in tasks:
            await task.stop()
        await container.reminders.shutdown()
        if settings.storage_backend == "sql":
            await close_db()
        logger.info("Applicazione arrestata")

    app = FastAPI(
        title=settings.app_name,
        description="Gestione vendite, fatturazione e incassi - Backend API",
        version=settings.app_version,
        lifespan=lifespan,
        docs_url="/docs" if settings.debug else None,
        redoc_url="/redoc" if settings.debug else None,
    )

    # ------------------------------------------------------------
    # Middleware CORS
    # ------------------------------------------------------------
    app.add_middleware(
        CORSMiddleware,
        allow_origins=settings.cors_origins,
        allow_credentials=True,
        allow_methods=["*"],
        allow_headers=["*"],
    )

    app.add_exception_handler(AppException, app_exception_handler)
    app.add_exception_handler(Exception, generic_exception_handler)

    # ------------------------------------------------------------
    # Endpoints
    # ------------------------------------------------------------
    @app.get(
        "/health",
        name="Health Check",
        summary="Controlla lo stato dell'applicazione",
        tags=["System"],
    )
    async def health_check() -> dict[str, str]:
        """
        Endpoint per il controllo dello stato di salute.

        Returns:
            dict: Stato dell'applicazione
        """
        return {
            "status": "healthy",
            "app": settings.app_name,
            "version": settings.app_version,
            "environment": settings.app_env,
        }

    app.include_router(api_v1_router)
    return app


app = create_app()
