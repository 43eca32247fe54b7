"""
Configurazione applicazione - Settings
Progetto: Sales Manager (Gestione Vendite)

Definisce le impostazioni dell'applicazione caricate da variabili d'ambiente.
"""


from __future__ import annotations
import logging
from decimal import Decimal
from functools import lru_cache
from typing import Literal

from pydantic import Field, field_validator, model_validator
from pydantic_settings import BaseSettings, SettingsConfigDict


class Settings(BaseSettings):
    """
    Configurazione applicazione.

    Carica le impostazioni da variabili d'ambiente.
    Valori di default adatti per sviluppo locale.

    Per ottenere un'istanza singleton:
    - In FastAPI: usa `Depends(get_settings)` per Dependency Injection
    - Altrove: usa `get_settings()` direttamente
    """

    model_config = SettingsConfigDict(
        env_file=".env",
        env_file_encoding="utf-8",
        case_sensitive=False,
        extra="ignore",
        frozen=True,
    )

    # ------------------------------------------------------------
    # Configurazione Database
    # ------------------------------------------------------------
    database_url: str = Field(
        default="sqlite+aiosqlite:///./sales_manager.db",
        description="URL connessione database (formato async)",
    )

    db_pool_size: int = Field(
        default=5,
        description="Numero connessioni permanenti nel pool",
    )

    db_max_overflow: int = Field(
        default=10,
        description="Connessioni extra temporanee oltre pool_size",
    )

    # ------------------------------------------------------------
    # Configurazione Applicazione
    # ------------------------------------------------------------
    app_name: str = Field(
        default="Sales Manager - Zeralda ERP",
        description="Nome applicazione",
    )

    app_version: str = Field(
        default="1.0.0",
        description="Versione applicazione",
    )

    app_env: Literal["development", "production", "testing"] = Field(
        default="development",
        description="Ambiente di esecuzione (development | production | testing)",
    )

    debug: bool = Field(
        default=False,
        description="Modalità debug",
    )

    backend_port: int = Field(
        default=8000,
        description="Porta backend",
    )

    # ------------------------------------------------------------
    # Configurazione CORS
    # ------------------------------------------------------------
    cors_origins: list[str] = Field(
        default_factory=lambda: [
            "http://localhost:3000",
            "http://127.0.0.1:3000",
        ],
        description="Origini CORS permesse",
    )

    # ------------------------------------------------------------
    # Configurazione Logging
    # ------------------------------------------------------------
    log_level: Literal["DEBUG", "INFO", "WARNING", "ERROR", "CRITICAL"] = Field(
        default="INFO",
        description="Livello logging",
    )

    # ------------------------------------------------------------
    # Configurazione Vendite
    # ------------------------------------------------------------
    tax_rate: Decimal = Field(
        default=Decimal("0.19"),
        ge=Decimal("0"),
        lt=Decimal("1"),
        description="Aliquota IVA come frazione (0.19 = 19%)",
    )

    default_currency: str = Field(
        default="DZD",
        min_length=3,
        max_length=3,
        description="Valuta predefinita (codice ISO 4217)",
    )

    payment_terms_days: int = Field(
        default=30,
        ge=0,
        description="Giorni di scadenza predefiniti per le fatture",
    )

    quote_validity_days: int = Field(
        default=30,
        ge=1,
        description="Giorni di validità predefiniti per i preventivi",
    )

    invoice_company_name: str = Field(
        default="Zeralda ERP",
        description="Ragione sociale stampata su fatture e report",
    )

    # ------------------------------------------------------------
    # Configurazione Storage (blob chiave/valore)
    # ------------------------------------------------------------
    storage_backend: Literal["memory", "sql"] = Field(
        default="sql",
        description="Backend di persistenza: memory (volatile) o sql (tabella storage_blobs)",
    )

    storage_prefix: str = Field(
        default="zeralda_sales_",
        description="Prefisso applicato a tutte le chiavi",
    )

    storage_version: str = Field(
        default="1.0.0",
        description="Versione dello schema dei blob salvati",
    )

    # ------------------------------------------------------------
    # Configurazione Gateway di Pagamento (simulati)
    # ------------------------------------------------------------
    stripe_enabled: bool = Field(default=True, description="Abilita il gateway Stripe")

    stripe_publishable_key: str = Field(
        default="pk_test_placeholder",
        description="Chiave pubblica Stripe",
    )

    paypal_enabled: bool = Field(default=True, description="Abilita il gateway PayPal")

    paypal_client_id: str = Field(default="", description="Client ID PayPal")

    paypal_mode: Literal["sandbox", "live"] = Field(
        default="sandbox",
        description="Modalità PayPal",
    )

    gateway_latency_seconds: float = Field(
        default=0.5,
        ge=0,
        description="Latenza simulata delle chiamate ai gateway",
    )

    # ------------------------------------------------------------
    # Configurazione Notifiche
    # ------------------------------------------------------------
    email_enabled: bool = Field(default=True, description="Abilita invio email")

    email_from: str = Field(
        default="noreply@zeralda-erp.com",
        description="Mittente delle email",
    )

    whatsapp_enabled: bool = Field(default=False, description="Abilita invio WhatsApp")

    notification_latency_seconds: float = Field(
        default=0.5,
        ge=0,
        description="Latenza simulata della consegna notifiche",
    )

    # ------------------------------------------------------------
    # Configurazione Promemoria
    # ------------------------------------------------------------
    reminder_days_before_due: list[int] = Field(
        default_factory=lambda: [7, 3, 1],
        description="Giorni prima della scadenza in cui inviare promemoria",
    )

    reminder_days_after_due: list[int] = Field(
        default_factory=lambda: [1, 7, 14, 30],
        description="Giorni dopo la scadenza in cui inviare promemoria",
    )

    reminders_auto_send: bool = Field(
        default=False,
        description="Abilita l'invio automatico dei promemoria",
    )

    reminder_check_interval: float = Field(
        default=3600,
        gt=0,
        description="Intervallo (secondi) del controllo automatico promemoria",
    )

    # ------------------------------------------------------------
    # Configurazione Report e Dashboard
    # ------------------------------------------------------------
    aging_bucket_bounds: list[int] = Field(
        default_factory=lambda: [30, 60, 90],
        description="Limiti superiori (giorni) delle fasce di anzianità crediti",
    )

    dashboard_refresh_interval: float = Field(
        default=60,
        gt=0,
        description="Intervallo (secondi) di aggiornamento dashboard",
    )

    dashboard_months: int = Field(
        default=6,
        ge=1,
        le=36,
        description="Mesi mostrati nella serie mensile della dashboard",
    )

    # ------------------------------------------------------------
    # Configurazione Ricerca
    # ------------------------------------------------------------
    search_min_length: int = Field(
        default=2,
        ge=0,
        description="Lunghezza minima della query di ricerca",
    )

    results_per_page: int = Field(
        default=10,
        ge=1,
        description="Risultati per pagina",
    )

    @property
    def is_production(self) -> bool:
        """Verifica se l'applicazione è in produzione."""
        return self.app_env == "production"

    @property
    def is_development(self) -> bool:
        """Verifica se l'applicazione è in sviluppo."""
        return self.app_env == "development"

    # ------------------------------------------------------------
    # Validatori
    # ------------------------------------------------------------

    @field_validator("tax_rate", mode="before")
    @classmethod
    def convert_decimal_from_string(cls, v) -> Decimal:
        """Gestisce input con virgola convertendolo in punto."""
        if v is None:
            return v
        if isinstance(v, str):
            v = v.replace(",", ".")
        return Decimal(str(v))

    @field_validator("default_currency")
    @classmethod
    def validate_currency(cls, v: str) -> str:
        """La valuta deve essere un codice alfabetico."""
        if not v.isalpha():
            raise ValueError("La valuta deve essere un codice ISO di 3 lettere")
        return v.upper()

    @field_validator("reminder_days_before_due", "reminder_days_after_due")
    @classmethod
    def validate_reminder_offsets(cls, v: list[int]) -> list[int]:
        """
        Valida gli offset dei promemoria.

        Devono essere positivi e senza duplicati; vengono normalizzati
        in ordine decrescente.
        """
        if any(day <= 0 for day in v):
            raise ValueError("Gli offset dei promemoria devono essere positivi")
        if len(set(v)) != len(v):
            raise ValueError("Gli offset dei promemoria non devono contenere duplicati")
        return sorted(v, reverse=True)

    @field_validator("aging_bucket_bounds")
    @classmethod
    def validate_aging_bounds(cls, v: list[int]) -> list[int]:
        """I limiti delle fasce devono essere positivi e strettamente crescenti."""
        if not v:
            raise ValueError("Serve almeno un limite per le fasce di anzianità")
        if v[0] <= 0:
            raise ValueError("I limiti delle fasce devono essere positivi")
        for lower, upper in zip(v, v[1:]):
            if upper <= lower:
                raise ValueError(
                    "I limiti delle fasce devono essere strettamente crescenti "
                    f"({lower} >= {upper})"
                )
        return v

    @field_validator("storage_prefix")
    @classmethod
    def validate_storage_prefix(cls, v: str) -> str:
        """Emette warning se il prefisso è vuoto."""
        if not v:
            logging.getLogger(__name__).warning(
                "storage_prefix vuoto: clear_all rimuoverà tutte le chiavi dello store"
            )
        return v

    @model_validator(mode="after")
    def validate_production_settings(self) -> "Settings":
        """Validazione settings obbligatori in produzione."""
        if self.app_env != "production":
            return self

        errors = []

        if self.debug:
            errors.append("- debug: deve essere False in produzione")

        if self.storage_backend == "memory":
            errors.append("- storage_backend: 'memory' non persiste i dati in produzione")

        for origin in self.cors_origins:
            if "localhost" in origin or "127.0.0.1" in origin:
                errors.append(
                    f"- cors_origins: l'origine '{origin}' non è consentita in produzione"
                )

        if errors:
            error_msg = "Errore di configurazione in produzione:\n" + "\n".join(errors)
            raise ValueError(error_msg)

        return self


@lru_cache()
def get_settings() -> Settings:
    """
    Restituisce l'istanza singleton delle impostazioni.

    Usa lru_cache per garantire che Settings() venga istanziato
    una sola volta e riutilizzato in tutta l'applicazione.
    In fase di test, usa get_settings.cache_clear() per resettare.

    Returns:
        Settings: Istanza delle impostazioni applicazione
    """
    return Settings()


# Istanza singleton delle impostazioni per uso diretto in modulo
settings = get_settings()
