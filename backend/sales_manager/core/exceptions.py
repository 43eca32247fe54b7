"""
Eccezioni Custom per l'applicazione.
Progetto: Sales Manager (Gestione Vendite)

Definisce eccezioni specifiche del dominio per una gestione
centralizzata degli errori.

NOTA: BusinessValidationError è volutamente distinta da pydantic.ValidationError.
- pydantic.ValidationError: errori di formato/tipo nei dati di input (gestiti da FastAPI → 422)
- BusinessValidationError: violazioni delle regole di business logic (gestiti dal nostro handler → 422)

Le operazioni CRUD e di pagamento non propagano queste eccezioni al chiamante:
vengono catturate al confine dell'operazione e restituite in un OperationResult
(vedi sales_manager.core.results).
"""

from typing import Any, Dict, Optional

__all__ = [
    "AppException",
    "NotFoundError",
    "BusinessValidationError",
    "ValidationError",       # alias di BusinessValidationError
    "OverpaymentError",
    "InvalidPaymentMethodError",
    "ConflictError",
    "InvoiceAlreadyPaidError",
    "PaymentGatewayError",
]


class AppException(Exception):
    """
    Base exception per l'applicazione.

    Tutte le eccezioni custom ereditano da questa classe base.

    Attributes:
        status_code: HTTP status code da restituire al client
        error_code: Identificativo univoco dell'errore per il frontend
        detail: Messaggio di errore leggibile per l'utente
        extra: Dizionario con dati aggiuntivi per il frontend
    """

    # Default values - overridden in subclasses
    status_code: int = 500
    error_code: str = "INTERNAL_SERVER_ERROR"
    default_detail: str = "Errore interno"

    def __init__(
        self,
        detail: Optional[str] = None,
        error_code: Optional[str] = None,
        extra: Optional[Dict[str, Any]] = None,
    ) -> None:
        """
        Inizializza l'eccezione.

        Args:
            detail: Messaggio di errore dettagliato (default: quello di classe)
            error_code: Identificativo univoco (default: quello di classe)
            extra: Dati aggiuntivi da passare al frontend (default: None)
        """
        self.detail = detail if detail is not None else self.default_detail
        self.error_code = error_code if error_code is not None else self.error_code
        self.extra = extra
        self.status_code = self.__class__.status_code
        super().__init__(self.detail)


class NotFoundError(AppException):
    """
    Eccezione sollevata quando una risorsa non viene trovata.

    Utilizzata per id di fattura, cliente, preventivo o dipendente sconosciuti.
    """

    status_code: int = 404
    error_code: str = "RESOURCE_NOT_FOUND"
    default_detail: str = "Risorsa non trovata"


class BusinessValidationError(ValueError, AppException):
    """
    Eccezione sollevata per violazioni delle regole di business logic.

    Eredita da ValueError per essere catturata dai validatori Pydantic.

    Esempi di utilizzo:
        - "Il cliente è obbligatorio"
        - "La fattura deve contenere almeno una riga"
        - "L'importo del pagamento deve essere positivo"
    """

    status_code: int = 422
    error_code: str = "BUSINESS_VALIDATION_ERROR"
    default_detail: str = "Validazione dati fallita"

    def __init__(
        self,
        detail: Optional[str] = None,
        error_code: Optional[str] = None,
        extra: Optional[Dict[str, Any]] = None,
    ) -> None:
        # Chiama AppException.__init__ direttamente per evitare ValueError
        AppException.__init__(self, detail, error_code, extra)


# Alias per compatibilità
ValidationError = BusinessValidationError


class OverpaymentError(BusinessValidationError):
    """
    Eccezione sollevata quando un pagamento supera il residuo della fattura.

    La fattura resta invariata.
    """

    error_code: str = "OVERPAYMENT"
    default_detail: str = "L'importo supera il residuo da pagare"


class InvalidPaymentMethodError(BusinessValidationError):
    """Eccezione sollevata per un metodo di pagamento non riconosciuto."""

    error_code: str = "INVALID_PAYMENT_METHOD"
    default_detail: str = "Metodo di pagamento non valido"


class ConflictError(AppException):
    """
    Eccezione sollevata per conflitti di stato.

    Utilizzata quando un'operazione non può essere eseguita
    a causa dello stato corrente della risorsa (es. versione della
    fattura cambiata dopo la lettura, promemoria già inviato oggi).
    """

    status_code: int = 409
    error_code: str = "CONFLICT_STATE"
    default_detail: str = "Conflitto di stato"


class InvoiceAlreadyPaidError(ConflictError):
    """Eccezione sollevata quando si opera su una fattura già saldata."""

    error_code: str = "INVOICE_ALREADY_PAID"
    default_detail: str = "La fattura è già stata pagata"


class PaymentGatewayError(AppException):
    """
    Eccezione sollevata quando il gateway di pagamento rifiuta l'addebito.

    Il messaggio del gateway è riportato in `detail`.
    """

    status_code: int = 402
    error_code: str = "PAYMENT_DECLINED"
    default_detail: str = "Pagamento rifiutato dal gateway"
