"""
Schemas Pydantic per l'anagrafica clienti
Progetto: Sales Manager (Gestione Vendite)
"""

import re
from typing import Optional

from pydantic import BaseModel, Field, field_validator, model_validator

from sales_manager.core.exceptions import BusinessValidationError


def normalize_phone(phone: Optional[str]) -> Optional[str]:
    """
    Normalizza il numero di telefono.

    Rimuove gli spazi e accetta solo + iniziale e cifre.

    Raises:
        ValueError: Se il formato non è valido
    """
    if phone is None or phone == "":
        return phone
    normalized = phone.strip().replace(" ", "")
    if not re.match(r"^\+?\d+$", normalized):
        raise ValueError("Numero di telefono non valido")
    return normalized


class CustomerBase(BaseModel):
    """Campi anagrafici del cliente."""

    name: str = Field(..., min_length=1, max_length=255, description="Nome o ragione sociale")
    email: str = Field("", max_length=255)
    phone: str = Field("", max_length=50)
    address: str = Field("", max_length=500)
    company: str = Field("", max_length=255)
    tax_id: str = Field("", max_length=50, description="Codice fiscale / NIF")

    @field_validator("name")
    @classmethod
    def strip_name(cls, v: str) -> str:
        v = v.strip()
        if not v:
            raise BusinessValidationError("Il nome del cliente è obbligatorio")
        return v

    @field_validator("phone")
    @classmethod
    def validate_phone(cls, v: str) -> str:
        return normalize_phone(v)

    @field_validator("email")
    @classmethod
    def normalize_email(cls, v: str) -> str:
        v = v.strip().lower()
        if v and "@" not in v:
            raise ValueError("Indirizzo email non valido")
        return v


class CustomerCreate(CustomerBase):
    """Schema per la creazione di un cliente."""
    pass


class CustomerUpdate(BaseModel):
    """Schema per l'aggiornamento di un cliente (campi a None invariati)."""

    name: Optional[str] = Field(None, min_length=1, max_length=255)
    email: Optional[str] = Field(None, max_length=255)
    phone: Optional[str] = Field(None, max_length=50)
    address: Optional[str] = Field(None, max_length=500)
    company: Optional[str] = Field(None, max_length=255)
    tax_id: Optional[str] = Field(None, max_length=50)

    @field_validator("phone")
    @classmethod
    def validate_phone(cls, v: Optional[str]) -> Optional[str]:
        return normalize_phone(v)

    @field_validator("email")
    @classmethod
    def normalize_email(cls, v: Optional[str]) -> Optional[str]:
        if v is None:
            return v
        v = v.strip().lower()
        if v and "@" not in v:
            raise ValueError("Indirizzo email non valido")
        return v

    @model_validator(mode="after")
    def validate_update(self) -> "CustomerUpdate":
        if not self.model_dump(exclude_none=True):
            raise BusinessValidationError("È necessario modificare almeno un campo")
        return self
