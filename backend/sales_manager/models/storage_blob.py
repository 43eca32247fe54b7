"""
Modello SQLAlchemy per i blob di storage
Progetto: Sales Manager (Gestione Vendite)

Tabella chiave/valore usata da SqlStorage: ogni riga contiene una
collezione serializzata (fatture, clienti, ...) sotto una chiave prefissata.
"""

from sqlalchemy import String, Text
from sqlalchemy.orm import Mapped, mapped_column

from sales_manager.models import Base
from sales_manager.models.mixins import TimestampMixin


class StorageBlob(Base, TimestampMixin):
    """
    Blob serializzato indicizzato per chiave.

    Attributes:
        key: Chiave completa (con prefisso), primary key
        value: Payload JSON della collezione
        created_at: Data/ora creazione record
        updated_at: Data/ora ultimo salvataggio
    """

    __tablename__ = "storage_blobs"

    key: Mapped[str] = mapped_column(
        String(255),
        primary_key=True,
        doc="Chiave prefissata (es. zeralda_sales_invoices)",
    )

    value: Mapped[str] = mapped_column(
        Text,
        nullable=False,
        doc="Payload JSON serializzato",
    )

    def __repr__(self) -> str:
        return f"<StorageBlob(key={self.key}, size={len(self.value or '')})>"
