"""
Schemas Pydantic per la ricerca
Progetto: Sales Manager (Gestione Vendite)
"""

from typing import List

from pydantic import BaseModel, Field

from sales_manager.models import Customer, Invoice, InvoiceFilters


class SearchResults(BaseModel):
    query: str
    invoices: List[Invoice]
    customers: List[Customer]


class SavedSearchCreate(BaseModel):
    name: str = Field(..., min_length=1, max_length=100)
    filters: InvoiceFilters = Field(default_factory=InvoiceFilters)
