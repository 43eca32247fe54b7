"""
Schemas Pydantic per l'anagrafica dipendenti
Progetto: Sales Manager (Gestione Vendite)
"""

from datetime import date
from decimal import Decimal
from typing import Dict, List, Literal, Optional

from pydantic import BaseModel, Field, model_validator

from sales_manager.core.exceptions import BusinessValidationError
from sales_manager.models import Department, Employee, EmployeeStatus

EmployeeSort = Literal[
    "name", "name_desc", "salary", "salary_desc", "hire_date", "hire_date_desc"
]


class EmployeeCreate(BaseModel):
    """Schema per la creazione di un dipendente."""

    name: str = Field(..., min_length=1, max_length=255)
    email: str = Field("", max_length=255)
    phone: str = Field("", max_length=50)
    department: Department
    position: str = Field("", max_length=255)
    hire_date: date
    salary: Decimal = Field(..., ge=0)
    address: str = Field("", max_length=500)
    status: EmployeeStatus = EmployeeStatus.ACTIVE


class EmployeeUpdate(BaseModel):
    name: Optional[str] = Field(None, min_length=1, max_length=255)
    email: Optional[str] = Field(None, max_length=255)
    phone: Optional[str] = Field(None, max_length=50)
    department: Optional[Department] = None
    position: Optional[str] = Field(None, max_length=255)
    hire_date: Optional[date] = None
    salary: Optional[Decimal] = Field(None, ge=0)
    address: Optional[str] = Field(None, max_length=500)
    status: Optional[EmployeeStatus] = None

    @model_validator(mode="after")
    def validate_update(self) -> "EmployeeUpdate":
        if not self.model_dump(exclude_none=True):
            raise BusinessValidationError("È necessario modificare almeno un campo")
        return self


class EmployeeQuery(BaseModel):
    """
    Filtri, ordinamento e paginazione dell'elenco dipendenti.

    `search` cerca in nome, email e ID; `position` e `city` sono
    corrispondenze parziali (city sull'indirizzo).
    """

    search: str = ""
    department: Optional[Department] = None
    status: Optional[EmployeeStatus] = None
    position: str = ""
    city: str = ""
    salary_min: Optional[Decimal] = Field(None, ge=0)
    salary_max: Optional[Decimal] = Field(None, ge=0)
    sort_by: EmployeeSort = "name"
    page: int = Field(1, ge=1)


class EmployeeList(BaseModel):
    """Pagina dell'elenco dipendenti."""

    items: List[Employee]
    total: int
    page: int
    per_page: int
    total_pages: int


class EmployeeStats(BaseModel):
    total: int
    active: int
    on_vacation: int
    departments: int
    by_department: Dict[str, int]
