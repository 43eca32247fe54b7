"""
Modello di dominio per l'anagrafica dipendenti
Progetto: Sales Manager (Gestione Vendite)
"""

from datetime import date
from decimal import Decimal

from pydantic import BaseModel, Field, computed_field

from sales_manager.models.enums import Department, EmployeeStatus


class Employee(BaseModel):
    """Dipendente (ID intero progressivo)."""

    id: int = Field(..., ge=1)
    name: str = Field(..., min_length=1, max_length=255)
    email: str = Field("", max_length=255)
    phone: str = Field("", max_length=50)
    department: Department
    position: str = Field("", max_length=255)
    hire_date: date
    salary: Decimal = Field(..., ge=0)
    address: str = Field("", max_length=500)
    status: EmployeeStatus = EmployeeStatus.ACTIVE

    @computed_field
    @property
    def department_name(self) -> str:
        return self.department.display_name

    @computed_field
    @property
    def avatar_initials(self) -> str:
        """Iniziali di nome e cognome."""
        parts = self.name.split()
        return "".join(part[0] for part in parts[:2]).upper()
