"""
Router FastAPI per l'anagrafica dipendenti
Progetto: Sales Manager (Gestione Vendite)
"""

from decimal import Decimal
from typing import Optional

from fastapi import APIRouter, Depends, Query, status

from sales_manager.core.deps import get_employee_service
from sales_manager.models import Department, Employee, EmployeeStatus
from sales_manager.schemas.employee import (
    EmployeeCreate,
    EmployeeList,
    EmployeeQuery,
    EmployeeSort,
    EmployeeStats,
    EmployeeUpdate,
)
from sales_manager.services.employee_service import EmployeeService

router = APIRouter(
    prefix="/employees",
    tags=["Dipendenti"],
)


@router.get(
    "/",
    name="dipendenti_lista",
    summary="Lista dipendenti",
    description="Elenco paginato con ricerca, filtri e ordinamento.",
    response_model=EmployeeList,
)
async def list_employees(
    search: str = Query("", description="Nome, email, telefono, posizione o ID"),
    department: Optional[Department] = Query(None),
    employee_status: Optional[EmployeeStatus] = Query(None, alias="status"),
    position: str = Query(""),
    city: str = Query(""),
    salary_min: Optional[Decimal] = Query(None, ge=0),
    salary_max: Optional[Decimal] = Query(None, ge=0),
    sort_by: EmployeeSort = Query("name"),
    page: int = Query(1, ge=1, description="Numero pagina"),
    service: EmployeeService = Depends(get_employee_service),
) -> EmployeeList:
    query = EmployeeQuery(
        search=search,
        department=department,
        status=employee_status,
        position=position,
        city=city,
        salary_min=salary_min,
        salary_max=salary_max,
        sort_by=sort_by,
        page=page,
    )
    return service.list_employees(query)


@router.get("/stats", name="dipendenti_statistiche", summary="Statistiche dipendenti", response_model=EmployeeStats)
async def employee_stats(
    service: EmployeeService = Depends(get_employee_service),
) -> EmployeeStats:
    return service.stats()


@router.get("/{employee_id}", name="dipendente_dettaglio", summary="Dettaglio dipendente", response_model=Employee)
async def get_employee(
    employee_id: int,
    service: EmployeeService = Depends(get_employee_service),
) -> Employee:
    result = await service.get_employee(employee_id)
    return result.unwrap()


@router.post(
    "/",
    name="dipendente_crea",
    summary="Crea dipendente",
    response_model=Employee,
    status_code=status.HTTP_201_CREATED,
)
async def create_employee(
    data: EmployeeCreate,
    service: EmployeeService = Depends(get_employee_service),
) -> Employee:
    result = await service.add_employee(data)
    return result.unwrap()


@router.patch("/{employee_id}", name="dipendente_aggiorna", summary="Aggiorna dipendente", response_model=Employee)
async def update_employee(
    employee_id: int,
    data: EmployeeUpdate,
    service: EmployeeService = Depends(get_employee_service),
) -> Employee:
    result = await service.update_employee(employee_id, data)
    return result.unwrap()


@router.delete(
    "/{employee_id}",
    name="dipendente_elimina",
    summary="Elimina dipendente",
    status_code=status.HTTP_204_NO_CONTENT,
)
async def delete_employee(
    employee_id: int,
    service: EmployeeService = Depends(get_employee_service),
) -> None:
    result = await service.delete_employee(employee_id)
    result.unwrap()
