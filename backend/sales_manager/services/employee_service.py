"""
Service Layer per l'anagrafica dipendenti
Progetto: Sales Manager (Gestione Vendite)

Elenco con ricerca, filtri, ordinamento e paginazione; statistiche; CRUD.
"""

import logging
import math
from collections import Counter

from sales_manager.core.config import Settings, settings as default_settings
from sales_manager.core.results import operation
from sales_manager.models import Employee, EmployeeStatus
from sales_manager.schemas.employee import (
    EmployeeCreate,
    EmployeeList,
    EmployeeQuery,
    EmployeeStats,
    EmployeeUpdate,
)
from sales_manager.services.repository import SalesRepository

# Logger per questo modulo
logger = logging.getLogger(__name__)

# sort_by -> (chiave, discendente)
SORT_OPTIONS = {
    "name": (lambda e: e.name.lower(), False),
    "name_desc": (lambda e: e.name.lower(), True),
    "salary": (lambda e: e.salary, False),
    "salary_desc": (lambda e: e.salary, True),
    "hire_date": (lambda e: e.hire_date, False),
    "hire_date_desc": (lambda e: e.hire_date, True),
}


def _matches_query(employee: Employee, query: EmployeeQuery) -> bool:
    if query.search:
        term = query.search.strip().lower()
        haystack = (
            employee.name.lower(),
            employee.email.lower(),
            employee.phone,
            employee.position.lower(),
            str(employee.id),
        )
        if not any(term in field for field in haystack):
            return False
    if query.department is not None and employee.department != query.department:
        return False
    if query.status is not None and employee.status != query.status:
        return False
    if query.position and query.position.lower() not in employee.position.lower():
        return False
    if query.city and query.city.lower() not in employee.address.lower():
        return False
    if query.salary_min is not None and employee.salary < query.salary_min:
        return False
    if query.salary_max is not None and employee.salary > query.salary_max:
        return False
    return True


class EmployeeService:
    """Service per la gestione dell'anagrafica dipendenti."""

    def __init__(self, repository: SalesRepository, settings: Settings = default_settings) -> None:
        self.repository = repository
        self.settings = settings

    def list_employees(self, query: EmployeeQuery) -> EmployeeList:
        """
        Elenco filtrato, ordinato e paginato.

        Una pagina oltre l'ultima restituisce una lista vuota.
        """
        employees = [e for e in self.repository.employees if _matches_query(e, query)]
        key, reverse = SORT_OPTIONS[query.sort_by]
        employees.sort(key=key, reverse=reverse)

        per_page = self.settings.results_per_page
        start = (query.page - 1) * per_page
        return EmployeeList(
            items=employees[start:start + per_page],
            total=len(employees),
            page=query.page,
            per_page=per_page,
            total_pages=math.ceil(len(employees) / per_page),
        )

    def stats(self) -> EmployeeStats:
        employees = self.repository.employees
        by_department = Counter(e.department.value for e in employees)
        return EmployeeStats(
            total=len(employees),
            active=sum(1 for e in employees if e.status == EmployeeStatus.ACTIVE),
            on_vacation=sum(1 for e in employees if e.status == EmployeeStatus.VACATION),
            departments=len(by_department),
            by_department=dict(by_department),
        )

    @operation("add_employee")
    async def add_employee(self, data: EmployeeCreate) -> Employee:
        employee = Employee(id=self.repository.next_employee_id(), **data.model_dump())
        self.repository.employees.append(employee)
        await self.repository.save("employees")
        logger.info("Dipendente %d (%s) creato", employee.id, employee.name)
        return employee

    @operation("update_employee")
    async def update_employee(self, employee_id: int, data: EmployeeUpdate) -> Employee:
        """
        Raises:
            NotFoundError: Dipendente non trovato
        """
        employee = self.repository.get_employee(employee_id)
        for field, value in data.model_dump(exclude_none=True).items():
            setattr(employee, field, value)
        await self.repository.save("employees")
        return employee

    @operation("delete_employee")
    async def delete_employee(self, employee_id: int) -> Employee:
        employee = self.repository.get_employee(employee_id)
        self.repository.employees.remove(employee)
        await self.repository.save("employees")
        logger.info("Dipendente %d eliminato", employee_id)
        return employee

    @operation("get_employee")
    async def get_employee(self, employee_id: int) -> Employee:
        return self.repository.get_employee(employee_id)
