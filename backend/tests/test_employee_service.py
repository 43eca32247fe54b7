"""
Unit tests per EmployeeService.
"""

from datetime import date
from decimal import Decimal

import pytest

from sales_manager.models import Department, EmployeeStatus
from sales_manager.schemas.employee import EmployeeCreate, EmployeeQuery, EmployeeUpdate


def employee_data(name, department=Department.SALES, salary="50000", **kwargs):
    kwargs.setdefault("hire_date", date(2022, 1, 10))
    return EmployeeCreate(name=name, department=department, salary=Decimal(salary), **kwargs)


@pytest.fixture
async def staff(employee_service):
    created = []
    for data in [
        employee_data("Sara Meziane", Department.IT, "90000", position="Sviluppatrice",
                      address="Rue Didouche, Alger", email="sara@zeralda.dz"),
        employee_data("Omar Tazi", Department.FINANCE, "70000", position="Contabile",
                      address="Oran", status=EmployeeStatus.VACATION),
        employee_data("amel Kaci", Department.IT, "60000", position="Sistemista",
                      address="Blida", hire_date=date(2020, 5, 1)),
    ]:
        created.append((await employee_service.add_employee(data)).data)
    return created


class TestEmployeeCrud:
    async def test_sequential_ids(self, staff):
        assert [e.id for e in staff] == [1, 2, 3]

    async def test_computed_fields(self, staff):
        sara = staff[0]

        assert sara.avatar_initials == "SM"
        assert sara.department_name == "Tecnologia dell'informazione"

    async def test_update(self, employee_service, staff):
        result = await employee_service.update_employee(2, EmployeeUpdate(status=EmployeeStatus.ACTIVE))

        assert result.data.status == EmployeeStatus.ACTIVE

    async def test_delete_then_new_id_continues(self, employee_service, staff):
        await employee_service.delete_employee(3)

        new = (await employee_service.add_employee(employee_data("Nuovo Arrivo"))).data

        assert new.id == 3

    async def test_unknown_employee(self, employee_service):
        result = await employee_service.get_employee(99)

        assert result.success is False
        assert result.error_code == "RESOURCE_NOT_FOUND"


class TestEmployeeList:
    async def test_default_sort_by_name(self, employee_service, staff):
        page = employee_service.list_employees(EmployeeQuery())

        assert [e.name for e in page.items] == ["amel Kaci", "Omar Tazi", "Sara Meziane"]
        assert page.total == 3
        assert page.total_pages == 1

    async def test_search_matches_email_and_id(self, employee_service, staff):
        by_email = employee_service.list_employees(EmployeeQuery(search="zeralda.dz"))
        by_id = employee_service.list_employees(EmployeeQuery(search="2"))

        assert [e.id for e in by_email.items] == [1]
        assert [e.id for e in by_id.items] == [2]

    async def test_filters(self, employee_service, staff):
        it_staff = employee_service.list_employees(EmployeeQuery(department=Department.IT))
        on_vacation = employee_service.list_employees(EmployeeQuery(status=EmployeeStatus.VACATION))
        in_oran = employee_service.list_employees(EmployeeQuery(city="oran"))
        high_salary = employee_service.list_employees(EmployeeQuery(salary_min=Decimal("65000")))

        assert {e.id for e in it_staff.items} == {1, 3}
        assert [e.id for e in on_vacation.items] == [2]
        assert [e.id for e in in_oran.items] == [2]
        assert {e.id for e in high_salary.items} == {1, 2}

    async def test_sort_options(self, employee_service, staff):
        by_salary = employee_service.list_employees(EmployeeQuery(sort_by="salary_desc"))
        by_hire = employee_service.list_employees(EmployeeQuery(sort_by="hire_date"))

        assert [e.id for e in by_salary.items] == [1, 2, 3]
        assert by_hire.items[0].id == 3

    async def test_pagination(self, employee_service):
        for i in range(12):
            await employee_service.add_employee(employee_data(f"Dipendente {i:02d}"))

        first = employee_service.list_employees(EmployeeQuery(page=1))
        second = employee_service.list_employees(EmployeeQuery(page=2))
        beyond = employee_service.list_employees(EmployeeQuery(page=5))

        assert len(first.items) == 10
        assert len(second.items) == 2
        assert first.total_pages == 2
        assert beyond.items == []

    async def test_stats(self, employee_service, staff):
        stats = employee_service.stats()

        assert stats.total == 3
        assert stats.active == 2
        assert stats.on_vacation == 1
        assert stats.departments == 2
        assert stats.by_department == {"it": 2, "finance": 1}
