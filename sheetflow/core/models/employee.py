"""
Employee model.
"""

from datetime import date
from typing import ClassVar

from ...utils.dates import whole_years_between
from .record import Record
from .status import EmployeeStatus


class Employee(Record):
    """
    A staff member.

    Attributes:
        id: Employee number (must be positive)
        first_name: Given name
        last_name: Family name
        email: Work email address
        department: Department name (grouping key)
        salary: Yearly salary
        birth_date: Date of birth
        hire_date: Date of hire
        status: EmployeeStatus member (ACTIVE when absent)
    """

    entity_name: ClassVar[str] = "employee"
    status_enum: ClassVar[type[EmployeeStatus]] = EmployeeStatus
    default_status: ClassVar[EmployeeStatus] = EmployeeStatus.ACTIVE
    format_fields: ClassVar[tuple[str, ...]] = (
        "id", "full_name", "email", "department", "salary", "status"
    )

    id: int | None = None
    first_name: str | None = None
    last_name: str | None = None
    email: str | None = None
    department: str | None = None
    salary: float | None = None
    birth_date: date | None = None
    hire_date: date | None = None
    status: EmployeeStatus | str | None = EmployeeStatus.ACTIVE

    @property
    def full_name(self) -> str:
        return " ".join(part for part in (self.first_name, self.last_name) if part)

    @property
    def age(self) -> int | None:
        """Age in whole years, None without a birth date."""
        if self.birth_date is None:
            return None
        return whole_years_between(self.birth_date, date.today())

    @property
    def years_of_service(self) -> int:
        if self.hire_date is None:
            return 0
        return whole_years_between(self.hire_date, date.today())
