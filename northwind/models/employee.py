"""
Employee record and the Employees table.

An Employee is a transient value: built from a row on read, or handed in
by the caller on write. The table row is the only durable state.

``region`` and ``reports_to`` are the only optional attributes. ``None``
means the column is NULL in storage.
"""

from dataclasses import dataclass, field
from datetime import datetime
from typing import Any, Dict, Mapping, Optional

from sqlalchemy import Column, DateTime, Integer, Table, Text

from northwind.core.constants import (
    COLUMN_TO_ATTRIBUTE,
    EMPLOYEE_COLUMNS,
    EMPLOYEES_TABLE,
    NULLABLE_COLUMNS,
    WRITABLE_COLUMNS,
)
from northwind.models.base import SerializationMixin, metadata


# ========================================
# Table Definition
# ========================================

employees_table = Table(
    EMPLOYEES_TABLE,
    metadata,
    Column("EmployeeId", Integer, primary_key=True, autoincrement=True,
           comment="Auto-incrementing primary key, assigned on insert"),
    Column("LastName", Text, nullable=False),
    Column("FirstName", Text, nullable=False),
    Column("Title", Text, nullable=False),
    Column("TitleOfCourtesy", Text, nullable=False),
    Column("BirthDate", DateTime, nullable=False),
    Column("HireDate", DateTime, nullable=False),
    Column("Address", Text, nullable=False),
    Column("City", Text, nullable=False),
    Column("Region", Text, nullable=True),
    Column("PostalCode", Text, nullable=False),
    Column("Country", Text, nullable=False),
    Column("HomePhone", Text, nullable=False),
    Column("Extension", Text, nullable=False),
    Column("Notes", Text, nullable=False),
    Column("ReportsTo", Integer, nullable=True,
           comment="EmployeeId of the manager (not enforced)"),
    Column("PhotoPath", Text, nullable=False),
)


def validate_column_contract(table: Table) -> None:
    """
    Check a table definition against the column-order contract.

    Raises:
        RuntimeError: If names, order or nullability differ
    """
    names = tuple(column.name for column in table.columns)
    if names != EMPLOYEE_COLUMNS:
        raise RuntimeError(
            f"{table.name} columns {names} do not match the contract {EMPLOYEE_COLUMNS}"
        )

    nullable = {c.name for c in table.columns if c.nullable and not c.primary_key}
    if nullable != NULLABLE_COLUMNS:
        raise RuntimeError(
            f"{table.name} nullable columns {sorted(nullable)} "
            f"do not match the contract {sorted(NULLABLE_COLUMNS)}"
        )


validate_column_contract(employees_table)


# ========================================
# Record
# ========================================

@dataclass(kw_only=True)
class Employee(SerializationMixin):
    """
    One row of the Employees table.

    Attributes:
        id: Storage-assigned identity (None until inserted)
        last_name .. photo_path: Required values, see the table above
        region: Optional region, None when absent
        reports_to: Optional id of another employee, None when absent

    Example:
        employee = Employee(
            last_name="Smith",
            first_name="Anna",
            ...
            photo_path="p.jpg",
        )
        employee.id = store.add_employee(employee)
    """

    last_name: str
    first_name: str
    title: str
    title_of_courtesy: str
    birth_date: datetime
    hire_date: datetime
    address: str
    city: str
    region: Optional[str] = None
    postal_code: str
    country: str
    home_phone: str
    extension: str
    notes: str
    reports_to: Optional[int] = None
    photo_path: str
    id: Optional[int] = field(default=None)

    @property
    def full_name(self) -> str:
        return f"{self.first_name} {self.last_name}"

    @classmethod
    def from_row(cls, row: Mapping[str, Any]) -> "Employee":
        """
        Build an Employee from a result row, reading columns by name.

        Args:
            row: Row mapping keyed by storage column name

        Returns:
            Employee with every attribute set from the row
        """
        return cls(**{COLUMN_TO_ATTRIBUTE[column]: row[column] for column in EMPLOYEE_COLUMNS})

    def to_parameters(self, include_id: bool = False) -> Dict[str, Any]:
        """
        Bound-parameter values keyed by storage column name.

        ``id`` is left out unless ``include_id`` is set; it is only ever
        used to select the row, never written.
        """
        columns = EMPLOYEE_COLUMNS if include_id else WRITABLE_COLUMNS
        return {column: getattr(self, COLUMN_TO_ATTRIBUTE[column]) for column in columns}

    def __str__(self) -> str:
        return f"Employee {self.id}: {self.title_of_courtesy} {self.full_name} ({self.title})"


__all__ = ["Employee", "employees_table", "validate_column_contract"]
