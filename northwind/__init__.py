"""Data access for the Northwind Employees table."""

from northwind.core.exceptions import (
    NorthwindError,
    InvalidArgumentError,
    EmployeeNotFoundError,
)
from northwind.database.provider import ConnectionProvider
from northwind.models.employee import Employee
from northwind.repositories.employees import EmployeeStore, get_employee_store

__version__ = "0.1.0"

__all__ = [
    "NorthwindError",
    "InvalidArgumentError",
    "EmployeeNotFoundError",
    "ConnectionProvider",
    "Employee",
    "EmployeeStore",
    "get_employee_store",
]
