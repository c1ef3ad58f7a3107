"""
Data access layer (Repository pattern).

Repositories handle all database queries,
isolating callers from SQL.
"""

from northwind.repositories.employees import EmployeeStore, get_employee_store

__all__ = [
    "EmployeeStore",
    "get_employee_store",
]
