"""
Data models package.

Contains the Employee record and the table definitions.
"""

from northwind.models.base import metadata, create_all_tables, drop_all_tables
from northwind.models.employee import Employee, employees_table

__all__ = [
    "metadata",
    "Employee",
    "employees_table",
    "create_all_tables",
    "drop_all_tables",
]
