"""Core constants and exceptions."""

from northwind.core.exceptions import (
    NorthwindError,
    InvalidArgumentError,
    EmployeeNotFoundError,
)

__all__ = [
    "NorthwindError",
    "InvalidArgumentError",
    "EmployeeNotFoundError",
]
