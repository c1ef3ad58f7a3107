"""Exceptions raised by the northwind data-access layer.

Storage failures coming from SQLAlchemy are not wrapped; they reach the
caller as ``sqlalchemy.exc.SQLAlchemyError`` subclasses.
"""

from typing import Optional


class NorthwindError(Exception):
    """Base class for all library errors."""

    pass


class InvalidArgumentError(NorthwindError, ValueError):
    """Raised when a required dependency is missing or malformed."""

    def __init__(self, message: str, argument: Optional[str] = None):
        super().__init__(message)
        self.argument = argument


class EmployeeNotFoundError(NorthwindError, LookupError):
    """Raised when no row matches the requested employee id."""

    def __init__(self, message: str = "employee not found", employee_id: Optional[int] = None):
        super().__init__(message)
        self.employee_id = employee_id
