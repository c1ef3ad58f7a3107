"""
Employee store.

Data access for the Employees table. Each public method opens its own
short-lived connection through the provider, runs exactly one
parameterized statement and releases the connection before returning.
Values are always passed as bound parameters.
"""

import logging
from typing import List, Optional, Union

from sqlalchemy import DateTime, Integer, bindparam, text
from sqlalchemy.sql.elements import TextClause
from sqlalchemy.sql.selectable import TextualSelect

from northwind.config import settings
from northwind.core.constants import (
    EMPLOYEE_COLUMNS,
    EMPLOYEES_TABLE,
    PRIMARY_KEY_COLUMN,
    WRITABLE_COLUMNS,
)
from northwind.core.exceptions import EmployeeNotFoundError, InvalidArgumentError
from northwind.database.provider import ConnectionProvider, get_connection_provider
from northwind.models.employee import Employee, employees_table

logger = logging.getLogger(__name__)


# ========================================
# Statements
# ========================================

# Parameter types the driver cannot infer from None or plain values
_PARAMETER_TYPES = {
    "EmployeeId": Integer,
    "BirthDate": DateTime,
    "HireDate": DateTime,
    "ReportsTo": Integer,
}


def _statement(sql: str, *parameters: str, returns_rows: bool = False) -> Union[TextClause, TextualSelect]:
    """Build a text() statement with typed bound parameters and result columns."""
    statement = text(sql).bindparams(
        *(bindparam(name, type_=_PARAMETER_TYPES[name])
          for name in parameters if name in _PARAMETER_TYPES)
    )
    if returns_rows:
        return statement.columns(*employees_table.c)
    return statement


_COLUMN_LIST = ", ".join(EMPLOYEE_COLUMNS)
_KEY_FILTER = f"{PRIMARY_KEY_COLUMN} = :{PRIMARY_KEY_COLUMN}"

SELECT_ALL = _statement(
    f"SELECT {_COLUMN_LIST} FROM {EMPLOYEES_TABLE}",
    returns_rows=True,
)

SELECT_ONE = _statement(
    f"SELECT {_COLUMN_LIST} FROM {EMPLOYEES_TABLE} WHERE {_KEY_FILTER}",
    PRIMARY_KEY_COLUMN,
    returns_rows=True,
)

_INSERT_SQL = (
    f"INSERT INTO {EMPLOYEES_TABLE} ({', '.join(WRITABLE_COLUMNS)}) "
    f"VALUES ({', '.join(':' + c for c in WRITABLE_COLUMNS)})"
)

INSERT = _statement(_INSERT_SQL, *WRITABLE_COLUMNS)

INSERT_RETURNING = _statement(
    f"{_INSERT_SQL} RETURNING {PRIMARY_KEY_COLUMN}", *WRITABLE_COLUMNS
)

UPDATE = _statement(
    f"UPDATE {EMPLOYEES_TABLE} "
    f"SET {', '.join(f'{c} = :{c}' for c in WRITABLE_COLUMNS)} "
    f"WHERE {_KEY_FILTER}",
    *EMPLOYEE_COLUMNS,
)

DELETE = _statement(
    f"DELETE FROM {EMPLOYEES_TABLE} WHERE {_KEY_FILTER}",
    PRIMARY_KEY_COLUMN,
)


# ========================================
# Store
# ========================================

class EmployeeStore:
    """
    CRUD operations on the Employees table.

    The store keeps only the provider and the connection string, so one
    instance can be shared between threads. Storage errors raised by
    SQLAlchemy are not caught here.

    Example:
        store = EmployeeStore(ConnectionProvider(), "sqlite:///./data/northwind.db")
        new_id = store.add_employee(employee)
        print(store.get_employee(new_id))
    """

    def __init__(self, provider: ConnectionProvider, connection_string: str):
        """
        Initialize the store.

        Args:
            provider: Supplies connections for the connection string
            connection_string: Database URL

        Raises:
            InvalidArgumentError: If provider is None, or the connection
                string is None, not a string, empty or whitespace
        """
        if provider is None:
            raise InvalidArgumentError("provider cannot be None", argument="provider")

        if connection_string is None:
            raise InvalidArgumentError(
                "connection_string cannot be None", argument="connection_string"
            )

        if not isinstance(connection_string, str) or not connection_string.strip():
            raise InvalidArgumentError(
                "Connection string cannot be empty or whitespace.",
                argument="connection_string",
            )

        self._provider = provider
        self._connection_string = connection_string

    @property
    def connection_string(self) -> str:
        return self._connection_string

    def list_employees(self) -> List[Employee]:
        """
        Get every employee.

        Returns:
            One Employee per row; empty list when the table is empty
        """
        with self._provider.connect(self._connection_string) as conn:
            rows = conn.execute(SELECT_ALL).mappings().all()

        employees = [Employee.from_row(row) for row in rows]
        logger.debug("Listed %d employees", len(employees))
        return employees

    def get_employee(self, employee_id: int) -> Employee:
        """
        Get one employee by id.

        Raises:
            EmployeeNotFoundError: If no row has this id
        """
        with self._provider.connect(self._connection_string) as conn:
            row = conn.execute(SELECT_ONE, {PRIMARY_KEY_COLUMN: employee_id}).mappings().first()

        if row is None:
            raise EmployeeNotFoundError("employee not found", employee_id=employee_id)

        logger.debug("Fetched employee id=%s", employee_id)
        return Employee.from_row(row)

    def add_employee(self, employee: Employee) -> int:
        """
        Insert a new employee.

        ``employee.id`` is ignored; storage assigns the id. The new id is
        read back on the same connection and transaction as the insert.

        Returns:
            The id assigned to the new row
        """
        parameters = employee.to_parameters()

        with self._provider.connect(self._connection_string) as conn:
            if conn.dialect.insert_returning:
                new_id = conn.execute(INSERT_RETURNING, parameters).scalar_one()
            else:
                new_id = conn.execute(INSERT, parameters).lastrowid

        logger.info("Added employee id=%s (%s)", new_id, employee.full_name)
        return int(new_id)

    def remove_employee(self, employee_id: int) -> None:
        """
        Delete an employee by id.

        Deleting an id that does not exist is not an error.
        """
        with self._provider.connect(self._connection_string) as conn:
            deleted = conn.execute(DELETE, {PRIMARY_KEY_COLUMN: employee_id}).rowcount

        if deleted == 0:
            logger.warning("No employee removed: id=%s does not exist", employee_id)
        else:
            logger.info("Removed employee id=%s", employee_id)

    def update_employee(self, employee: Employee) -> None:
        """
        Overwrite every stored field of an existing employee.

        The row is selected by ``employee.id``; the id itself is never
        changed.

        Raises:
            EmployeeNotFoundError: If no row has this id
        """
        parameters = employee.to_parameters(include_id=True)

        with self._provider.connect(self._connection_string) as conn:
            updated = conn.execute(UPDATE, parameters).rowcount

        if updated == 0:
            raise EmployeeNotFoundError(
                "No employee found with the provided ID.", employee_id=employee.id
            )

        logger.info("Updated employee id=%s", employee.id)


# ========================================
# Convenience Functions
# ========================================

def get_employee_store(
    connection_string: Optional[str] = None,
    provider: Optional[ConnectionProvider] = None,
) -> EmployeeStore:
    """
    Factory function for creating EmployeeStore.

    Defaults to ``settings.database_url`` and the process-wide provider.

    Usage:
        from northwind.repositories import get_employee_store

        store = get_employee_store()
        for employee in store.list_employees():
            print(employee)
    """
    return EmployeeStore(
        provider if provider is not None else get_connection_provider(),
        connection_string if connection_string is not None else settings.database_url,
    )


__all__ = ["EmployeeStore", "get_employee_store"]
