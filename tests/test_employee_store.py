"""Tests for EmployeeStore against a real SQLite database."""

import dataclasses
import threading
from datetime import datetime
from unittest.mock import MagicMock

import pytest
from sqlalchemy.exc import OperationalError

from northwind.core.exceptions import EmployeeNotFoundError, InvalidArgumentError
from northwind.database.provider import ConnectionProvider
from northwind.models import Employee
from northwind.repositories.employees import (
    INSERT,
    INSERT_RETURNING,
    EmployeeStore,
    get_employee_store,
)


# ========================================
# Construction
# ========================================

class TestConstruction:
    def test_valid_arguments(self, provider, database_url):
        store = EmployeeStore(provider, database_url)
        assert store.connection_string == database_url

    def test_provider_none(self, database_url):
        with pytest.raises(InvalidArgumentError) as exc_info:
            EmployeeStore(None, database_url)
        assert exc_info.value.argument == "provider"

    @pytest.mark.parametrize("connection_string", [None, "", " ", "\t\n  "])
    def test_blank_connection_string(self, provider, connection_string):
        with pytest.raises(InvalidArgumentError) as exc_info:
            EmployeeStore(provider, connection_string)
        assert exc_info.value.argument == "connection_string"

    def test_non_string_connection_string(self, provider):
        with pytest.raises(InvalidArgumentError):
            EmployeeStore(provider, 42)

    def test_invalid_argument_is_value_error(self, provider):
        with pytest.raises(ValueError):
            EmployeeStore(provider, "")

    def test_factory_uses_given_arguments(self, provider, database_url):
        store = get_employee_store(database_url, provider=provider)
        assert store.connection_string == database_url
        assert store.list_employees() == []


# ========================================
# Reads
# ========================================

class TestListEmployees:
    def test_empty_table(self, store):
        assert store.list_employees() == []

    def test_returns_every_row(self, store, make_employee):
        added = [
            make_employee(last_name="Smith"),
            make_employee(last_name="Jones", region="WA", reports_to=1),
            make_employee(last_name="Brown", city="London"),
        ]
        ids = [store.add_employee(e) for e in added]

        employees = store.list_employees()

        assert len(employees) == 3
        by_id = {e.id: e for e in employees}
        for new_id, employee in zip(ids, added):
            assert by_id[new_id] == dataclasses.replace(employee, id=new_id)


class TestGetEmployee:
    def test_not_found(self, store):
        with pytest.raises(EmployeeNotFoundError) as exc_info:
            store.get_employee(999)
        assert exc_info.value.employee_id == 999
        assert str(exc_info.value) == "employee not found"

    def test_optional_fields_absent(self, store, make_employee):
        new_id = store.add_employee(make_employee())

        employee = store.get_employee(new_id)

        assert employee.region is None
        assert employee.reports_to is None

    def test_optional_fields_present(self, store, make_employee):
        manager_id = store.add_employee(make_employee(last_name="Fuller"))
        new_id = store.add_employee(make_employee(region="WA", reports_to=manager_id))

        employee = store.get_employee(new_id)

        assert employee.region == "WA"
        assert employee.reports_to == manager_id

    def test_reports_to_not_enforced(self, store, make_employee):
        new_id = store.add_employee(make_employee(reports_to=12345))
        assert store.get_employee(new_id).reports_to == 12345

    def test_id_is_bound_not_interpolated(self, store, make_employee):
        store.add_employee(make_employee())

        with pytest.raises(EmployeeNotFoundError):
            store.get_employee("1 OR 1=1")

        assert len(store.list_employees()) == 1


# ========================================
# Writes
# ========================================

class TestAddEmployee:
    def test_smith_scenario(self, store, make_employee):
        employee = make_employee()

        new_id = store.add_employee(employee)

        assert isinstance(new_id, int)
        assert new_id > 0
        fetched = store.get_employee(new_id)
        assert fetched == dataclasses.replace(employee, id=new_id)
        assert fetched.birth_date == datetime(1990, 1, 1)
        assert fetched.hire_date == datetime(2020, 1, 1)
        assert fetched.region is None
        assert fetched.reports_to is None

    def test_ids_are_distinct(self, store, make_employee):
        first = store.add_employee(make_employee())
        second = store.add_employee(make_employee())
        assert first != second

    def test_caller_id_is_ignored(self, store, make_employee):
        store.add_employee(make_employee())

        new_id = store.add_employee(make_employee(id=1))

        assert new_id != 1
        assert len(store.list_employees()) == 2

    def test_does_not_mutate_argument(self, store, make_employee):
        employee = make_employee()
        store.add_employee(employee)
        assert employee.id is None

    def test_values_are_bound_not_interpolated(self, store, make_employee):
        hostile = "Robert'); DROP TABLE Employees;--"

        new_id = store.add_employee(make_employee(last_name=hostile))

        assert store.get_employee(new_id).last_name == hostile
        assert len(store.list_employees()) == 1

    def test_concurrent_adds_get_unique_ids(self, store, make_employee):
        ids = []
        lock = threading.Lock()

        def worker():
            for _ in range(5):
                new_id = store.add_employee(make_employee())
                with lock:
                    ids.append(new_id)

        threads = [threading.Thread(target=worker) for _ in range(4)]
        for thread in threads:
            thread.start()
        for thread in threads:
            thread.join()

        assert len(ids) == 20
        assert len(set(ids)) == 20
        assert {e.id for e in store.list_employees()} == set(ids)


class TestUpdateEmployee:
    def test_not_found(self, store, make_employee):
        with pytest.raises(EmployeeNotFoundError) as exc_info:
            store.update_employee(make_employee(id=999))
        assert exc_info.value.employee_id == 999
        assert str(exc_info.value) == "No employee found with the provided ID."

    def test_missing_id_is_not_found(self, store, make_employee):
        store.add_employee(make_employee())
        with pytest.raises(EmployeeNotFoundError):
            store.update_employee(make_employee(id=None))

    def test_every_field_changes(self, store, make_employee):
        new_id = store.add_employee(make_employee())
        changed = Employee(
            id=new_id,
            last_name="Jones",
            first_name="Bob",
            title="Manager",
            title_of_courtesy="Mr.",
            birth_date=datetime(1980, 6, 15, 8, 30),
            hire_date=datetime(2010, 3, 1),
            address="2 High St",
            city="Shelbyville",
            region="OR",
            postal_code="11111",
            country="UK",
            home_phone="555-0199",
            extension="200",
            notes="promoted",
            reports_to=7,
            photo_path="q.jpg",
        )

        store.update_employee(changed)

        assert store.get_employee(new_id) == changed

    def test_optional_fields_can_be_cleared(self, store, make_employee):
        new_id = store.add_employee(make_employee(region="WA", reports_to=3))

        store.update_employee(make_employee(id=new_id, region=None, reports_to=None))

        fetched = store.get_employee(new_id)
        assert fetched.region is None
        assert fetched.reports_to is None

    def test_other_rows_untouched(self, store, make_employee):
        first = store.add_employee(make_employee(last_name="First"))
        second = store.add_employee(make_employee(last_name="Second"))

        store.update_employee(make_employee(id=first, last_name="Changed"))

        assert store.get_employee(second).last_name == "Second"


class TestRemoveEmployee:
    def test_removed_employee_is_gone(self, store, make_employee):
        new_id = store.add_employee(make_employee())

        store.remove_employee(new_id)

        with pytest.raises(EmployeeNotFoundError):
            store.get_employee(new_id)

    def test_missing_id_is_not_an_error(self, store):
        store.remove_employee(999)

    def test_missing_id_logs_warning(self, store, caplog):
        with caplog.at_level("WARNING", logger="northwind.repositories.employees"):
            store.remove_employee(999)
        assert "id=999 does not exist" in caplog.text

    def test_only_target_row_removed(self, store, make_employee):
        keep = store.add_employee(make_employee(last_name="Keep"))
        drop = store.add_employee(make_employee(last_name="Drop"))

        store.remove_employee(drop)

        assert [e.id for e in store.list_employees()] == [keep]


# ========================================
# Storage Failures and Resource Release
# ========================================

class TestStorageFailures:
    def test_missing_table_propagates(self, database_url, make_employee):
        provider = ConnectionProvider()
        store = EmployeeStore(provider, database_url)
        try:
            with pytest.raises(OperationalError):
                store.list_employees()
            with pytest.raises(OperationalError):
                store.add_employee(make_employee())
        finally:
            provider.dispose()

    def test_connections_released_after_error(self, database_url):
        provider = ConnectionProvider()
        store = EmployeeStore(provider, database_url)
        try:
            with pytest.raises(OperationalError):
                store.get_employee(1)
            assert provider.get_engine(database_url).pool.checkedout() == 0
        finally:
            provider.dispose()

    def test_connections_released_after_not_found(self, store, provider, database_url):
        with pytest.raises(EmployeeNotFoundError):
            store.get_employee(1)
        assert provider.get_engine(database_url).pool.checkedout() == 0

    def test_error_is_not_wrapped(self):
        error = OperationalError("SELECT", {}, Exception("disk I/O error"))
        provider = MagicMock(spec=ConnectionProvider)
        conn = provider.connect.return_value.__enter__.return_value
        conn.execute.side_effect = error

        store = EmployeeStore(provider, "sqlite:///unused.db")

        with pytest.raises(OperationalError) as exc_info:
            store.list_employees()

        assert exc_info.value is error
        provider.connect.assert_called_once_with("sqlite:///unused.db")
        assert provider.connect.return_value.__exit__.called


class TestInsertedId:
    def test_returning_used_when_supported(self, make_employee):
        provider = MagicMock(spec=ConnectionProvider)
        conn = provider.connect.return_value.__enter__.return_value
        conn.dialect.insert_returning = True
        conn.execute.return_value.scalar_one.return_value = 11

        new_id = EmployeeStore(provider, "db").add_employee(make_employee())

        assert new_id == 11
        assert conn.execute.call_args[0][0] is INSERT_RETURNING
        assert "EmployeeId" not in conn.execute.call_args[0][1]

    def test_lastrowid_used_otherwise(self, make_employee):
        provider = MagicMock(spec=ConnectionProvider)
        conn = provider.connect.return_value.__enter__.return_value
        conn.dialect.insert_returning = False
        conn.execute.return_value.lastrowid = 7

        new_id = EmployeeStore(provider, "db").add_employee(make_employee(region="WA"))

        assert new_id == 7
        assert conn.execute.call_args[0][0] is INSERT
        assert conn.execute.call_args[0][1]["Region"] == "WA"
        assert conn.execute.call_args[0][1]["ReportsTo"] is None
