"""Test fixtures and configuration."""

from datetime import datetime

import pytest

from northwind.database.provider import ConnectionProvider
from northwind.models import Employee, create_all_tables
from northwind.repositories.employees import EmployeeStore


@pytest.fixture
def database_url(tmp_path):
    """File-backed SQLite database, one per test."""
    return f"sqlite:///{tmp_path / 'northwind.db'}"


@pytest.fixture
def provider(database_url):
    """Provider with the Employees table already created."""
    provider = ConnectionProvider()
    create_all_tables(provider.get_engine(database_url))
    yield provider
    provider.dispose()


@pytest.fixture
def store(provider, database_url):
    return EmployeeStore(provider, database_url)


@pytest.fixture
def make_employee():
    """Build an Employee with sensible defaults, overridable per field."""

    def _make(**overrides):
        fields = dict(
            last_name="Smith",
            first_name="Anna",
            title="Rep",
            title_of_courtesy="Ms.",
            birth_date=datetime(1990, 1, 1),
            hire_date=datetime(2020, 1, 1),
            address="1 Main St",
            city="Springfield",
            region=None,
            postal_code="00000",
            country="USA",
            home_phone="555-0100",
            extension="100",
            notes="n/a",
            reports_to=None,
            photo_path="p.jpg",
        )
        fields.update(overrides)
        return Employee(**fields)

    return _make
