"""
Database initialization and seeding.

This script:
- Creates the Employees table
- Optionally adds sample employees for development/testing
- Can reset the database (drop and recreate)

Usage:
    # Create the table
    python -m northwind.database.init_db

    # Reset database (drops all tables and recreates)
    python -m northwind.database.init_db --reset

    # Add sample employees
    python -m northwind.database.init_db --sample-data
"""

import argparse
import logging
import sys
from datetime import datetime
from typing import List, Optional

from sqlalchemy import func, select

from northwind.config import settings
from northwind.database.provider import ConnectionProvider, get_connection_provider
from northwind.models import Employee, create_all_tables, drop_all_tables, employees_table
from northwind.repositories.employees import EmployeeStore

logger = logging.getLogger(__name__)


SAMPLE_EMPLOYEES = [
    Employee(
        last_name="Davolio",
        first_name="Nancy",
        title="Sales Representative",
        title_of_courtesy="Ms.",
        birth_date=datetime(1968, 12, 8),
        hire_date=datetime(1992, 5, 1),
        address="507 - 20th Ave. E. Apt. 2A",
        city="Seattle",
        region="WA",
        postal_code="98122",
        country="USA",
        home_phone="(206) 555-9857",
        extension="5467",
        notes="Education includes a BA in psychology.",
        photo_path="http://accweb/emmployees/davolio.bmp",
    ),
    Employee(
        last_name="Fuller",
        first_name="Andrew",
        title="Vice President, Sales",
        title_of_courtesy="Dr.",
        birth_date=datetime(1952, 2, 19),
        hire_date=datetime(1992, 8, 14),
        address="908 W. Capital Way",
        city="Tacoma",
        region="WA",
        postal_code="98401",
        country="USA",
        home_phone="(206) 555-9482",
        extension="3457",
        notes="Andrew received his BTS commercial and a Ph.D. in international marketing.",
        photo_path="http://accweb/emmployees/fuller.bmp",
    ),
    Employee(
        last_name="Buchanan",
        first_name="Steven",
        title="Sales Manager",
        title_of_courtesy="Mr.",
        birth_date=datetime(1955, 3, 4),
        hire_date=datetime(1993, 10, 17),
        address="14 Garrett Hill",
        city="London",
        postal_code="SW1 8JR",
        country="UK",
        home_phone="(71) 555-4848",
        extension="3453",
        notes="Steven Buchanan graduated from St. Andrews University, Scotland.",
        photo_path="http://accweb/emmployees/buchanan.bmp",
    ),
]
"""Sample rows; Buchanan has no region and none of them report to anyone."""


def create_tables(provider: ConnectionProvider, database_url: str, reset: bool = False) -> None:
    """
    Create all database tables.

    Args:
        provider: Connection provider
        database_url: Target database
        reset: If True, drop existing tables first
    """
    engine = provider.get_engine(database_url)

    if reset:
        logger.info("Dropping existing tables")
        drop_all_tables(engine)

    logger.info("Creating database tables")
    create_all_tables(engine)


def seed_sample_data(store: EmployeeStore) -> List[int]:
    """
    Insert the sample employees through the store.

    Returns:
        Ids assigned to the new rows
    """
    ids = [store.add_employee(employee) for employee in SAMPLE_EMPLOYEES]
    logger.info("Seeded %d sample employees", len(ids))
    return ids


def count_employees(provider: ConnectionProvider, database_url: str) -> int:
    """Number of rows in the Employees table."""
    with provider.connect(database_url) as conn:
        return conn.execute(select(func.count()).select_from(employees_table)).scalar_one()


def initialize_database(
    database_url: Optional[str] = None,
    reset: bool = False,
    sample_data: bool = False,
    provider: Optional[ConnectionProvider] = None,
) -> int:
    """
    Initialize the database.

    Args:
        database_url: Target database (default: settings.database_url)
        reset: Drop existing tables before creating
        sample_data: Add sample employees
        provider: Connection provider (default: process-wide provider)

    Returns:
        Number of employees after initialization
    """
    database_url = database_url or settings.database_url
    provider = provider or get_connection_provider()

    create_tables(provider, database_url, reset=reset)

    if sample_data:
        seed_sample_data(EmployeeStore(provider, database_url))

    total = count_employees(provider, database_url)
    logger.info("Database initialized: %d employees", total)
    return total


def main(argv: Optional[List[str]] = None) -> int:
    """Main entry point with CLI argument parsing."""
    parser = argparse.ArgumentParser(
        description="Initialize and seed the Northwind Employees database",
        formatter_class=argparse.RawDescriptionHelpFormatter,
        epilog="""
Examples:
  # Create the Employees table
  python -m northwind.database.init_db

  # Reset database (drop all tables and recreate)
  python -m northwind.database.init_db --reset

  # Full reset with sample data, no prompt
  python -m northwind.database.init_db --reset --sample-data --yes
        """
    )

    parser.add_argument(
        "--database-url",
        default=None,
        help="Database URL (default: DATABASE_URL setting)"
    )

    parser.add_argument(
        "--reset",
        action="store_true",
        help="Drop existing tables before creating (WARNING: deletes all data!)"
    )

    parser.add_argument(
        "--sample-data",
        action="store_true",
        help="Add sample employees for development/testing"
    )

    parser.add_argument(
        "--yes",
        action="store_true",
        help="Do not ask for confirmation before a reset"
    )

    args = parser.parse_args(argv)

    logging.basicConfig(
        level=settings.log_level,
        format="%(asctime)s - %(name)s - %(levelname)s - %(message)s",
        handlers=[
            logging.StreamHandler(sys.stdout),
        ],
    )

    # Confirm reset if requested
    if args.reset and not args.yes:
        response = input("This will DELETE ALL DATA in the database. Type 'yes' to continue: ")
        if response.lower() != "yes":
            logger.warning("Reset aborted")
            return 1

    initialize_database(
        database_url=args.database_url,
        reset=args.reset,
        sample_data=args.sample_data,
    )
    return 0


if __name__ == "__main__":
    sys.exit(main())
