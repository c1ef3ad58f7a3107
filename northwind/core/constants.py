"""
Storage constants for the Employees table.

The column tuple below is the column-order contract every statement in
the repositories layer is built from. The table definition in
``northwind.models.employee`` is checked against it at import time.
"""

# ========================================
# Table
# ========================================

EMPLOYEES_TABLE = "Employees"

# ========================================
# Column Contract
# ========================================

PRIMARY_KEY_COLUMN = "EmployeeId"

EMPLOYEE_COLUMNS = (
    "EmployeeId",
    "LastName",
    "FirstName",
    "Title",
    "TitleOfCourtesy",
    "BirthDate",
    "HireDate",
    "Address",
    "City",
    "Region",
    "PostalCode",
    "Country",
    "HomePhone",
    "Extension",
    "Notes",
    "ReportsTo",
    "PhotoPath",
)
"""Storage column names, in table order."""

NULLABLE_COLUMNS = frozenset({"Region", "ReportsTo"})

# Storage column -> Employee attribute
COLUMN_TO_ATTRIBUTE = {
    "EmployeeId": "id",
    "LastName": "last_name",
    "FirstName": "first_name",
    "Title": "title",
    "TitleOfCourtesy": "title_of_courtesy",
    "BirthDate": "birth_date",
    "HireDate": "hire_date",
    "Address": "address",
    "City": "city",
    "Region": "region",
    "PostalCode": "postal_code",
    "Country": "country",
    "HomePhone": "home_phone",
    "Extension": "extension",
    "Notes": "notes",
    "ReportsTo": "reports_to",
    "PhotoPath": "photo_path",
}

# Columns written by INSERT/UPDATE (everything but the key)
WRITABLE_COLUMNS = tuple(c for c in EMPLOYEE_COLUMNS if c != PRIMARY_KEY_COLUMN)
