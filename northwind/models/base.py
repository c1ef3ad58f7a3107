"""
Base Model
==========

Shared table metadata and the serialization mixin for record types.
"""

from dataclasses import fields
from datetime import datetime
from typing import Any, Dict, Optional

from sqlalchemy import MetaData
from sqlalchemy.engine import Engine


metadata = MetaData()
"""Holds every table definition of the package."""


class SerializationMixin:
    """Mixin that adds to_dict() serialization to dataclass records."""

    def to_dict(self, exclude: Optional[set] = None) -> Dict[str, Any]:
        """Convert record to dictionary, datetimes as ISO-8601 strings."""
        exclude = exclude or set()
        result = {}
        for field in fields(self):
            if field.name in exclude:
                continue
            value = getattr(self, field.name)
            if isinstance(value, datetime):
                result[field.name] = value.isoformat()
            else:
                result[field.name] = value
        return result


def create_all_tables(engine: Engine) -> None:
    """Create all tables in the database."""
    metadata.create_all(bind=engine)


def drop_all_tables(engine: Engine) -> None:
    """Drop all tables in the database."""
    metadata.drop_all(bind=engine)
