"""Schema validation of a structure store.

Usage:
    from form_drafts.schema import expected_columns, fetch_column_names, validate_schema

    actual = await fetch_column_names(adapter)
    result = validate_schema(actual, expected_columns(), record_names())
"""

from form_drafts.schema.comparator import validate_schema
from form_drafts.schema.introspector import expected_columns, fetch_column_names, record_names
from form_drafts.schema.models import ColumnDiff, ConnectionResult, SchemaValidationResult

__all__ = [
    "validate_schema",
    "expected_columns",
    "fetch_column_names",
    "record_names",
    "ColumnDiff",
    "ConnectionResult",
    "SchemaValidationResult",
]
