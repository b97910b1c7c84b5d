"""Compare the columns the engine needs against the columns a store has.

Pure set logic; the live column map comes from ``introspector``.

Usage:
    from form_drafts.schema.comparator import validate_schema
    from form_drafts.schema.introspector import expected_columns, record_names

    result = validate_schema(actual, expected_columns(), record_names())
    print(result.format_report())
"""

from form_drafts.schema.models import ColumnDiff, SchemaValidationResult


def validate_schema(
    actual_columns: dict[str, set[str]],
    expected_columns: dict[str, set[str]],
    records: dict[str, str] | None = None,
) -> SchemaValidationResult:
    """Find tables and columns the engine expects but the store lacks.

    Tables present in the store but not expected are ignored; the structure
    tables usually share a schema with unrelated application tables.

    Args:
        actual_columns: Table name to live column names.
        expected_columns: Table name to required column names.
        records: Table name to the record model stored there, for reporting.

    Returns:
        ``SchemaValidationResult``; ``valid`` is ``True`` when nothing is
        missing.

    Examples:
        >>> validate_schema({"forms": {"id"}}, {"forms": {"id"}}).valid
        True
        >>> result = validate_schema({"forms": {"id"}}, {"forms": {"id", "slug"}})
        >>> result.missing_columns[0].column
        'slug'
    """
    records = records or {}
    missing_tables = sorted(set(expected_columns) - set(actual_columns))

    missing_columns = [
        ColumnDiff(table=table_name, column=col_name, record=records.get(table_name))
        for table_name in sorted(set(expected_columns) & set(actual_columns))
        for col_name in sorted(expected_columns[table_name] - actual_columns[table_name])
    ]

    return SchemaValidationResult(
        valid=not missing_tables and not missing_columns,
        missing_tables=missing_tables,
        missing_columns=missing_columns,
        records=records,
    )
