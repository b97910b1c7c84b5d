"""Read live column names and derive the columns the engine requires.

Live columns come from ``information_schema.columns`` through the adapter's
own ``select``, so no second connection is opened.
"""

from form_drafts.adapters.base import DatabaseClient
from form_drafts.config.models import TableNames
from form_drafts.structure.models import Field, Form, Step


async def fetch_column_names(
    adapter: DatabaseClient, schema_name: str = "public"
) -> dict[str, set[str]]:
    """Map every table in *schema_name* to its set of column names.

    Raises:
        StoreError: The catalog query failed.
    """
    rows = await adapter.select(
        "information_schema.columns",
        "table_name, column_name",
        {"table_schema": schema_name},
    )
    columns: dict[str, set[str]] = {}
    for row in rows:
        columns.setdefault(row["table_name"], set()).add(row["column_name"])
    return columns


def expected_columns(tables: TableNames | None = None) -> dict[str, set[str]]:
    """Columns each structure table must have, taken from the record models."""
    tables = tables or TableNames()
    return {
        tables.forms: set(Form.model_fields),
        tables.steps: set(Step.model_fields),
        tables.fields: set(Field.model_fields),
    }


def record_names(tables: TableNames | None = None) -> dict[str, str]:
    """Name of the record model each structure table holds."""
    tables = tables or TableNames()
    return {
        tables.forms: Form.__name__,
        tables.steps: Step.__name__,
        tables.fields: Field.__name__,
    }
