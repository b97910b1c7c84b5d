"""Pydantic models for store schema checks and connection results."""

from pydantic import BaseModel, Field


# ============================================================================
# Validation Result Models
# ============================================================================


class ColumnDiff(BaseModel):
    """A column a structure record needs but its table lacks."""

    table: str
    column: str
    record: str | None = None  # "Form", "Step" or "Field"


class SchemaValidationResult(BaseModel):
    """Which structure tables or record columns the live store is missing.

    ``records`` names the record model each table stores, so the report can
    say what cannot be loaded rather than only which column is absent.

    Example:
        >>> result = SchemaValidationResult(valid=True)
        >>> result.error_count
        0
        >>> result.format_report()
        'Schema valid'
    """

    valid: bool
    missing_tables: list[str] = Field(default_factory=list)
    missing_columns: list[ColumnDiff] = Field(default_factory=list)
    records: dict[str, str] = Field(default_factory=dict)

    @property
    def error_count(self) -> int:
        return len(self.missing_tables) + len(self.missing_columns)

    def columns_by_table(self) -> dict[str, list[str]]:
        """Missing column names grouped per table, in report order."""
        grouped: dict[str, list[str]] = {}
        for diff in self.missing_columns:
            grouped.setdefault(diff.table, []).append(diff.column)
        return grouped

    def _label(self, table: str) -> str:
        record = self.records.get(table)
        return f"{table} ({record} records)" if record else table

    def format_report(self) -> str:
        """One line per affected table, then how to bring the store up to date."""
        if self.valid:
            return "Schema valid"

        lines = [f"Structure store is missing {self.error_count} required item(s):"]
        for table in self.missing_tables:
            lines.append(f"  - {self._label(table)}: table not found")
        for table, columns in self.columns_by_table().items():
            lines.append(f"  - {self._label(table)}: missing {', '.join(columns)}")
        lines.append(
            "Apply sql/schema.sql, or map [tables] in forms.toml to the existing tables."
        )
        return "\n".join(lines)


# ============================================================================
# Connection Result
# ============================================================================


class ConnectionResult(BaseModel):
    """Result of connect_and_validate().

    ``schema_valid`` stays ``None`` when the provider was not introspected.
    """

    success: bool
    profile_name: str | None = None
    provider: str | None = None
    schema_valid: bool | None = None
    schema_report: SchemaValidationResult | None = None
    error: str | None = None
