"""Structure Store client protocol definition.

Defines the ``DatabaseClient`` Protocol that every storage backend must
implement.  Rows travel as plain dicts; the ``StructureStore`` turns them into
pydantic records.  All methods are ``async def``.

Filters are equality matches joined with AND.  A filter value of ``None``
matches SQL ``NULL`` (``column IS NULL``), never the literal string.

Usage:
    from form_drafts.adapters.base import DatabaseClient

    async def drafts_for(client: DatabaseClient, form_id: str) -> list[dict]:
        return await client.select(
            "form_fields", "*", filters={"form_id": form_id, "is_draft": True}
        )
"""

from typing import Any, Protocol


class DatabaseClient(Protocol):
    """Storage interface used by ``StructureStore``.

    Implementations must raise ``form_drafts.errors.StoreError`` for
    driver/network failures so that callers only ever see the engine's
    error taxonomy.
    """

    async def select(
        self,
        table: str,
        columns: str,
        filters: dict[str, Any] | None = None,
        order_by: str | None = None,
    ) -> list[dict]:
        """Select rows from table.

        Args:
            table: Table name.
            columns: Comma-separated column names, or ``"*"``.
            filters: Optional dict of column=value filters (AND).  ``None``
                values match NULL.
            order_by: Optional column name to sort by (ascending).

        Returns:
            List of dicts, one per row.  Empty list if no matches.

        Example:
            rows = await client.select(
                "form_steps",
                "*",
                filters={"form_id": form_id, "pending_delete": False},
                order_by="step_order",
            )
        """
        ...

    async def insert(self, table: str, data: dict) -> dict:
        """Insert a row and return it as stored.

        The backend assigns ``id`` and timestamp columns.

        Example:
            row = await client.insert("form_steps", {
                "form_id": form_id,
                "title": "Step 1",
                "step_order": 0,
            })
        """
        ...

    async def update(
        self, table: str, data: dict, filters: dict[str, Any]
    ) -> dict | None:
        """Update matching rows and return the first updated row.

        Returns:
            The updated row, or ``None`` when no row matched *filters*.

        Example:
            row = await client.update(
                "form_fields",
                {"pending_delete": True},
                {"id": field_id},
            )
        """
        ...

    async def delete(self, table: str, filters: dict[str, Any]) -> None:
        """Delete matching rows.  Deleting nothing is not an error.

        Example:
            await client.delete("form_fields", {"step_id": step_id})
        """
        ...

    async def close(self) -> None:
        """Release connections held by the client."""
        ...
