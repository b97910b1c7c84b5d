"""In-process structure store adapter.

``MemoryAdapter`` keeps each table as a dict of rows keyed by ``id`` and
mimics the column defaults of ``sql/schema.sql``: ``id`` (uuid4 string),
``created_at`` and ``updated_at``.  Rows are copied on the way in and out so
callers can never mutate stored state by accident.  Like the database, it
never refreshes ``updated_at`` on its own; ``StructureStore.update_form``
stamps it explicitly.

Used by the ``memory`` profile provider and by the test-suite.

Usage:
    from form_drafts.adapters.memory import MemoryAdapter

    adapter = MemoryAdapter()
    row = await adapter.insert("forms", {"title": "Contact"})
"""

import copy
from datetime import datetime, timezone
from typing import Any
from uuid import uuid4


def _now() -> str:
    return datetime.now(timezone.utc).isoformat()


class MemoryAdapter:
    """Dict-backed implementation of the ``DatabaseClient`` protocol."""

    def __init__(self) -> None:
        self._tables: dict[str, dict[str, dict]] = {}

    def _table(self, table: str) -> dict[str, dict]:
        return self._tables.setdefault(table, {})

    @staticmethod
    def _matches(row: dict, filters: dict[str, Any] | None) -> bool:
        if not filters:
            return True
        return all(row.get(k) == v for k, v in filters.items())

    @staticmethod
    def _project(row: dict, columns: str) -> dict:
        if columns.strip() == "*":
            return copy.deepcopy(row)
        names = [c.strip() for c in columns.split(",")]
        return {name: copy.deepcopy(row.get(name)) for name in names}

    # ------------------------------------------------------------------
    # CRUD Methods
    # ------------------------------------------------------------------

    async def select(
        self,
        table: str,
        columns: str,
        filters: dict[str, Any] | None = None,
        order_by: str | None = None,
    ) -> list[dict]:
        rows = [r for r in self._table(table).values() if self._matches(r, filters)]
        if order_by:
            rows.sort(key=lambda r: (r.get(order_by) is None, r.get(order_by)))
        return [self._project(r, columns) for r in rows]

    async def insert(self, table: str, data: dict) -> dict:
        stamp = _now()
        row = {"id": str(uuid4()), "created_at": stamp, "updated_at": stamp}
        row.update(copy.deepcopy(data))
        self._table(table)[row["id"]] = row
        return copy.deepcopy(row)

    async def update(
        self, table: str, data: dict, filters: dict[str, Any]
    ) -> dict | None:
        first: dict | None = None
        for row in self._table(table).values():
            if not self._matches(row, filters):
                continue
            row.update(copy.deepcopy(data))
            if first is None:
                first = copy.deepcopy(row)
        return first

    async def delete(self, table: str, filters: dict[str, Any]) -> None:
        rows = self._table(table)
        for row_id in [k for k, r in rows.items() if self._matches(r, filters)]:
            del rows[row_id]

    async def close(self) -> None:
        """Nothing to release; stored rows survive for inspection."""
        return None

    # ------------------------------------------------------------------
    # Inspection
    # ------------------------------------------------------------------

    def rows(self, table: str) -> list[dict]:
        """Return copies of every row in *table* (insertion order)."""
        return [copy.deepcopy(r) for r in self._table(table).values()]
