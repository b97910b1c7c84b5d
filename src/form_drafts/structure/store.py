"""Structure Store: typed CRUD over forms, steps, and fields.

``StructureStore`` wraps any ``DatabaseClient`` and exposes the keyed
operations the draft engine needs, returning pydantic records and raising
``NotFoundError`` for missing ids.  Adapter failures surface as
``StoreError`` unchanged.

Usage:
    from form_drafts.adapters import MemoryAdapter
    from form_drafts.structure.store import StructureStore

    store = StructureStore(MemoryAdapter())
    form = await store.insert_form({"title": "Contact"})
    steps = await store.list_steps_by_form(form.id)
"""

from datetime import datetime, timezone
from typing import Any
from uuid import UUID

from form_drafts.adapters.base import DatabaseClient
from form_drafts.config.models import TableNames
from form_drafts.errors import NotFoundError
from form_drafts.structure.models import BaseFieldConfig, Field, Form, Step


def _field_row(data: dict[str, Any]) -> dict[str, Any]:
    """Convert a field payload into column values."""
    row = dict(data)
    config = row.get("validation")
    if isinstance(config, BaseFieldConfig):
        row["validation"] = config.model_dump(exclude_none=True)
    return row


def _is_row_id(value: str) -> bool:
    """Row ids are UUIDs in every backend; other strings can never match a row."""
    try:
        UUID(str(value))
    except ValueError:
        return False
    return True


def _by_order(attr: str):
    # Equal orders break on id so rendering never depends on storage order
    return lambda record: (getattr(record, attr), record.id)


class StructureStore:
    """Keyed access to ``Form``, ``Step`` and ``Field`` records.

    Args:
        client: Storage backend implementing ``DatabaseClient``.
        tables: Table names; defaults to ``forms``, ``form_steps``,
            ``form_fields``.
    """

    def __init__(self, client: DatabaseClient, tables: TableNames | None = None) -> None:
        self.client = client
        self.tables = tables or TableNames()

    async def close(self) -> None:
        await self.client.close()

    # ------------------------------------------------------------------
    # Forms
    # ------------------------------------------------------------------

    async def get_form(self, form_id: str) -> Form:
        if not _is_row_id(form_id):
            raise NotFoundError("form", form_id)
        rows = await self.client.select(self.tables.forms, "*", {"id": form_id})
        if not rows:
            raise NotFoundError("form", form_id)
        return Form.model_validate(rows[0])

    async def get_form_by_slug(self, slug: str) -> Form | None:
        rows = await self.client.select(self.tables.forms, "*", {"slug": slug})
        return Form.model_validate(rows[0]) if rows else None

    async def slug_exists(self, candidate: str) -> bool:
        rows = await self.client.select(self.tables.forms, "id", {"slug": candidate})
        return bool(rows)

    async def list_forms(self) -> list[Form]:
        """All forms, newest first."""
        rows = await self.client.select(self.tables.forms, "*", order_by="created_at")
        return [Form.model_validate(r) for r in reversed(rows)]

    async def insert_form(self, data: dict[str, Any]) -> Form:
        row = await self.client.insert(self.tables.forms, data)
        return Form.model_validate(row)

    async def update_form(self, form_id: str, patch: dict[str, Any]) -> Form:
        """Apply *patch* and stamp ``updated_at``."""
        if not _is_row_id(form_id):
            raise NotFoundError("form", form_id)
        patch = {**patch, "updated_at": datetime.now(timezone.utc)}
        row = await self.client.update(self.tables.forms, patch, {"id": form_id})
        if row is None:
            raise NotFoundError("form", form_id)
        return Form.model_validate(row)

    async def delete_form(self, form_id: str) -> None:
        if not _is_row_id(form_id):
            return
        await self.client.delete(self.tables.forms, {"id": form_id})

    # ------------------------------------------------------------------
    # Steps
    # ------------------------------------------------------------------

    async def get_step(self, step_id: str) -> Step:
        if not _is_row_id(step_id):
            raise NotFoundError("step", step_id)
        rows = await self.client.select(self.tables.steps, "*", {"id": step_id})
        if not rows:
            raise NotFoundError("step", step_id)
        return Step.model_validate(rows[0])

    async def insert_step(self, data: dict[str, Any]) -> Step:
        row = await self.client.insert(self.tables.steps, data)
        return Step.model_validate(row)

    async def update_step(self, step_id: str, patch: dict[str, Any]) -> Step:
        if not _is_row_id(step_id):
            raise NotFoundError("step", step_id)
        row = await self.client.update(self.tables.steps, patch, {"id": step_id})
        if row is None:
            raise NotFoundError("step", step_id)
        return Step.model_validate(row)

    async def delete_step(self, step_id: str) -> None:
        if not _is_row_id(step_id):
            return
        await self.client.delete(self.tables.steps, {"id": step_id})

    async def list_steps_by_form(
        self, form_id: str, filters: dict[str, Any] | None = None
    ) -> list[Step]:
        """Steps of a form ordered by ``step_order``, optionally filtered."""
        if not _is_row_id(form_id):
            return []
        rows = await self.client.select(
            self.tables.steps, "*", {"form_id": form_id, **(filters or {})}
        )
        return sorted((Step.model_validate(r) for r in rows), key=_by_order("step_order"))

    # ------------------------------------------------------------------
    # Fields
    # ------------------------------------------------------------------

    async def get_field(self, field_id: str) -> Field:
        if not _is_row_id(field_id):
            raise NotFoundError("field", field_id)
        rows = await self.client.select(self.tables.fields, "*", {"id": field_id})
        if not rows:
            raise NotFoundError("field", field_id)
        return Field.model_validate(rows[0])

    async def insert_field(self, data: dict[str, Any]) -> Field:
        row = await self.client.insert(self.tables.fields, _field_row(data))
        return Field.model_validate(row)

    async def update_field(self, field_id: str, patch: dict[str, Any]) -> Field:
        if not _is_row_id(field_id):
            raise NotFoundError("field", field_id)
        row = await self.client.update(self.tables.fields, _field_row(patch), {"id": field_id})
        if row is None:
            raise NotFoundError("field", field_id)
        return Field.model_validate(row)

    async def delete_field(self, field_id: str) -> None:
        if not _is_row_id(field_id):
            return
        await self.client.delete(self.tables.fields, {"id": field_id})

    async def delete_fields_by_step(self, step_id: str) -> None:
        if not _is_row_id(step_id):
            return
        await self.client.delete(self.tables.fields, {"step_id": step_id})

    async def list_fields_by_form(
        self, form_id: str, filters: dict[str, Any] | None = None
    ) -> list[Field]:
        """Fields of a form ordered by ``field_order``, optionally filtered."""
        if not _is_row_id(form_id):
            return []
        rows = await self.client.select(
            self.tables.fields, "*", {"form_id": form_id, **(filters or {})}
        )
        return sorted((Field.model_validate(r) for r in rows), key=_by_order("field_order"))

    async def list_fields_by_step(self, step_id: str) -> list[Field]:
        if not _is_row_id(step_id):
            return []
        rows = await self.client.select(self.tables.fields, "*", {"step_id": step_id})
        return sorted((Field.model_validate(r) for r in rows), key=_by_order("field_order"))

    async def find_shadow(self, parent_id: str) -> Field | None:
        """The edit-shadow draft of a published field, if one exists."""
        if not _is_row_id(parent_id):
            return None
        rows = await self.client.select(
            self.tables.fields, "*", {"draft_parent_id": parent_id}
        )
        return Field.model_validate(rows[0]) if rows else None
