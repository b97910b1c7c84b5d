"""Editor and public-renderer entry points.

``FormBuilder`` is the surface the editing UI talks to; ``PublicForms`` is
the read-only surface of the public renderer.  Both are thin, stateless
facades over one ``StructureStore``.

Usage:
    from form_drafts.adapters import MemoryAdapter
    from form_drafts.builder import FormBuilder, PublicForms
    from form_drafts.structure import StructureStore

    store = StructureStore(MemoryAdapter())
    builder = FormBuilder(store)

    form = await builder.create_form("Contact")
    view = await builder.get_working_view(form.id)
    await builder.add_field(form.id, view.steps[0].id, "text", label="Name")
    result = await builder.publish(form.id)

    public = await PublicForms(store).get_public_form(result.form.slug)
"""

import logging
from typing import Any

from form_drafts.config.models import SlugSettings
from form_drafts.drafts.fields import (
    add_field,
    delete_field,
    reorder_fields,
    restore_field,
    update_field,
)
from form_drafts.drafts.models import (
    FieldDeleteResult,
    FieldUpdateResult,
    PublishResult,
    StepDeleteResult,
)
from form_drafts.drafts.publish import publish, unpublish
from form_drafts.drafts.steps import add_step, delete_step, restore_step, update_step
from form_drafts.structure.models import Field, FieldPatch, Form, Step, StepPatch
from form_drafts.structure.store import StructureStore
from form_drafts.views.builder import get_working_view
from form_drafts.views.models import FormFull, WorkingView
from form_drafts.views.public import get_public_form

logger = logging.getLogger(__name__)


class FormBuilder:
    """Editor operations on a form's structure.

    Args:
        store: Structure store shared with the public renderer.
        slug_settings: Settings for slugs allocated at first publish.
    """

    def __init__(
        self, store: StructureStore, slug_settings: SlugSettings | None = None
    ) -> None:
        self.store = store
        self.slug_settings = slug_settings or SlugSettings()

    # ------------------------------------------------------------------
    # Forms
    # ------------------------------------------------------------------

    async def create_form(self, title: str = "Untitled Form", description: str = "") -> Form:
        """Create an unpublished form with a default first step."""
        form = await self.store.insert_form(
            {"title": title, "description": description, "is_published": False}
        )
        await add_step(self.store, form.id, title="Step 1", step_order=0)
        logger.info("Created form %s", form.id)
        return form

    async def update_form(
        self, form_id: str, title: str | None = None, description: str | None = None
    ) -> Form:
        """Edit form metadata in place (metadata is not draft-versioned)."""
        patch: dict[str, Any] = {}
        if title is not None:
            patch["title"] = title
        if description is not None:
            patch["description"] = description
        if not patch:
            return await self.store.get_form(form_id)
        return await self.store.update_form(form_id, patch)

    async def delete_form(self, form_id: str) -> None:
        """Remove a form with all of its steps and fields."""
        await self.store.get_form(form_id)
        for step in await self.store.list_steps_by_form(form_id):
            await self.store.delete_fields_by_step(step.id)
            await self.store.delete_step(step.id)
        for field in await self.store.list_fields_by_form(form_id):
            await self.store.delete_field(field.id)
        await self.store.delete_form(form_id)
        logger.info("Deleted form %s", form_id)

    async def list_forms(self) -> list[Form]:
        return await self.store.list_forms()

    async def duplicate_form(self, form_id: str) -> Form:
        """Copy the working view into a new unpublished form.

        Staged deletions are left out; everything copied is a new draft.
        """
        view = await self.get_working_view(form_id)
        copy = await self.store.insert_form({
            "title": f"{view.form.title} (Copy)",
            "description": view.form.description,
            "is_published": False,
            "slug": None,
        })
        for step in view.steps:
            if step.pending_delete:
                continue
            new_step = await add_step(
                self.store, copy.id, title=step.title, step_order=step.step_order
            )
            for field in view.fields_for(step.id):
                if field.pending_delete:
                    continue
                await self.store.insert_field({
                    **field.content(),
                    "form_id": copy.id,
                    "step_id": new_step.id,
                    "is_draft": True,
                    "draft_parent_id": None,
                    "pending_delete": False,
                })
        logger.info("Duplicated form %s as %s", form_id, copy.id)
        return copy

    # ------------------------------------------------------------------
    # Working view
    # ------------------------------------------------------------------

    async def get_working_view(self, form_id: str) -> WorkingView:
        return await get_working_view(self.store, form_id)

    # ------------------------------------------------------------------
    # Fields
    # ------------------------------------------------------------------

    async def add_field(
        self, form_id: str, step_id: str, field_type: str, **attributes: Any
    ) -> Field:
        return await add_field(self.store, form_id, step_id, field_type, **attributes)

    async def mutate_field(
        self, form_id: str, field_id: str, patch: dict[str, Any] | FieldPatch
    ) -> FieldUpdateResult:
        return await update_field(self.store, form_id, field_id, patch)

    async def delete_field(self, form_id: str, field_id: str) -> FieldDeleteResult:
        return await delete_field(self.store, form_id, field_id)

    async def restore_field(self, form_id: str, field_id: str) -> Field:
        return await restore_field(self.store, form_id, field_id)

    async def reorder_fields(
        self, form_id: str, step_id: str, ordered_ids: list[str]
    ) -> list[Field]:
        return await reorder_fields(self.store, form_id, step_id, ordered_ids)

    # ------------------------------------------------------------------
    # Steps
    # ------------------------------------------------------------------

    async def add_step(
        self, form_id: str, title: str | None = None, step_order: int | None = None
    ) -> Step:
        return await add_step(self.store, form_id, title, step_order)

    async def mutate_step(
        self, form_id: str, step_id: str, patch: dict[str, Any] | StepPatch
    ) -> Step:
        return await update_step(self.store, form_id, step_id, patch)

    async def delete_step(self, form_id: str, step_id: str) -> StepDeleteResult:
        return await delete_step(self.store, form_id, step_id)

    async def restore_step(self, form_id: str, step_id: str) -> Step:
        return await restore_step(self.store, form_id, step_id)

    # ------------------------------------------------------------------
    # Lifecycle
    # ------------------------------------------------------------------

    async def publish(self, form_id: str) -> PublishResult:
        return await publish(self.store, form_id, self.slug_settings)

    async def unpublish(self, form_id: str) -> Form:
        return await unpublish(self.store, form_id)


class PublicForms:
    """Read-only access for the public renderer."""

    def __init__(self, store: StructureStore) -> None:
        self.store = store

    async def get_public_form(self, slug: str) -> FormFull:
        return await get_public_form(self.store, slug)
