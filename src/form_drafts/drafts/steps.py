"""Step mutations.

Steps have no edit-shadows: a step is either a new draft or published.
Renames and reorders apply in place immediately; deleting a published step is
staged until publish.  A form always keeps at least one live step.
"""

import logging
from typing import Any

from pydantic import ValidationError

from form_drafts.drafts.models import StepDeleteResult
from form_drafts.errors import InvalidStateError, NotFoundError
from form_drafts.structure.models import Step, StepPatch
from form_drafts.structure.store import StructureStore

logger = logging.getLogger(__name__)


async def _step_in_form(store: StructureStore, form_id: str, step_id: str) -> Step:
    step = await store.get_step(step_id)
    if step.form_id != form_id:
        raise NotFoundError("step", step_id)
    return step


async def add_step(
    store: StructureStore,
    form_id: str,
    title: str | None = None,
    step_order: int | None = None,
) -> Step:
    """Append a new draft step (default title ``"Step <n>"``)."""
    await store.get_form(form_id)
    existing = await store.list_steps_by_form(form_id)
    if title is None:
        title = f"Step {len(existing) + 1}"
    if step_order is None:
        step_order = max((s.step_order for s in existing), default=-1) + 1

    step = await store.insert_step({
        "form_id": form_id,
        "title": title,
        "step_order": step_order,
        "is_draft": True,
        "draft_parent_id": None,
        "pending_delete": False,
    })
    logger.debug("Added draft step %s to form %s", step.id, form_id)
    return step


async def update_step(
    store: StructureStore,
    form_id: str,
    step_id: str,
    patch: dict[str, Any] | StepPatch,
) -> Step:
    """Rename, reorder, or restore a step in place."""
    if isinstance(patch, StepPatch):
        changes = patch.changes()
    else:
        try:
            changes = StepPatch.model_validate(patch).changes()
        except ValidationError as e:
            raise InvalidStateError(f"Invalid step update: {e}") from e

    step = await _step_in_form(store, form_id, step_id)
    if not changes:
        return step
    return await store.update_step(step.id, changes)


async def restore_step(store: StructureStore, form_id: str, step_id: str) -> Step:
    """Undo a staged step deletion."""
    return await update_step(store, form_id, step_id, {"pending_delete": False})


async def delete_step(
    store: StructureStore, form_id: str, step_id: str
) -> StepDeleteResult:
    """Delete a step.

    - New draft step: the step and all of its fields are hard-deleted.
    - Published step: staged (``pending_delete=True``); its fields are purged
      at publish.

    Raises:
        InvalidStateError: The form has at most one live step.  Checked before
            anything else, so nothing is mutated.
    """
    live = await store.list_steps_by_form(form_id, {"pending_delete": False})
    if len(live) <= 1:
        raise InvalidStateError("Cannot delete the last step")

    step = await _step_in_form(store, form_id, step_id)

    if step.is_new_draft:
        await store.delete_fields_by_step(step.id)
        await store.delete_step(step.id)
        logger.debug("Deleted draft step %s and its fields", step.id)
        return StepDeleteResult(deleted=True)

    staged = await store.update_step(step.id, {"pending_delete": True})
    logger.debug("Staged step %s for deletion", step.id)
    return StepDeleteResult(step=staged)
