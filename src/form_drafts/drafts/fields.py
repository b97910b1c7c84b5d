"""Field mutations under the draft-shadow rule.

A field row is in one of three states:

- **published** (``is_draft=False``): what the public renderer shows.
- **new draft** (``is_draft=True``, no parent): never published.
- **edit-shadow** (``is_draft=True``, ``draft_parent_id`` set): pending
  content edits of a published row, which stays untouched until publish.

Content edits to a published field go to its (single) edit-shadow.  Meta
edits (``field_order``, ``pending_delete``) always apply in place.

Usage:
    from form_drafts.drafts.fields import add_field, update_field, delete_field

    field = await add_field(store, form_id, step_id, "text", label="Name")
    result = await update_field(store, form_id, field.id, {"label": "Full Name"})
"""

import logging
from typing import Any

from pydantic import ValidationError

from form_drafts.drafts.models import FieldDeleteResult, FieldUpdateResult
from form_drafts.errors import InvalidStateError, NotFoundError
from form_drafts.structure.models import (
    CHOICE_TYPES,
    META_ATTRIBUTES,
    Field,
    FieldPatch,
    parse_field_config,
)
from form_drafts.structure.store import StructureStore
from form_drafts.structure.templates import build_group_config, default_label

logger = logging.getLogger(__name__)


def validate_patch(patch: dict[str, Any] | FieldPatch) -> dict[str, Any]:
    """Validate a sparse field patch and return only the supplied keys.

    Raises:
        InvalidStateError: Unknown keys, null for a required column, or
            wrongly typed values.
    """
    if isinstance(patch, FieldPatch):
        return patch.changes()
    try:
        return FieldPatch.model_validate(patch).changes()
    except ValidationError as e:
        raise InvalidStateError(f"Invalid field update: {e}") from e


def is_meta_only(changes: dict[str, Any]) -> bool:
    """True when every changed key is exempt from shadowing."""
    return set(changes) <= META_ATTRIBUTES


async def _field_in_form(store: StructureStore, form_id: str, field_id: str) -> Field:
    field = await store.get_field(field_id)
    if field.form_id != form_id:
        raise NotFoundError("field", field_id)
    return field


async def _prepare(
    store: StructureStore, current: Field, changes: dict[str, Any]
) -> dict[str, Any]:
    """Resolve a patch against the row it will be applied to.

    Parses ``validation`` for the effective field type, re-coerces the
    existing config when only the type changes, and checks cross-column
    constraints.
    """
    prepared = dict(changes)
    field_type = prepared.get("field_type", current.field_type)

    try:
        if "validation" in prepared:
            prepared["validation"] = parse_field_config(
                field_type, prepared["validation"], strict=True
            )
        elif "field_type" in prepared and current.validation is not None:
            prepared["validation"] = parse_field_config(field_type, current.validation)
    except (ValueError, ValidationError) as e:
        raise InvalidStateError(f"Invalid {field_type} settings: {e}") from e

    if field_type == "checkbox":
        config = prepared.get("validation", current.validation)
        options = prepared.get("options", current.options) or []
        missing = [o for o in getattr(config, "required_options", []) if o not in options]
        if missing:
            raise InvalidStateError(
                f"Required options not among choices: {', '.join(missing)}"
            )

    if prepared.get("step_id", current.step_id) != current.step_id:
        step = await store.get_step(prepared["step_id"])
        if step.form_id != current.form_id:
            raise InvalidStateError("Cannot move a field to another form's step")

    return prepared


async def add_field(
    store: StructureStore,
    form_id: str,
    step_id: str,
    field_type: str,
    **attributes: Any,
) -> Field:
    """Create a new draft field at the end of *step_id*.

    Missing attributes get builder defaults: a label derived from the type,
    ``["Option 1"]`` for choice types, and predefined sub-fields for
    name/address groups.
    """
    step = await store.get_step(step_id)
    if step.form_id != form_id:
        raise NotFoundError("step", step_id)

    changes = validate_patch({"field_type": field_type, **attributes})
    changes.pop("pending_delete", None)
    changes.pop("step_id", None)

    if changes.get("label") is None:
        changes["label"] = default_label(field_type)
    if "options" not in changes and field_type in CHOICE_TYPES:
        changes["options"] = ["Option 1"]
    if "validation" not in changes:
        group_config = build_group_config(field_type)
        if group_config is not None:
            changes["validation"] = group_config.model_dump()
    if "field_order" not in changes:
        siblings = await store.list_fields_by_step(step_id)
        changes["field_order"] = max((f.field_order for f in siblings), default=-1) + 1

    blank = Field(id="", form_id=form_id, step_id=step_id, field_type=field_type)
    prepared = await _prepare(store, blank, changes)

    field = await store.insert_field({
        **prepared,
        "form_id": form_id,
        "step_id": step_id,
        "is_draft": True,
        "draft_parent_id": None,
        "pending_delete": False,
    })
    logger.debug("Added draft field %s (%s) to step %s", field.id, field_type, step_id)
    return field


async def update_field(
    store: StructureStore,
    form_id: str,
    field_id: str,
    patch: dict[str, Any] | FieldPatch,
) -> FieldUpdateResult:
    """Apply a sparse patch following the draft-shadow rule.

    - Drafts (new or edit-shadow) and meta-only patches update in place.
    - The first content edit of a published field creates its edit-shadow;
      later content edits addressed to the published id update that shadow.

    Returns:
        ``FieldUpdateResult``; ``replaced_id`` names the published field the
        returned shadow stands in for.
    """
    changes = validate_patch(patch)
    field = await _field_in_form(store, form_id, field_id)

    if field.is_draft or is_meta_only(changes):
        if not changes:
            return FieldUpdateResult(field=field)
        discarded = None
        if not field.is_draft and changes.get("pending_delete"):
            # Publish would merge a surviving shadow back over the staged row
            discarded = await store.find_shadow(field.id)
            if discarded is not None:
                await store.delete_field(discarded.id)
        prepared = await _prepare(store, field, changes)
        updated = await store.update_field(field.id, prepared)
        logger.debug("Updated field %s in place: %s", field.id, sorted(changes))
        return FieldUpdateResult(
            field=updated, replaced_id=discarded.id if discarded else None
        )

    # A staging flag sent alongside content edits belongs to the published row
    if "pending_delete" in changes:
        flag = changes.pop("pending_delete")
        if flag != field.pending_delete:
            await store.update_field(field.id, {"pending_delete": flag})

    shadow = await store.find_shadow(field.id)
    if shadow is not None:
        prepared = await _prepare(store, shadow, changes)
        updated = await store.update_field(shadow.id, prepared)
        logger.debug("Updated edit-shadow %s of field %s", shadow.id, field.id)
        return FieldUpdateResult(field=updated, replaced_id=field.id)

    prepared = await _prepare(store, field, changes)
    created = await store.insert_field({
        **field.content(),
        **prepared,
        "form_id": field.form_id,
        "is_draft": True,
        "draft_parent_id": field.id,
        "pending_delete": False,
    })
    logger.debug("Created edit-shadow %s of field %s", created.id, field.id)
    return FieldUpdateResult(field=created, replaced_id=field.id)


async def delete_field(
    store: StructureStore, form_id: str, field_id: str
) -> FieldDeleteResult:
    """Delete a field according to its draft state.

    - New draft: hard-deleted.
    - Edit-shadow: shadow hard-deleted, its published parent staged
      (``pending_delete=True``).
    - Published: staged in place; an existing edit-shadow is discarded.
    """
    field = await _field_in_form(store, form_id, field_id)

    if field.is_new_draft:
        await store.delete_field(field.id)
        logger.debug("Deleted draft field %s", field.id)
        return FieldDeleteResult(deleted=True)

    if field.is_edit_shadow:
        await store.delete_field(field.id)
        try:
            parent = await store.update_field(field.draft_parent_id, {"pending_delete": True})
        except NotFoundError:
            logger.warning(
                "Edit-shadow %s had no parent %s; removed it outright",
                field.id,
                field.draft_parent_id,
            )
            return FieldDeleteResult(deleted=True)
        logger.debug("Discarded edit-shadow %s; staged field %s", field.id, parent.id)
        return FieldDeleteResult(field=parent, replaced_id=field.id)

    shadow = await store.find_shadow(field.id)
    if shadow is not None:
        await store.delete_field(shadow.id)
    staged = await store.update_field(field.id, {"pending_delete": True})
    logger.debug("Staged field %s for deletion", field.id)
    return FieldDeleteResult(field=staged, replaced_id=shadow.id if shadow else None)


async def restore_field(store: StructureStore, form_id: str, field_id: str) -> Field:
    """Undo a staged deletion.  Never creates an edit-shadow."""
    result = await update_field(store, form_id, field_id, {"pending_delete": False})
    return result.field


async def reorder_fields(
    store: StructureStore, form_id: str, step_id: str, ordered_ids: list[str]
) -> list[Field]:
    """Assign ``field_order = index`` to each id, in place.

    Raises:
        InvalidStateError: An id is not a field of *step_id*.
    """
    step = await store.get_step(step_id)
    if step.form_id != form_id:
        raise NotFoundError("step", step_id)

    known = {f.id for f in await store.list_fields_by_step(step_id)}
    strangers = [i for i in ordered_ids if i not in known]
    if strangers:
        raise InvalidStateError(
            f"Fields not in step {step_id}: {', '.join(strangers)}"
        )

    reordered: list[Field] = []
    for index, field_id in enumerate(ordered_ids):
        result = await update_field(store, form_id, field_id, {"field_order": index})
        reordered.append(result.field)
    return reordered
