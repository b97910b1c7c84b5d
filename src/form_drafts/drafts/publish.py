"""Publish and unpublish transitions.

Publishing reconciles every draft and staged deletion of a form into its live
structure:

1. Allocate a slug if the form has none (existing slugs are reused).
2. Merge edit-shadows into their published parents (clearing the parent's
   ``pending_delete``) and drop the shadows; promote new draft fields.
3. Purge fields staged for deletion.
4. Promote new draft steps.
5. Purge staged steps together with their remaining fields.
6. Mark the form published and persist the slug.

Fields are resolved before steps are purged so a purged step takes its
already-resolved fields with it.

The sequence is not one transaction.  Each store call is idempotent, so after
a ``StoreError`` the whole transition can simply be re-run.
"""

import logging

from form_drafts.config.models import SlugSettings
from form_drafts.drafts.models import PublishResult
from form_drafts.errors import NotFoundError
from form_drafts.slugs import allocate_slug
from form_drafts.structure.models import Field, Form
from form_drafts.structure.store import StructureStore

logger = logging.getLogger(__name__)


async def _merge_shadow(store: StructureStore, shadow: Field) -> bool:
    """Copy shadow content onto its parent, then drop the shadow.

    Returns:
        ``True`` if merged, ``False`` if the parent was gone and the shadow
        was promoted on its own instead.
    """
    try:
        await store.update_field(
            shadow.draft_parent_id, {**shadow.content(), "pending_delete": False}
        )
    except NotFoundError:
        logger.warning(
            "Edit-shadow %s lost its parent %s; publishing it as a new field",
            shadow.id,
            shadow.draft_parent_id,
        )
        await store.update_field(shadow.id, {"is_draft": False, "draft_parent_id": None})
        return False
    await store.delete_field(shadow.id)
    return True


async def publish(
    store: StructureStore,
    form_id: str,
    slug_settings: SlugSettings | None = None,
) -> PublishResult:
    """Promote all drafts of *form_id* and make it publicly reachable.

    Args:
        store: Structure store.
        form_id: Form to publish.
        slug_settings: Slug generation settings (used on first publish only).

    Returns:
        ``PublishResult`` with the published form and per-phase counts.

    Raises:
        NotFoundError: The form does not exist.
        StoreError: A store call failed; re-run ``publish``.
    """
    form = await store.get_form(form_id)
    result = PublishResult(form=form)

    slug = form.slug
    if not slug:
        slug = await allocate_slug(store, form.title, slug_settings)

    for draft in await store.list_fields_by_form(form_id, {"is_draft": True}):
        if draft.draft_parent_id is not None:
            if await _merge_shadow(store, draft):
                result.merged_fields += 1
            else:
                result.promoted_fields += 1
        else:
            await store.update_field(draft.id, {"is_draft": False})
            result.promoted_fields += 1

    for staged in await store.list_fields_by_form(form_id, {"pending_delete": True}):
        await store.delete_field(staged.id)
        result.purged_fields += 1

    for step in await store.list_steps_by_form(form_id, {"is_draft": True}):
        await store.update_step(step.id, {"is_draft": False})
        result.promoted_steps += 1

    for step in await store.list_steps_by_form(form_id, {"pending_delete": True}):
        await store.delete_fields_by_step(step.id)
        await store.delete_step(step.id)
        result.purged_steps += 1

    result.form = await store.update_form(form_id, {"is_published": True, "slug": slug})
    logger.info(
        "Published form %s as %s (merged=%d promoted=%d purged=%d, "
        "steps promoted=%d purged=%d)",
        form_id,
        slug,
        result.merged_fields,
        result.promoted_fields,
        result.purged_fields,
        result.promoted_steps,
        result.purged_steps,
    )
    return result


async def unpublish(store: StructureStore, form_id: str) -> Form:
    """Take a form offline.  Drafts and staged deletions are kept as they are."""
    form = await store.update_form(form_id, {"is_published": False})
    logger.info("Unpublished form %s", form_id)
    return form
