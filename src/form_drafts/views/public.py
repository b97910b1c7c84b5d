"""Public View Projector: the live structure served to respondents.

Only published rows (``is_draft=False``) that are not staged for deletion
are ever returned, nested step -> fields and ordered by ``step_order`` /
``field_order``.  Only published forms resolve by slug.
"""

from form_drafts.errors import NotFoundError
from form_drafts.structure.models import Field, Form, Step
from form_drafts.structure.store import StructureStore
from form_drafts.views.models import FormFull, StepWithFields


def is_live(record: Step | Field) -> bool:
    return not record.is_draft and not record.pending_delete


def project_public_form(form: Form, steps: list[Step], fields: list[Field]) -> FormFull:
    live_fields = sorted((f for f in fields if is_live(f)), key=lambda f: (f.field_order, f.id))
    nested = [
        StepWithFields(
            **step.model_dump(),
            fields=[f for f in live_fields if f.step_id == step.id],
        )
        for step in sorted(steps, key=lambda s: (s.step_order, s.id))
        if is_live(step)
    ]
    return FormFull(**form.model_dump(), steps=nested)


async def get_public_form(store: StructureStore, slug: str) -> FormFull:
    """Resolve a public slug to its published structure.

    Raises:
        NotFoundError: No form has *slug*, or it is not published.
    """
    form = await store.get_form_by_slug(slug)
    if form is None or not form.is_published:
        raise NotFoundError("form", slug)
    steps = await store.list_steps_by_form(form.id)
    fields = await store.list_fields_by_form(form.id)
    return project_public_form(form, steps, fields)
