"""Builder View Projector: the editor's working view of a form.

Every step is shown, including staged ones (so they can be restored).  A
field is shown if it is a draft, or if it is published and no edit-shadow
stands in for it.
"""

from form_drafts.structure.models import Field, Form, Step
from form_drafts.structure.store import StructureStore
from form_drafts.views.models import WorkingView


def shadow_index(fields: list[Field]) -> dict[str, str]:
    """Map published field id -> id of its edit-shadow."""
    return {f.draft_parent_id: f.id for f in fields if f.is_edit_shadow}


def project_working_fields(fields: list[Field]) -> list[Field]:
    shadows = shadow_index(fields)
    return [f for f in fields if f.is_draft or f.id not in shadows]


def project_working_view(form: Form, steps: list[Step], fields: list[Field]) -> WorkingView:
    """Compute the working view from every step and field row of *form*."""
    step_ids = {s.id for s in steps}
    visible = [f for f in project_working_fields(fields) if f.step_id in step_ids]
    return WorkingView(
        form=form,
        steps=sorted(steps, key=lambda s: (s.step_order, s.id)),
        fields=sorted(visible, key=lambda f: (f.field_order, f.id)),
        shadows=shadow_index(fields),
    )


async def get_working_view(store: StructureStore, form_id: str) -> WorkingView:
    form = await store.get_form(form_id)
    steps = await store.list_steps_by_form(form_id)
    fields = await store.list_fields_by_form(form_id)
    return project_working_view(form, steps, fields)
