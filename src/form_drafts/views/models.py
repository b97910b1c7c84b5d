"""Projection models for the builder and the public renderer."""

from pydantic import BaseModel, Field as PydanticField

from form_drafts.structure.models import Field, Form, Step


class WorkingView(BaseModel):
    """What the editor sees: drafts plus published rows not shadowed.

    ``shadows`` maps a hidden published field id to the edit-shadow shown in
    its place.
    """

    form: Form
    steps: list[Step] = PydanticField(default_factory=list)
    fields: list[Field] = PydanticField(default_factory=list)
    shadows: dict[str, str] = PydanticField(default_factory=dict)

    def fields_for(self, step_id: str) -> list[Field]:
        return [f for f in self.fields if f.step_id == step_id]

    @property
    def has_unpublished_changes(self) -> bool:
        return any(s.is_draft or s.pending_delete for s in self.steps) or any(
            f.is_draft or f.pending_delete for f in self.fields
        )


class StepWithFields(Step):
    """A step with its fields nested, as served to the renderer."""

    fields: list[Field] = PydanticField(default_factory=list)


class FormFull(Form):
    """A form with steps and fields hydrated."""

    steps: list[StepWithFields] = PydanticField(default_factory=list)
