"""Result models returned by draft engine mutations and publish."""

from pydantic import BaseModel

from form_drafts.structure.models import Field, Form, Step


class FieldUpdateResult(BaseModel):
    """Outcome of a field update.

    ``replaced_id`` is set when the row to display is an edit-shadow standing
    in for the published field with that id, or when staging a published
    field discarded its edit-shadow with that id.
    """

    field: Field
    replaced_id: str | None = None


class FieldDeleteResult(BaseModel):
    """Outcome of a field delete.

    - ``deleted=True``: the row no longer exists (it was a new draft).
    - ``field`` set: the row now shown (staged for deletion).  When
      ``replaced_id`` is also set, that row was removed from view.
    """

    deleted: bool = False
    field: Field | None = None
    replaced_id: str | None = None


class StepDeleteResult(BaseModel):
    """Outcome of a step delete: hard-deleted, or staged as ``step``."""

    deleted: bool = False
    step: Step | None = None


class PublishResult(BaseModel):
    """Outcome of a publish transition.

    Example:
        >>> result.public_path
        '/f/contact-us-k3x9q2'
    """

    form: Form
    merged_fields: int = 0
    promoted_fields: int = 0
    purged_fields: int = 0
    promoted_steps: int = 0
    purged_steps: int = 0

    @property
    def public_path(self) -> str:
        return f"/f/{self.form.slug}"

    def public_url(self, base_url: str) -> str:
        """Join the public path onto an origin such as ``https://forms.example.com``."""
        return base_url.rstrip("/") + self.public_path
