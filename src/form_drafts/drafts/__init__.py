"""Draft reconciliation engine: field/step mutations, publish, unpublish.

Usage:
    from form_drafts.drafts import update_field, delete_field, delete_step, publish
"""

from form_drafts.drafts.fields import (
    add_field,
    delete_field,
    is_meta_only,
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

__all__ = [
    "add_field",
    "update_field",
    "delete_field",
    "restore_field",
    "reorder_fields",
    "is_meta_only",
    "add_step",
    "update_step",
    "delete_step",
    "restore_step",
    "publish",
    "unpublish",
    "FieldUpdateResult",
    "FieldDeleteResult",
    "StepDeleteResult",
    "PublishResult",
]
