"""Builder and public projections of a form's structure.

Usage:
    from form_drafts.views import get_working_view, get_public_form
"""

from form_drafts.views.builder import get_working_view, project_working_view, shadow_index
from form_drafts.views.models import FormFull, StepWithFields, WorkingView
from form_drafts.views.public import get_public_form, project_public_form

__all__ = [
    "get_working_view",
    "project_working_view",
    "shadow_index",
    "get_public_form",
    "project_public_form",
    "WorkingView",
    "FormFull",
    "StepWithFields",
]
