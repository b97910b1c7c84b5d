"""Predefined group field templates (Name, Address).

Sub-field ids are assigned when a template is instantiated, so two fields
built from the same template never share ids.
"""

from uuid import uuid4

from form_drafts.structure.models import GroupConfig, SubField

PREDEFINED_TEMPLATES: dict[str, dict] = {
    "name_group": {
        "default_label": "Full Name",
        "sub_fields": [
            {
                "label": "Prefix / Title",
                "placeholder": "Mr., Mrs., Dr.…",
                "input_type": "dropdown",
                "options": ["Mr.", "Mrs.", "Ms.", "Dr.", "Prof."],
                "enabled": False,
            },
            {"label": "First Name", "placeholder": "First name", "is_required": True},
            {"label": "Middle Name", "placeholder": "Middle name", "enabled": False},
            {"label": "Last Name", "placeholder": "Last name", "is_required": True},
            {"label": "Suffix", "placeholder": "Jr., Sr., III…", "enabled": False},
        ],
    },
    "address_group": {
        "default_label": "Address",
        "sub_fields": [
            {"label": "Street Address", "placeholder": "Street address", "is_required": True},
            {"label": "Street Address Line 2", "placeholder": "Apt, Suite, Unit…"},
            {
                "label": "Street Address Line 3",
                "placeholder": "Additional address line",
                "enabled": False,
            },
            {"label": "City", "placeholder": "City", "is_required": True},
            {"label": "State / Province", "placeholder": "State or province"},
            {"label": "ZIP / Postal Code", "placeholder": "ZIP or postal code"},
            {"label": "Country", "placeholder": "Country"},
        ],
    },
}


def default_label(field_type: str) -> str:
    """Label given to a newly added field of *field_type*."""
    if field_type in PREDEFINED_TEMPLATES:
        return PREDEFINED_TEMPLATES[field_type]["default_label"]
    if field_type == "image":
        return ""
    return f"New {field_type} field"


def build_group_config(field_type: str) -> GroupConfig | None:
    """Instantiate the predefined sub-fields for *field_type*, if it has any."""
    template = PREDEFINED_TEMPLATES.get(field_type)
    if template is None:
        return None
    return GroupConfig(
        sub_fields=[SubField(id=str(uuid4()), **sub) for sub in template["sub_fields"]]
    )
