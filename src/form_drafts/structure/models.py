"""Pydantic records for forms, steps, fields, and per-type field configuration.

Field configuration (the ``validation`` column) is a closed union selected by
``field_type``:

- ``InputConfig``: text, textarea, email, phone, number, datetime, boolean
- ``ChoiceConfig``: dropdown, radio
- ``CheckboxConfig``: checkbox (adds ``required_options``)
- ``GroupConfig``: group, name_group, address_group (adds ``sub_fields``)
- ``DisplayConfig``: image, paragraph

Rows read from the store are parsed leniently (unknown keys are dropped);
mutation requests are parsed strictly via ``parse_field_config(strict=True)``.
"""

from datetime import datetime
from typing import Any, Literal, get_args

from pydantic import (
    BaseModel,
    ConfigDict,
    Field as PydanticField,
    SerializeAsAny,
    model_validator,
)


FieldType = Literal[
    "text",
    "textarea",
    "email",
    "phone",
    "number",
    "dropdown",
    "checkbox",
    "radio",
    "datetime",
    "image",
    "paragraph",
    "group",
    "name_group",
    "address_group",
    "boolean",
]

FIELD_TYPES: tuple[str, ...] = get_args(FieldType)

CHOICE_TYPES: frozenset[str] = frozenset({"dropdown", "radio", "checkbox"})
GROUP_TYPES: frozenset[str] = frozenset({"group", "name_group", "address_group"})

LabelAlign = Literal["left", "center", "right"]
SubFieldInputType = Literal["text", "dropdown"]


# ============================================================================
# Field Configuration
# ============================================================================


class ElementColorStyle(BaseModel):
    """Colour overrides for a rendered element."""

    text_color: str | None = None
    background_color: str | None = None
    border_color: str | None = None


class SubField(BaseModel):
    """One input inside a group field."""

    id: str
    label: str = ""
    placeholder: str = ""
    is_required: bool = False
    input_type: SubFieldInputType = "text"
    options: list[str] = PydanticField(default_factory=list)
    enabled: bool = True


class BaseFieldConfig(BaseModel):
    """Settings shared by every field type."""

    appearance: ElementColorStyle | None = None
    label_align: LabelAlign | None = None


class InputConfig(BaseFieldConfig):
    """Free-entry inputs."""


class ChoiceConfig(BaseFieldConfig):
    """Single-choice inputs (dropdown, radio)."""


class CheckboxConfig(BaseFieldConfig):
    """Multi-choice checkbox; ``required_options`` must all be ticked."""

    required_options: list[str] = PydanticField(default_factory=list)


class GroupConfig(BaseFieldConfig):
    """Composite field rendered as several sub-inputs."""

    sub_fields: list[SubField] = PydanticField(default_factory=list)


class DisplayConfig(BaseFieldConfig):
    """Non-input content (image, paragraph)."""


CONFIG_TYPES: dict[str, type[BaseFieldConfig]] = {
    "text": InputConfig,
    "textarea": InputConfig,
    "email": InputConfig,
    "phone": InputConfig,
    "number": InputConfig,
    "datetime": InputConfig,
    "boolean": InputConfig,
    "dropdown": ChoiceConfig,
    "radio": ChoiceConfig,
    "checkbox": CheckboxConfig,
    "group": GroupConfig,
    "name_group": GroupConfig,
    "address_group": GroupConfig,
    "image": DisplayConfig,
    "paragraph": DisplayConfig,
}


def parse_field_config(
    field_type: str,
    raw: dict[str, Any] | BaseFieldConfig | None,
    strict: bool = False,
) -> BaseFieldConfig | None:
    """Parse a raw ``validation`` payload into the config class for *field_type*.

    Args:
        field_type: The field's type tag; selects the config class.
        raw: Raw payload (dict), an existing config instance, or ``None``.
        strict: When ``True``, keys the config class does not define raise
            ``ValueError``; otherwise they are dropped.

    Returns:
        Config instance, or ``None`` when *raw* is ``None``.

    Raises:
        ValueError: Unknown field type, or unknown keys in strict mode.
        pydantic.ValidationError: Known keys with invalid values.

    Example:
        >>> cfg = parse_field_config("checkbox", {"required_options": ["Yes"]})
        >>> type(cfg).__name__
        'CheckboxConfig'
    """
    if raw is None:
        return None
    if field_type not in CONFIG_TYPES:
        raise ValueError(f"Unknown field type: {field_type}")
    config_cls = CONFIG_TYPES[field_type]

    if isinstance(raw, BaseFieldConfig):
        if type(raw) is config_cls:
            return raw
        raw = raw.model_dump(exclude_none=True)

    unknown = set(raw) - set(config_cls.model_fields)
    if unknown and strict:
        raise ValueError(
            f"Unsupported settings for {field_type} field: {', '.join(sorted(unknown))}"
        )
    return config_cls.model_validate({k: v for k, v in raw.items() if k not in unknown})


# ============================================================================
# Structure Records
# ============================================================================


class Form(BaseModel):
    """A form.  ``slug`` is assigned on first publish and never changes."""

    id: str
    title: str
    description: str | None = None
    slug: str | None = None
    is_published: bool = False
    created_at: datetime | None = None
    updated_at: datetime | None = None


class Step(BaseModel):
    """A page of a multi-step form.

    Steps are either new drafts or published; they have no edit-shadows, so
    ``draft_parent_id`` is always ``None``.
    """

    id: str
    form_id: str
    title: str = ""
    step_order: int = 0
    is_draft: bool = False
    draft_parent_id: str | None = None
    pending_delete: bool = False
    created_at: datetime | None = None

    @property
    def is_new_draft(self) -> bool:
        return self.is_draft and self.draft_parent_id is None


class Field(BaseModel):
    """A form field row: published, new draft, or edit-shadow draft."""

    id: str
    form_id: str
    step_id: str
    field_type: FieldType
    label: str | None = None
    placeholder: str | None = None
    helper_text: str | None = None
    is_required: bool = False
    field_order: int = 0
    options: list[str] | None = None
    image_url: str | None = None
    image_alt: str | None = None
    validation: SerializeAsAny[BaseFieldConfig] | None = None
    is_draft: bool = False
    draft_parent_id: str | None = None
    pending_delete: bool = False
    created_at: datetime | None = None

    @model_validator(mode="before")
    @classmethod
    def _coerce_validation(cls, data: Any) -> Any:
        if isinstance(data, dict) and data.get("validation") is not None:
            data = dict(data)
            data["validation"] = parse_field_config(
                data.get("field_type", ""), data["validation"]
            )
        return data

    @property
    def is_new_draft(self) -> bool:
        return self.is_draft and self.draft_parent_id is None

    @property
    def is_edit_shadow(self) -> bool:
        return self.is_draft and self.draft_parent_id is not None

    def content(self) -> dict[str, Any]:
        """Content attributes in store (column) form."""
        data = self.model_dump(include=set(CONTENT_ATTRIBUTES))
        if self.validation is not None:
            data["validation"] = self.validation.model_dump(exclude_none=True)
        return data


# Attributes copied into an edit-shadow and merged back at publish
CONTENT_ATTRIBUTES: tuple[str, ...] = (
    "step_id",
    "field_type",
    "label",
    "placeholder",
    "helper_text",
    "is_required",
    "field_order",
    "options",
    "image_url",
    "image_alt",
    "validation",
)

# Patch keys that never create an edit-shadow
META_ATTRIBUTES: frozenset[str] = frozenset({"field_order", "pending_delete"})


class FieldPatch(BaseModel):
    """Sparse field update.  Only keys the caller sets are applied."""

    model_config = ConfigDict(extra="forbid")

    step_id: str | None = None
    field_type: FieldType | None = None
    label: str | None = None
    placeholder: str | None = None
    helper_text: str | None = None
    is_required: bool | None = None
    field_order: int | None = None
    options: list[str] | None = None
    image_url: str | None = None
    image_alt: str | None = None
    validation: dict[str, Any] | None = None
    pending_delete: bool | None = None

    @model_validator(mode="after")
    def _reject_null_columns(self) -> "FieldPatch":
        for name in ("step_id", "field_type", "is_required", "field_order", "pending_delete"):
            if name in self.model_fields_set and getattr(self, name) is None:
                raise ValueError(f"{name} cannot be null")
        return self

    def changes(self) -> dict[str, Any]:
        """The supplied keys and their values."""
        return self.model_dump(exclude_unset=True)


class StepPatch(BaseModel):
    """Sparse step update: rename, reorder, or restore."""

    model_config = ConfigDict(extra="forbid")

    title: str | None = None
    step_order: int | None = None
    pending_delete: bool | None = None

    @model_validator(mode="after")
    def _reject_null_columns(self) -> "StepPatch":
        for name in ("title", "step_order", "pending_delete"):
            if name in self.model_fields_set and getattr(self, name) is None:
                raise ValueError(f"{name} cannot be null")
        return self

    def changes(self) -> dict[str, Any]:
        return self.model_dump(exclude_unset=True)
