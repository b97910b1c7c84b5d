"""Form structure records and their store.

Usage:
    from form_drafts.structure import Form, Step, Field, StructureStore
    from form_drafts.structure import parse_field_config, FieldPatch
"""

from form_drafts.structure.models import (
    CONTENT_ATTRIBUTES,
    META_ATTRIBUTES,
    BaseFieldConfig,
    CheckboxConfig,
    ChoiceConfig,
    DisplayConfig,
    ElementColorStyle,
    Field,
    FieldPatch,
    FieldType,
    Form,
    GroupConfig,
    InputConfig,
    Step,
    StepPatch,
    SubField,
    parse_field_config,
)
from form_drafts.structure.store import StructureStore
from form_drafts.structure.templates import PREDEFINED_TEMPLATES, build_group_config

__all__ = [
    "CONTENT_ATTRIBUTES",
    "META_ATTRIBUTES",
    "BaseFieldConfig",
    "CheckboxConfig",
    "ChoiceConfig",
    "DisplayConfig",
    "ElementColorStyle",
    "Field",
    "FieldPatch",
    "FieldType",
    "Form",
    "GroupConfig",
    "InputConfig",
    "Step",
    "StepPatch",
    "SubField",
    "parse_field_config",
    "StructureStore",
    "PREDEFINED_TEMPLATES",
    "build_group_config",
]
