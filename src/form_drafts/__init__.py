"""form-drafts: draft-shadow versioning for multi-step form structures.

Editors change a form's steps and fields freely; the public renderer keeps
serving the last published structure until ``publish`` reconciles the drafts.

Usage:
    from form_drafts import FormBuilder, PublicForms, StructureStore, get_store
    from form_drafts import NotFoundError, InvalidStateError, StoreError
"""

__version__ = "0.1.0"

# Adapters
from form_drafts.adapters.base import DatabaseClient
from form_drafts.adapters.memory import MemoryAdapter
from form_drafts.adapters.postgres import AsyncPostgresAdapter

# Engine
from form_drafts.builder import FormBuilder, PublicForms
from form_drafts.drafts.models import (
    FieldDeleteResult,
    FieldUpdateResult,
    PublishResult,
    StepDeleteResult,
)
from form_drafts.errors import FormEngineError, InvalidStateError, NotFoundError, StoreError
from form_drafts.structure.models import Field, FieldPatch, Form, Step, StepPatch
from form_drafts.structure.store import StructureStore
from form_drafts.views.models import FormFull, StepWithFields, WorkingView

# Config
from form_drafts.config.loader import load_config
from form_drafts.config.models import EngineConfig, ProfileConfig, SlugSettings, TableNames

# Factory
from form_drafts.factory import (
    ProfileNotFoundError,
    connect_and_validate,
    get_adapter,
    get_store,
    resolve_url,
)

__all__ = [
    # Adapters
    "DatabaseClient",
    "AsyncPostgresAdapter",
    "MemoryAdapter",
    # Engine
    "FormBuilder",
    "PublicForms",
    "StructureStore",
    "Form",
    "Step",
    "Field",
    "FieldPatch",
    "StepPatch",
    "WorkingView",
    "FormFull",
    "StepWithFields",
    "FieldUpdateResult",
    "FieldDeleteResult",
    "StepDeleteResult",
    "PublishResult",
    # Errors
    "FormEngineError",
    "NotFoundError",
    "InvalidStateError",
    "StoreError",
    # Config
    "load_config",
    "EngineConfig",
    "ProfileConfig",
    "SlugSettings",
    "TableNames",
    # Factory
    "get_adapter",
    "get_store",
    "connect_and_validate",
    "ProfileNotFoundError",
    "resolve_url",
]

# Optional: AsyncSupabaseAdapter (only available with supabase extra)
try:
    from form_drafts.adapters.supabase import AsyncSupabaseAdapter

    __all__.append("AsyncSupabaseAdapter")
except ImportError:
    pass
