"""Pydantic models for engine configuration (``forms.toml``)."""

from typing import Literal

from pydantic import BaseModel, Field


class ProfileConfig(BaseModel):
    """Structure store connection profile from forms.toml."""

    url: str = ""
    provider: Literal["postgres", "supabase", "memory"] = "postgres"
    description: str = ""
    db_password: str | None = None  # For [YOUR-PASSWORD] placeholder substitution
    api_key: str | None = None  # Supabase service key


class TableNames(BaseModel):
    """Table names for the three structure collections."""

    forms: str = "forms"
    steps: str = "form_steps"
    fields: str = "form_fields"


class SlugSettings(BaseModel):
    """Public slug generation settings."""

    max_prefix_length: int = Field(default=40, ge=1)
    suffix_length: int = Field(default=6, ge=1)
    alphabet: str = Field(default="abcdefghijklmnopqrstuvwxyz0123456789", min_length=2)
    fallback: str = "form"


class EngineConfig(BaseModel):
    """Complete configuration from forms.toml."""

    profiles: dict[str, ProfileConfig] = Field(default_factory=dict)
    tables: TableNames = Field(default_factory=TableNames)
    slugs: SlugSettings = Field(default_factory=SlugSettings)
    validate_on_connect: bool = True
