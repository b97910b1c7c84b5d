"""Load engine configuration from a TOML file.

Usage:
    from form_drafts.config.loader import load_config

    config = load_config()                      # ./forms.toml
    config = load_config(Path("conf/forms.toml"))
"""

import tomllib
from pathlib import Path

from form_drafts.config.models import EngineConfig, ProfileConfig, SlugSettings, TableNames


def load_config(config_path: Path | None = None) -> EngineConfig:
    """Load engine configuration from TOML file.

    Args:
        config_path: Path to forms.toml (default: ``Path.cwd() / "forms.toml"``).

    Returns:
        EngineConfig with all profiles, table names and slug settings.

    Raises:
        FileNotFoundError: If config file doesn't exist.
        pydantic.ValidationError: If a section holds invalid values.
    """
    if config_path is None:
        config_path = Path.cwd() / "forms.toml"

    if not config_path.exists():
        raise FileNotFoundError(
            f"Engine config not found: {config_path}\n"
            f"Create forms.toml with at least one [profiles.<name>] table."
        )

    with open(config_path, "rb") as f:
        data = tomllib.load(f)

    profiles = {
        name: ProfileConfig(**profile_data)
        for name, profile_data in data.get("profiles", {}).items()
    }
    schema_settings = data.get("schema", {})

    return EngineConfig(
        profiles=profiles,
        tables=TableNames(**data.get("tables", {})),
        slugs=SlugSettings(**data.get("slugs", {})),
        validate_on_connect=schema_settings.get("validate_on_connect", True),
    )
