"""Structure store factory.

Profiles live in ``forms.toml``; the active one is chosen by an environment
variable or by the ``.forms-profile`` lock file that ``connect`` writes after
a successful schema check.

Usage:
    from form_drafts.factory import connect_and_validate, get_store

    result = await connect_and_validate("local")
    if result.success:
        store = await get_store()
"""

import logging
import os
from pathlib import Path
from urllib.parse import quote

from form_drafts.adapters import AsyncPostgresAdapter, DatabaseClient, MemoryAdapter
from form_drafts.config.loader import load_config
from form_drafts.config.models import EngineConfig, ProfileConfig
from form_drafts.errors import StoreError
from form_drafts.schema.comparator import validate_schema
from form_drafts.schema.introspector import (
    expected_columns,
    fetch_column_names,
    record_names,
)
from form_drafts.schema.models import ConnectionResult
from form_drafts.structure.store import StructureStore

logger = logging.getLogger(__name__)

# Profile lock file name, resolved against the current working directory
_PROFILE_LOCK_NAME = ".forms-profile"

# Id that never matches; used to probe providers without introspection
_PROBE_ID = "00000000-0000-0000-0000-000000000000"


# ============================================================================
# Profile Lock File Operations
# ============================================================================


class ProfileNotFoundError(Exception):
    """Raised when no structure store profile is configured."""

    pass


def profile_lock_path() -> Path:
    """Lock file location for the current working directory."""
    return Path.cwd() / _PROFILE_LOCK_NAME


def read_profile_lock() -> str | None:
    """Read profile name from lock file.

    Returns:
        Profile name if lock file exists, None otherwise
    """
    lock = profile_lock_path()
    if lock.exists():
        return lock.read_text().strip()
    return None


def write_profile_lock(profile_name: str) -> None:
    """Write profile name to lock file.

    Only call this after a successful connection check.
    """
    profile_lock_path().write_text(profile_name)


def clear_profile_lock() -> None:
    """Remove profile lock file."""
    profile_lock_path().unlink(missing_ok=True)


def get_active_profile_name(env_prefix: str = "") -> str:
    """Get active profile name from env var or lock file.

    Priority:
    1. ``{env_prefix}FORMS_PROFILE`` env var
    2. ``.forms-profile`` file (written by a previous successful connect)
    3. Raise ProfileNotFoundError

    Args:
        env_prefix: Prefix for the environment variable, e.g. ``"APP_"``
            reads ``APP_FORMS_PROFILE``.

    Raises:
        ProfileNotFoundError: If no profile is configured
    """
    env_profile = os.environ.get(f"{env_prefix}FORMS_PROFILE")
    if env_profile:
        return env_profile

    lock_profile = read_profile_lock()
    if lock_profile:
        return lock_profile

    raise ProfileNotFoundError(
        "No structure store profile configured.\n"
        f"Run: {env_prefix}FORMS_PROFILE=<name> form-drafts connect\n"
        "Profiles are defined in forms.toml under [profiles.<name>]."
    )


def _lookup_profile(config: EngineConfig, profile_name: str) -> ProfileConfig:
    if profile_name not in config.profiles:
        raise KeyError(
            f"Profile '{profile_name}' not found in forms.toml.\n"
            f"Available profiles: {', '.join(config.profiles.keys())}"
        )
    return config.profiles[profile_name]


def get_active_profile(
    env_prefix: str = "", config_path: Path | None = None
) -> tuple[str, ProfileConfig]:
    """Get active profile name and configuration.

    Raises:
        ProfileNotFoundError: If no profile configured
        KeyError: If the profile is not in forms.toml
    """
    profile_name = get_active_profile_name(env_prefix)
    config = load_config(config_path)
    return profile_name, _lookup_profile(config, profile_name)


# ============================================================================
# Adapter Construction
# ============================================================================


def resolve_url(profile: ProfileConfig) -> str:
    """Resolve profile URL with password substitution.

    Example:
        >>> resolve_url(ProfileConfig(url="postgresql://u:[YOUR-PASSWORD]@h/db", db_password="a/b"))
        'postgresql://u:a%2Fb@h/db'
    """
    url = profile.url
    if profile.db_password and "[YOUR-PASSWORD]" in url:
        url = url.replace("[YOUR-PASSWORD]", quote(profile.db_password, safe=""))
    return url


def build_adapter(profile: ProfileConfig) -> DatabaseClient:
    """Create the adapter a profile describes.

    Raises:
        ValueError: A Supabase profile has no ``api_key``.
        ImportError: A Supabase profile is used without the ``supabase`` extra.
    """
    if profile.provider == "memory":
        return MemoryAdapter()

    if profile.provider == "supabase":
        if not profile.api_key:
            raise ValueError("Supabase profiles require an api_key")
        try:
            from form_drafts.adapters.supabase import AsyncSupabaseAdapter
        except ImportError as e:
            raise ImportError(
                "Supabase profiles need the supabase extra: "
                "pip install 'form-drafts[supabase]'"
            ) from e
        return AsyncSupabaseAdapter(url=profile.url, key=profile.api_key)

    return AsyncPostgresAdapter(database_url=resolve_url(profile))


async def get_adapter(
    profile_name: str | None = None,
    env_prefix: str = "",
    database_url: str | None = None,
    config_path: Path | None = None,
) -> DatabaseClient:
    """Create a new adapter for a profile or an explicit URL.

    Adapters are not cached; the caller owns the returned adapter and
    should ``await adapter.close()`` when done.

    Args:
        profile_name: Profile from forms.toml.  If None, the active profile
            is used (see ``get_active_profile_name``).
        env_prefix: Prefix for the profile environment variable.
        database_url: PostgreSQL URL that bypasses profile lookup entirely.
        config_path: Alternative forms.toml location.

    Raises:
        ProfileNotFoundError: No profile given and none active.
        KeyError: Profile not in forms.toml.
        FileNotFoundError: forms.toml missing.
    """
    if database_url:
        return AsyncPostgresAdapter(database_url=database_url)

    if profile_name is None:
        profile_name = get_active_profile_name(env_prefix)

    config = load_config(config_path)
    return build_adapter(_lookup_profile(config, profile_name))


async def get_store(
    profile_name: str | None = None,
    env_prefix: str = "",
    database_url: str | None = None,
    config_path: Path | None = None,
) -> StructureStore:
    """Like ``get_adapter`` but wrapped in a ``StructureStore``.

    Table names come from forms.toml.  With an explicit *database_url* a
    missing forms.toml falls back to the default table names.
    """
    try:
        config = load_config(config_path)
    except FileNotFoundError:
        if not database_url:
            raise
        config = EngineConfig()

    adapter = await get_adapter(
        profile_name=profile_name,
        env_prefix=env_prefix,
        database_url=database_url,
        config_path=config_path,
    )
    return StructureStore(adapter, config.tables)


# ============================================================================
# Connection and Validation
# ============================================================================


async def connect_and_validate(
    profile_name: str | None = None,
    env_prefix: str = "",
    config_path: Path | None = None,
    validate_only: bool = False,
) -> ConnectionResult:
    """Check a profile's store and remember it as the active profile.

    PostgreSQL profiles are validated against the columns the structure
    records need (unless ``[schema] validate_on_connect = false``).
    Supabase profiles are probed with a single keyed read.  Memory profiles
    always succeed.

    Args:
        profile_name: Profile from forms.toml.  If None, uses the env var or
            the existing lock file.
        env_prefix: Prefix for the profile environment variable.
        config_path: Alternative forms.toml location.
        validate_only: Check only; do not write the lock file.

    Returns:
        ConnectionResult with success status and validation report

    Example:
        >>> result = await connect_and_validate("local")
        >>> if not result.success:
        ...     print(result.error)
    """
    if profile_name is None:
        try:
            profile_name = get_active_profile_name(env_prefix)
        except ProfileNotFoundError as e:
            return ConnectionResult(success=False, error=str(e))

    try:
        config = load_config(config_path)
    except FileNotFoundError as e:
        return ConnectionResult(success=False, error=str(e))

    if profile_name not in config.profiles:
        available = ", ".join(config.profiles.keys())
        return ConnectionResult(
            success=False,
            profile_name=profile_name,
            error=f"Profile '{profile_name}' not found. Available: {available}",
        )
    profile = config.profiles[profile_name]

    try:
        adapter = build_adapter(profile)
    except (ImportError, ValueError) as e:
        return ConnectionResult(
            success=False,
            profile_name=profile_name,
            provider=profile.provider,
            error=str(e),
        )

    validation = None
    try:
        if profile.provider == "postgres" and config.validate_on_connect:
            actual_columns = await fetch_column_names(adapter)
            validation = validate_schema(
                actual_columns,
                expected_columns(config.tables),
                record_names(config.tables),
            )
        elif profile.provider == "supabase":
            await adapter.select(config.tables.forms, "id", {"id": _PROBE_ID})
    except StoreError as e:
        return ConnectionResult(
            success=False,
            profile_name=profile_name,
            provider=profile.provider,
            error=f"Failed to connect to structure store: {e}",
        )
    finally:
        await adapter.close()

    if validation is not None and not validation.valid:
        return ConnectionResult(
            success=False,
            profile_name=profile_name,
            provider=profile.provider,
            schema_valid=False,
            schema_report=validation,
            error=f"Schema validation failed: {validation.error_count} errors",
        )

    if not validate_only:
        write_profile_lock(profile_name)
    logger.info("Connected to profile %s (%s)", profile_name, profile.provider)

    return ConnectionResult(
        success=True,
        profile_name=profile_name,
        provider=profile.provider,
        schema_valid=validation.valid if validation is not None else None,
        schema_report=validation,
    )
