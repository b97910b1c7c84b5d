"""Public slug allocation.

A slug is a URL-safe prefix derived from the form title plus a short random
suffix, e.g. ``"Contact Us!"`` -> ``"contact-us-k3x9q2"``.  Uniqueness is
checked against the store once; on collision a fresh candidate is drawn.

Usage:
    from form_drafts.slugs import allocate_slug, generate_slug

    slug = await allocate_slug(store, "Contact Us!")
"""

import logging
import re
import secrets

from form_drafts.config.models import SlugSettings
from form_drafts.structure.store import StructureStore

logger = logging.getLogger(__name__)

_DISALLOWED = re.compile(r"[^a-z0-9\s-]")
_WHITESPACE = re.compile(r"\s+")
_HYPHENS = re.compile(r"-+")


def slug_prefix(title: str, settings: SlugSettings | None = None) -> str:
    """Derive the readable part of a slug from *title*.

    Example:
        >>> slug_prefix("  Hello,  World -- 2024 ")
        'hello-world-2024'
        >>> slug_prefix("!!!")
        'form'
    """
    settings = settings or SlugSettings()
    base = _DISALLOWED.sub("", title.lower().strip())
    base = _WHITESPACE.sub("-", base)
    base = _HYPHENS.sub("-", base)
    base = base[: settings.max_prefix_length].strip("-")
    return base or settings.fallback


def random_suffix(settings: SlugSettings | None = None) -> str:
    settings = settings or SlugSettings()
    return "".join(secrets.choice(settings.alphabet) for _ in range(settings.suffix_length))


def generate_slug(title: str, settings: SlugSettings | None = None) -> str:
    """Build a slug candidate.  Every call draws a new random suffix."""
    return f"{slug_prefix(title, settings)}-{random_suffix(settings)}"


async def allocate_slug(
    store: StructureStore, title: str, settings: SlugSettings | None = None
) -> str:
    """Generate a slug for *title*, regenerating once if it is already taken."""
    candidate = generate_slug(title, settings)
    if await store.slug_exists(candidate):
        logger.warning("Slug collision on %s; drawing a new candidate", candidate)
        candidate = generate_slug(title, settings)
    return candidate
