"""Structure store adapters package.

Provides the ``DatabaseClient`` Protocol and its async implementations for
PostgreSQL, an in-process memory store, and (optionally) Supabase.

``AsyncSupabaseAdapter`` is only available when the ``supabase`` extra
is installed.

Usage:
    from form_drafts.adapters import DatabaseClient, AsyncPostgresAdapter, MemoryAdapter
"""

from form_drafts.adapters.base import DatabaseClient
from form_drafts.adapters.memory import MemoryAdapter
from form_drafts.adapters.postgres import AsyncPostgresAdapter

__all__ = [
    "DatabaseClient",
    "AsyncPostgresAdapter",
    "MemoryAdapter",
]

try:
    from form_drafts.adapters.supabase import AsyncSupabaseAdapter

    __all__.append("AsyncSupabaseAdapter")
except ImportError:
    # supabase extra not installed -- AsyncSupabaseAdapter unavailable
    pass
