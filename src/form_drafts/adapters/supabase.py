"""Async Supabase structure store adapter.

Provides ``AsyncSupabaseAdapter``, an implementation of the ``DatabaseClient``
protocol using the supabase-py async client.  Only available with the
``supabase`` extra installed.

The client is created lazily on first use behind an ``asyncio.Lock``.

Usage:
    from form_drafts.adapters.supabase import AsyncSupabaseAdapter

    adapter = AsyncSupabaseAdapter(
        url="https://xyzproject.supabase.co",
        key="eyJ...",
    )
    rows = await adapter.select("forms", "*", filters={"slug": "contact-x1y2z3"})
    await adapter.close()
"""

import asyncio
from datetime import datetime
from typing import Any

import httpx
from postgrest.exceptions import APIError
from supabase import AsyncClient, acreate_client

from form_drafts.errors import StoreError


class AsyncSupabaseAdapter:
    """Async Supabase implementation of the ``DatabaseClient`` protocol.

    Args:
        url: Supabase project URL.
        key: Supabase API key (service key for editor operations).
    """

    def __init__(self, url: str, key: str) -> None:
        self._url: str = url
        self._key: str = key
        self._client: AsyncClient | None = None
        self._lock: asyncio.Lock = asyncio.Lock()

    async def _get_client(self) -> AsyncClient:
        """Get or create the async Supabase client exactly once."""
        if self._client is None:
            async with self._lock:
                # Double-check after acquiring lock
                if self._client is None:
                    self._client = await acreate_client(self._url, self._key)
        return self._client

    @staticmethod
    def _payload(data: dict) -> dict:
        """Render datetimes as ISO strings for the JSON request body."""
        return {
            k: v.isoformat() if isinstance(v, datetime) else v for k, v in data.items()
        }

    @staticmethod
    def _apply_filters(query: Any, filters: dict[str, Any]) -> Any:
        for key, value in filters.items():
            if value is None:
                query = query.is_(key, "null")
            else:
                query = query.eq(key, value)
        return query

    async def _run(self, table: str, action: str, query: Any) -> list[dict]:
        try:
            result = await query.execute()
        except (APIError, httpx.HTTPError) as e:
            raise StoreError(f"{action} on {table} failed: {e}") from e
        return result.data or []

    # ------------------------------------------------------------------
    # CRUD Methods
    # ------------------------------------------------------------------

    async def select(
        self,
        table: str,
        columns: str,
        filters: dict[str, Any] | None = None,
        order_by: str | None = None,
    ) -> list[dict]:
        """Select rows using the PostgREST query builder."""
        client = await self._get_client()
        query = self._apply_filters(client.table(table).select(columns), filters or {})
        if order_by:
            query = query.order(order_by)
        return await self._run(table, "select", query)

    async def insert(self, table: str, data: dict) -> dict:
        """Insert row and return the created row."""
        client = await self._get_client()
        query = client.table(table).insert(self._payload(data))
        rows = await self._run(table, "insert", query)
        if not rows:
            raise StoreError(f"insert on {table} returned no row")
        return rows[0]

    async def update(
        self, table: str, data: dict, filters: dict[str, Any]
    ) -> dict | None:
        """Update rows and return the first updated row, or ``None``."""
        client = await self._get_client()
        query = self._apply_filters(
            client.table(table).update(self._payload(data)), filters
        )
        rows = await self._run(table, "update", query)
        return rows[0] if rows else None

    async def delete(self, table: str, filters: dict[str, Any]) -> None:
        """Delete rows matching filters."""
        client = await self._get_client()
        query = self._apply_filters(client.table(table).delete(), filters)
        await self._run(table, "delete", query)

    async def close(self) -> None:
        """Drop the async client.  No-op if it was never created."""
        if self._client is not None:
            await self._client.postgrest.aclose()
            self._client = None
