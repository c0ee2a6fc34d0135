# -*- coding: utf-8 -*-
"""kv_store.py

Key-value storage boundary
--------------------------

The app keeps everything under a handful of string keys (``journalEntries``,
``hrtEntries``) whose values are JSON strings. This module provides that
get/set/remove surface and nothing more.

Backends
  - ``SupabaseKeyValueStore``: one PostgREST table with ``key`` (PK) and
    ``value`` (text) columns, written with service_role. Upsert on ``key``.
  - ``MemoryKeyValueStore``: process memory. Used when Supabase is not
    configured (local dev, tests).

Failure policy
  - Reads are best-effort: a failed read is logged and returns None so the
    journal screen can still render an empty state.
  - Writes raise ``KeyValueStoreError``; the caller decides how to answer.

Env
  - SUPABASE_URL / SUPABASE_SERVICE_ROLE_KEY
  - BLOOM_KV_TABLE (default ``kv_store``)
  - BLOOM_KV_TIMEOUT_SECONDS (default 5.0)
"""

from __future__ import annotations

import logging
import os
from typing import Dict, Optional

import httpx

logger = logging.getLogger("kv_store")

SUPABASE_URL = os.getenv("SUPABASE_URL", "").rstrip("/")
SUPABASE_SERVICE_ROLE_KEY = os.getenv("SUPABASE_SERVICE_ROLE_KEY", "")
KV_TABLE = os.getenv("BLOOM_KV_TABLE", "kv_store")
try:
    KV_TIMEOUT_SECONDS = float(os.getenv("BLOOM_KV_TIMEOUT_SECONDS", "5.0"))
except ValueError:
    KV_TIMEOUT_SECONDS = 5.0


class KeyValueStoreError(RuntimeError):
    """A write to the key-value store did not go through."""


class KeyValueStore:
    name = "none"

    async def get_item(self, key: str) -> Optional[str]:
        raise NotImplementedError

    async def set_item(self, key: str, value: str) -> None:
        raise NotImplementedError

    async def remove_item(self, key: str) -> None:
        raise NotImplementedError

    async def aclose(self) -> None:
        return None


class MemoryKeyValueStore(KeyValueStore):
    name = "memory"

    def __init__(self, initial: Optional[Dict[str, str]] = None):
        self._data: Dict[str, str] = dict(initial or {})

    async def get_item(self, key: str) -> Optional[str]:
        return self._data.get(key)

    async def set_item(self, key: str, value: str) -> None:
        self._data[key] = str(value)

    async def remove_item(self, key: str) -> None:
        self._data.pop(key, None)


class SupabaseKeyValueStore(KeyValueStore):
    name = "supabase"

    def __init__(
        self,
        url: str,
        service_role_key: str,
        *,
        table: str = KV_TABLE,
        timeout: float = KV_TIMEOUT_SECONDS,
        transport: Optional[httpx.AsyncBaseTransport] = None,
    ):
        if not url or not service_role_key:
            raise ValueError("Supabase url and service_role key are required")
        self._endpoint = f"{url.rstrip('/')}/rest/v1/{table}"
        self._key = service_role_key
        self._timeout = timeout
        self._transport = transport
        self._client: Optional[httpx.AsyncClient] = None

    def _headers(self, *, prefer: Optional[str] = None) -> Dict[str, str]:
        h = {
            "apikey": self._key,
            "Authorization": f"Bearer {self._key}",
            "Content-Type": "application/json",
        }
        if prefer:
            h["Prefer"] = prefer
        return h

    def _get_client(self) -> httpx.AsyncClient:
        # single event loop: no await between check and assign
        if self._client is None:
            self._client = httpx.AsyncClient(timeout=httpx.Timeout(self._timeout), transport=self._transport)
        return self._client

    async def get_item(self, key: str) -> Optional[str]:
        params = {"select": "value", "key": f"eq.{key}", "limit": "1"}
        try:
            resp = await self._get_client().get(self._endpoint, headers=self._headers(), params=params)
        except httpx.HTTPError as exc:
            logger.warning("kv get failed (network): key=%s err=%s", key, exc)
            return None
        if resp.status_code != 200:
            logger.warning("kv get failed: key=%s status=%s body=%s", key, resp.status_code, (resp.text or "")[:300])
            return None
        try:
            rows = resp.json()
        except ValueError:
            logger.warning("kv get returned non-JSON body: key=%s", key)
            return None
        if not isinstance(rows, list) or not rows:
            return None
        value = rows[0].get("value") if isinstance(rows[0], dict) else None
        return value if isinstance(value, str) else None

    async def set_item(self, key: str, value: str) -> None:
        try:
            resp = await self._get_client().post(
                self._endpoint,
                headers=self._headers(prefer="resolution=merge-duplicates,return=minimal"),
                params={"on_conflict": "key"},
                json={"key": key, "value": str(value)},
            )
        except httpx.HTTPError as exc:
            raise KeyValueStoreError(f"kv set failed for {key}: {exc}") from exc
        if resp.status_code not in (200, 201, 204):
            raise KeyValueStoreError(f"kv set failed for {key}: status={resp.status_code}")

    async def remove_item(self, key: str) -> None:
        try:
            resp = await self._get_client().delete(
                self._endpoint,
                headers=self._headers(prefer="return=minimal"),
                params={"key": f"eq.{key}"},
            )
        except httpx.HTTPError as exc:
            raise KeyValueStoreError(f"kv remove failed for {key}: {exc}") from exc
        if resp.status_code not in (200, 202, 204):
            raise KeyValueStoreError(f"kv remove failed for {key}: status={resp.status_code}")

    async def aclose(self) -> None:
        if self._client is None:
            return
        try:
            await self._client.aclose()
        finally:
            self._client = None


def build_store_from_env() -> KeyValueStore:
    """Supabase when configured, memory otherwise."""
    if SUPABASE_URL and SUPABASE_SERVICE_ROLE_KEY:
        logger.info("kv store: supabase table=%s", KV_TABLE)
        return SupabaseKeyValueStore(SUPABASE_URL, SUPABASE_SERVICE_ROLE_KEY)
    logger.warning("kv store: SUPABASE_URL/SUPABASE_SERVICE_ROLE_KEY not set, using process memory")
    return MemoryKeyValueStore()
