from __future__ import annotations

import logging
from threading import Lock
from typing import Any, Dict, List, Optional, Tuple
from urllib.parse import urlencode

import httpx

from src.core.config import get_settings

logger = logging.getLogger(__name__)

Filters = List[Tuple[str, str]]


class SupabaseClient:
    """Minimal PostgREST client shared by the objectives repositories."""

    _shared_client: httpx.Client | None = None
    _client_lock: Lock = Lock()

    def __init__(self) -> None:
        settings = get_settings()
        self.base_url = settings.supabase_url.rstrip("/") + "/rest/v1"
        self.api_key = settings.supabase_service_role_key or settings.supabase_anon_key
        if not self.api_key:
            raise ValueError("Supabase API key is required")
        self._client = self._get_shared_client(settings.supabase_timeout_seconds)

    @classmethod
    def _get_shared_client(cls, timeout: float) -> httpx.Client:
        if cls._shared_client is not None:
            return cls._shared_client
        with cls._client_lock:
            if cls._shared_client is None:
                cls._shared_client = httpx.Client(
                    timeout=timeout,
                    limits=httpx.Limits(max_keepalive_connections=20, max_connections=100),
                )
        return cls._shared_client

    def _headers(self, prefer: Optional[str] = None, json_body: bool = False) -> Dict[str, str]:
        headers = {
            "apikey": self.api_key,
            "Authorization": f"Bearer {self.api_key}",
        }
        if json_body:
            headers["Content-Type"] = "application/json"
        if prefer:
            headers["Prefer"] = prefer
        return headers

    def _url(self, table: str, params: Filters) -> str:
        url = f"{self.base_url}/{table}"
        if params:
            url = f"{url}?{urlencode(params, doseq=True)}"
        return url

    def select(
        self,
        table: str,
        select: str,
        filters: Optional[Filters] = None,
        limit: Optional[int] = None,
        order: Optional[str] = None,
    ) -> List[Dict[str, Any]]:
        params: Filters = [("select", select)]
        if filters:
            params.extend(filters)
        if limit is not None:
            params.append(("limit", str(limit)))
        if order:
            params.append(("order", order))

        response = self._client.get(
            self._url(table, params),
            headers=self._headers(),
        )
        response.raise_for_status()
        return response.json()

    def upsert(
        self,
        table: str,
        payload: Dict[str, Any] | List[Dict[str, Any]],
        on_conflict: str,
    ) -> List[Dict[str, Any]]:
        url = self._url(table, [("on_conflict", on_conflict)])
        response = self._client.post(
            url,
            headers=self._headers(
                prefer="resolution=merge-duplicates,return=representation", json_body=True
            ),
            json=payload,
        )
        response.raise_for_status()
        logger.debug("Upserted into %s on %s", table, on_conflict)
        if not response.content:
            return []
        data = response.json()
        if isinstance(data, list):
            return data
        if isinstance(data, dict):
            return [data]
        return []
