from __future__ import annotations

import logging
from typing import Any, Dict, List, Mapping, Optional, Sequence

import httpx
from pydantic_core import to_jsonable_python

from app.services.exceptions import DownstreamServiceError

logger = logging.getLogger(__name__)


def _format_in(values: Sequence[Any]) -> str:
    return "in.(" + ",".join(str(to_jsonable_python(value)) for value in values) + ")"


def build_query_params(
    filters: Mapping[str, Any] | None = None,
    in_filters: Mapping[str, Sequence[Any]] | None = None,
    order: Sequence[str] | None = None,
) -> Dict[str, str]:
    """Translate filters into PostgREST query parameters."""

    params: Dict[str, str] = {"select": "*"}
    for column, value in (filters or {}).items():
        if value is None:
            params[column] = "is.null"
        elif isinstance(value, bool):
            params[column] = f"eq.{str(value).lower()}"
        else:
            params[column] = f"eq.{to_jsonable_python(value)}"
    for column, values in (in_filters or {}).items():
        params[column] = _format_in(values)
    if order:
        params["order"] = ",".join(order)
    return params


class BackendClient:
    """Async HTTP client for the hosted backend's REST and RPC endpoints."""

    def __init__(
        self,
        base_url: str | None,
        *,
        timeout: float = 10.0,
        use_mock_data: bool = True,
        api_key: str | None = None,
        transport: httpx.AsyncBaseTransport | None = None,
    ) -> None:
        self._base_url = str(base_url).rstrip("/") if base_url else None
        self._timeout = timeout
        self.use_mock_data = use_mock_data or not self._base_url
        self._headers = {
            "Content-Type": "application/json",
            "Accept": "application/json",
            "Prefer": "return=representation",
        }
        if api_key:
            self._headers.update({"apikey": api_key, "Authorization": f"Bearer {api_key}"})
        self._transport = transport
        self._client: Optional[httpx.AsyncClient] = None
        if not self.use_mock_data and self._base_url:
            self._client = self._build_client()

    def _build_client(self) -> httpx.AsyncClient:
        return httpx.AsyncClient(
            base_url=self._base_url,
            timeout=self._timeout,
            headers=self._headers,
            transport=self._transport,
        )

    async def close(self) -> None:
        if self._client is not None:
            await self._client.aclose()

    async def _ensure_client(self) -> httpx.AsyncClient:
        if self.use_mock_data or not self._base_url:
            raise RuntimeError("HTTP client requested while running in mock mode")
        if self._client is None:
            self._client = self._build_client()
        return self._client

    async def _request(
        self,
        method: str,
        path: str,
        *,
        params: Dict[str, str] | None = None,
        payload: Any = None,
    ) -> Any:
        if self.use_mock_data:
            raise RuntimeError("Real HTTP call requested while mock mode is enabled")
        client = await self._ensure_client()
        try:
            logger.debug("%s %s params=%s", method, path, params)
            response = await client.request(
                method,
                path,
                params=params,
                json=to_jsonable_python(payload) if payload is not None else None,
            )
            response.raise_for_status()
            if not response.content:
                return None
            return response.json()
        except httpx.HTTPStatusError as exc:
            logger.exception("Backend returned error %s", exc.response.status_code)
            raise DownstreamServiceError(
                "Backend returned an error response",
                status_code=exc.response.status_code,
                cause=exc,
            ) from exc
        except httpx.RequestError as exc:
            logger.exception("Unable to reach backend: %s", exc)
            raise DownstreamServiceError(
                "Unable to reach backend", status_code=None, cause=exc
            ) from exc

    async def create(self, table: str, record: Dict[str, Any]) -> Dict[str, Any]:
        rows = await self._request("POST", f"/{table}", payload=record)
        if isinstance(rows, list):
            return rows[0] if rows else dict(record)
        return rows or dict(record)

    async def update(
        self, table: str, record_id: str, patch: Dict[str, Any]
    ) -> Optional[Dict[str, Any]]:
        rows = await self._request(
            "PATCH", f"/{table}", params={"id": f"eq.{record_id}"}, payload=patch
        )
        return rows[0] if rows else None

    async def query(
        self,
        table: str,
        *,
        filters: Mapping[str, Any] | None = None,
        in_filters: Mapping[str, Sequence[Any]] | None = None,
        order: Sequence[str] | None = None,
    ) -> List[Dict[str, Any]]:
        params = build_query_params(filters, in_filters, order)
        rows = await self._request("GET", f"/{table}", params=params)
        return list(rows or [])

    async def get(self, table: str, record_id: str) -> Optional[Dict[str, Any]]:
        rows = await self.query(table, filters={"id": record_id})
        return rows[0] if rows else None

    async def delete(self, table: str, record_id: str) -> bool:
        rows = await self._request("DELETE", f"/{table}", params={"id": f"eq.{record_id}"})
        return bool(rows)

    async def rpc(self, name: str, args: Dict[str, Any] | None = None) -> Any:
        return await self._request("POST", f"/rpc/{name}", payload=args or {})
