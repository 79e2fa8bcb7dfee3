import asyncio
import json
import os
import sys

import httpx
import pytest

sys.path.append(os.path.abspath(os.path.join(os.path.dirname(__file__), "..")))

from app.clients.backend import BackendClient, build_query_params
from app.services.exceptions import DownstreamServiceError

BASE_URL = "https://project.example.co/rest/v1"


def _client(handler) -> BackendClient:
    return BackendClient(
        BASE_URL,
        use_mock_data=False,
        api_key="anon-key",
        transport=httpx.MockTransport(handler),
    )


def test_build_query_params_translates_filters() -> None:
    params = build_query_params(
        {"is_active": True, "status": "pending", "service_id": None},
        {"id": ["a", "b"]},
        ["parent_column.asc", "column_order.asc"],
    )

    assert params == {
        "select": "*",
        "is_active": "eq.true",
        "status": "eq.pending",
        "service_id": "is.null",
        "id": "in.(a,b)",
        "order": "parent_column.asc,column_order.asc",
    }


def test_client_without_base_url_stays_in_mock_mode() -> None:
    assert BackendClient(None, use_mock_data=False).use_mock_data is True


def test_query_sends_auth_headers_and_params() -> None:
    seen = {}

    def handler(request: httpx.Request) -> httpx.Response:
        seen["path"] = request.url.path
        seen["params"] = dict(request.url.params)
        seen["apikey"] = request.headers.get("apikey")
        seen["authorization"] = request.headers.get("authorization")
        return httpx.Response(200, json=[{"id": "1", "name": "Website"}])

    client = _client(handler)
    rows = asyncio.run(client.query("services", filters={"is_active": True}, order=["created_at.asc"]))

    assert rows == [{"id": "1", "name": "Website"}]
    assert seen["path"] == "/rest/v1/services"
    assert seen["params"]["is_active"] == "eq.true"
    assert seen["params"]["order"] == "created_at.asc"
    assert seen["apikey"] == "anon-key"
    assert seen["authorization"] == "Bearer anon-key"


def test_create_update_and_rpc_requests() -> None:
    calls = []

    def handler(request: httpx.Request) -> httpx.Response:
        body = json.loads(request.content) if request.content else None
        calls.append((request.method, request.url.path, dict(request.url.params), body))
        if request.url.path.endswith("/rpc/generate_invoice_number"):
            return httpx.Response(200, json="INV-202601-0001")
        return httpx.Response(201, json=[{"id": "ord-1", **(body or {})}])

    client = _client(handler)
    created = asyncio.run(client.create("orders", {"customer_name": "Rina"}))
    updated = asyncio.run(client.update("orders", "ord-1", {"status": "completed"}))
    number = asyncio.run(client.rpc("generate_invoice_number"))

    assert created == {"id": "ord-1", "customer_name": "Rina"}
    assert updated["status"] == "completed"
    assert number == "INV-202601-0001"
    assert calls[0][:2] == ("POST", "/rest/v1/orders")
    assert calls[1][:3] == ("PATCH", "/rest/v1/orders", {"id": "eq.ord-1"})
    assert calls[2][0] == "POST"


def test_error_response_becomes_downstream_error() -> None:
    def handler(request: httpx.Request) -> httpx.Response:
        return httpx.Response(503, json={"message": "unavailable"})

    with pytest.raises(DownstreamServiceError) as excinfo:
        asyncio.run(_client(handler).query("orders"))
    assert excinfo.value.status_code == 503


def test_unreachable_backend_becomes_downstream_error() -> None:
    def handler(request: httpx.Request) -> httpx.Response:
        raise httpx.ConnectError("connection refused", request=request)

    with pytest.raises(DownstreamServiceError) as excinfo:
        asyncio.run(_client(handler).get("orders", "ord-1"))
    assert excinfo.value.status_code is None
