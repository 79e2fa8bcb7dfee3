# app/health.py
from fastapi import APIRouter

from app.dependencies.services import get_backend_client_cached

router = APIRouter()


@router.get("/health")
def health():
    client = get_backend_client_cached()
    return {"status": "ok", "mock_data": client.use_mock_data}


@router.get("/mcp/info")
def mcp_info():
    return {"status": "ok", "transport": "streamable-http", "path": "/mcp"}
