from __future__ import annotations

from functools import lru_cache

from fastapi import Depends

from app.clients.backend import BackendClient
from app.config import Settings, get_settings
from app.services import (
    CatalogService,
    ConsentService,
    ContentService,
    DashboardService,
    InvoiceService,
    OrderService,
    PortfolioService,
    SettingsService,
)
from app.services.document_sink import LocalDocumentSink, MemoryDocumentSink


@lru_cache(maxsize=1)
def get_backend_client_cached() -> BackendClient:
    settings = get_settings()
    return BackendClient(
        settings.backend_base_url,
        timeout=settings.backend_timeout,
        use_mock_data=settings.use_mock_data,
        api_key=settings.backend_api_key,
    )


def get_backend_client(settings: Settings = Depends(get_settings)) -> BackendClient:
    return get_backend_client_cached()


@lru_cache(maxsize=1)
def _memory_sink() -> MemoryDocumentSink:
    return MemoryDocumentSink()


def get_document_sink(settings: Settings = Depends(get_settings)):
    if settings.use_mock_data:
        return _memory_sink()
    return LocalDocumentSink(settings.document_output_dir)


def get_catalog_service(
    client: BackendClient = Depends(get_backend_client),
) -> CatalogService:
    return CatalogService(client)


def get_order_service(
    client: BackendClient = Depends(get_backend_client),
) -> OrderService:
    return OrderService(client)


def get_invoice_service(
    client: BackendClient = Depends(get_backend_client),
    settings: Settings = Depends(get_settings),
    sink=Depends(get_document_sink),
) -> InvoiceService:
    return InvoiceService(client, settings=settings, sink=sink)


def get_portfolio_service(
    client: BackendClient = Depends(get_backend_client),
) -> PortfolioService:
    return PortfolioService(client)


def get_content_service(
    client: BackendClient = Depends(get_backend_client),
) -> ContentService:
    return ContentService(client)


def get_settings_service(
    client: BackendClient = Depends(get_backend_client),
) -> SettingsService:
    return SettingsService(client)


def get_consent_service(
    client: BackendClient = Depends(get_backend_client),
) -> ConsentService:
    return ConsentService(client)


def get_dashboard_service(
    client: BackendClient = Depends(get_backend_client),
    settings: Settings = Depends(get_settings),
) -> DashboardService:
    return DashboardService(client, settings=settings)
