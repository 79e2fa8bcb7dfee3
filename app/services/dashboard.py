from __future__ import annotations

import logging

from app.clients.backend import BackendClient
from app.config import Settings, get_settings
from app.schemas.content import DashboardStats
from app.services.money import ZERO, format_currency
from app.services.repositories import (
    InvoiceRepository,
    OrderRepository,
    PortfolioRepository,
    RecordStore,
    ServiceRepository,
    get_record_store,
)

logger = logging.getLogger(__name__)


class DashboardService:
    def __init__(
        self,
        client: BackendClient,
        *,
        store: RecordStore | None = None,
        settings: Settings | None = None,
    ) -> None:
        self._client = client
        store = store or get_record_store(client)
        self._orders = OrderRepository(store)
        self._services = ServiceRepository(store)
        self._portfolio = PortfolioRepository(store)
        self._invoices = InvoiceRepository(store)
        self._settings = settings or get_settings()

    async def stats(self) -> DashboardStats:
        orders = await self._orders.list()
        services = await self._services.list()
        portfolio = await self._portfolio.list()
        invoices = await self._invoices.list()

        revenue = sum((order.total_amount for order in orders), ZERO)
        return DashboardStats(
            total_orders=len(orders),
            pending_orders=sum(1 for order in orders if order.status == "pending"),
            active_services=sum(1 for service in services if service.is_active),
            total_portfolio=len(portfolio),
            featured_portfolio=sum(1 for item in portfolio if item.is_featured),
            total_invoices=len(invoices),
            total_revenue=revenue,
            total_revenue_display=format_currency(revenue, self._settings.currency_prefix),
        )
