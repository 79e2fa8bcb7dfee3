from __future__ import annotations

import logging
from typing import Dict, Iterable, List, Optional

from app.clients.backend import BackendClient
from app.schemas.catalog import Service
from app.schemas.order import (
    DownpaymentBreakdown,
    DownpaymentPreviewRequest,
    Order,
    OrderCreateRequest,
    OrderListResponse,
    OrderOut,
    OrderStatus,
)
from app.services.downpayment import calculate_downpayment, validate_percentage
from app.services.exceptions import ServiceError, ValidationError
from app.services.order_state import INVOICEABLE_STATUSES, set_status
from app.services.repositories import (
    OrderRepository,
    RecordStore,
    ServiceRepository,
    get_record_store,
)

logger = logging.getLogger(__name__)

REQUIRED_ORDER_FIELDS = ("customer_name", "customer_email", "service_id")


def order_out(order: Order, service: Optional[Service] = None) -> OrderOut:
    return OrderOut(
        **order.model_dump(),
        service_name=service.name if service else None,
        service_price=service.price if service else None,
    )


class OrderService:
    def __init__(
        self,
        client: BackendClient,
        *,
        store: RecordStore | None = None,
    ) -> None:
        self._client = client
        store = store or get_record_store(client)
        self._orders = OrderRepository(store)
        self._services = ServiceRepository(store)

    def preview_downpayment(self, request: DownpaymentPreviewRequest) -> DownpaymentBreakdown:
        return calculate_downpayment(
            request.base_price, request.percentage, enabled=request.enabled
        )

    async def submit(self, request: OrderCreateRequest) -> OrderOut:
        missing = [
            field
            for field in REQUIRED_ORDER_FIELDS
            if not (getattr(request, field) or "").strip()
        ]
        if missing:
            raise ValidationError(
                f"Please complete the required fields: {', '.join(missing)}",
                field=missing[0],
            )

        service = await self._services.get(request.service_id)
        if service is None or not service.is_active:
            raise ValidationError("The selected service is not available", field="service_id")

        percentage = request.downpayment_percentage if request.use_downpayment else 0
        if request.use_downpayment:
            validate_percentage(percentage)

        total = request.total_amount if request.total_amount else service.price
        breakdown = calculate_downpayment(total, percentage, enabled=percentage > 0)

        record = {
            "customer_name": request.customer_name.strip(),
            "customer_email": request.customer_email.strip(),
            "customer_phone": request.customer_phone or None,
            "service_id": service.id,
            "custom_requirements": request.custom_requirements or None,
            "budget_range": request.budget_range,
            "deadline_date": request.deadline_date,
            "status": "pending",
            "total_amount": total,
            "downpayment_percentage": percentage,
            "downpayment_amount": breakdown.downpayment_amount,
            "remaining_amount": breakdown.remaining_amount,
        }
        logger.info("Submitting order for %s (%s)", record["customer_name"], service.name)
        try:
            order = await self._orders.create(record)
        except ServiceError:
            raise
        except Exception as exc:  # pragma: no cover - unexpected store failure
            logger.exception("Unexpected error while submitting order")
            raise ServiceError("Failed to submit order", cause=exc)
        return order_out(order, service)

    async def _with_services(self, orders: Iterable[Order]) -> List[OrderOut]:
        orders = list(orders)
        service_ids = sorted({order.service_id for order in orders if order.service_id})
        services: Dict[str, Service] = {}
        if service_ids:
            services = {
                service.id: service
                for service in await self._services.list(in_filters={"id": service_ids})
            }
        return [order_out(order, services.get(order.service_id or "")) for order in orders]

    async def list(self, *, status: OrderStatus | None = None) -> OrderListResponse:
        if status:
            orders = await self._orders.list(status=status)
        else:
            orders = await self._orders.list()
        items = await self._with_services(orders)
        return OrderListResponse(total=len(items), items=items)

    async def list_invoiceable(self) -> OrderListResponse:
        orders = await self._orders.list(in_filters={"status": sorted(INVOICEABLE_STATUSES)})
        items = await self._with_services(orders)
        return OrderListResponse(total=len(items), items=items)

    async def get(self, order_id: str) -> OrderOut:
        order = await self._orders.require(order_id)
        items = await self._with_services([order])
        return items[0]

    async def set_status(self, order_id: str, status: OrderStatus) -> OrderOut:
        order = await self._orders.require(order_id)
        updated = set_status(order, status)
        stored = await self._orders.update(order_id, {"status": updated.status})
        items = await self._with_services([stored])
        return items[0]
