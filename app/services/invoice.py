from __future__ import annotations

import logging
from datetime import date
from typing import Callable, Dict, Optional, Protocol, Tuple

from app.clients.backend import BackendClient
from app.config import Settings, get_settings
from app.schemas.catalog import Service
from app.schemas.invoice import (
    AdjustmentResult,
    DocumentLineItem,
    DocumentParty,
    Invoice,
    InvoiceAdjustmentRequest,
    InvoiceCreateRequest,
    InvoiceCreateResponse,
    InvoiceDocument,
    InvoiceListResponse,
    InvoiceOut,
    InvoiceStatus,
    InvoiceType,
)
from app.schemas.order import Order, OrderOut
from app.schemas.settings import CompanyInfo
from app.services.document_sink import invoice_filename
from app.services.exceptions import ServiceError, ValidationError
from app.services.invoice_engine import (
    compute_adjustment,
    compute_invoice_amounts,
    downpayment_order_patch,
    is_overdue,
    order_base_amount,
    tax_rate_label,
)
from app.services.invoice_pdf import InvoicePdfRenderer
from app.services.order_state import ensure_invoiceable
from app.services.orders import order_out
from app.services.repositories import (
    InvoiceRepository,
    OrderRepository,
    RecordStore,
    ServiceRepository,
    SettingsRepository,
    get_record_store,
)

logger = logging.getLogger(__name__)

DEFAULT_ITEM_DESCRIPTION = "Digital Service"


class DocumentSink(Protocol):
    def save(self, filename: str, content: bytes) -> None: ...


class InvoiceService:
    def __init__(
        self,
        client: BackendClient,
        *,
        store: RecordStore | None = None,
        settings: Settings | None = None,
        sink: DocumentSink | None = None,
        today: Callable[[], date] = date.today,
    ) -> None:
        self._client = client
        store = store or get_record_store(client)
        self._invoices = InvoiceRepository(store)
        self._orders = OrderRepository(store)
        self._services = ServiceRepository(store)
        self._site_settings = SettingsRepository(store)
        self._settings = settings or get_settings()
        self._sink = sink
        self._today = today

    def _project(
        self,
        invoice: Invoice,
        order: Optional[Order] = None,
        service: Optional[Service] = None,
    ) -> InvoiceOut:
        return InvoiceOut(
            **invoice.model_dump(),
            is_overdue=is_overdue(invoice, self._today()),
            customer_name=order.customer_name if order else None,
            customer_email=order.customer_email if order else None,
            service_name=service.name if service else None,
            order_remaining_amount=order.remaining_amount if order else None,
        )

    async def _order_and_service(
        self, order_id: Optional[str]
    ) -> Tuple[Optional[Order], Optional[Service]]:
        if not order_id:
            return None, None
        order = await self._orders.get(order_id)
        service = None
        if order and order.service_id:
            service = await self._services.get(order.service_id)
        return order, service

    async def create(self, request: InvoiceCreateRequest) -> InvoiceCreateResponse:
        order = await self._orders.require(request.order_id)
        ensure_invoiceable(order)
        service = await self._services.get(order.service_id) if order.service_id else None
        base_amount = order_base_amount(order, service.price if service else None)

        site = await self._site_settings.load()
        amounts = compute_invoice_amounts(
            base_amount,
            request.invoice_type,
            downpayment_percentage=request.downpayment_percentage,
            tax_amount=request.tax_amount,
            tax_rate=site.invoice_config.tax_rate,
        )
        if request.related_invoice_id:
            await self._invoices.require(request.related_invoice_id)

        logger.info(
            "Creating %s invoice for order %s (subtotal %s)",
            amounts.invoice_type,
            order.id,
            amounts.subtotal,
        )
        try:
            invoice_number = await self._invoices.next_invoice_number()
            invoice = await self._invoices.create(
                {
                    "invoice_number": invoice_number,
                    "order_id": order.id,
                    "issue_date": request.issue_date or self._today(),
                    "due_date": request.due_date,
                    "status": "draft",
                    "is_downpayment": amounts.is_downpayment,
                    "invoice_type": amounts.invoice_type,
                    "downpayment_percentage": amounts.downpayment_percentage,
                    "subtotal": amounts.subtotal,
                    "tax_amount": amounts.tax_amount,
                    "total_amount": amounts.total_amount,
                    "payment_terms": request.payment_terms
                    or site.invoice_config.payment_terms
                    or self._settings.default_payment_terms,
                    "notes": request.notes or site.invoice_config.notes,
                    "related_invoice_id": request.related_invoice_id,
                }
            )
        except ServiceError:
            raise
        except Exception as exc:  # pragma: no cover - unexpected store failure
            logger.exception("Unexpected error while creating invoice")
            raise ServiceError("Failed to create invoice", cause=exc)

        order_synced = True
        if invoice.is_downpayment:
            patch = downpayment_order_patch(
                base_amount, invoice.subtotal, invoice.downpayment_percentage
            )
            try:
                order = await self._orders.update(order.id, patch)
            except ServiceError as exc:
                # The invoice is already stored and stays authoritative; resync_order repairs the order.
                logger.warning(
                    "Invoice %s created but order %s downpayment fields were not updated: %s",
                    invoice.invoice_number,
                    order.id,
                    exc,
                )
                order_synced = False

        return InvoiceCreateResponse(
            invoice=self._project(invoice, order, service),
            order_synced=order_synced,
        )

    async def resync_order(self, invoice_id: str) -> OrderOut:
        """Re-apply a downpayment invoice's amounts to its order. Safe to repeat."""

        invoice = await self._invoices.require(invoice_id)
        if not invoice.is_downpayment or not invoice.order_id:
            raise ValidationError("Only downpayment invoices update their order", field="invoice_id")
        order = await self._orders.require(invoice.order_id)
        service = await self._services.get(order.service_id) if order.service_id else None
        base_amount = order_base_amount(order, service.price if service else None)
        patch = downpayment_order_patch(
            base_amount, invoice.subtotal, invoice.downpayment_percentage
        )
        logger.info("Resyncing order %s from invoice %s", order.id, invoice.invoice_number)
        updated = await self._orders.update(order.id, patch)
        return order_out(updated, service)

    async def list(
        self,
        *,
        search: str | None = None,
        status: InvoiceStatus | None = None,
        invoice_type: InvoiceType | None = None,
    ) -> InvoiceListResponse:
        if status:
            invoices = await self._invoices.list(status=status)
        else:
            invoices = await self._invoices.list()
        if invoice_type == "downpayment":
            invoices = [invoice for invoice in invoices if invoice.is_downpayment]
        elif invoice_type == "full":
            invoices = [invoice for invoice in invoices if not invoice.is_downpayment]

        order_ids = sorted({invoice.order_id for invoice in invoices if invoice.order_id})
        orders: Dict[str, Order] = {}
        services: Dict[str, Service] = {}
        if order_ids:
            orders = {
                order.id: order
                for order in await self._orders.list(in_filters={"id": order_ids})
            }
            service_ids = sorted({order.service_id for order in orders.values() if order.service_id})
            if service_ids:
                services = {
                    service.id: service
                    for service in await self._services.list(in_filters={"id": service_ids})
                }

        items = []
        for invoice in invoices:
            order = orders.get(invoice.order_id or "")
            service = services.get(order.service_id or "") if order else None
            items.append(self._project(invoice, order, service))

        if search:
            needle = search.strip().lower()
            items = [
                item
                for item in items
                if needle in item.invoice_number.lower()
                or needle in (item.customer_name or "").lower()
            ]
        return InvoiceListResponse(total=len(items), items=items)

    async def get(self, invoice_id: str) -> InvoiceOut:
        invoice = await self._invoices.require(invoice_id)
        order, service = await self._order_and_service(invoice.order_id)
        return self._project(invoice, order, service)

    async def set_status(self, invoice_id: str, status: InvoiceStatus) -> InvoiceOut:
        await self._invoices.require(invoice_id)
        logger.info("Setting invoice %s status to %s", invoice_id, status)
        invoice = await self._invoices.update(invoice_id, {"status": status})
        order, service = await self._order_and_service(invoice.order_id)
        return self._project(invoice, order, service)

    async def preview_adjustment(
        self, invoice_id: str, request: InvoiceAdjustmentRequest
    ) -> AdjustmentResult:
        invoice = await self._invoices.require(invoice_id)
        return compute_adjustment(
            invoice.subtotal,
            invoice.tax_amount,
            request,
            tax_adjustment_mode=self._settings.tax_adjustment_mode,
        )

    async def apply_adjustment(
        self, invoice_id: str, request: InvoiceAdjustmentRequest
    ) -> InvoiceOut:
        invoice = await self._invoices.require(invoice_id)
        result = compute_adjustment(
            invoice.subtotal,
            invoice.tax_amount,
            request,
            tax_adjustment_mode=self._settings.tax_adjustment_mode,
        )
        logger.info(
            "Applying %s of %s to invoice %s",
            request.type,
            result.adjustment_amount,
            invoice.invoice_number,
        )
        updated = await self._invoices.update(
            invoice_id,
            {
                "subtotal": result.new_subtotal,
                "tax_amount": result.new_tax_amount,
                "total_amount": result.new_total,
                "notes": result.notes,
            },
        )
        order, service = await self._order_and_service(updated.order_id)
        return self._project(updated, order, service)

    def _company(self, configured: CompanyInfo) -> CompanyInfo:
        if configured.name:
            return configured
        settings = self._settings
        return CompanyInfo(
            name=settings.company_name,
            address=settings.company_address,
            phone=settings.company_phone,
            email=settings.company_email,
            website=settings.company_website,
            tax_number=settings.company_tax_number,
        )

    async def build_document(self, invoice_id: str) -> InvoiceDocument:
        invoice = await self._invoices.require(invoice_id)
        order, service = await self._order_and_service(invoice.order_id)
        site = await self._site_settings.load()

        description = service.name if service else DEFAULT_ITEM_DESCRIPTION
        if invoice.is_downpayment:
            description = f"{description} (DP)"

        return InvoiceDocument(
            invoice_number=invoice.invoice_number,
            issue_date=invoice.issue_date,
            due_date=invoice.due_date,
            customer=DocumentParty(
                name=order.customer_name if order else "",
                email=order.customer_email if order else "",
            ),
            company=self._company(site.company_info),
            items=[
                DocumentLineItem(
                    description=description,
                    quantity=1,
                    price=invoice.subtotal,
                    total=invoice.subtotal,
                )
            ],
            subtotal=invoice.subtotal,
            tax_amount=invoice.tax_amount,
            total_amount=invoice.total_amount,
            notes=invoice.notes,
            payment_terms=invoice.payment_terms or self._settings.default_payment_terms,
        )

    def renderer_for(self, document: InvoiceDocument) -> InvoicePdfRenderer:
        label = self._settings.invoice_tax_label
        if label == "auto":
            label = tax_rate_label(document.subtotal, document.tax_amount)
        return InvoicePdfRenderer(
            tax_label=label, currency_prefix=self._settings.currency_prefix
        )

    async def render_pdf(self, invoice_id: str) -> Tuple[str, bytes]:
        document = await self.build_document(invoice_id)
        content = self.renderer_for(document).render(document)
        filename = invoice_filename(document.invoice_number)
        if self._sink is not None:
            self._sink.save(filename, content)
        return filename, content
