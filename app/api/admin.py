"""Back-office routes, mounted under ``/admin``."""

from typing import List, Optional

from fastapi import APIRouter, Depends, Response

from app.api.errors import http_error
from app.dependencies.services import (
    get_catalog_service,
    get_content_service,
    get_dashboard_service,
    get_invoice_service,
    get_order_service,
    get_portfolio_service,
    get_settings_service,
)
from app.schemas.catalog import (
    Service,
    ServiceCreateRequest,
    ServiceListResponse,
    ServiceUpdateRequest,
)
from app.schemas.content import (
    DashboardStats,
    FooterLink,
    FooterLinkRequest,
    LandingSection,
    LandingSectionRequest,
    PortfolioItem,
    PortfolioItemRequest,
)
from app.schemas.invoice import (
    AdjustmentResult,
    InvoiceAdjustmentRequest,
    InvoiceCreateRequest,
    InvoiceCreateResponse,
    InvoiceListResponse,
    InvoiceOut,
    InvoiceStatus,
    InvoiceStatusUpdate,
    InvoiceType,
)
from app.schemas.order import OrderListResponse, OrderOut, OrderStatus, OrderStatusUpdate
from app.schemas.settings import SettingKey, SiteSettings
from app.services import (
    CatalogService,
    ContentService,
    DashboardService,
    InvoiceService,
    OrderService,
    PortfolioService,
    SettingsService,
)
from app.services.exceptions import ServiceError

router = APIRouter()


# --- Dashboard ---


@router.get("/dashboard", response_model=DashboardStats)
async def dashboard_stats(service: DashboardService = Depends(get_dashboard_service)):
    try:
        return await service.stats()
    except ServiceError as exc:
        raise http_error(exc) from exc


# --- Services catalogue ---


@router.get("/services", response_model=ServiceListResponse)
async def list_services(service: CatalogService = Depends(get_catalog_service)):
    try:
        return await service.list()
    except ServiceError as exc:
        raise http_error(exc) from exc


@router.post("/services", response_model=Service, status_code=201)
async def create_service(
    req: ServiceCreateRequest,
    service: CatalogService = Depends(get_catalog_service),
):
    try:
        return await service.create(req)
    except ServiceError as exc:
        raise http_error(exc) from exc


@router.patch("/services/{service_id}", response_model=Service)
async def update_service(
    service_id: str,
    req: ServiceUpdateRequest,
    service: CatalogService = Depends(get_catalog_service),
):
    try:
        return await service.update(service_id, req)
    except ServiceError as exc:
        raise http_error(exc) from exc


@router.delete("/services/{service_id}", status_code=204)
async def delete_service(
    service_id: str,
    service: CatalogService = Depends(get_catalog_service),
):
    try:
        await service.delete(service_id)
    except ServiceError as exc:
        raise http_error(exc) from exc
    return Response(status_code=204)


# --- Orders ---


@router.get("/orders", response_model=OrderListResponse)
async def list_orders(
    status: Optional[OrderStatus] = None,
    service: OrderService = Depends(get_order_service),
):
    try:
        return await service.list(status=status)
    except ServiceError as exc:
        raise http_error(exc) from exc


@router.get("/orders/invoiceable", response_model=OrderListResponse)
async def list_invoiceable_orders(service: OrderService = Depends(get_order_service)):
    try:
        return await service.list_invoiceable()
    except ServiceError as exc:
        raise http_error(exc) from exc


@router.get("/orders/{order_id}", response_model=OrderOut)
async def get_order(order_id: str, service: OrderService = Depends(get_order_service)):
    try:
        return await service.get(order_id)
    except ServiceError as exc:
        raise http_error(exc) from exc


@router.put("/orders/{order_id}/status", response_model=OrderOut)
async def update_order_status(
    order_id: str,
    req: OrderStatusUpdate,
    service: OrderService = Depends(get_order_service),
):
    try:
        return await service.set_status(order_id, req.status)
    except ServiceError as exc:
        raise http_error(exc) from exc


# --- Invoices ---


@router.post("/invoices", response_model=InvoiceCreateResponse, status_code=201)
async def create_invoice(
    req: InvoiceCreateRequest,
    service: InvoiceService = Depends(get_invoice_service),
):
    try:
        return await service.create(req)
    except ServiceError as exc:
        raise http_error(exc) from exc


@router.get("/invoices", response_model=InvoiceListResponse)
async def list_invoices(
    search: Optional[str] = None,
    status: Optional[InvoiceStatus] = None,
    invoice_type: Optional[InvoiceType] = None,
    service: InvoiceService = Depends(get_invoice_service),
):
    try:
        return await service.list(search=search, status=status, invoice_type=invoice_type)
    except ServiceError as exc:
        raise http_error(exc) from exc


@router.get("/invoices/{invoice_id}", response_model=InvoiceOut)
async def get_invoice(
    invoice_id: str,
    service: InvoiceService = Depends(get_invoice_service),
):
    try:
        return await service.get(invoice_id)
    except ServiceError as exc:
        raise http_error(exc) from exc


@router.put("/invoices/{invoice_id}/status", response_model=InvoiceOut)
async def update_invoice_status(
    invoice_id: str,
    req: InvoiceStatusUpdate,
    service: InvoiceService = Depends(get_invoice_service),
):
    try:
        return await service.set_status(invoice_id, req.status)
    except ServiceError as exc:
        raise http_error(exc) from exc


@router.post("/invoices/{invoice_id}/adjust-preview", response_model=AdjustmentResult)
async def preview_invoice_adjustment(
    invoice_id: str,
    req: InvoiceAdjustmentRequest,
    service: InvoiceService = Depends(get_invoice_service),
):
    try:
        return await service.preview_adjustment(invoice_id, req)
    except ServiceError as exc:
        raise http_error(exc) from exc


@router.post("/invoices/{invoice_id}/adjust", response_model=InvoiceOut)
async def apply_invoice_adjustment(
    invoice_id: str,
    req: InvoiceAdjustmentRequest,
    service: InvoiceService = Depends(get_invoice_service),
):
    try:
        return await service.apply_adjustment(invoice_id, req)
    except ServiceError as exc:
        raise http_error(exc) from exc


@router.post("/invoices/{invoice_id}/resync-order", response_model=OrderOut)
async def resync_invoice_order(
    invoice_id: str,
    service: InvoiceService = Depends(get_invoice_service),
):
    try:
        return await service.resync_order(invoice_id)
    except ServiceError as exc:
        raise http_error(exc) from exc


@router.get("/invoices/{invoice_id}/pdf")
async def download_invoice_pdf(
    invoice_id: str,
    service: InvoiceService = Depends(get_invoice_service),
):
    try:
        filename, content = await service.render_pdf(invoice_id)
    except ServiceError as exc:
        raise http_error(exc) from exc
    return Response(
        content=content,
        media_type="application/pdf",
        headers={"Content-Disposition": f'attachment; filename="{filename}"'},
    )


# --- Portfolio ---


@router.get("/portfolio", response_model=List[PortfolioItem])
async def list_portfolio(service: PortfolioService = Depends(get_portfolio_service)):
    try:
        return await service.list()
    except ServiceError as exc:
        raise http_error(exc) from exc


@router.post("/portfolio", response_model=PortfolioItem, status_code=201)
async def create_portfolio_item(
    req: PortfolioItemRequest,
    service: PortfolioService = Depends(get_portfolio_service),
):
    try:
        return await service.create(req)
    except ServiceError as exc:
        raise http_error(exc) from exc


@router.put("/portfolio/{item_id}", response_model=PortfolioItem)
async def update_portfolio_item(
    item_id: str,
    req: PortfolioItemRequest,
    service: PortfolioService = Depends(get_portfolio_service),
):
    try:
        return await service.update(item_id, req)
    except ServiceError as exc:
        raise http_error(exc) from exc


@router.delete("/portfolio/{item_id}", status_code=204)
async def delete_portfolio_item(
    item_id: str,
    service: PortfolioService = Depends(get_portfolio_service),
):
    try:
        await service.delete(item_id)
    except ServiceError as exc:
        raise http_error(exc) from exc
    return Response(status_code=204)


# --- Landing content and footer ---


@router.get("/content/landing", response_model=List[LandingSection])
async def list_landing_sections(service: ContentService = Depends(get_content_service)):
    try:
        return await service.landing_sections()
    except ServiceError as exc:
        raise http_error(exc) from exc


@router.post("/content/landing", response_model=LandingSection, status_code=201)
async def create_landing_section(
    req: LandingSectionRequest,
    service: ContentService = Depends(get_content_service),
):
    try:
        return await service.create_section(req)
    except ServiceError as exc:
        raise http_error(exc) from exc


@router.put("/content/landing/{section_id}", response_model=LandingSection)
async def update_landing_section(
    section_id: str,
    req: LandingSectionRequest,
    service: ContentService = Depends(get_content_service),
):
    try:
        return await service.update_section(section_id, req)
    except ServiceError as exc:
        raise http_error(exc) from exc


@router.delete("/content/landing/{section_id}", status_code=204)
async def delete_landing_section(
    section_id: str,
    service: ContentService = Depends(get_content_service),
):
    try:
        await service.delete_section(section_id)
    except ServiceError as exc:
        raise http_error(exc) from exc
    return Response(status_code=204)


@router.get("/content/footer", response_model=List[FooterLink])
async def list_footer_links(service: ContentService = Depends(get_content_service)):
    try:
        return await service.footer_links()
    except ServiceError as exc:
        raise http_error(exc) from exc


@router.post("/content/footer", response_model=FooterLink, status_code=201)
async def create_footer_link(
    req: FooterLinkRequest,
    service: ContentService = Depends(get_content_service),
):
    try:
        return await service.create_link(req)
    except ServiceError as exc:
        raise http_error(exc) from exc


@router.put("/content/footer/{link_id}", response_model=FooterLink)
async def update_footer_link(
    link_id: str,
    req: FooterLinkRequest,
    service: ContentService = Depends(get_content_service),
):
    try:
        return await service.update_link(link_id, req)
    except ServiceError as exc:
        raise http_error(exc) from exc


@router.delete("/content/footer/{link_id}", status_code=204)
async def delete_footer_link(
    link_id: str,
    service: ContentService = Depends(get_content_service),
):
    try:
        await service.delete_link(link_id)
    except ServiceError as exc:
        raise http_error(exc) from exc
    return Response(status_code=204)


# --- Settings ---


@router.get("/settings", response_model=SiteSettings)
async def get_site_settings(service: SettingsService = Depends(get_settings_service)):
    try:
        return await service.get()
    except ServiceError as exc:
        raise http_error(exc) from exc


@router.put("/settings/{key}", response_model=SiteSettings)
async def update_site_setting(
    key: SettingKey,
    value: dict,
    service: SettingsService = Depends(get_settings_service),
):
    try:
        return await service.update(key, value)
    except ServiceError as exc:
        raise http_error(exc) from exc
