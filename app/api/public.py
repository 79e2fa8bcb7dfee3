"""Routes used by the public marketing site and order form."""

from typing import List, Optional

from fastapi import APIRouter, Depends

from app.api.errors import http_error
from app.dependencies.services import (
    get_catalog_service,
    get_consent_service,
    get_content_service,
    get_order_service,
    get_portfolio_service,
    get_settings_service,
)
from app.schemas.catalog import ServiceListResponse
from app.schemas.content import (
    ConsentRequest,
    ConsentResponse,
    FooterLink,
    LandingSection,
    PortfolioItem,
)
from app.schemas.order import (
    DownpaymentBreakdown,
    DownpaymentPreviewRequest,
    OrderCreateRequest,
    OrderOut,
)
from app.schemas.settings import PublicSiteSettings
from app.services import (
    CatalogService,
    ConsentService,
    ContentService,
    OrderService,
    PortfolioService,
    SettingsService,
)
from app.services.exceptions import ServiceError

router = APIRouter()


@router.get("/services", response_model=ServiceListResponse)
async def list_services(service: CatalogService = Depends(get_catalog_service)):
    try:
        return await service.list(active_only=True)
    except ServiceError as exc:
        raise http_error(exc) from exc


@router.post("/orders", response_model=OrderOut, status_code=201)
async def submit_order(
    req: OrderCreateRequest,
    service: OrderService = Depends(get_order_service),
):
    try:
        return await service.submit(req)
    except ServiceError as exc:
        raise http_error(exc) from exc


@router.post("/orders/downpayment-preview", response_model=DownpaymentBreakdown)
async def preview_downpayment(
    req: DownpaymentPreviewRequest,
    service: OrderService = Depends(get_order_service),
):
    try:
        return service.preview_downpayment(req)
    except ServiceError as exc:
        raise http_error(exc) from exc


@router.get("/content/landing", response_model=List[LandingSection])
async def landing_content(service: ContentService = Depends(get_content_service)):
    try:
        return await service.landing_sections(enabled_only=True)
    except ServiceError as exc:
        raise http_error(exc) from exc


@router.get("/content/footer", response_model=List[FooterLink])
async def footer_content(service: ContentService = Depends(get_content_service)):
    try:
        return await service.footer_links(enabled_only=True)
    except ServiceError as exc:
        raise http_error(exc) from exc


@router.get("/portfolio", response_model=List[PortfolioItem])
async def list_portfolio(
    featured: Optional[bool] = None,
    service: PortfolioService = Depends(get_portfolio_service),
):
    try:
        return await service.list(featured=featured)
    except ServiceError as exc:
        raise http_error(exc) from exc


@router.post("/consent", response_model=ConsentResponse)
async def record_consent(
    req: ConsentRequest,
    service: ConsentService = Depends(get_consent_service),
):
    return await service.record(req)


@router.get("/settings", response_model=PublicSiteSettings)
async def public_settings(service: SettingsService = Depends(get_settings_service)):
    try:
        return await service.get_public()
    except ServiceError as exc:
        raise http_error(exc) from exc
