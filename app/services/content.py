from __future__ import annotations

import logging
from typing import List, Optional

from app.clients.backend import BackendClient
from app.schemas.content import (
    FooterLink,
    FooterLinkRequest,
    LandingSection,
    LandingSectionRequest,
    PortfolioItem,
    PortfolioItemRequest,
)
from app.services.repositories import (
    FooterLinkRepository,
    LandingSectionRepository,
    PortfolioRepository,
    RecordStore,
    get_record_store,
)

logger = logging.getLogger(__name__)


class PortfolioService:
    def __init__(
        self,
        client: BackendClient,
        *,
        store: RecordStore | None = None,
    ) -> None:
        self._client = client
        self._portfolio = PortfolioRepository(store or get_record_store(client))

    async def list(self, *, featured: Optional[bool] = None) -> List[PortfolioItem]:
        if featured is None:
            return await self._portfolio.list()
        return await self._portfolio.list(is_featured=featured)

    async def create(self, request: PortfolioItemRequest) -> PortfolioItem:
        logger.info("Adding portfolio item %s", request.title)
        return await self._portfolio.create(request.model_dump())

    async def update(self, item_id: str, request: PortfolioItemRequest) -> PortfolioItem:
        return await self._portfolio.update(item_id, request.model_dump())

    async def delete(self, item_id: str) -> None:
        logger.info("Deleting portfolio item %s", item_id)
        await self._portfolio.delete(item_id)


class ContentService:
    """Landing page sections and footer links."""

    def __init__(
        self,
        client: BackendClient,
        *,
        store: RecordStore | None = None,
    ) -> None:
        self._client = client
        store = store or get_record_store(client)
        self._sections = LandingSectionRepository(store)
        self._links = FooterLinkRepository(store)

    async def landing_sections(self, *, enabled_only: bool = False) -> List[LandingSection]:
        if enabled_only:
            return await self._sections.list(is_enabled=True)
        return await self._sections.list()

    async def create_section(self, request: LandingSectionRequest) -> LandingSection:
        return await self._sections.create(request.model_dump())

    async def update_section(
        self, section_id: str, request: LandingSectionRequest
    ) -> LandingSection:
        return await self._sections.update(section_id, request.model_dump())

    async def delete_section(self, section_id: str) -> None:
        await self._sections.delete(section_id)

    async def footer_links(self, *, enabled_only: bool = False) -> List[FooterLink]:
        if enabled_only:
            return await self._links.list(is_enabled=True)
        return await self._links.list()

    async def create_link(self, request: FooterLinkRequest) -> FooterLink:
        return await self._links.create(request.model_dump())

    async def update_link(self, link_id: str, request: FooterLinkRequest) -> FooterLink:
        return await self._links.update(link_id, request.model_dump())

    async def delete_link(self, link_id: str) -> None:
        await self._links.delete(link_id)
