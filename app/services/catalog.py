from __future__ import annotations

import logging

from app.clients.backend import BackendClient
from app.schemas.catalog import (
    Service,
    ServiceCreateRequest,
    ServiceListResponse,
    ServiceUpdateRequest,
)
from app.services.repositories import RecordStore, ServiceRepository, get_record_store

logger = logging.getLogger(__name__)


class CatalogService:
    def __init__(
        self,
        client: BackendClient,
        *,
        store: RecordStore | None = None,
    ) -> None:
        self._client = client
        self._services = ServiceRepository(store or get_record_store(client))

    async def list(self, *, active_only: bool = False) -> ServiceListResponse:
        if active_only:
            services = await self._services.list(is_active=True)
        else:
            services = await self._services.list()
        return ServiceListResponse(total=len(services), items=services)

    async def get(self, service_id: str) -> Service:
        return await self._services.require(service_id)

    async def create(self, request: ServiceCreateRequest) -> Service:
        logger.info("Creating service %s", request.name)
        return await self._services.create(request.model_dump())

    async def update(self, service_id: str, request: ServiceUpdateRequest) -> Service:
        patch = request.model_dump(exclude_unset=True)
        if not patch:
            return await self._services.require(service_id)
        logger.info("Updating service %s", service_id)
        return await self._services.update(service_id, patch)

    async def delete(self, service_id: str) -> None:
        logger.info("Deleting service %s", service_id)
        await self._services.delete(service_id)
