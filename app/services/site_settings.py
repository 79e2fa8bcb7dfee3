from __future__ import annotations

import logging
from typing import Any, Dict

from app.clients.backend import BackendClient
from app.schemas.settings import (
    CompanyInfo,
    EmailConfig,
    InvoiceConfig,
    PublicSiteSettings,
    SettingKey,
    SiteSettings,
)
from app.services.exceptions import ValidationError
from app.services.repositories import RecordStore, SettingsRepository, get_record_store

logger = logging.getLogger(__name__)

_SETTING_MODELS = {
    "email_config": EmailConfig,
    "company_info": CompanyInfo,
    "invoice_config": InvoiceConfig,
}


class SettingsService:
    def __init__(
        self,
        client: BackendClient,
        *,
        store: RecordStore | None = None,
    ) -> None:
        self._client = client
        self._settings = SettingsRepository(store or get_record_store(client))

    async def get(self) -> SiteSettings:
        return await self._settings.load()

    async def get_public(self) -> PublicSiteSettings:
        """Everything except the mail credentials."""

        settings = await self._settings.load()
        return PublicSiteSettings(
            company_info=settings.company_info,
            invoice_config=settings.invoice_config,
        )

    async def update(self, key: SettingKey, value: Dict[str, Any]) -> SiteSettings:
        model = _SETTING_MODELS.get(key)
        if model is None:
            raise ValidationError(f"Unknown setting {key}", field="key")
        try:
            parsed = model.model_validate(value)
        except ValueError as exc:
            raise ValidationError(f"Invalid value for {key}: {exc}", field=key) from exc
        logger.info("Updating setting %s", key)
        await self._settings.save(key, parsed.model_dump(mode="json"))
        return await self._settings.load()
