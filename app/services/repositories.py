"""Typed repositories, one per backend table.

Each repository talks to a :class:`RecordStore`: the hosted backend client in
production, or the seeded in-memory store when mock data is enabled.
"""

from __future__ import annotations

import logging
from typing import (
    Any,
    ClassVar,
    Dict,
    Generic,
    List,
    Mapping,
    Optional,
    Protocol,
    Sequence,
    Tuple,
    Type,
    TypeVar,
)

from pydantic import BaseModel

from app.schemas.catalog import Service
from app.schemas.content import ConsentRecord, FooterLink, LandingSection, PortfolioItem
from app.schemas.invoice import Invoice
from app.schemas.order import Order
from app.schemas.settings import SettingKey, SiteSettings
from app.services.exceptions import DownstreamServiceError, NotFoundError
from app.services.mock_store import get_mock_store

logger = logging.getLogger(__name__)


class RecordStore(Protocol):
    async def create(self, table: str, record: Dict[str, Any]) -> Dict[str, Any]: ...

    async def update(
        self, table: str, record_id: str, patch: Dict[str, Any]
    ) -> Optional[Dict[str, Any]]: ...

    async def query(
        self,
        table: str,
        *,
        filters: Mapping[str, Any] | None = None,
        in_filters: Mapping[str, Sequence[Any]] | None = None,
        order: Sequence[str] | None = None,
    ) -> List[Dict[str, Any]]: ...

    async def get(self, table: str, record_id: str) -> Optional[Dict[str, Any]]: ...

    async def delete(self, table: str, record_id: str) -> bool: ...

    async def rpc(self, name: str, args: Dict[str, Any] | None = None) -> Any: ...


def get_record_store(client: Any) -> RecordStore:
    """Pick the in-memory store in mock mode, otherwise the backend client itself."""

    if client.use_mock_data:
        return get_mock_store()
    return client


ModelT = TypeVar("ModelT", bound=BaseModel)


class TableRepository(Generic[ModelT]):
    table: ClassVar[str]
    model: ClassVar[Type[BaseModel]]
    default_order: ClassVar[Tuple[str, ...]] = ()
    label: ClassVar[str] = "Record"

    def __init__(self, store: RecordStore) -> None:
        self._store = store

    def _parse(self, row: Mapping[str, Any]) -> ModelT:
        return self.model.model_validate(row)  # type: ignore[return-value]

    async def list(
        self,
        *,
        order: Sequence[str] | None = None,
        in_filters: Mapping[str, Sequence[Any]] | None = None,
        **filters: Any,
    ) -> List[ModelT]:
        rows = await self._store.query(
            self.table,
            filters=filters or None,
            in_filters=in_filters,
            order=order if order is not None else self.default_order,
        )
        return [self._parse(row) for row in rows]

    async def get(self, record_id: str) -> Optional[ModelT]:
        row = await self._store.get(self.table, record_id)
        return self._parse(row) if row is not None else None

    async def require(self, record_id: str) -> ModelT:
        record = await self.get(record_id)
        if record is None:
            raise NotFoundError(f"{self.label} {record_id} not found")
        return record

    async def create(self, record: Dict[str, Any]) -> ModelT:
        row = await self._store.create(self.table, record)
        return self._parse(row)

    async def update(self, record_id: str, patch: Dict[str, Any]) -> ModelT:
        row = await self._store.update(self.table, record_id, patch)
        if row is None:
            raise NotFoundError(f"{self.label} {record_id} not found")
        return self._parse(row)

    async def delete(self, record_id: str) -> None:
        deleted = await self._store.delete(self.table, record_id)
        if not deleted:
            raise NotFoundError(f"{self.label} {record_id} not found")


class ServiceRepository(TableRepository[Service]):
    table = "services"
    model = Service
    default_order = ("created_at.asc",)
    label = "Service"


class OrderRepository(TableRepository[Order]):
    table = "orders"
    model = Order
    default_order = ("order_date.desc",)
    label = "Order"


class InvoiceRepository(TableRepository[Invoice]):
    table = "invoices"
    model = Invoice
    default_order = ("created_at.desc",)
    label = "Invoice"

    async def next_invoice_number(self) -> str:
        number = await self._store.rpc("generate_invoice_number")
        if not number:
            raise DownstreamServiceError("Invoice number sequence returned no value")
        return str(number)


class PortfolioRepository(TableRepository[PortfolioItem]):
    table = "portfolio"
    model = PortfolioItem
    default_order = ("created_at.desc",)
    label = "Portfolio item"


class LandingSectionRepository(TableRepository[LandingSection]):
    table = "landing_content"
    model = LandingSection
    default_order = ("section_order.asc",)
    label = "Landing section"


class FooterLinkRepository(TableRepository[FooterLink]):
    table = "footer_content"
    model = FooterLink
    default_order = ("parent_column.asc", "column_order.asc")
    label = "Footer link"


class ConsentRepository(TableRepository[ConsentRecord]):
    table = "gdpr_consents"
    model = ConsentRecord
    label = "Consent"


class SettingsRepository:
    """Settings rows are ``{setting_key, setting_value}``; this exposes them typed."""

    table = "settings"

    def __init__(self, store: RecordStore) -> None:
        self._store = store

    async def load(self) -> SiteSettings:
        rows = await self._store.query(self.table)
        values = {
            row["setting_key"]: row.get("setting_value")
            for row in rows
            if row.get("setting_key") in SiteSettings.model_fields and row.get("setting_value")
        }
        return SiteSettings.model_validate(values)

    async def save(self, key: SettingKey, value: Dict[str, Any]) -> None:
        rows = await self._store.query(self.table, filters={"setting_key": key})
        if rows:
            await self._store.update(self.table, rows[0]["id"], {"setting_value": value})
        else:
            await self._store.create(self.table, {"setting_key": key, "setting_value": value})
