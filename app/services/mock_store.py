from __future__ import annotations

import asyncio
import itertools
from datetime import date, datetime, timezone
from typing import Any, Callable, Dict, Iterator, List, Mapping, Optional, Sequence

from pydantic_core import to_jsonable_python

from app.services.exceptions import DownstreamServiceError

TABLE_PREFIXES = {
    "services": "SVC",
    "orders": "ORD",
    "invoices": "IVC",
    "portfolio": "PRT",
    "landing_content": "LND",
    "footer_content": "FTR",
    "settings": "SET",
    "gdpr_consents": "GDPR",
}


def _utc_now_iso() -> str:
    return datetime.now(timezone.utc).isoformat()


def _today_iso() -> str:
    return date.today().isoformat()


# Column defaults the hosted database fills in on insert.
_INSERT_DEFAULTS: Dict[str, Dict[str, Callable[[], Any]]] = {
    "services": {"created_at": _utc_now_iso, "updated_at": _utc_now_iso, "is_active": lambda: True},
    "orders": {"order_date": _utc_now_iso, "status": lambda: "pending"},
    "invoices": {
        "created_at": _utc_now_iso,
        "issue_date": _today_iso,
        "status": lambda: "draft",
    },
    "portfolio": {"created_at": _utc_now_iso},
    "landing_content": {"created_at": _utc_now_iso, "updated_at": _utc_now_iso},
    "footer_content": {"created_at": _utc_now_iso, "updated_at": _utc_now_iso},
    "settings": {"created_at": _utc_now_iso, "updated_at": _utc_now_iso},
    "gdpr_consents": {"consent_date": _utc_now_iso},
}


def _sort_key(column: str):
    def key(row: Mapping[str, Any]):
        value = row.get(column)
        return (value is None, value if value is not None else "")

    return key


class MockRecordStore:
    """In-memory stand-in for the hosted backend's tables and RPCs."""

    def __init__(self, *, seed: bool = True) -> None:
        self.tables: Dict[str, Dict[str, Dict[str, Any]]] = {
            name: {} for name in TABLE_PREFIXES
        }
        self._counters: Dict[str, Iterator[int]] = {
            name: itertools.count(1) for name in TABLE_PREFIXES
        }
        self._invoice_sequence = itertools.count(1)
        self.fail_tables: set[str] = set()
        if seed:
            self._seed()

    async def simulate_latency(self) -> None:
        await asyncio.sleep(0)

    def _next_id(self, table: str) -> str:
        prefix = TABLE_PREFIXES.get(table, table[:3].upper())
        counter = self._counters.setdefault(table, itertools.count(1))
        return f"{prefix}-{next(counter):05d}"

    def _check_available(self, table: str) -> None:
        if table in self.fail_tables:
            raise DownstreamServiceError(f"Write to {table} rejected", status_code=503)

    def _table(self, table: str) -> Dict[str, Dict[str, Any]]:
        return self.tables.setdefault(table, {})

    async def create(self, table: str, record: Dict[str, Any]) -> Dict[str, Any]:
        await self.simulate_latency()
        self._check_available(table)
        row = to_jsonable_python(dict(record))
        for column, default in _INSERT_DEFAULTS.get(table, {}).items():
            if row.get(column) is None:
                row[column] = default()
        row["id"] = row.get("id") or self._next_id(table)
        self._table(table)[row["id"]] = row
        return dict(row)

    async def update(
        self, table: str, record_id: str, patch: Dict[str, Any]
    ) -> Optional[Dict[str, Any]]:
        await self.simulate_latency()
        self._check_available(table)
        row = self._table(table).get(record_id)
        if row is None:
            return None
        row.update(to_jsonable_python(dict(patch)))
        if "updated_at" in row:
            row["updated_at"] = _utc_now_iso()
        return dict(row)

    async def query(
        self,
        table: str,
        *,
        filters: Mapping[str, Any] | None = None,
        in_filters: Mapping[str, Sequence[Any]] | None = None,
        order: Sequence[str] | None = None,
    ) -> List[Dict[str, Any]]:
        await self.simulate_latency()
        wanted = to_jsonable_python(dict(filters or {}))
        wanted_in = {
            column: set(to_jsonable_python(list(values)))
            for column, values in (in_filters or {}).items()
        }
        rows = [
            dict(row)
            for row in self._table(table).values()
            if all(row.get(column) == value for column, value in wanted.items())
            and all(row.get(column) in values for column, values in wanted_in.items())
        ]
        # Apply the least significant ordering first so earlier columns win.
        for clause in reversed(list(order or [])):
            column, _, direction = clause.partition(".")
            rows.sort(key=_sort_key(column), reverse=direction == "desc")
        return rows

    async def get(self, table: str, record_id: str) -> Optional[Dict[str, Any]]:
        await self.simulate_latency()
        row = self._table(table).get(record_id)
        return dict(row) if row is not None else None

    async def delete(self, table: str, record_id: str) -> bool:
        await self.simulate_latency()
        self._check_available(table)
        return self._table(table).pop(record_id, None) is not None

    async def rpc(self, name: str, args: Dict[str, Any] | None = None) -> Any:
        await self.simulate_latency()
        if name == "generate_invoice_number":
            stamp = date.today().strftime("%Y%m")
            return f"INV-{stamp}-{next(self._invoice_sequence):04d}"
        raise KeyError(f"Unknown RPC {name}")

    def _insert_seed(self, table: str, record: Dict[str, Any]) -> None:
        row = to_jsonable_python(dict(record))
        row["id"] = self._next_id(table)
        row.setdefault("created_at", "2025-01-01T00:00:00+00:00")
        self._table(table)[row["id"]] = row

    def _seed(self) -> None:
        services = [
            {
                "name": "Company Profile Website",
                "description": "Responsive company profile website with CMS.",
                "category": "website",
                "price": 5000000,
                "features": ["5 pages", "Responsive design", "Basic SEO"],
                "is_active": True,
            },
            {
                "name": "E-Commerce Website",
                "description": "Online store with payment gateway integration.",
                "category": "website",
                "price": 15000000,
                "features": ["Product catalogue", "Payment gateway", "Order dashboard"],
                "is_active": True,
            },
            {
                "name": "Mobile App Development",
                "description": "Android and iOS application.",
                "category": "mobile",
                "price": 25000000,
                "features": ["Android", "iOS", "Push notifications"],
                "is_active": True,
            },
            {
                "name": "Legacy Hosting Package",
                "description": "Retired shared hosting bundle.",
                "category": "hosting",
                "price": 1000000,
                "features": ["Shared hosting"],
                "is_active": False,
            },
        ]
        for record in services:
            self._insert_seed("services", record)

        landing = [
            {
                "section_name": "hero",
                "title": "Solusi Digital untuk Bisnis Anda",
                "subtitle": "Website, aplikasi, dan pemasaran digital",
                "content": "Kami membantu bisnis tumbuh melalui teknologi.",
                "section_order": 1,
                "is_enabled": True,
            },
            {
                "section_name": "services",
                "title": "Layanan Kami",
                "subtitle": None,
                "content": None,
                "section_order": 2,
                "is_enabled": True,
            },
            {
                "section_name": "promo",
                "title": "Promo Akhir Tahun",
                "subtitle": None,
                "content": "Diskon 20% untuk semua paket website.",
                "section_order": 3,
                "is_enabled": False,
            },
        ]
        for record in landing:
            self._insert_seed("landing_content", record)

        footer = [
            {"parent_column": "company", "column_title": "Perusahaan", "link_text": "Tentang Kami", "link_url": "/about", "column_order": 1, "is_enabled": True},
            {"parent_column": "company", "column_title": "Perusahaan", "link_text": "Kontak", "link_url": "/contact", "column_order": 2, "is_enabled": True},
            {"parent_column": "services", "column_title": "Layanan", "link_text": "Website", "link_url": "/#services", "column_order": 1, "is_enabled": True},
        ]
        for record in footer:
            self._insert_seed("footer_content", record)

        self._insert_seed(
            "portfolio",
            {
                "title": "Toko Batik Online",
                "description": "E-commerce store for a batik retailer.",
                "category": "website",
                "image_url": None,
                "project_url": "https://example.com/batik",
                "technologies": ["React", "Supabase"],
                "is_featured": True,
            },
        )

        settings = {
            "company_info": {
                "name": "Digital Service Company",
                "address": "Jl. Digital No. 123, Jakarta",
                "phone": "+62 21 1234567",
                "email": "info@digitalservice.com",
                "website": "www.digitalservice.com",
                "tax_number": "12.345.678.9-012.345",
            },
            "invoice_config": {
                "prefix": "INV",
                "tax_rate": 0,
                "payment_terms": "30 days",
                "notes": None,
            },
            "email_config": {},
        }
        for key, value in settings.items():
            self._insert_seed("settings", {"setting_key": key, "setting_value": value})


_mock_store: Optional[MockRecordStore] = None


def get_mock_store() -> MockRecordStore:
    global _mock_store
    if _mock_store is None:
        _mock_store = MockRecordStore()
    return _mock_store


def reset_mock_store() -> None:
    global _mock_store
    _mock_store = None
