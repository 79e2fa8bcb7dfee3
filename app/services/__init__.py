"""Service package public API definitions.

Service implementations import ``app.clients.backend`` which in turn imports
``app.services.exceptions``. Importing the implementations eagerly here would
make that a circular import, so they are loaded lazily on first access.
"""

from __future__ import annotations

from importlib import import_module
from typing import TYPE_CHECKING, Any

__all__ = [
    "CatalogService",
    "ConsentService",
    "ContentService",
    "DashboardService",
    "InvoiceService",
    "OrderService",
    "PortfolioService",
    "SettingsService",
]

_SERVICE_MODULES = {
    "CatalogService": "catalog",
    "ConsentService": "consent",
    "ContentService": "content",
    "DashboardService": "dashboard",
    "InvoiceService": "invoice",
    "OrderService": "orders",
    "PortfolioService": "content",
    "SettingsService": "site_settings",
}


def __getattr__(name: str) -> Any:
    if name not in _SERVICE_MODULES:
        raise AttributeError(f"module {__name__!r} has no attribute {name!r}")

    module = import_module(f".{_SERVICE_MODULES[name]}", __name__)
    attr = getattr(module, name)
    globals()[name] = attr
    return attr


if TYPE_CHECKING:  # pragma: no cover - import for static analysis only
    from .catalog import CatalogService as CatalogService
    from .consent import ConsentService as ConsentService
    from .content import ContentService as ContentService
    from .content import PortfolioService as PortfolioService
    from .dashboard import DashboardService as DashboardService
    from .invoice import InvoiceService as InvoiceService
    from .orders import OrderService as OrderService
    from .site_settings import SettingsService as SettingsService
