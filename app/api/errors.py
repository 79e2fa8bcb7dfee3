from __future__ import annotations

import logging

from fastapi import HTTPException

from app.services.exceptions import (
    InvoiceNotAllowedError,
    NotFoundError,
    ServiceError,
    ValidationError,
)

logger = logging.getLogger(__name__)


def http_error(exc: ServiceError) -> HTTPException:
    """Translate a service failure into the HTTP status the dashboard expects."""

    if isinstance(exc, ValidationError):
        return HTTPException(status_code=422, detail=str(exc))
    if isinstance(exc, NotFoundError):
        return HTTPException(status_code=404, detail=str(exc))
    if isinstance(exc, InvoiceNotAllowedError):
        return HTTPException(status_code=409, detail=str(exc))
    logger.error("Backend request failed: %s", exc)
    return HTTPException(status_code=502, detail="The backend service is unavailable")
