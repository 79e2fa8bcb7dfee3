class ServiceError(Exception):
    """Base exception for service layer failures."""

    def __init__(self, message: str, *, cause: Exception | None = None):
        super().__init__(message)
        self.cause = cause


class DownstreamServiceError(ServiceError):
    """Raised when the hosted backend returns an error response or is unreachable."""

    def __init__(self, message: str, status_code: int | None = None, *, cause: Exception | None = None):
        super().__init__(message, cause=cause)
        self.status_code = status_code


class ValidationError(ServiceError):
    """Raised when required input is missing or invalid. Nothing is written."""

    def __init__(self, message: str, *, field: str | None = None):
        super().__init__(message)
        self.field = field


class NotFoundError(ServiceError):
    """Raised when a referenced record does not exist."""


class InvoiceNotAllowedError(ServiceError):
    """Raised when an order is not in a state that accepts invoices."""
