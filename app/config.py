from functools import lru_cache
from typing import List, Literal

from pydantic import AnyHttpUrl, Field, field_validator
from pydantic_settings import BaseSettings, SettingsConfigDict


class Settings(BaseSettings):
    """Application configuration loaded from environment variables."""

    app_name: str = Field(default="Agency Back-office Service")
    cors_origins: List[AnyHttpUrl] = Field(
        default_factory=lambda: [
            "http://localhost:5173",
            "http://127.0.0.1:5173",
            "http://localhost:8080",
        ]
    )
    backend_base_url: AnyHttpUrl | None = Field(
        default=None
    )
    backend_api_key: str | None = Field(
        default=None
    )
    backend_timeout: float = Field(
        default=10.0
    )
    use_mock_data: bool = Field(
        default=True
    )

    # "subtotal" keeps tax adjustments on the subtotal like additional charges,
    # "tax_amount" routes them to the tax line instead.
    tax_adjustment_mode: Literal["subtotal", "tax_amount"] = Field(
        default="subtotal"
    )
    invoice_tax_label: str = Field(
        default="11%"
    )
    currency_prefix: str = Field(
        default="Rp"
    )
    default_payment_terms: str = Field(
        default="30 days"
    )
    document_output_dir: str = Field(
        default="invoices"
    )

    company_name: str = Field(default="Digital Service Company")
    company_address: str = Field(default="Jl. Digital No. 123, Jakarta")
    company_phone: str = Field(default="+62 21 1234567")
    company_email: str = Field(default="info@digitalservice.com")
    company_website: str | None = Field(default="www.digitalservice.com")
    company_tax_number: str | None = Field(default="12.345.678.9-012.345")

    model_config = SettingsConfigDict(env_prefix="AGENCY_", case_sensitive=False)

    @field_validator("cors_origins", mode="before")
    def _split_origins(cls, value):
        if isinstance(value, str):
            return [origin.strip() for origin in value.split(",") if origin.strip()]
        return value


@lru_cache(maxsize=1)
def get_settings() -> Settings:
    """Return cached application settings."""

    return Settings()
