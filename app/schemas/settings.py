from __future__ import annotations

from decimal import Decimal
from typing import Literal, Optional

from pydantic import BaseModel, Field

SettingKey = Literal["email_config", "company_info", "invoice_config"]


class EmailConfig(BaseModel):
    smtp_host: Optional[str] = None
    smtp_port: Optional[int] = None
    smtp_user: Optional[str] = None
    smtp_password: Optional[str] = None
    from_email: Optional[str] = None
    from_name: Optional[str] = None


class CompanyInfo(BaseModel):
    name: str = ""
    address: str = ""
    phone: str = ""
    email: str = ""
    website: Optional[str] = None
    tax_number: Optional[str] = None


class InvoiceConfig(BaseModel):
    prefix: str = "INV"
    tax_rate: Decimal = Field(Decimal("0"), ge=0, le=100)
    payment_terms: Optional[str] = None
    notes: Optional[str] = None


class SiteSettings(BaseModel):
    """Typed view over the ``settings`` key/value rows."""

    email_config: EmailConfig = Field(default_factory=EmailConfig)
    company_info: CompanyInfo = Field(default_factory=CompanyInfo)
    invoice_config: InvoiceConfig = Field(default_factory=InvoiceConfig)


class PublicSiteSettings(BaseModel):
    company_info: CompanyInfo
    invoice_config: InvoiceConfig
