from __future__ import annotations

from datetime import datetime
from decimal import Decimal
from typing import List, Optional

from pydantic import BaseModel, Field, field_validator


class PortfolioItem(BaseModel):
    id: str
    title: str
    description: Optional[str] = None
    category: Optional[str] = None
    image_url: Optional[str] = None
    project_url: Optional[str] = None
    technologies: List[str] = Field(default_factory=list)
    is_featured: bool = False
    created_at: Optional[datetime] = None

    @field_validator("technologies", mode="before")
    def _null_technologies(cls, value):
        return [] if value is None else value

    @field_validator("is_featured", mode="before")
    def _null_featured(cls, value):
        return False if value is None else value


class PortfolioItemRequest(BaseModel):
    title: str = Field(..., min_length=1)
    description: Optional[str] = None
    category: Optional[str] = None
    image_url: Optional[str] = None
    project_url: Optional[str] = None
    technologies: List[str] = Field(default_factory=list)
    is_featured: bool = False


class LandingSection(BaseModel):
    id: str
    section_name: str
    title: Optional[str] = None
    subtitle: Optional[str] = None
    content: Optional[str] = None
    section_order: int = 0
    is_enabled: bool = True

    @field_validator("section_order", mode="before")
    def _null_order(cls, value):
        return 0 if value is None else value

    @field_validator("is_enabled", mode="before")
    def _null_enabled(cls, value):
        return True if value is None else value


class LandingSectionRequest(BaseModel):
    section_name: str = Field(..., min_length=1)
    title: Optional[str] = None
    subtitle: Optional[str] = None
    content: Optional[str] = None
    section_order: int = 0
    is_enabled: bool = True


class FooterLink(BaseModel):
    id: str
    parent_column: Optional[str] = None
    column_title: Optional[str] = None
    link_text: Optional[str] = None
    link_url: Optional[str] = None
    column_order: int = 1
    is_enabled: bool = True

    @field_validator("column_order", mode="before")
    def _null_order(cls, value):
        return 1 if value is None else value

    @field_validator("is_enabled", mode="before")
    def _null_enabled(cls, value):
        return True if value is None else value


class FooterLinkRequest(BaseModel):
    parent_column: Optional[str] = None
    column_title: Optional[str] = None
    link_text: Optional[str] = None
    link_url: Optional[str] = None
    column_order: int = 1
    is_enabled: bool = True


class ConsentRecord(BaseModel):
    id: str
    user_session: str
    consent_given: Optional[bool] = None
    user_agent: Optional[str] = None
    consent_date: Optional[datetime] = None


class ConsentRequest(BaseModel):
    user_session: str = Field(..., min_length=1)
    consent_given: bool
    user_agent: Optional[str] = None


class ConsentResponse(BaseModel):
    decision: str
    recorded: bool


class DashboardStats(BaseModel):
    total_orders: int
    pending_orders: int
    active_services: int
    total_portfolio: int
    featured_portfolio: int
    total_invoices: int
    total_revenue: Decimal
    total_revenue_display: str
