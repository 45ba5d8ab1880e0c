"""
Tenant model - the tenant directory record
"""

from sqlmodel import Field, SQLModel
from sqlalchemy import Column, DateTime, JSON
from datetime import datetime
from typing import Optional
import uuid

from dochost.core.clock import utcnow

DEFAULT_BRAND_COLOR = "#3B82F6"


def default_domain_settings() -> dict:
    return {
        "favicon": None,
        "custom_css": None,
        "logo_url": None,
        "brand_color": DEFAULT_BRAND_COLOR,
    }


class Tenant(SQLModel, table=True):
    """Tenant model for multi-tenant architecture"""

    __tablename__ = "tenants"

    id: uuid.UUID = Field(default_factory=uuid.uuid4, primary_key=True)
    name: str = Field(unique=True, index=True, max_length=100)
    domain: str = Field(max_length=255, description="Tenant's own website domain")
    api_key: str = Field(unique=True, index=True, max_length=64)

    # Hosting
    custom_domain: Optional[str] = Field(
        default=None,
        unique=True,
        index=True,
        max_length=255,
        description="Fully-qualified custom domain, e.g. docs.company.com"
    )
    subdomain: Optional[str] = Field(
        default=None,
        unique=True,
        index=True,
        max_length=63,
        description="Label under the platform domain, e.g. company.docforge.com"
    )
    subdomain_password_hash: Optional[str] = Field(default=None, max_length=255)
    domain_verified: bool = Field(default=False)

    # Branding (favicon, custom_css, logo_url, brand_color)
    domain_settings: dict = Field(default_factory=default_domain_settings, sa_column=Column(JSON))

    # Timestamps
    created_at: datetime = Field(default_factory=utcnow, sa_type=DateTime(timezone=True))
    updated_at: Optional[datetime] = Field(default=None, sa_type=DateTime(timezone=True))

    @property
    def password_protected(self) -> bool:
        return self.subdomain_password_hash is not None
