"""
Pydantic schemas for tenants and domain configuration
"""

from pydantic import BaseModel, Field, field_validator
from typing import Literal, Optional
from datetime import datetime
import re
import uuid

DOMAIN_RE = re.compile(
    r"^[a-z0-9][a-z0-9-]{0,61}[a-z0-9](?:\.[a-z0-9][a-z0-9-]{0,61}[a-z0-9])*$"
)
SUBDOMAIN_RE = re.compile(r"^[a-z0-9][a-z0-9-]{0,61}[a-z0-9]$")


def _normalise(value: Optional[str]) -> Optional[str]:
    if value is None:
        return None
    value = value.strip().lower().rstrip(".")
    return value or None


class TenantCreate(BaseModel):
    """Tenant registration schema"""
    name: str = Field(..., min_length=2, max_length=50)
    domain: str = Field(..., min_length=3, max_length=255)

    @field_validator("name")
    @classmethod
    def strip_name(cls, v: str) -> str:
        return v.strip()

    @field_validator("domain")
    @classmethod
    def validate_domain(cls, v: str) -> str:
        v = _normalise(v)
        if not v or not DOMAIN_RE.match(v) or "." not in v:
            raise ValueError("Invalid domain")
        return v


class DomainSettings(BaseModel):
    favicon: Optional[str] = None
    custom_css: Optional[str] = None
    logo_url: Optional[str] = None
    brand_color: str = "#3B82F6"


class TenantInfo(BaseModel):
    """Tenant as shown to its owner (no secrets)"""
    id: uuid.UUID
    name: str
    domain: str
    custom_domain: Optional[str] = None
    subdomain: Optional[str] = None
    password_protected: bool = False
    domain_verified: bool = False
    domain_settings: DomainSettings
    created_at: datetime


class TenantCreated(BaseModel):
    tenant: TenantInfo
    api_key: str


class DomainUpdate(BaseModel):
    """Custom domain / subdomain claim. Omitted or empty values clear the binding."""
    custom_domain: Optional[str] = None
    subdomain: Optional[str] = None

    @field_validator("custom_domain")
    @classmethod
    def validate_custom_domain(cls, v: Optional[str]) -> Optional[str]:
        v = _normalise(v)
        if v is not None and (not DOMAIN_RE.match(v) or "." not in v):
            raise ValueError("Invalid custom domain format")
        return v

    @field_validator("subdomain")
    @classmethod
    def validate_subdomain(cls, v: Optional[str]) -> Optional[str]:
        v = _normalise(v)
        if v is not None and not SUBDOMAIN_RE.match(v):
            raise ValueError("Invalid subdomain format")
        return v


class DomainUpdateResponse(BaseModel):
    message: str
    custom_domain: Optional[str] = None
    subdomain: Optional[str] = None
    domain_verified: bool


class VerifyDomainResponse(BaseModel):
    verified: bool
    message: str


class BrandingUpdate(BaseModel):
    favicon: Optional[str] = None
    custom_css: Optional[str] = None
    logo_url: Optional[str] = None
    brand_color: Optional[str] = Field(default=None, pattern=r"^#[0-9A-Fa-f]{6}$")


class SubdomainPasswordUpdate(BaseModel):
    """Set the subdomain password. null removes the password gate."""
    password: Optional[str] = Field(default=None, max_length=128)


class DomainLookup(BaseModel):
    domain: str
    type: Literal["custom", "subdomain"]

    @field_validator("domain")
    @classmethod
    def normalise_domain(cls, v: str) -> str:
        return _normalise(v) or ""


class TenantRecord(BaseModel):
    """Directory record handed to the site process. Never carries the password."""
    id: uuid.UUID
    name: str
    api_key: str
    custom_domain: Optional[str] = None
    subdomain: Optional[str] = None
    password_protected: bool = False
    domain_verified: bool = False
    domain_settings: DomainSettings = Field(default_factory=DomainSettings)
