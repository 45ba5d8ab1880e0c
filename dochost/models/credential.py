"""
Service credential model
"""

from sqlmodel import Field, SQLModel
from sqlalchemy import Column, DateTime, JSON
from datetime import datetime
from typing import Optional
from enum import Enum
import uuid

from dochost.core.clock import utcnow


class Environment(str, Enum):
    """Deployment environment a credential belongs to"""
    PRODUCTION = "production"
    STAGING = "staging"
    TESTING = "testing"


class Credential(SQLModel, table=True):
    """Credentials for an external service, scoped to a tenant"""

    __tablename__ = "credentials"

    id: uuid.UUID = Field(default_factory=uuid.uuid4, primary_key=True)
    tenant_id: uuid.UUID = Field(foreign_key="tenants.id", index=True, description="Tenant ID for multi-tenant isolation")

    environment: Environment = Field(index=True)
    service_name: str = Field(max_length=100)

    # username, password, api_key, endpoint, region, custom fields...
    credentials: dict = Field(default_factory=dict, sa_column=Column(JSON))
    # provider, region, account_id, instance_id
    deployment_info: Optional[dict] = Field(default=None, sa_column=Column(JSON))

    created_at: datetime = Field(default_factory=utcnow, sa_type=DateTime(timezone=True))
    updated_at: datetime = Field(default_factory=utcnow, sa_type=DateTime(timezone=True))
