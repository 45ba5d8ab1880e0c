"""
Documentation page model
"""

from sqlmodel import Field, SQLModel
from sqlalchemy import Column, DateTime, JSON
from datetime import datetime
from typing import List, Optional
import uuid

from dochost.core.clock import utcnow


class Page(SQLModel, table=True):
    """Markdown documentation page owned by a tenant"""

    __tablename__ = "pages"

    id: uuid.UUID = Field(default_factory=uuid.uuid4, primary_key=True)
    tenant_id: uuid.UUID = Field(foreign_key="tenants.id", index=True, description="Tenant ID for multi-tenant isolation")

    title: str = Field(max_length=255)
    slug: str = Field(index=True, max_length=255)
    content: str
    category: str = Field(index=True, max_length=100)
    tags: List[str] = Field(default_factory=list, sa_column=Column(JSON))
    weight: int = Field(default=999, description="Sidebar ordering")

    created_at: datetime = Field(default_factory=utcnow, sa_type=DateTime(timezone=True))
    updated_at: datetime = Field(default_factory=utcnow, sa_type=DateTime(timezone=True))
