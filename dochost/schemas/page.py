"""
Pydantic schemas for documentation pages
"""

from pydantic import BaseModel, Field
from typing import List, Optional
from datetime import datetime
import uuid


class PageCreate(BaseModel):
    title: str = Field(..., min_length=1, max_length=255)
    slug: str = Field(..., min_length=1, max_length=255, pattern=r"^[a-z0-9][a-z0-9-]*$")
    content: str = Field(..., min_length=1)
    category: str = Field(..., min_length=1, max_length=100)
    tags: List[str] = Field(default_factory=list)
    weight: int = 999


class PageUpdate(BaseModel):
    title: Optional[str] = Field(default=None, min_length=1, max_length=255)
    slug: Optional[str] = Field(default=None, min_length=1, max_length=255, pattern=r"^[a-z0-9][a-z0-9-]*$")
    content: Optional[str] = Field(default=None, min_length=1)
    category: Optional[str] = Field(default=None, min_length=1, max_length=100)
    tags: Optional[List[str]] = None
    weight: Optional[int] = None


class PageResponse(BaseModel):
    id: uuid.UUID
    tenant_id: uuid.UUID
    title: str
    slug: str
    content: str
    category: str
    tags: List[str]
    weight: int
    created_at: datetime
    updated_at: datetime
