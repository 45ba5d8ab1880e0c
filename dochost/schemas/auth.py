"""
Pydantic schemas for subdomain authentication
"""

from pydantic import BaseModel, Field
from datetime import datetime
import uuid


class SubdomainLogin(BaseModel):
    """Subdomain password login"""
    subdomain: str = Field(..., min_length=1, max_length=63)
    password: str = Field(..., min_length=1, max_length=128)


class SubdomainLoginResponse(BaseModel):
    success: bool = True
    redirect_url: str = "/"
    token: str
    cookie_name: str
    expires_at: datetime


class SessionRecord(BaseModel):
    """Session as seen by other processes"""
    tenant_id: uuid.UUID
    subdomain: str
    expires_at: datetime
