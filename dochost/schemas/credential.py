"""
Pydantic schemas for service credentials
"""

from pydantic import BaseModel, Field
from typing import Dict, Optional
from datetime import datetime
import uuid

from dochost.models.credential import Environment


class CredentialCreate(BaseModel):
    environment: Environment
    service_name: str = Field(..., min_length=2, max_length=100)
    credentials: Dict[str, str] = Field(default_factory=dict)
    deployment_info: Optional[Dict[str, str]] = None


class CredentialUpdate(BaseModel):
    environment: Optional[Environment] = None
    service_name: Optional[str] = Field(default=None, min_length=2, max_length=100)
    credentials: Optional[Dict[str, str]] = None
    deployment_info: Optional[Dict[str, str]] = None


class CredentialResponse(BaseModel):
    id: uuid.UUID
    tenant_id: uuid.UUID
    environment: Environment
    service_name: str
    credentials: Dict[str, str]
    deployment_info: Optional[Dict[str, str]] = None
    created_at: datetime
    updated_at: datetime
