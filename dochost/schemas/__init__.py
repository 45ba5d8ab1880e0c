"""
Schemas for API responses and requests
"""

from dochost.schemas.auth import SessionRecord, SubdomainLogin, SubdomainLoginResponse
from dochost.schemas.tenant import TenantCreate, TenantCreated, TenantInfo, TenantRecord

__all__ = [
    "SessionRecord",
    "SubdomainLogin",
    "SubdomainLoginResponse",
    "TenantCreate",
    "TenantCreated",
    "TenantInfo",
    "TenantRecord",
]
