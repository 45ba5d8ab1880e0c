"""
Tenant directory lookups

The api process owns the tenant table and reads it through SqlTenantDirectory.
The site process has no database access and asks the api over HTTP through
HttpTenantDirectory. Both hand out TenantRecord, which never carries the
subdomain password or its hash.
"""

from typing import Optional, Protocol, Tuple
import uuid

import httpx
import structlog
from sqlmodel import Session, select

from dochost.core.exceptions import DirectoryUnavailable
from dochost.models.tenant import Tenant
from dochost.schemas.tenant import DomainSettings, TenantRecord

logger = structlog.get_logger(__name__)


class TenantDirectory(Protocol):
    """Read-only tenant lookups used by the resolver"""

    async def find_by_custom_domain(self, host: str) -> Optional[TenantRecord]:
        ...

    async def find_by_subdomain(self, label: str) -> Optional[TenantRecord]:
        ...

    async def find_by_id(self, tenant_id: uuid.UUID) -> Optional[TenantRecord]:
        ...


def tenant_record(tenant: Tenant) -> TenantRecord:
    """Project a tenant row onto the record shared with the site process"""
    return TenantRecord(
        id=tenant.id,
        name=tenant.name,
        api_key=tenant.api_key,
        custom_domain=tenant.custom_domain,
        subdomain=tenant.subdomain,
        password_protected=tenant.password_protected,
        domain_verified=tenant.domain_verified,
        domain_settings=DomainSettings(**(tenant.domain_settings or {})),
    )


class SqlTenantDirectory:
    """Directory backed by the tenants table"""

    def __init__(self, session: Session):
        self.session = session

    def _first(self, *criteria) -> Optional[Tenant]:
        return self.session.exec(select(Tenant).where(*criteria)).first()

    async def find_by_custom_domain(self, host: str) -> Optional[TenantRecord]:
        tenant = self._first(Tenant.custom_domain == host)
        return tenant_record(tenant) if tenant else None

    async def find_by_subdomain(self, label: str) -> Optional[TenantRecord]:
        tenant = self._first(Tenant.subdomain == label)
        return tenant_record(tenant) if tenant else None

    async def find_by_id(self, tenant_id: uuid.UUID) -> Optional[TenantRecord]:
        tenant = self.session.get(Tenant, tenant_id)
        return tenant_record(tenant) if tenant else None

    async def find_login_subject(self, label: str) -> Tuple[Optional[TenantRecord], Optional[str]]:
        """Tenant claiming a subdomain, together with its stored password hash"""
        tenant = self._first(Tenant.subdomain == label)
        if tenant is None:
            return None, None
        return tenant_record(tenant), tenant.subdomain_password_hash


class HttpTenantDirectory:
    """Directory served by the api process (internal endpoints)"""

    def __init__(self, client: httpx.AsyncClient, internal_key: str, key_header: str = "X-Internal-Key"):
        self.client = client
        self.headers = {key_header: internal_key}

    async def _fetch(self, method: str, url: str, **kwargs) -> Optional[TenantRecord]:
        try:
            response = await self.client.request(method, url, headers=self.headers, **kwargs)
        except httpx.HTTPError as e:
            logger.error(f"Tenant directory unreachable: {e}")
            raise DirectoryUnavailable() from e

        if response.status_code == 404:
            return None
        if response.status_code != 200:
            logger.error(f"Tenant directory returned {response.status_code} for {url}")
            raise DirectoryUnavailable()
        try:
            return TenantRecord.model_validate(response.json())
        except ValueError as e:
            logger.error(f"Tenant directory sent an unreadable record for {url}: {e}")
            raise DirectoryUnavailable() from e

    async def find_by_custom_domain(self, host: str) -> Optional[TenantRecord]:
        return await self._fetch("POST", "/tenant/by-domain", json={"domain": host, "type": "custom"})

    async def find_by_subdomain(self, label: str) -> Optional[TenantRecord]:
        return await self._fetch("POST", "/tenant/by-domain", json={"domain": label, "type": "subdomain"})

    async def find_by_id(self, tenant_id: uuid.UUID) -> Optional[TenantRecord]:
        return await self._fetch("GET", f"/tenant/by-id/{tenant_id}")
