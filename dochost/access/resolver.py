"""
Host header -> tenant resolution
"""

from dataclasses import dataclass
from enum import Enum
from typing import Optional, Union

import structlog

from dochost.access.directory import TenantDirectory
from dochost.core.exceptions import DirectoryUnavailable
from dochost.schemas.tenant import TenantRecord

logger = structlog.get_logger(__name__)


class BindingMode(str, Enum):
    """How a request was bound to a tenant"""
    NONE = "none"
    CUSTOM = "custom"
    SUBDOMAIN = "subdomain"


@dataclass(frozen=True)
class NoTenant:
    """Anonymous, platform-level request"""
    mode = BindingMode.NONE
    tenant: Optional[TenantRecord] = None


@dataclass(frozen=True)
class CustomDomainTenant:
    tenant: TenantRecord
    host: str
    mode = BindingMode.CUSTOM


@dataclass(frozen=True)
class SubdomainTenant:
    tenant: TenantRecord
    label: str
    mode = BindingMode.SUBDOMAIN


ResolvedContext = Union[NoTenant, CustomDomainTenant, SubdomainTenant]

NO_TENANT = NoTenant()


def normalise_host(host: Optional[str]) -> str:
    """Lower-case, drop the port and any trailing dot"""
    if not host:
        return ""
    host = host.strip().lower()
    if host.startswith("["):
        # IPv6 literal, never a tenant host
        return ""
    name, sep, port = host.rpartition(":")
    if sep and port.isdigit():
        host = name
    return host.rstrip(".")


class DomainResolver:
    """Resolves a request host to a tenant

    Custom domains are checked first, then `<label>.<platform_domain>`.
    Anything else is anonymous. With fail_open the resolver never raises:
    a directory outage reads as "no tenant". Without it the outage
    propagates as DirectoryUnavailable.
    """

    def __init__(self, directory: TenantDirectory, platform_domain: str, fail_open: bool = True):
        self.directory = directory
        self.platform_domain = platform_domain.lower().strip(".")
        self.fail_open = fail_open

    def subdomain_label(self, host: str) -> Optional[str]:
        """Leftmost label of a host under the platform domain"""
        if not host.endswith("." + self.platform_domain):
            return None
        label = host.split(".", 1)[0]
        return label or None

    async def resolve(self, host: Optional[str]) -> ResolvedContext:
        host = normalise_host(host)
        if not host:
            return NO_TENANT

        try:
            tenant = await self.directory.find_by_custom_domain(host)
            if tenant is not None:
                return CustomDomainTenant(tenant=tenant, host=host)

            label = self.subdomain_label(host)
            if label is not None:
                tenant = await self.directory.find_by_subdomain(label)
                if tenant is not None:
                    return SubdomainTenant(tenant=tenant, label=label)
        except DirectoryUnavailable:
            if not self.fail_open:
                raise
            logger.warning(f"Directory unavailable, treating {host} as anonymous")

        return NO_TENANT
