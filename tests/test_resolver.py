"""
Unit tests for host -> tenant resolution
"""

import pytest

from dochost.access.resolver import (
    BindingMode, CustomDomainTenant, DomainResolver, NoTenant, SubdomainTenant, normalise_host,
)
from dochost.core.exceptions import DirectoryUnavailable


class BrokenDirectory:
    async def find_by_custom_domain(self, host):
        raise DirectoryUnavailable()

    async def find_by_subdomain(self, label):
        raise DirectoryUnavailable()

    async def find_by_id(self, tenant_id):
        raise DirectoryUnavailable()


@pytest.fixture
def resolver(directory):
    return DomainResolver(directory, "docforge.com")


def test_normalise_host():
    assert normalise_host("Docs.Acme.COM") == "docs.acme.com"
    assert normalise_host("acme.docforge.com:3000") == "acme.docforge.com"
    assert normalise_host("acme.docforge.com.") == "acme.docforge.com"
    assert normalise_host("[::1]:8000") == ""
    assert normalise_host(None) == ""


@pytest.mark.asyncio
async def test_custom_domain_resolves_exactly(resolver, directory):
    acme = directory.add("Acme", subdomain="acme", custom_domain="docs.acme.com")
    directory.add("Other", custom_domain="docs.other.com")

    context = await resolver.resolve("docs.acme.com")

    assert isinstance(context, CustomDomainTenant)
    assert context.tenant.id == acme.id
    assert context.mode is BindingMode.CUSTOM


@pytest.mark.asyncio
async def test_custom_domain_case_and_port_insensitive(resolver, directory):
    acme = directory.add("Acme", custom_domain="docs.acme.com")

    context = await resolver.resolve("DOCS.acme.com:443")

    assert context.tenant.id == acme.id


@pytest.mark.asyncio
async def test_subdomain_resolves(resolver, directory):
    acme = directory.add("Acme", subdomain="acme")

    context = await resolver.resolve("acme.docforge.com")

    assert isinstance(context, SubdomainTenant)
    assert context.tenant.id == acme.id
    assert context.label == "acme"
    assert context.mode is BindingMode.SUBDOMAIN


@pytest.mark.asyncio
async def test_unknown_subdomain_is_anonymous(resolver, directory):
    directory.add("Acme", subdomain="acme")

    context = await resolver.resolve("nobody.docforge.com")

    assert isinstance(context, NoTenant)
    assert context.tenant is None


@pytest.mark.asyncio
async def test_host_outside_platform_is_anonymous(resolver, directory):
    directory.add("Acme", subdomain="acme")

    assert (await resolver.resolve("acme.example.com")).tenant is None
    assert (await resolver.resolve("docforge.com")).tenant is None
    # Suffix must be a whole label
    assert (await resolver.resolve("acme.notdocforge.com")).tenant is None


@pytest.mark.asyncio
async def test_leftmost_label_is_used(resolver, directory):
    acme = directory.add("Acme", subdomain="acme")

    context = await resolver.resolve("acme.eu.docforge.com")

    assert context.tenant.id == acme.id


@pytest.mark.asyncio
async def test_custom_domain_checked_before_subdomain(resolver, directory):
    """A custom domain under the platform suffix still wins"""
    owner = directory.add("Owner", custom_domain="acme.docforge.com")
    directory.add("Acme", subdomain="acme")

    context = await resolver.resolve("acme.docforge.com")

    assert isinstance(context, CustomDomainTenant)
    assert context.tenant.id == owner.id


@pytest.mark.asyncio
async def test_empty_host_skips_directory(resolver, directory):
    context = await resolver.resolve("")

    assert context.tenant is None
    assert directory.calls == 0


@pytest.mark.asyncio
async def test_directory_failure_fail_open():
    resolver = DomainResolver(BrokenDirectory(), "docforge.com", fail_open=True)

    context = await resolver.resolve("acme.docforge.com")

    assert isinstance(context, NoTenant)


@pytest.mark.asyncio
async def test_directory_failure_fail_closed():
    resolver = DomainResolver(BrokenDirectory(), "docforge.com", fail_open=False)

    with pytest.raises(DirectoryUnavailable):
        await resolver.resolve("acme.docforge.com")
