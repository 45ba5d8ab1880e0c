"""
Integration tests for the tenant API
"""

import pytest
from datetime import timedelta
import uuid

from dochost.api import tenants as tenants_api
from dochost.models.page import Page
from dochost.models.tenant import Tenant
from tests.conftest import INTERNAL_HEADERS


def test_register_tenant(api_client):
    response = api_client.post("/api/tenant", json={"name": "Acme", "domain": "Acme.io"})

    assert response.status_code == 201
    body = response.json()
    assert len(body["api_key"]) == 64
    assert body["tenant"]["name"] == "Acme"
    assert body["tenant"]["domain"] == "acme.io"
    assert body["tenant"]["password_protected"] is False
    assert body["tenant"]["domain_settings"]["brand_color"] == "#3B82F6"


def test_register_duplicate_name(api_client, register_tenant):
    register_tenant("Acme")

    response = api_client.post("/api/tenant", json={"name": "Acme", "domain": "other.io"})

    assert response.status_code == 409


def test_register_invalid_domain(api_client):
    response = api_client.post("/api/tenant", json={"name": "Acme", "domain": "not a domain"})

    assert response.status_code == 422


def test_tenant_info_requires_api_key(api_client, register_tenant):
    register_tenant()

    assert api_client.get("/api/tenant/info").json()["detail"] == "API key required"
    response = api_client.get("/api/tenant/info", headers={"X-API-Key": "nope"})
    assert response.status_code == 401
    assert response.json()["detail"] == "Invalid API key"


def test_tenant_info(api_client, register_tenant):
    tenant, headers = register_tenant()

    response = api_client.get("/api/tenant/info", headers=headers)

    assert response.status_code == 200
    assert response.json()["id"] == tenant["id"]
    assert "api_key" not in response.json()


def test_claim_domains(api_client, register_tenant):
    _, headers = register_tenant()

    response = api_client.post(
        "/api/tenant/domain",
        json={"custom_domain": "Docs.Acme.com", "subdomain": "ACME"},
        headers=headers,
    )

    assert response.status_code == 200
    assert response.json()["custom_domain"] == "docs.acme.com"
    assert response.json()["subdomain"] == "acme"
    assert response.json()["domain_verified"] is False


def test_domain_claims_are_unique(api_client, register_tenant):
    _, acme = register_tenant("Acme", "acme.io")
    _, beta = register_tenant("Beta", "beta.io")
    api_client.post("/api/tenant/domain", json={"custom_domain": "docs.acme.com", "subdomain": "acme"}, headers=acme)

    subdomain = api_client.post("/api/tenant/domain", json={"subdomain": "acme"}, headers=beta)
    custom = api_client.post("/api/tenant/domain", json={"custom_domain": "docs.acme.com"}, headers=beta)

    assert subdomain.status_code == 409
    assert subdomain.json()["error"] == "Subdomain already in use"
    assert custom.status_code == 409
    # Re-claiming your own binding is fine
    assert api_client.post("/api/tenant/domain", json={"subdomain": "acme"}, headers=acme).status_code == 200


@pytest.mark.parametrize("payload", [
    {"subdomain": "-acme"},
    {"subdomain": "acme.docs"},
    {"custom_domain": "localhost"},
    {"custom_domain": "bad_domain.com"},
])
def test_invalid_domain_formats(api_client, register_tenant, payload):
    _, headers = register_tenant()

    assert api_client.post("/api/tenant/domain", json=payload, headers=headers).status_code == 422


def test_custom_domain_under_platform_rejected(api_client, register_tenant):
    _, headers = register_tenant()

    response = api_client.post("/api/tenant/domain", json={"custom_domain": "x.docforge.com"}, headers=headers)

    assert response.status_code == 400


def test_subdomain_password_stored_hashed(api_client, register_tenant, db):
    tenant, headers = register_tenant()

    response = api_client.post("/api/tenant/subdomain-password", json={"password": "secret123"}, headers=headers)

    assert response.status_code == 200
    row = db.get(Tenant, uuid.UUID(tenant["id"]))
    db.refresh(row)
    assert row.subdomain_password_hash is not None
    assert row.subdomain_password_hash != "secret123"
    assert api_client.get("/api/tenant/info", headers=headers).json()["password_protected"] is True


def test_subdomain_password_too_short(api_client, register_tenant):
    _, headers = register_tenant()

    response = api_client.post("/api/tenant/subdomain-password", json={"password": "abc"}, headers=headers)

    assert response.status_code == 400


def test_branding_merge(api_client, register_tenant):
    _, headers = register_tenant()
    api_client.post("/api/tenant/branding", json={"logo_url": "https://acme.io/logo.png"}, headers=headers)

    response = api_client.post("/api/tenant/branding", json={"brand_color": "#112233"}, headers=headers)

    settings = response.json()["domain_settings"]
    assert settings["logo_url"] == "https://acme.io/logo.png"
    assert settings["brand_color"] == "#112233"


def test_verify_domain(api_client, register_tenant, monkeypatch):
    _, headers = register_tenant()

    assert api_client.post("/api/tenant/verify-domain", headers=headers).status_code == 400

    api_client.post("/api/tenant/domain", json={"custom_domain": "docs.acme.com"}, headers=headers)

    async def fake_resolve(domain):
        return ["203.0.113.10"] if domain == "docs.acme.com" else []

    monkeypatch.setattr(tenants_api, "resolve_ipv4", fake_resolve)

    response = api_client.post("/api/tenant/verify-domain", headers=headers)
    assert response.json() == {"verified": True, "message": "Domain verified successfully"}
    assert api_client.get("/api/tenant/info", headers=headers).json()["domain_verified"] is True


def test_by_domain_requires_internal_key(api_client, register_tenant):
    _, headers = register_tenant()
    api_client.post("/api/tenant/domain", json={"subdomain": "acme"}, headers=headers)

    response = api_client.post("/api/tenant/by-domain", json={"domain": "acme", "type": "subdomain"})

    assert response.status_code == 403


def test_by_domain_never_returns_password(api_client, register_tenant):
    tenant, headers = register_tenant()
    api_client.post("/api/tenant/domain", json={"custom_domain": "docs.acme.com", "subdomain": "acme"}, headers=headers)
    api_client.post("/api/tenant/subdomain-password", json={"password": "secret123"}, headers=headers)

    by_label = api_client.post("/api/tenant/by-domain", json={"domain": "acme", "type": "subdomain"}, headers=INTERNAL_HEADERS)
    by_host = api_client.post("/api/tenant/by-domain", json={"domain": "DOCS.acme.com", "type": "custom"}, headers=INTERNAL_HEADERS)

    assert by_label.status_code == 200
    assert by_host.json()["id"] == tenant["id"]
    record = by_label.json()
    assert record["password_protected"] is True
    assert record["api_key"] == headers["X-API-Key"]
    assert not any("password" in key and key != "password_protected" for key in record)


def test_by_domain_not_found(api_client):
    response = api_client.post("/api/tenant/by-domain", json={"domain": "ghost", "type": "subdomain"}, headers=INTERNAL_HEADERS)

    assert response.status_code == 404
    assert response.json() == {"error": "Tenant not found"}


def test_by_id(api_client, register_tenant):
    tenant, _ = register_tenant()

    response = api_client.get(f"/api/tenant/by-id/{tenant['id']}", headers=INTERNAL_HEADERS)

    assert response.json()["name"] == "Acme"


def test_health(api_client):
    assert api_client.get("/api/health").json()["status"] == "healthy"


def test_timestamps_are_timezone_aware():
    tenant = Tenant(name="Acme", domain="acme.io", api_key="k" * 64)
    page = Page(tenant_id=tenant.id, title="Intro", slug="intro", content="# Hi", category="guides")

    assert tenant.created_at.utcoffset() == timedelta(0)
    assert page.updated_at.utcoffset() == timedelta(0)


def test_updates_persist_with_aware_timestamps(api_client, register_tenant, db):
    tenant, headers = register_tenant("Acme", "acme.io")

    response = api_client.post("/api/tenant/branding", json={"brand_color": "#000000"}, headers=headers)

    assert response.status_code == 200
    assert db.get(Tenant, uuid.UUID(tenant["id"])).updated_at is not None
