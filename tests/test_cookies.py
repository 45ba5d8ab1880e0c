"""
Session cookie attributes
"""

import pytest
from starlette.responses import Response

from dochost.access.gate import set_session_cookie
from dochost.core.config import Settings, get_settings


def cookie_header(**kwargs) -> str:
    response = Response()
    set_session_cookie(response, "subdomain_auth_acme", "tok", **kwargs)
    return response.headers["set-cookie"].lower()


def test_cookie_defaults():
    header = cookie_header()

    assert header.startswith("subdomain_auth_acme=tok")
    assert "httponly" in header
    assert "samesite=lax" in header
    assert "path=/" in header
    assert "max-age=86400" in header
    assert "secure" not in header


def test_cookie_secure_flag():
    assert "secure" in cookie_header(secure=True)


@pytest.mark.parametrize("environment,secure", [
    ("production", True),
    ("staging", False),
    ("development", False),
])
def test_cookie_secure_follows_environment(environment, secure):
    assert Settings(ENVIRONMENT=environment).cookie_secure is secure


@pytest.fixture
def protected_acme(api_client, register_tenant):
    _, headers = register_tenant("Acme", "acme.io")
    api_client.post("/api/tenant/domain", json={"subdomain": "acme"}, headers=headers)
    api_client.post("/api/tenant/subdomain-password", json={"password": "secret123"}, headers=headers)
    return headers


def login_cookie(api_client) -> str:
    response = api_client.post("/api/subdomain/login", json={"subdomain": "acme", "password": "secret123"})
    assert response.status_code == 200
    return response.headers["set-cookie"].lower()


def test_login_cookie_outside_production(api_client, protected_acme):
    header = login_cookie(api_client)

    assert "httponly" in header
    assert "samesite=lax" in header
    assert "path=/" in header
    assert "secure" not in header


def test_login_cookie_in_production(api_client, protected_acme, monkeypatch):
    monkeypatch.setattr(get_settings(), "ENVIRONMENT", "production")

    header = login_cookie(api_client)

    assert "secure" in header
    assert "samesite=lax" in header
