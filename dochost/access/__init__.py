"""
Tenant resolution and subdomain access control
"""

from dochost.access.directory import HttpTenantDirectory, SqlTenantDirectory, TenantDirectory
from dochost.access.gate import AccessGate, GateDecision, Verdict, session_cookie_name, set_session_cookie
from dochost.access.issuer import CredentialIssuer, IssuedSession
from dochost.access.resolver import (
    BindingMode, CustomDomainTenant, DomainResolver, NoTenant, ResolvedContext,
    SubdomainTenant, normalise_host,
)
from dochost.access.sessions import (
    InMemorySessionStore, RedisSessionStore, RemoteSessionStore, SessionReader,
    SessionStore, SubdomainSession, utcnow,
)

__all__ = [
    "AccessGate",
    "BindingMode",
    "CredentialIssuer",
    "CustomDomainTenant",
    "DomainResolver",
    "GateDecision",
    "HttpTenantDirectory",
    "InMemorySessionStore",
    "IssuedSession",
    "NoTenant",
    "RedisSessionStore",
    "RemoteSessionStore",
    "ResolvedContext",
    "SessionReader",
    "SessionStore",
    "SqlTenantDirectory",
    "SubdomainSession",
    "SubdomainTenant",
    "TenantDirectory",
    "Verdict",
    "normalise_host",
    "session_cookie_name",
    "set_session_cookie",
    "utcnow",
]
