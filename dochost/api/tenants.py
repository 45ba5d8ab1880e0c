"""
Tenant API endpoints
"""

from fastapi import APIRouter, Depends, HTTPException, status
from sqlalchemy.exc import IntegrityError
from sqlmodel import Session, select
import asyncio
import socket
import structlog
import uuid

from dochost.access.directory import tenant_record
from dochost.core.clock import utcnow
from dochost.core.config import get_settings
from dochost.core.database import get_session
from dochost.core.dependencies import get_current_tenant, require_internal_key
from dochost.core.exceptions import TenantConflict, TenantNotFound
from dochost.core.security import generate_api_key, hash_password
from dochost.models.tenant import Tenant
from dochost.schemas.tenant import (
    BrandingUpdate, DomainLookup, DomainSettings, DomainUpdate, DomainUpdateResponse,
    SubdomainPasswordUpdate, TenantCreate, TenantCreated, TenantInfo, TenantRecord,
    VerifyDomainResponse,
)

logger = structlog.get_logger(__name__)
router = APIRouter()
settings = get_settings()


def tenant_info(tenant: Tenant) -> TenantInfo:
    return TenantInfo(
        id=tenant.id,
        name=tenant.name,
        domain=tenant.domain,
        custom_domain=tenant.custom_domain,
        subdomain=tenant.subdomain,
        password_protected=tenant.password_protected,
        domain_verified=tenant.domain_verified,
        domain_settings=DomainSettings(**(tenant.domain_settings or {})),
        created_at=tenant.created_at,
    )


def _save(session: Session, tenant: Tenant, conflict: str) -> Tenant:
    tenant.updated_at = utcnow()
    session.add(tenant)
    try:
        session.commit()
    except IntegrityError:
        session.rollback()
        raise TenantConflict(conflict)
    session.refresh(tenant)
    return tenant


async def resolve_ipv4(domain: str) -> list:
    """A records for a domain, empty when it does not resolve"""
    try:
        infos = await asyncio.to_thread(socket.getaddrinfo, domain, None, socket.AF_INET)
    except socket.gaierror:
        return []
    return sorted({info[4][0] for info in infos})


@router.post("/tenant", response_model=TenantCreated, status_code=status.HTTP_201_CREATED)
async def create_tenant(
    tenant_data: TenantCreate,
    session: Session = Depends(get_session)
):
    """Register a tenant and issue its API key"""
    existing = session.exec(select(Tenant).where(Tenant.name == tenant_data.name)).first()
    if existing:
        raise TenantConflict("Tenant name already in use")

    api_key = generate_api_key()
    tenant = Tenant(name=tenant_data.name, domain=tenant_data.domain, api_key=api_key)
    tenant = _save(session, tenant, "Tenant name already in use")

    logger.info(f"Tenant created: {tenant.id}")
    return TenantCreated(tenant=tenant_info(tenant), api_key=api_key)


@router.get("/tenant/info", response_model=TenantInfo)
async def get_tenant_info(tenant: Tenant = Depends(get_current_tenant)):
    """Tenant owning the API key"""
    return tenant_info(tenant)


@router.post("/tenant/domain", response_model=DomainUpdateResponse)
async def update_domain(
    update: DomainUpdate,
    tenant: Tenant = Depends(get_current_tenant),
    session: Session = Depends(get_session)
):
    """Claim a custom domain and/or subdomain"""
    if update.custom_domain:
        if update.custom_domain == settings.PLATFORM_DOMAIN or update.custom_domain.endswith(
            "." + settings.PLATFORM_DOMAIN
        ):
            raise HTTPException(
                status_code=status.HTTP_400_BAD_REQUEST,
                detail="Custom domain cannot be under the platform domain"
            )
        taken = session.exec(
            select(Tenant).where(Tenant.custom_domain == update.custom_domain, Tenant.id != tenant.id)
        ).first()
        if taken:
            raise TenantConflict("Custom domain already in use")

    if update.subdomain:
        taken = session.exec(
            select(Tenant).where(Tenant.subdomain == update.subdomain, Tenant.id != tenant.id)
        ).first()
        if taken:
            raise TenantConflict("Subdomain already in use")

    tenant.custom_domain = update.custom_domain
    tenant.subdomain = update.subdomain
    tenant.domain_verified = False
    tenant = _save(session, tenant, "Domain already in use")

    logger.info(f"Domain settings updated for tenant {tenant.id}")
    return DomainUpdateResponse(
        message="Domain settings updated successfully",
        custom_domain=tenant.custom_domain,
        subdomain=tenant.subdomain,
        domain_verified=tenant.domain_verified,
    )


@router.post("/tenant/verify-domain", response_model=VerifyDomainResponse)
async def verify_domain(
    tenant: Tenant = Depends(get_current_tenant),
    session: Session = Depends(get_session)
):
    """Check that the custom domain resolves"""
    if not tenant.custom_domain:
        raise HTTPException(
            status_code=status.HTTP_400_BAD_REQUEST,
            detail="No custom domain configured"
        )

    # TODO: compare the A records against the platform's ingress addresses
    records = await resolve_ipv4(tenant.custom_domain)
    tenant.domain_verified = bool(records)
    _save(session, tenant, "Domain already in use")

    logger.info(f"Domain verification for {tenant.custom_domain}: {tenant.domain_verified}")
    return VerifyDomainResponse(
        verified=tenant.domain_verified,
        message="Domain verified successfully" if tenant.domain_verified else "Domain verification failed",
    )


@router.post("/tenant/branding")
async def update_branding(
    branding: BrandingUpdate,
    tenant: Tenant = Depends(get_current_tenant),
    session: Session = Depends(get_session)
):
    """Merge branding settings; omitted fields keep their value"""
    current = DomainSettings(**(tenant.domain_settings or {}))
    merged = current.model_copy(update=branding.model_dump(exclude_none=True))
    # Reassign so SQLAlchemy notices the JSON change
    tenant.domain_settings = merged.model_dump()
    _save(session, tenant, "Domain already in use")

    return {"message": "Branding updated successfully", "domain_settings": merged}


@router.post("/tenant/subdomain-password")
async def update_subdomain_password(
    update: SubdomainPasswordUpdate,
    tenant: Tenant = Depends(get_current_tenant),
    session: Session = Depends(get_session)
):
    """Set or clear the password gate for the tenant's subdomain"""
    if update.password is None:
        tenant.subdomain_password_hash = None
        _save(session, tenant, "Domain already in use")
        logger.info(f"Subdomain password removed for tenant {tenant.id}")
        return {"message": "Subdomain password removed"}

    if len(update.password) < settings.SUBDOMAIN_PASSWORD_MIN_LENGTH:
        raise HTTPException(
            status_code=status.HTTP_400_BAD_REQUEST,
            detail=f"Password must be at least {settings.SUBDOMAIN_PASSWORD_MIN_LENGTH} characters"
        )

    tenant.subdomain_password_hash = hash_password(update.password)
    _save(session, tenant, "Domain already in use")
    logger.info(f"Subdomain password updated for tenant {tenant.id}")
    return {"message": "Subdomain password updated successfully"}


@router.post(
    "/tenant/by-domain",
    response_model=TenantRecord,
    dependencies=[Depends(require_internal_key)],
)
async def get_tenant_by_domain(
    lookup: DomainLookup,
    session: Session = Depends(get_session)
):
    """Directory lookup for the site process"""
    if lookup.type == "custom":
        criteria = Tenant.custom_domain == lookup.domain
    else:
        criteria = Tenant.subdomain == lookup.domain

    tenant = session.exec(select(Tenant).where(criteria)).first()
    if not tenant:
        raise TenantNotFound()
    return tenant_record(tenant)


@router.get(
    "/tenant/by-id/{tenant_id}",
    response_model=TenantRecord,
    dependencies=[Depends(require_internal_key)],
)
async def get_tenant_by_id(
    tenant_id: uuid.UUID,
    session: Session = Depends(get_session)
):
    tenant = session.get(Tenant, tenant_id)
    if not tenant:
        raise TenantNotFound()
    return tenant_record(tenant)
