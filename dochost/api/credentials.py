"""
Service credential API endpoints
"""

from fastapi import APIRouter, Depends, HTTPException, status
from sqlmodel import Session, select
from typing import List
import structlog
import uuid

from dochost.core.clock import utcnow
from dochost.core.database import get_session
from dochost.core.dependencies import get_current_tenant
from dochost.models.credential import Credential
from dochost.models.tenant import Tenant
from dochost.schemas.credential import CredentialCreate, CredentialResponse, CredentialUpdate

logger = structlog.get_logger(__name__)
router = APIRouter()


def _get_owned_credential(session: Session, credential_id: uuid.UUID, tenant_id: uuid.UUID) -> Credential:
    credential = session.exec(
        select(Credential).where(Credential.id == credential_id, Credential.tenant_id == tenant_id)
    ).first()
    if not credential:
        raise HTTPException(
            status_code=status.HTTP_404_NOT_FOUND,
            detail="Credential not found"
        )
    return credential


@router.post("/", response_model=CredentialResponse, status_code=status.HTTP_201_CREATED)
async def create_credential(
    credential_data: CredentialCreate,
    tenant: Tenant = Depends(get_current_tenant),
    session: Session = Depends(get_session)
):
    """Store credentials for a service"""
    credential = Credential(tenant_id=tenant.id, **credential_data.model_dump())
    session.add(credential)
    session.commit()
    session.refresh(credential)

    logger.info(f"Credential created: {credential.id} ({credential.service_name})")
    return credential


@router.get("/", response_model=List[CredentialResponse])
async def list_credentials(
    tenant: Tenant = Depends(get_current_tenant),
    session: Session = Depends(get_session)
):
    return session.exec(
        select(Credential).where(Credential.tenant_id == tenant.id).order_by(Credential.created_at.desc())
    ).all()


@router.get("/{credential_id}", response_model=CredentialResponse)
async def get_credential(
    credential_id: uuid.UUID,
    tenant: Tenant = Depends(get_current_tenant),
    session: Session = Depends(get_session)
):
    return _get_owned_credential(session, credential_id, tenant.id)


@router.put("/{credential_id}", response_model=CredentialResponse)
async def update_credential(
    credential_id: uuid.UUID,
    credential_update: CredentialUpdate,
    tenant: Tenant = Depends(get_current_tenant),
    session: Session = Depends(get_session)
):
    credential = _get_owned_credential(session, credential_id, tenant.id)

    for key, value in credential_update.model_dump(exclude_unset=True).items():
        setattr(credential, key, value)

    credential.updated_at = utcnow()
    session.add(credential)
    session.commit()
    session.refresh(credential)
    logger.info(f"Credential updated: {credential_id}")
    return credential


@router.delete("/{credential_id}")
async def delete_credential(
    credential_id: uuid.UUID,
    tenant: Tenant = Depends(get_current_tenant),
    session: Session = Depends(get_session)
):
    credential = _get_owned_credential(session, credential_id, tenant.id)
    session.delete(credential)
    session.commit()
    logger.info(f"Credential deleted: {credential_id}")
    return {"message": "Credential deleted successfully"}
