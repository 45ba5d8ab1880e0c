"""
Documentation page API endpoints
"""

from fastapi import APIRouter, Depends, HTTPException, Query, status
from sqlmodel import Session, select
from typing import List, Optional
import structlog
import uuid

from dochost.core.clock import utcnow
from dochost.core.database import get_session
from dochost.core.dependencies import get_current_tenant
from dochost.models.page import Page
from dochost.models.tenant import Tenant
from dochost.schemas.page import PageCreate, PageResponse, PageUpdate

logger = structlog.get_logger(__name__)
router = APIRouter()


def _get_owned_page(session: Session, page_id: uuid.UUID, tenant_id: uuid.UUID) -> Page:
    page = session.exec(
        select(Page).where(Page.id == page_id, Page.tenant_id == tenant_id)
    ).first()
    if not page:
        raise HTTPException(
            status_code=status.HTTP_404_NOT_FOUND,
            detail="Page not found"
        )
    return page


@router.post("/", response_model=PageResponse, status_code=status.HTTP_201_CREATED)
async def create_page(
    page_data: PageCreate,
    tenant: Tenant = Depends(get_current_tenant),
    session: Session = Depends(get_session)
):
    """Create a documentation page"""
    page = Page(tenant_id=tenant.id, **page_data.model_dump())
    session.add(page)
    session.commit()
    session.refresh(page)

    logger.info(f"Page created: {page.id} ({page.category}/{page.slug})")
    return page


@router.get("/", response_model=List[PageResponse])
async def list_pages(
    category: Optional[str] = Query(None, description="Filter by category"),
    tenant: Tenant = Depends(get_current_tenant),
    session: Session = Depends(get_session)
):
    """List the tenant's pages, newest first"""
    query = select(Page).where(Page.tenant_id == tenant.id)
    if category:
        query = query.where(Page.category == category)
    return session.exec(query.order_by(Page.created_at.desc())).all()


@router.get("/{page_id}", response_model=PageResponse)
async def get_page(
    page_id: uuid.UUID,
    tenant: Tenant = Depends(get_current_tenant),
    session: Session = Depends(get_session)
):
    return _get_owned_page(session, page_id, tenant.id)


@router.put("/{page_id}", response_model=PageResponse)
async def update_page(
    page_id: uuid.UUID,
    page_update: PageUpdate,
    tenant: Tenant = Depends(get_current_tenant),
    session: Session = Depends(get_session)
):
    """Update a page"""
    page = _get_owned_page(session, page_id, tenant.id)

    for key, value in page_update.model_dump(exclude_unset=True).items():
        setattr(page, key, value)

    page.updated_at = utcnow()
    session.add(page)
    session.commit()
    session.refresh(page)
    logger.info(f"Page updated: {page_id}")
    return page


@router.delete("/{page_id}")
async def delete_page(
    page_id: uuid.UUID,
    tenant: Tenant = Depends(get_current_tenant),
    session: Session = Depends(get_session)
):
    page = _get_owned_page(session, page_id, tenant.id)
    session.delete(page)
    session.commit()
    logger.info(f"Page deleted: {page_id}")
    return {"message": "Page deleted successfully"}
