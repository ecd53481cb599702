"""Site content endpoints: public reads, admin upserts."""
from fastapi import APIRouter, Depends, Request
from sqlalchemy.orm import Session

from garden_club.audit import client_ip
from garden_club.auth import require_admin
from garden_club.database import get_db
from garden_club.models import User
from garden_club.schemas import SiteContentEnvelope, SiteContentListEnvelope, SiteContentWrite
from garden_club.services import site_content

router = APIRouter(prefix="/api/site-content", tags=["site-content"])


@router.get("", response_model=SiteContentListEnvelope)
def list_content(db: Session = Depends(get_db)):
    return {"content": site_content.list_content(db)}


@router.put("", response_model=SiteContentEnvelope)
def upsert_content(
    request: Request,
    payload: SiteContentWrite,
    db: Session = Depends(get_db),
    admin: User = Depends(require_admin),
):
    return {"content": site_content.upsert_content(db, admin, payload, ip=client_ip(request))}


@router.get("/{key}", response_model=SiteContentEnvelope)
def get_content(key: str, db: Session = Depends(get_db)):
    return {"content": site_content.get_content(db, key)}


@router.put("/{key}", response_model=SiteContentEnvelope)
def upsert_content_by_key(
    request: Request,
    key: str,
    payload: SiteContentWrite,
    db: Session = Depends(get_db),
    admin: User = Depends(require_admin),
):
    return {"content": site_content.upsert_content(db, admin, payload, key=key, ip=client_ip(request))}
