# tender_system/api/v1/tenders.py
from __future__ import annotations

from typing import List, Optional

from fastapi import APIRouter, Depends, Query
from sqlalchemy.orm import Session

from tender_system.core.deps import (
    get_pagination,
    get_tender_service,
    parse_uuid,
)
from tender_system.core.pagination import Pagination
from tender_system.db.session import get_db
from tender_system.models.enums import TenderServiceType, TenderStatus
from tender_system.models.tender import Tender, TenderVersion
from tender_system.schemas.tenders import (
    TenderCreateRequest,
    TenderEditRequest,
    TenderResponse,
    TenderVersionResponse,
)
from tender_system.services.tenders_service import TenderService

router = APIRouter(prefix="/tenders", tags=["tenders"])

TIMESTAMP_FORMAT = "%Y-%m-%dT%H:%M:%S"


# ─────────────────────────────────────────────────────────────
# Helpers
# ─────────────────────────────────────────────────────────────

def _tender_to_schema(t: Tender) -> TenderResponse:
    return TenderResponse(
        id=str(t.id),
        name=t.name,
        description=t.description,
        status=t.status,
        serviceType=t.service_type,
        version=t.version,
        createdAt=t.created_at.strftime(TIMESTAMP_FORMAT),
    )


def _version_to_schema(v: TenderVersion) -> TenderVersionResponse:
    return TenderVersionResponse(
        version=v.version,
        name=v.name,
        description=v.description,
        serviceType=v.service_type,
        createdAt=v.created_at.strftime(TIMESTAMP_FORMAT),
    )


def _service_type(raw: str) -> TenderServiceType:
    return TenderServiceType.parse(raw.lower())


# ─────────────────────────────────────────────────────────────
# LIST
# ─────────────────────────────────────────────────────────────

@router.get("", response_model=List[TenderResponse])
async def list_tenders(
    service_type: Optional[List[str]] = Query(None),
    pagination: Pagination = Depends(get_pagination),
    db: Session = Depends(get_db),
    svc: TenderService = Depends(get_tender_service),
):
    types = [_service_type(s) for s in (service_type or [])]
    tenders = svc.get_all(db, pagination=pagination, service_types=types)
    return [_tender_to_schema(t) for t in tenders]


@router.get("/my", response_model=List[TenderResponse])
async def my_tenders(
    username: str = Query(...),
    pagination: Pagination = Depends(get_pagination),
    db: Session = Depends(get_db),
    svc: TenderService = Depends(get_tender_service),
):
    tenders = svc.get_my(db, username=username, pagination=pagination)
    return [_tender_to_schema(t) for t in tenders]


# ─────────────────────────────────────────────────────────────
# CREATE
# ─────────────────────────────────────────────────────────────

@router.post("/new", response_model=TenderResponse)
async def create_tender(
    payload: TenderCreateRequest,
    db: Session = Depends(get_db),
    svc: TenderService = Depends(get_tender_service),
):
    tender = svc.create(
        db,
        name=payload.name,
        description=payload.description,
        service_type=_service_type(payload.serviceType),
        organization_id=parse_uuid(payload.organizationId, "organizationId"),
        creator_username=payload.creatorUsername,
    )
    return _tender_to_schema(tender)


# ─────────────────────────────────────────────────────────────
# STATUS
# ─────────────────────────────────────────────────────────────

@router.get("/{tender_id}/status", response_model=str)
async def get_tender_status(
    tender_id: str,
    username: str = Query(...),
    db: Session = Depends(get_db),
    svc: TenderService = Depends(get_tender_service),
):
    status = svc.get_status(db, tender_id=parse_uuid(tender_id, "tenderId"), username=username)
    return status.value


@router.put("/{tender_id}/status", response_model=TenderResponse)
async def set_tender_status(
    tender_id: str,
    status: str = Query(...),
    username: str = Query(...),
    db: Session = Depends(get_db),
    svc: TenderService = Depends(get_tender_service),
):
    tender = svc.set_status(
        db,
        tender_id=parse_uuid(tender_id, "tenderId"),
        username=username,
        status=TenderStatus.parse(status.lower()),
    )
    return _tender_to_schema(tender)


# ─────────────────────────────────────────────────────────────
# VERSIONING
# ─────────────────────────────────────────────────────────────

@router.patch("/{tender_id}/edit", response_model=TenderResponse)
async def edit_tender(
    tender_id: str,
    payload: TenderEditRequest,
    username: str = Query(...),
    db: Session = Depends(get_db),
    svc: TenderService = Depends(get_tender_service),
):
    tender = svc.update(
        db,
        tender_id=parse_uuid(tender_id, "tenderId"),
        username=username,
        name=payload.name,
        description=payload.description,
        service_type=_service_type(payload.serviceType) if payload.serviceType is not None else None,
    )
    return _tender_to_schema(tender)


@router.put("/{tender_id}/rollback/{version}", response_model=TenderResponse)
async def rollback_tender(
    tender_id: str,
    version: int,
    username: str = Query(...),
    db: Session = Depends(get_db),
    svc: TenderService = Depends(get_tender_service),
):
    tender = svc.rollback(
        db,
        tender_id=parse_uuid(tender_id, "tenderId"),
        username=username,
        version=version,
    )
    return _tender_to_schema(tender)


@router.get("/{tender_id}/versions", response_model=List[TenderVersionResponse])
async def tender_versions(
    tender_id: str,
    username: str = Query(...),
    pagination: Pagination = Depends(get_pagination),
    db: Session = Depends(get_db),
    svc: TenderService = Depends(get_tender_service),
):
    versions = svc.get_versions(
        db,
        tender_id=parse_uuid(tender_id, "tenderId"),
        username=username,
        pagination=pagination,
    )
    return [_version_to_schema(v) for v in versions]
