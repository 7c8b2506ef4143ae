"""
Store Report Endpoints
======================
Submit, review, edit and withdraw reports of unlisted arcades.  Every
route is scoped to the caller's own reports.
"""

from __future__ import annotations

import uuid

from fastapi import APIRouter, Depends, HTTPException
from sqlalchemy.ext.asyncio import AsyncSession

from dollpick.models.database import get_db
from dollpick.routers.deps import require_viewer
from dollpick.schemas.submission import StoreReportIn, StoreReportOut
from dollpick.services.review_gate import Viewer
from dollpick.services.store_reports import STATUS_PENDING, StoreReportService

router = APIRouter(prefix="/store-reports", tags=["Store Reports"])


@router.get("", response_model=list[StoreReportOut])
async def list_store_reports(
    viewer: Viewer = Depends(require_viewer),
    db: AsyncSession = Depends(get_db),
):
    svc = StoreReportService(db)
    return [svc.present(r) for r in await svc.list_reports(viewer.user_id)]


@router.get("/{report_id}", response_model=StoreReportOut)
async def get_store_report(
    report_id: uuid.UUID,
    viewer: Viewer = Depends(require_viewer),
    db: AsyncSession = Depends(get_db),
):
    svc = StoreReportService(db)
    report = await svc.get_report(viewer.user_id, report_id)
    if not report:
        raise HTTPException(404, "Store report not found")
    return svc.present(report)


@router.post("", response_model=StoreReportOut, status_code=201)
async def create_store_report(
    body: StoreReportIn,
    viewer: Viewer = Depends(require_viewer),
    db: AsyncSession = Depends(get_db),
):
    svc = StoreReportService(db)
    if await svc.find_duplicate(viewer.user_id, body.store_name, body.address):
        raise HTTPException(409, "You have already reported this store")
    report = await svc.create_report(viewer.user_id, body)
    return svc.present(report)


@router.put("/{report_id}", response_model=StoreReportOut)
async def update_store_report(
    report_id: uuid.UUID,
    body: StoreReportIn,
    viewer: Viewer = Depends(require_viewer),
    db: AsyncSession = Depends(get_db),
):
    svc = StoreReportService(db)
    report = await svc.get_report(viewer.user_id, report_id)
    if not report:
        raise HTTPException(404, "Store report not found")
    if report.status != STATUS_PENDING:
        raise HTTPException(400, "Only pending reports can be edited")
    report = await svc.update_report(report, body)
    return svc.present(report)


@router.delete("/{report_id}", status_code=204)
async def delete_store_report(
    report_id: uuid.UUID,
    viewer: Viewer = Depends(require_viewer),
    db: AsyncSession = Depends(get_db),
):
    svc = StoreReportService(db)
    report = await svc.get_report(viewer.user_id, report_id)
    if not report:
        raise HTTPException(404, "Store report not found")
    if report.status != STATUS_PENDING:
        raise HTTPException(400, "Only pending reports can be deleted")
    await svc.delete_report(report)
