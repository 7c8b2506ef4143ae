"""
Open Alert Endpoints
====================
One "tell me when it opens" request per user.
"""

from __future__ import annotations

from fastapi import APIRouter, Depends, HTTPException
from sqlalchemy.ext.asyncio import AsyncSession

from dollpick.models.database import get_db
from dollpick.routers.deps import require_viewer
from dollpick.schemas.submission import OpenAlertCreate, OpenAlertOut, OpenAlertStatus
from dollpick.services.open_alerts import OpenAlertService
from dollpick.services.review_gate import Viewer

router = APIRouter(prefix="/open-alerts", tags=["Open Alerts"])


@router.post("", response_model=OpenAlertOut, status_code=201)
async def create_open_alert(
    body: OpenAlertCreate,
    viewer: Viewer = Depends(require_viewer),
    db: AsyncSession = Depends(get_db),
):
    alert_id = await OpenAlertService(db).create_alert(viewer.user_id, body)
    if alert_id is None:
        raise HTTPException(409, "You have already submitted an open alert")
    return OpenAlertOut(id=alert_id, contacted=False, **body.model_dump())


@router.get("/status", response_model=OpenAlertStatus)
async def open_alert_status(
    viewer: Viewer = Depends(require_viewer),
    db: AsyncSession = Depends(get_db),
):
    return await OpenAlertService(db).status(viewer.user_id)
