"""
Ad Request Endpoints
====================
Store owners request banner slots; anyone can list the ads live today.
"""

from __future__ import annotations

import uuid
from datetime import date

from fastapi import APIRouter, Depends, HTTPException
from sqlalchemy.ext.asyncio import AsyncSession

from dollpick.models.database import get_db
from dollpick.models.store import Store
from dollpick.routers.deps import require_viewer
from dollpick.schemas.submission import (
    ActiveAd,
    AdRequestCreate,
    AdRequestDetail,
    AdRequestOut,
)
from dollpick.services.ads import AdService, present_request, present_request_detail
from dollpick.services.review_gate import Viewer

router = APIRouter(prefix="/ad-requests", tags=["Ads"])


@router.post("", response_model=AdRequestOut, status_code=201)
async def create_ad_request(
    body: AdRequestCreate,
    viewer: Viewer = Depends(require_viewer),
    db: AsyncSession = Depends(get_db),
):
    if body.start_date < date.today():
        raise HTTPException(400, "start_date cannot be in the past")

    store = None
    if body.store_id is not None:
        store = await db.get(Store, body.store_id)
        if not store:
            raise HTTPException(404, "Store not found")

    ad = await AdService(db).create_request(viewer.user_id, body)
    return present_request(ad, store)


@router.get("/user", response_model=list[AdRequestOut])
async def list_my_ad_requests(
    viewer: Viewer = Depends(require_viewer),
    db: AsyncSession = Depends(get_db),
):
    ads = await AdService(db).list_user_requests(viewer.user_id)
    return [present_request(ad) for ad in ads]


@router.get("/active", response_model=list[ActiveAd])
async def list_active_ads(db: AsyncSession = Depends(get_db)):
    """Approved ads running today, each with a map-ready store pin."""
    return await AdService(db).active_ads()


@router.get("/{request_id}", response_model=AdRequestDetail)
async def get_ad_request(
    request_id: uuid.UUID,
    viewer: Viewer = Depends(require_viewer),
    db: AsyncSession = Depends(get_db),
):
    ad = await AdService(db).get_request(request_id)
    if not ad:
        raise HTTPException(404, "Ad request not found")
    if ad.user_id != viewer.user_id:
        raise HTTPException(403, "Not your ad request")
    return present_request_detail(ad)
