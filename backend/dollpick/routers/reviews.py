"""
Review Endpoints
================
Gated review pages, review CRUD, statistics, and the unlock ledger.
"""

from __future__ import annotations

import logging
import uuid

from fastapi import APIRouter, Depends, HTTPException, Query
from sqlalchemy.ext.asyncio import AsyncSession

from dollpick.config import get_settings
from dollpick.models.database import get_db
from dollpick.models.store import Store
from dollpick.routers.deps import get_viewer, require_viewer
from dollpick.schemas.review import (
    ReviewCreate,
    ReviewListResponse,
    ReviewOut,
    ReviewSortOrder,
    ReviewStats,
    ReviewUpdate,
    TopCatcher,
    UnlockResult,
    UnlockStatus,
)
from dollpick.services.review_gate import Viewer, present_review
from dollpick.services.reviews import ReviewService

logger = logging.getLogger(__name__)
router = APIRouter(prefix="/reviews", tags=["Reviews"])
settings = get_settings()


# ── Gated review page ─────────────────────────────────────────────
@router.get("/store/{store_id}", response_model=ReviewListResponse)
async def list_store_reviews(
    store_id: int,
    limit: int = Query(
        default=settings.review_page_default, ge=1, le=settings.review_page_max
    ),
    offset: int = Query(default=0, ge=0),
    sort_by: ReviewSortOrder = ReviewSortOrder.LATEST,
    viewer: Viewer = Depends(get_viewer),
    db: AsyncSession = Depends(get_db),
):
    """
    One page of a store's reviews.

    Until the viewer unlocks the store, only the first review of the
    page is shown in full; the rest are blinded.
    """
    svc = ReviewService(db)
    return await svc.list_store_reviews(
        store_id=store_id,
        viewer=viewer,
        limit=limit,
        offset=offset,
        sort_by=sort_by,
    )


# ── Create ────────────────────────────────────────────────────────
@router.post("", response_model=ReviewOut, status_code=201)
async def create_review(
    req: ReviewCreate,
    viewer: Viewer = Depends(get_viewer),
    db: AsyncSession = Depends(get_db),
):
    """Write a review.  Anonymous reviews are signed with ``user_name``."""
    store = await db.get(Store, req.store_id)
    if not store:
        raise HTTPException(404, "Store not found")

    svc = ReviewService(db)
    review = await svc.create_review(req, viewer)
    return present_review(review, viewer)


# ── Update / delete (owner only) ──────────────────────────────────
@router.put("/{review_id}", response_model=ReviewOut)
async def update_review(
    review_id: uuid.UUID,
    req: ReviewUpdate,
    viewer: Viewer = Depends(require_viewer),
    db: AsyncSession = Depends(get_db),
):
    svc = ReviewService(db)
    review = await svc.get_review(review_id)
    if not review:
        raise HTTPException(404, "Review not found")
    if not viewer.owns(review):
        raise HTTPException(403, "Only the author can edit this review")

    review = await svc.update_review(review, req)
    return present_review(review, viewer)


@router.delete("/{review_id}", status_code=204)
async def delete_review(
    review_id: uuid.UUID,
    viewer: Viewer = Depends(require_viewer),
    db: AsyncSession = Depends(get_db),
):
    svc = ReviewService(db)
    review = await svc.get_review(review_id)
    if not review:
        raise HTTPException(404, "Review not found")
    if not viewer.owns(review):
        raise HTTPException(403, "Only the author can delete this review")

    await svc.delete_review(review)


# ── Statistics ────────────────────────────────────────────────────
@router.get("/stats/{store_id}", response_model=ReviewStats)
async def review_stats(
    store_id: int,
    db: AsyncSession = Depends(get_db),
):
    """Rating distribution and average for a store."""
    return await ReviewService(db).get_stats(store_id)


@router.get("/top-catchers", response_model=list[TopCatcher])
async def top_catchers(db: AsyncSession = Depends(get_db)):
    """Leaderboard of users by number of dolls caught."""
    return await ReviewService(db).top_catchers()


# ── Unlock ledger ─────────────────────────────────────────────────
@router.get("/unlock-status/{store_id}", response_model=UnlockStatus)
async def unlock_status(
    store_id: int,
    viewer: Viewer = Depends(require_viewer),
    db: AsyncSession = Depends(get_db),
):
    return await ReviewService(db).unlock_status(viewer.user_id, store_id)


@router.post("/unlock/{store_id}", response_model=UnlockResult)
async def unlock_reviews(
    store_id: int,
    viewer: Viewer = Depends(require_viewer),
    db: AsyncSession = Depends(get_db),
):
    """
    Unlock every review of a store for the viewer (ad-view reward).

    Idempotent: unlocking twice reports ``already_unlocked``.
    """
    store = await db.get(Store, store_id)
    if not store:
        raise HTTPException(404, "Store not found")

    return await ReviewService(db).unlock(viewer.user_id, store_id)
