"""
Favorite Endpoints
==================
Bookmarked stores for the logged-in user.
"""

from __future__ import annotations

from fastapi import APIRouter, Depends, HTTPException
from sqlalchemy.ext.asyncio import AsyncSession

from dollpick.models.database import get_db
from dollpick.models.store import Store
from dollpick.routers.deps import require_viewer
from dollpick.schemas.store import FavoriteListResponse, FavoriteStatus
from dollpick.services.favorites import FavoriteService
from dollpick.services.review_gate import Viewer

router = APIRouter(prefix="/favorites", tags=["Favorites"])


@router.get("", response_model=FavoriteListResponse)
async def list_favorites(
    viewer: Viewer = Depends(require_viewer),
    db: AsyncSession = Depends(get_db),
):
    """Favorites, newest first, with map coordinates and ratings."""
    favorites = await FavoriteService(db).list_favorites(viewer.user_id)
    return FavoriteListResponse(favorites=favorites)


@router.get("/check/{store_id}", response_model=FavoriteStatus)
async def check_favorite(
    store_id: int,
    viewer: Viewer = Depends(require_viewer),
    db: AsyncSession = Depends(get_db),
):
    return await FavoriteService(db).status(viewer.user_id, store_id)


@router.post("/{store_id}", response_model=FavoriteStatus, status_code=201)
async def add_favorite(
    store_id: int,
    viewer: Viewer = Depends(require_viewer),
    db: AsyncSession = Depends(get_db),
):
    store = await db.get(Store, store_id)
    if not store:
        raise HTTPException(404, "Store not found")

    favorite_id = await FavoriteService(db).add_favorite(viewer.user_id, store_id)
    if favorite_id is None:
        raise HTTPException(409, "Store is already a favorite")
    return FavoriteStatus(store_id=store_id, is_favorite=True, favorite_id=favorite_id)


@router.delete("/{store_id}", status_code=204)
async def remove_favorite(
    store_id: int,
    viewer: Viewer = Depends(require_viewer),
    db: AsyncSession = Depends(get_db),
):
    svc = FavoriteService(db)
    favorite = await svc.get_favorite(viewer.user_id, store_id)
    if not favorite:
        raise HTTPException(404, "Favorite not found")
    await svc.remove_favorite(favorite)
