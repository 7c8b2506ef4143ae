"""
Store Endpoints
===============
Store detail with map-ready WGS84 coordinates.
"""

from __future__ import annotations

from fastapi import APIRouter, Depends, HTTPException
from sqlalchemy.ext.asyncio import AsyncSession

from dollpick.models.database import get_db
from dollpick.schemas.store import StoreDetail
from dollpick.services.stores import StoreService

router = APIRouter(prefix="/stores", tags=["Stores"])


@router.get("/{store_id}", response_model=StoreDetail)
async def get_store(
    store_id: int,
    db: AsyncSession = Depends(get_db),
):
    """
    Store detail.  ``is_approximate`` is set when the registry
    coordinate was unusable and the pin falls back to central Seoul.
    """
    detail = await StoreService(db).get_store_detail(store_id)
    if detail is None:
        raise HTTPException(404, "Store not found")
    return detail
