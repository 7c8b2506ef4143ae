"""
Pydantic schemas for store and favorite endpoints.
"""

from __future__ import annotations

from datetime import datetime

from pydantic import BaseModel, Field


class StoreSummary(BaseModel):
    """A store as rendered on the map."""

    id: int
    name: str
    address: str | None = None
    lat: float = Field(description="WGS84 latitude")
    lng: float = Field(description="WGS84 longitude")
    is_approximate: bool = Field(
        default=False,
        description="Registry coordinate was unusable; pin is the default location",
    )
    status: str | None = None
    game_machine_count: int | None = None
    facility_area: str | None = None
    phone: str | None = None
    average_rating: float | None = None
    review_count: int = 0


class StoreDetail(StoreSummary):
    road_address: str | None = None
    lot_address: str | None = None


class FavoriteOut(BaseModel):
    id: int
    created_at: datetime | None = None
    store: StoreSummary


class FavoriteListResponse(BaseModel):
    favorites: list[FavoriteOut]


class FavoriteStatus(BaseModel):
    store_id: int
    is_favorite: bool
    favorite_id: int | None = None
