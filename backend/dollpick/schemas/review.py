"""
Pydantic schemas for review endpoints.
"""

from __future__ import annotations

import enum
import uuid
from datetime import datetime

from pydantic import BaseModel, Field, field_validator

MAX_DOLL_IMAGES = 4


# ═══════════════════════════════════════════════════════════════════
# Review output (what the viewer sees after gating)
# ═══════════════════════════════════════════════════════════════════
class ReviewOut(BaseModel):
    id: uuid.UUID
    store_id: int
    rating: int
    content: str
    images: list[str] = Field(default_factory=list)
    tags: list[str] = Field(default_factory=list)
    doll_count: int = 0
    spent_amount: int = 0
    doll_images: list[str] = Field(default_factory=list)
    user_name: str | None = None
    user_avatar: str | None = None
    is_owner: bool = False
    is_blinded: bool = False
    created_at: datetime | None = None
    updated_at: datetime | None = None


class ReviewSortOrder(str, enum.Enum):
    LATEST = "latest"
    RATING_HIGH = "rating_high"
    RATING_LOW = "rating_low"


class Pagination(BaseModel):
    total: int
    limit: int
    offset: int
    has_more: bool


class ReviewListResponse(BaseModel):
    """A page of a store's reviews, gated for the requesting viewer."""

    store_id: int
    reviews: list[ReviewOut]
    is_unlocked: bool
    pagination: Pagination


# ═══════════════════════════════════════════════════════════════════
# Review create / update
# ═══════════════════════════════════════════════════════════════════
class ReviewCreate(BaseModel):
    store_id: int
    rating: int = Field(ge=1, le=5)
    content: str = Field(min_length=1)
    images: list[str] = Field(default_factory=list)
    tags: list[str] = Field(default_factory=list)
    doll_count: int = Field(default=0, ge=0)
    spent_amount: int = Field(default=0, ge=0)
    doll_images: list[str] = Field(default_factory=list)
    user_name: str | None = Field(
        default=None, description="Display name for anonymous reviews"
    )

    @field_validator("doll_images")
    @classmethod
    def doll_images_limit(cls, v: list[str]) -> list[str]:
        if len(v) > MAX_DOLL_IMAGES:
            raise ValueError(f"At most {MAX_DOLL_IMAGES} doll images are allowed")
        return v


class ReviewUpdate(BaseModel):
    """Partial update; omitted fields are left untouched."""

    rating: int | None = Field(default=None, ge=1, le=5)
    content: str | None = Field(default=None, min_length=1)
    images: list[str] | None = None
    tags: list[str] | None = None


# ═══════════════════════════════════════════════════════════════════
# Statistics
# ═══════════════════════════════════════════════════════════════════
class ReviewStats(BaseModel):
    store_id: int
    total_reviews: int
    average_rating: float = Field(description="Rounded to one decimal; 0 when empty")
    rating_distribution: dict[int, int]


class TopCatcher(BaseModel):
    rank: int
    masked_phone: str
    nickname: str
    total_doll_count: int
    total_spent_amount: int


# ═══════════════════════════════════════════════════════════════════
# Unlock ledger
# ═══════════════════════════════════════════════════════════════════
class UnlockStatus(BaseModel):
    store_id: int
    is_unlocked: bool
    unlocked_at: datetime | None = None


class UnlockResult(UnlockStatus):
    already_unlocked: bool = False
