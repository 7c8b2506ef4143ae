"""
Store Query Service
===================
Loads stores and renders them for the map: registry coordinates are
converted to WGS84 on every read and review aggregates are attached.
"""

from __future__ import annotations

import logging
import math
from typing import Iterable

from sqlalchemy import func, select
from sqlalchemy.ext.asyncio import AsyncSession

from dollpick.models.store import Review, Store
from dollpick.schemas.store import StoreDetail, StoreSummary
from dollpick.schemas.submission import StoreRef
from dollpick.spatial.transform import CoordinateTransformer, get_coordinate_transformer

logger = logging.getLogger(__name__)

# (average rating, review count)
RatingSummary = tuple[float | None, int]
NO_REVIEWS: RatingSummary = (None, 0)


def round_rating(value: float) -> float:
    """Round to one decimal, halves away from zero."""
    return math.floor(value * 10 + 0.5) / 10


def store_ref(store: Store | None) -> StoreRef | None:
    if store is None:
        return None
    return StoreRef(id=store.id, name=store.name, address=store.address)


class StoreService:
    """
    Read-side access to stores.  All methods are async and use the
    injected AsyncSession.
    """

    def __init__(
        self,
        session: AsyncSession,
        transformer: CoordinateTransformer | None = None,
    ) -> None:
        self.session = session
        self.transformer = transformer or get_coordinate_transformer()

    async def get_store(self, store_id: int) -> Store | None:
        return await self.session.get(Store, store_id)

    # ── Review aggregates ─────────────────────────────────────

    async def rating_summaries(
        self, store_ids: Iterable[int]
    ) -> dict[int, RatingSummary]:
        """Average rating and review count per store, in one query."""
        ids = list(set(store_ids))
        if not ids:
            return {}

        stmt = (
            select(
                Review.store_id,
                func.avg(Review.rating).label("avg_rating"),
                func.count().label("cnt"),
            )
            .where(Review.store_id.in_(ids))
            .group_by(Review.store_id)
        )
        result = await self.session.execute(stmt)
        return {
            row.store_id: (
                round_rating(float(row.avg_rating)) if row.cnt else None,
                row.cnt,
            )
            for row in result.all()
        }

    # ── Rendering ─────────────────────────────────────────────

    def summarize(self, store: Store, ratings: RatingSummary = NO_REVIEWS) -> StoreSummary:
        conversion = self.transformer.convert(store.coord_x, store.coord_y)
        if conversion.is_approximate:
            logger.debug("Store %s has no usable coordinate", store.id)
        average_rating, review_count = ratings
        return StoreSummary(
            id=store.id,
            name=store.name,
            address=store.address,
            lat=conversion.coordinate.lat,
            lng=conversion.coordinate.lng,
            is_approximate=conversion.is_approximate,
            status=store.business_status,
            game_machine_count=store.game_machine_count,
            facility_area=store.facility_area,
            phone=store.phone,
            average_rating=average_rating,
            review_count=review_count,
        )

    async def get_store_detail(self, store_id: int) -> StoreDetail | None:
        store = await self.get_store(store_id)
        if store is None:
            return None
        ratings = await self.rating_summaries([store_id])
        summary = self.summarize(store, ratings.get(store_id, NO_REVIEWS))
        return StoreDetail(
            **summary.model_dump(),
            road_address=store.road_address,
            lot_address=store.lot_address,
        )
