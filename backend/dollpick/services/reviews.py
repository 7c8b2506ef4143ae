"""
Review Service
==============
Review pages, CRUD, statistics and the review unlock ledger.

Unlock Ledger
-------------
An unlock is written with ``INSERT … ON CONFLICT DO NOTHING`` against
the ``(user_id, store_id)`` unique constraint, so a double-tapped
"watch ad to unlock" button yields exactly one row.  A conflicting
insert is reported as ``already_unlocked`` rather than an error.
"""

from __future__ import annotations

import logging
import random
import re
import uuid

from sqlalchemy import func, select
from sqlalchemy.dialects.postgresql import insert as pg_insert
from sqlalchemy.ext.asyncio import AsyncSession

from dollpick.models.store import Review, ReviewUnlock, User
from dollpick.schemas.review import (
    Pagination,
    ReviewCreate,
    ReviewListResponse,
    ReviewSortOrder,
    ReviewStats,
    ReviewUpdate,
    TopCatcher,
    UnlockResult,
    UnlockStatus,
)
from dollpick.services.review_gate import ANONYMOUS_NAME, Viewer, gate, resolve_unlock
from dollpick.services.stores import round_rating

logger = logging.getLogger(__name__)

TOP_CATCHER_COUNT = 3
MASKED_PHONE_FALLBACK = "****"

_ORDERINGS = {
    ReviewSortOrder.LATEST: (Review.created_at.desc(),),
    ReviewSortOrder.RATING_HIGH: (Review.rating.desc(), Review.created_at.desc()),
    ReviewSortOrder.RATING_LOW: (Review.rating.asc(), Review.created_at.desc()),
}


def mask_phone(phone: str | None) -> str:
    """``010-1234-5678`` → ``56**``."""
    if not phone:
        return MASKED_PHONE_FALLBACK
    digits = re.sub(r"[^0-9]", "", phone)
    if len(digits) < 4:
        return MASKED_PHONE_FALLBACK
    return digits[-4:-2] + "**"


class ReviewService:
    """
    Review reads and writes.  All methods are async and use the
    injected AsyncSession; writers commit their own unit-of-work.
    """

    def __init__(self, session: AsyncSession) -> None:
        self.session = session

    # ── Unlock ledger ─────────────────────────────────────────

    async def get_unlock(self, user_id: str, store_id: int) -> ReviewUnlock | None:
        stmt = select(ReviewUnlock).where(
            ReviewUnlock.user_id == user_id,
            ReviewUnlock.store_id == store_id,
        )
        result = await self.session.execute(stmt)
        return result.scalar_one_or_none()

    async def is_unlocked(self, user_id: str, store_id: int) -> bool:
        return await self.get_unlock(user_id, store_id) is not None

    async def unlock_status(self, user_id: str, store_id: int) -> UnlockStatus:
        record = await self.get_unlock(user_id, store_id)
        return UnlockStatus(
            store_id=store_id,
            is_unlocked=record is not None,
            unlocked_at=record.unlocked_at if record is not None else None,
        )

    async def unlock(self, user_id: str, store_id: int) -> UnlockResult:
        """Record an unlock; repeating it is a successful no-op."""
        stmt = (
            pg_insert(ReviewUnlock)
            .values(user_id=user_id, store_id=store_id)
            .on_conflict_do_nothing(constraint="uq_review_unlocks_user_store")
            .returning(ReviewUnlock.unlocked_at)
        )
        result = await self.session.execute(stmt)
        unlocked_at = result.scalar_one_or_none()
        await self.session.commit()

        if unlocked_at is not None:
            logger.info("User %s unlocked reviews for store %s", user_id, store_id)
            return UnlockResult(
                store_id=store_id, is_unlocked=True, unlocked_at=unlocked_at
            )

        existing = await self.get_unlock(user_id, store_id)
        return UnlockResult(
            store_id=store_id,
            is_unlocked=True,
            unlocked_at=existing.unlocked_at if existing is not None else None,
            already_unlocked=True,
        )

    # ── Review page ───────────────────────────────────────────

    async def list_store_reviews(
        self,
        store_id: int,
        viewer: Viewer,
        limit: int,
        offset: int = 0,
        sort_by: ReviewSortOrder = ReviewSortOrder.LATEST,
    ) -> ReviewListResponse:
        """
        Fetch one page of a store's reviews and gate it for ``viewer``.
        """
        is_unlocked = await resolve_unlock(viewer, store_id, self.is_unlocked)

        stmt = (
            select(Review)
            .where(Review.store_id == store_id)
            .order_by(*_ORDERINGS[sort_by])
            .offset(offset)
            .limit(limit)
        )
        result = await self.session.execute(stmt)
        rows = result.scalars().all()

        count_stmt = (
            select(func.count())
            .select_from(Review)
            .where(Review.store_id == store_id)
        )
        total = (await self.session.execute(count_stmt)).scalar_one()

        return ReviewListResponse(
            store_id=store_id,
            reviews=gate(rows, viewer, is_unlocked),
            is_unlocked=is_unlocked,
            pagination=Pagination(
                total=total,
                limit=limit,
                offset=offset,
                has_more=offset + limit < total,
            ),
        )

    # ── CRUD ──────────────────────────────────────────────────

    async def get_review(self, review_id: uuid.UUID) -> Review | None:
        return await self.session.get(Review, review_id)

    async def create_review(self, payload: ReviewCreate, viewer: Viewer) -> Review:
        review = Review(
            store_id=payload.store_id,
            rating=payload.rating,
            content=payload.content,
            images=list(payload.images),
            tags=list(payload.tags),
            doll_count=payload.doll_count,
            spent_amount=payload.spent_amount,
            doll_images=list(payload.doll_images),
        )
        if viewer.is_authenticated:
            review.user_id = viewer.user_id
        else:
            review.user_name = payload.user_name or ANONYMOUS_NAME

        self.session.add(review)
        await self.session.commit()
        await self.session.refresh(review)
        logger.info("Created review %s for store %s", review.id, review.store_id)
        return review

    async def update_review(self, review: Review, payload: ReviewUpdate) -> Review:
        for field, value in payload.model_dump(exclude_none=True).items():
            setattr(review, field, value)
        await self.session.commit()
        await self.session.refresh(review)
        return review

    async def delete_review(self, review: Review) -> None:
        await self.session.delete(review)
        await self.session.commit()
        logger.info("Deleted review %s", review.id)

    # ── Statistics ────────────────────────────────────────────

    async def get_stats(self, store_id: int) -> ReviewStats:
        """Rating distribution and rounded average for one store."""
        stmt = (
            select(Review.rating, func.count().label("cnt"))
            .where(Review.store_id == store_id)
            .group_by(Review.rating)
        )
        result = await self.session.execute(stmt)

        distribution = {rating: 0 for rating in range(1, 6)}
        for row in result.all():
            distribution[row.rating] = row.cnt

        total = sum(distribution.values())
        weighted = sum(rating * cnt for rating, cnt in distribution.items())
        average = round_rating(weighted / total) if total > 0 else 0.0

        return ReviewStats(
            store_id=store_id,
            total_reviews=total,
            average_rating=average,
            rating_distribution=distribution,
        )

    async def top_catchers(self, count: int = TOP_CATCHER_COUNT) -> list[TopCatcher]:
        """
        Users who caught the most dolls, ranked by summed ``doll_count``.

        Only users with a phone number on file qualify.  When fewer
        than ``count`` users have caught anything, the board is padded
        with randomly chosen other reviewers.
        """
        doll_sum = func.coalesce(func.sum(Review.doll_count), 0).label("total_dolls")
        spent_sum = func.coalesce(func.sum(Review.spent_amount), 0).label("total_spent")

        base = (
            select(User.id, User.nickname, User.phone, doll_sum, spent_sum)
            .select_from(Review)
            .join(User, Review.user_id == User.id)
            .where(User.phone.is_not(None))
            .group_by(User.id, User.nickname, User.phone)
        )

        ranked_stmt = (
            base.where(Review.doll_count > 0)
            .order_by(doll_sum.desc())
            .limit(count)
        )
        ranked = list((await self.session.execute(ranked_stmt)).all())

        if len(ranked) < count:
            taken = [row.id for row in ranked]
            filler_stmt = base.where(User.id.not_in(taken)) if taken else base
            fillers = list((await self.session.execute(filler_stmt)).all())
            ranked.extend(random.sample(fillers, min(count - len(ranked), len(fillers))))

        return [
            TopCatcher(
                rank=index + 1,
                masked_phone=mask_phone(row.phone),
                nickname=row.nickname or ANONYMOUS_NAME,
                total_doll_count=int(row.total_dolls or 0),
                total_spent_amount=int(row.total_spent or 0),
            )
            for index, row in enumerate(ranked)
        ]
