"""
Favorite Service
================
A user's bookmarked stores, rendered with map coordinates and review
aggregates.
"""

from __future__ import annotations

import logging

from sqlalchemy import select
from sqlalchemy.dialects.postgresql import insert as pg_insert
from sqlalchemy.ext.asyncio import AsyncSession
from sqlalchemy.orm import selectinload

from dollpick.models.store import Favorite
from dollpick.schemas.store import FavoriteOut, FavoriteStatus
from dollpick.services.stores import NO_REVIEWS, StoreService

logger = logging.getLogger(__name__)


class FavoriteService:
    def __init__(self, session: AsyncSession, stores: StoreService | None = None) -> None:
        self.session = session
        self.stores = stores or StoreService(session)

    async def get_favorite(self, user_id: str, store_id: int) -> Favorite | None:
        stmt = select(Favorite).where(
            Favorite.user_id == user_id,
            Favorite.store_id == store_id,
        )
        result = await self.session.execute(stmt)
        return result.scalar_one_or_none()

    async def status(self, user_id: str, store_id: int) -> FavoriteStatus:
        favorite = await self.get_favorite(user_id, store_id)
        return FavoriteStatus(
            store_id=store_id,
            is_favorite=favorite is not None,
            favorite_id=favorite.id if favorite is not None else None,
        )

    async def list_favorites(self, user_id: str) -> list[FavoriteOut]:
        """Most recently added first."""
        stmt = (
            select(Favorite)
            .options(selectinload(Favorite.store))
            .where(Favorite.user_id == user_id)
            .order_by(Favorite.created_at.desc())
        )
        result = await self.session.execute(stmt)
        favorites = result.scalars().all()

        ratings = await self.stores.rating_summaries(f.store_id for f in favorites)
        return [
            FavoriteOut(
                id=f.id,
                created_at=f.created_at,
                store=self.stores.summarize(f.store, ratings.get(f.store_id, NO_REVIEWS)),
            )
            for f in favorites
        ]

    async def add_favorite(self, user_id: str, store_id: int) -> int | None:
        """
        Bookmark a store.  Returns the new favorite id, or None when
        the store was already a favorite.
        """
        stmt = (
            pg_insert(Favorite)
            .values(user_id=user_id, store_id=store_id)
            .on_conflict_do_nothing(constraint="uq_favorites_user_store")
            .returning(Favorite.id)
        )
        result = await self.session.execute(stmt)
        favorite_id = result.scalar_one_or_none()
        await self.session.commit()
        if favorite_id is not None:
            logger.info("User %s added store %s to favorites", user_id, store_id)
        return favorite_id

    async def remove_favorite(self, favorite: Favorite) -> None:
        await self.session.delete(favorite)
        await self.session.commit()
        logger.info(
            "User %s removed store %s from favorites", favorite.user_id, favorite.store_id
        )
