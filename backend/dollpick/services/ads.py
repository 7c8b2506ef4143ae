"""
Ad Request Service
==================
Owner-submitted requests to feature a store in the app banner, and
the public list of ads that are live today.

A request is live when it is ``approved`` and today falls inside
``[start_date, end_date]`` (both ends inclusive).  Live ads are sent to
the client with the same map pin a store detail would show, so their
registry coordinates go through the coordinate transformer.
"""

from __future__ import annotations

import logging
import uuid
from datetime import date

from sqlalchemy import select
from sqlalchemy.ext.asyncio import AsyncSession

from dollpick.models.store import AdRequest, Store
from dollpick.schemas.submission import (
    ActiveAd,
    AdRequestCreate,
    AdRequestDetail,
    AdRequestOut,
)
from dollpick.services.stores import NO_REVIEWS, StoreService, store_ref

logger = logging.getLogger(__name__)

STATUS_PENDING = "pending"
STATUS_APPROVED = "approved"


def present_request(ad: AdRequest, store: Store | None = None) -> AdRequestOut:
    return AdRequestOut(
        id=ad.id,
        store=store_ref(store if store is not None else ad.store),
        start_date=ad.start_date,
        end_date=ad.end_date,
        owner_name=ad.owner_name,
        owner_phone=ad.owner_phone,
        status=ad.status,
        admin_note=ad.admin_note,
        created_at=ad.created_at,
        approved_at=ad.approved_at,
    )


def present_request_detail(ad: AdRequest) -> AdRequestDetail:
    return AdRequestDetail(
        **present_request(ad).model_dump(),
        business_license_url=ad.business_license_url,
        id_card_url=ad.id_card_url,
        approved_by=ad.approved_by,
    )


class AdService:
    def __init__(self, session: AsyncSession, stores: StoreService | None = None) -> None:
        self.session = session
        self.stores = stores or StoreService(session)

    async def create_request(
        self, user_id: str, payload: AdRequestCreate
    ) -> AdRequest:
        ad = AdRequest(
            user_id=user_id,
            store_id=payload.store_id,
            start_date=payload.start_date,
            end_date=payload.end_date,
            owner_name=payload.owner_name,
            owner_phone=payload.owner_phone,
            business_license_url=payload.business_license_url,
            id_card_url=payload.id_card_url,
            status=STATUS_PENDING,
        )
        self.session.add(ad)
        await self.session.commit()
        await self.session.refresh(ad)
        logger.info(
            "User %s requested an ad for store %s (%s to %s)",
            user_id, payload.store_id, payload.start_date, payload.end_date,
        )
        return ad

    async def list_user_requests(self, user_id: str) -> list[AdRequest]:
        """Most recent first."""
        stmt = (
            select(AdRequest)
            .where(AdRequest.user_id == user_id)
            .order_by(AdRequest.created_at.desc())
        )
        result = await self.session.execute(stmt)
        return list(result.scalars().all())

    async def get_request(self, request_id: uuid.UUID) -> AdRequest | None:
        return await self.session.get(AdRequest, request_id)

    async def active_ads(self, today: date | None = None) -> list[ActiveAd]:
        """Approved ads running on ``today``, most recently approved first."""
        today = today or date.today()
        stmt = (
            select(AdRequest)
            .where(
                AdRequest.status == STATUS_APPROVED,
                AdRequest.start_date <= today,
                AdRequest.end_date >= today,
            )
            .order_by(AdRequest.approved_at.desc())
        )
        result = await self.session.execute(stmt)
        ads = result.scalars().all()

        ratings = await self.stores.rating_summaries(
            ad.store_id for ad in ads if ad.store is not None
        )
        return [
            ActiveAd(
                id=ad.id,
                store=(
                    self.stores.summarize(ad.store, ratings.get(ad.store.id, NO_REVIEWS))
                    if ad.store is not None
                    else None
                ),
                start_date=ad.start_date,
                end_date=ad.end_date,
                approved_at=ad.approved_at,
            )
            for ad in ads
        ]
