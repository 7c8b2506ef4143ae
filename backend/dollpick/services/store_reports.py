"""
Store Report Service
====================
Users tip us off about arcades the registry does not list yet.  A
report stays editable while it is ``pending``; once an admin picks it
up it is read-only for the submitter.
"""

from __future__ import annotations

import logging
import uuid

from sqlalchemy import select
from sqlalchemy.ext.asyncio import AsyncSession

from dollpick.models.store import StoreReport
from dollpick.schemas.submission import StoreReportIn, StoreReportOut
from dollpick.services.stores import NO_REVIEWS, StoreService

logger = logging.getLogger(__name__)

STATUS_PENDING = "pending"
STATUS_REJECTED = "rejected"


class StoreReportService:
    def __init__(self, session: AsyncSession, stores: StoreService | None = None) -> None:
        self.session = session
        self.stores = stores or StoreService(session)

    def present(self, report: StoreReport) -> StoreReportOut:
        approved = report.approved_store
        return StoreReportOut(
            id=report.id,
            store_name=report.store_name,
            address=report.address,
            phone=report.phone,
            description=report.description,
            latitude=report.latitude,
            longitude=report.longitude,
            status=report.status,
            approved_store=(
                self.stores.summarize(approved, NO_REVIEWS) if approved is not None else None
            ),
            created_at=report.created_at,
            updated_at=report.updated_at,
        )

    async def list_reports(self, user_id: str) -> list[StoreReport]:
        """Most recent first."""
        stmt = (
            select(StoreReport)
            .where(StoreReport.user_id == user_id)
            .order_by(StoreReport.created_at.desc())
        )
        result = await self.session.execute(stmt)
        return list(result.scalars().all())

    async def get_report(self, user_id: str, report_id: uuid.UUID) -> StoreReport | None:
        """A report, only if ``user_id`` submitted it."""
        stmt = select(StoreReport).where(
            StoreReport.id == report_id,
            StoreReport.user_id == user_id,
        )
        result = await self.session.execute(stmt)
        return result.scalar_one_or_none()

    async def find_duplicate(
        self, user_id: str, store_name: str, address: str
    ) -> StoreReport | None:
        """An open (not rejected) report of the same store by the same user."""
        stmt = select(StoreReport).where(
            StoreReport.user_id == user_id,
            StoreReport.store_name == store_name,
            StoreReport.address == address,
            StoreReport.status != STATUS_REJECTED,
        )
        result = await self.session.execute(stmt)
        return result.scalars().first()

    async def create_report(self, user_id: str, payload: StoreReportIn) -> StoreReport:
        report = StoreReport(
            user_id=user_id,
            status=STATUS_PENDING,
            **payload.model_dump(),
        )
        self.session.add(report)
        await self.session.commit()
        await self.session.refresh(report)
        logger.info("User %s reported store %r", user_id, payload.store_name)
        return report

    async def update_report(self, report: StoreReport, payload: StoreReportIn) -> StoreReport:
        for field, value in payload.model_dump().items():
            setattr(report, field, value)
        await self.session.commit()
        await self.session.refresh(report)
        logger.info("Store report %s updated", report.id)
        return report

    async def delete_report(self, report: StoreReport) -> None:
        await self.session.delete(report)
        await self.session.commit()
        logger.info("Store report %s deleted", report.id)
