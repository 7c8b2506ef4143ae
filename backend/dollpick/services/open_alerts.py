"""
Open Alert Service
==================
Each user may leave one contact request for a store they want to see
open.  The single-submission rule is enforced by the
``uq_open_alerts_user`` constraint, not by a read-then-write check.
"""

from __future__ import annotations

import logging
import uuid

from sqlalchemy import select
from sqlalchemy.dialects.postgresql import insert as pg_insert
from sqlalchemy.ext.asyncio import AsyncSession

from dollpick.models.store import OpenAlert
from dollpick.schemas.submission import OpenAlertCreate, OpenAlertOut, OpenAlertStatus

logger = logging.getLogger(__name__)


class OpenAlertService:
    def __init__(self, session: AsyncSession) -> None:
        self.session = session

    async def get_alert(self, user_id: str) -> OpenAlert | None:
        stmt = select(OpenAlert).where(OpenAlert.user_id == user_id)
        result = await self.session.execute(stmt)
        return result.scalar_one_or_none()

    async def status(self, user_id: str) -> OpenAlertStatus:
        alert = await self.get_alert(user_id)
        return OpenAlertStatus(
            has_submitted=alert is not None,
            alert=OpenAlertOut.model_validate(alert) if alert is not None else None,
        )

    async def create_alert(self, user_id: str, payload: OpenAlertCreate) -> uuid.UUID | None:
        """
        Store the user's alert.  Returns the new id, or None when the
        user has already submitted one.
        """
        stmt = (
            pg_insert(OpenAlert)
            .values(
                id=uuid.uuid4(),
                user_id=user_id,
                store_name=payload.store_name,
                name=payload.name,
                phone=payload.phone,
                contacted=False,
            )
            .on_conflict_do_nothing(constraint="uq_open_alerts_user")
            .returning(OpenAlert.id)
        )
        result = await self.session.execute(stmt)
        alert_id = result.scalar_one_or_none()
        await self.session.commit()
        if alert_id is None:
            logger.info("User %s already has an open alert", user_id)
        else:
            logger.info("User %s asked to be told when %r opens", user_id, payload.store_name)
        return alert_id
