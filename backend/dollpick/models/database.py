"""
Database plumbing: one async engine, one session factory, and the
``get_db`` dependency every router uses.

Sessions are opened without autocommit.  Each service method that
writes (``ReviewService.unlock``, ``FavoriteService.add_favorite``,
``StoreReportService.create_report`` and friends) commits its own unit
of work; ``get_db`` only cleans up.

Failures
--------
If the request raises while the session is open, ``get_db`` rolls the
session back before the exception reaches the app's handlers:

* ``IntegrityError`` (a foreign key to a user the auth gateway knows
  but we have never stored, a check constraint) is logged at WARNING.
  ``dollpick.main`` turns it into a 409.
* Any other ``SQLAlchemyError`` is logged at ERROR with a traceback.
* Everything else is rolled back silently and re-raised.
"""

from __future__ import annotations

import logging
from typing import AsyncIterator

from sqlalchemy.exc import IntegrityError, SQLAlchemyError
from sqlalchemy.ext.asyncio import (
    AsyncSession,
    async_sessionmaker,
    create_async_engine,
)
from sqlalchemy.orm import DeclarativeBase

from dollpick.config import get_settings

logger = logging.getLogger(__name__)
settings = get_settings()

engine = create_async_engine(
    settings.database_url,
    echo=settings.debug,
    pool_size=settings.db_pool_size,
    max_overflow=settings.db_max_overflow,
    pool_pre_ping=True,
)

# Presenters read relationships after commit, so keep loaded state.
async_session_factory = async_sessionmaker(
    engine,
    class_=AsyncSession,
    expire_on_commit=False,
)


class Base(DeclarativeBase):
    pass


async def get_db() -> AsyncIterator[AsyncSession]:
    session = async_session_factory()
    try:
        yield session
    except IntegrityError as exc:
        await session.rollback()
        logger.warning("Constraint violation, rolled back: %s", exc.orig)
        raise
    except SQLAlchemyError as exc:
        await session.rollback()
        logger.error("Database error, rolled back: %s", exc, exc_info=True)
        raise
    except Exception:
        await session.rollback()
        raise
    finally:
        await session.close()


async def init_models() -> None:
    """
    Create any missing DollPick tables (stores, reviews, the unlock
    ledger, favorites and user submissions).  Existing tables are left
    untouched; there are no migrations.
    """
    # Registers every table on Base.metadata.
    import dollpick.models.store  # noqa: F401

    async with engine.begin() as conn:
        await conn.run_sync(Base.metadata.create_all)
    logger.debug("Tables ensured: %s", ", ".join(sorted(Base.metadata.tables)))
