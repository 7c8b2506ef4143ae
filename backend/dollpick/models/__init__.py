"""Models subpackage."""

from dollpick.models.database import Base, engine, async_session_factory, get_db, init_models
from dollpick.models.store import (
    AdRequest,
    Favorite,
    OpenAlert,
    Review,
    ReviewUnlock,
    Store,
    StoreReport,
    User,
)

__all__ = [
    "Base",
    "engine",
    "async_session_factory",
    "get_db",
    "init_models",
    "AdRequest",
    "Favorite",
    "OpenAlert",
    "StoreReport",
    "Review",
    "ReviewUnlock",
    "Store",
    "User",
]
