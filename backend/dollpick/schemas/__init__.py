"""Schemas subpackage — Pydantic request/response models."""

from dollpick.schemas.review import (
    Pagination,
    ReviewCreate,
    ReviewListResponse,
    ReviewOut,
    ReviewSortOrder,
    ReviewStats,
    ReviewUpdate,
    TopCatcher,
    UnlockResult,
    UnlockStatus,
)
from dollpick.schemas.store import (
    FavoriteListResponse,
    FavoriteOut,
    FavoriteStatus,
    StoreDetail,
    StoreSummary,
)
from dollpick.schemas.submission import (
    ActiveAd,
    AdRequestCreate,
    AdRequestDetail,
    AdRequestOut,
    OpenAlertCreate,
    OpenAlertOut,
    OpenAlertStatus,
    StoreRef,
    StoreReportIn,
    StoreReportOut,
)

__all__ = [
    "ActiveAd",
    "AdRequestCreate",
    "AdRequestDetail",
    "AdRequestOut",
    "FavoriteListResponse",
    "FavoriteOut",
    "FavoriteStatus",
    "OpenAlertCreate",
    "OpenAlertOut",
    "OpenAlertStatus",
    "Pagination",
    "ReviewCreate",
    "ReviewListResponse",
    "ReviewOut",
    "ReviewSortOrder",
    "ReviewStats",
    "ReviewUpdate",
    "StoreDetail",
    "StoreRef",
    "StoreReportIn",
    "StoreReportOut",
    "StoreSummary",
    "TopCatcher",
    "UnlockResult",
    "UnlockStatus",
]
