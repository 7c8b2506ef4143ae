"""Services subpackage — business logic and data access."""

from dollpick.services.ads import AdService
from dollpick.services.favorites import FavoriteService
from dollpick.services.open_alerts import OpenAlertService
from dollpick.services.review_gate import ANONYMOUS, Viewer, gate, resolve_unlock
from dollpick.services.reviews import ReviewService, mask_phone
from dollpick.services.store_reports import StoreReportService
from dollpick.services.stores import StoreService

__all__ = [
    "ANONYMOUS",
    "AdService",
    "FavoriteService",
    "OpenAlertService",
    "ReviewService",
    "StoreReportService",
    "StoreService",
    "Viewer",
    "gate",
    "mask_phone",
    "resolve_unlock",
]
