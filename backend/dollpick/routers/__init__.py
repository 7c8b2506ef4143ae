"""Routers subpackage — HTTP layer for all API endpoints."""

from dollpick.routers import ads, favorites, open_alerts, reviews, store_reports, stores

__all__ = ["ads", "favorites", "open_alerts", "reviews", "store_reports", "stores"]
