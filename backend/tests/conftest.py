"""
Shared fixtures for the DollPick test suite.

This conftest provides reusable mock row factories that behave like
the ORM objects the services and routers work with.
"""
from __future__ import annotations

import uuid
from datetime import date, datetime, timedelta, timezone
from unittest.mock import MagicMock

import pytest

# ---------------------------------------------------------------------------
# Sample data factories
# ---------------------------------------------------------------------------
SAMPLE_STORE_ID = 42
SAMPLE_USER_ID = "user-1"
OTHER_USER_ID = "user-2"
SAMPLE_REVIEW_ID = uuid.UUID("11111111-2222-3333-4444-555555555555")
BASE_TIME = datetime(2025, 1, 1, tzinfo=timezone.utc)


def make_user_row(
    *,
    id: str = SAMPLE_USER_ID,
    nickname: str | None = "catcher",
    avatar: str | None = "https://cdn.example.com/a.png",
    phone: str | None = "010-1234-5678",
) -> MagicMock:
    """Return a mock that behaves like a User ORM object."""
    user = MagicMock()
    user.id = id
    user.nickname = nickname
    user.avatar = avatar
    user.phone = phone
    return user


def make_store_row(
    *,
    id: int = SAMPLE_STORE_ID,
    name: str = "Doll Land",
    lot_address: str | None = "서울특별시 중구 명동 1-1",
    road_address: str | None = "서울특별시 중구 명동길 1",
    coord_x: str | None = "198000",
    coord_y: str | None = "450000",
    business_status: str | None = "영업/정상",
    game_machine_count: int | None = 30,
    facility_area: str | None = "120.5",
    phone: str | None = "02-123-4567",
) -> MagicMock:
    """Return a mock that behaves like a Store ORM object."""
    store = MagicMock()
    store.id = id
    store.name = name
    store.lot_address = lot_address
    store.road_address = road_address
    store.coord_x = coord_x
    store.coord_y = coord_y
    store.business_status = business_status
    store.game_machine_count = game_machine_count
    store.facility_area = facility_area
    store.phone = phone
    store.address = lot_address or road_address
    store.created_at = BASE_TIME
    return store


def make_review_row(
    *,
    id: uuid.UUID | None = None,
    store_id: int = SAMPLE_STORE_ID,
    user_id: str | None = None,
    user_name: str | None = "익명",
    user: MagicMock | None = None,
    rating: int = 5,
    content: str = "Great claws, fair prizes.",
    images: list[str] | None = None,
    tags: list[str] | None = None,
    doll_count: int = 2,
    spent_amount: int = 10000,
    doll_images: list[str] | None = None,
    created_at: datetime | None = None,
) -> MagicMock:
    """Return a mock that behaves like a Review ORM object."""
    review = MagicMock()
    review.id = id or uuid.uuid4()
    review.store_id = store_id
    review.user_id = user_id
    review.user_name = user_name
    review.user = user
    review.rating = rating
    review.content = content
    review.images = ["https://cdn.example.com/r.jpg"] if images is None else images
    review.tags = ["friendly"] if tags is None else tags
    review.doll_count = doll_count
    review.spent_amount = spent_amount
    review.doll_images = ["https://cdn.example.com/d.jpg"] if doll_images is None else doll_images
    review.created_at = created_at or BASE_TIME
    review.updated_at = created_at or BASE_TIME
    return review


def make_review_page(count: int = 3, **kwargs) -> list[MagicMock]:
    """Reviews ordered newest first, as the LATEST sort returns them."""
    return [
        make_review_row(
            content=f"review {i}",
            created_at=BASE_TIME - timedelta(days=i),
            **kwargs,
        )
        for i in range(count)
    ]



def make_ad_row(
    *,
    id: uuid.UUID | None = None,
    user_id: str = SAMPLE_USER_ID,
    store: MagicMock | None = None,
    start_date: date = date(2025, 3, 1),
    end_date: date = date(2025, 3, 31),
    status: str = "pending",
    approved_at: datetime | None = None,
) -> MagicMock:
    """Return a mock that behaves like an AdRequest ORM object."""
    ad = MagicMock()
    ad.id = id or uuid.uuid4()
    ad.user_id = user_id
    ad.store = store
    ad.store_id = store.id if store is not None else None
    ad.start_date = start_date
    ad.end_date = end_date
    ad.owner_name = "Kim Owner"
    ad.owner_phone = "010-9876-5432"
    ad.business_license_url = "https://cdn.example.com/license.pdf"
    ad.id_card_url = None
    ad.status = status
    ad.admin_note = None
    ad.approved_at = approved_at
    ad.approved_by = "admin-1" if approved_at is not None else None
    ad.created_at = BASE_TIME
    return ad


def make_report_row(
    *,
    id: uuid.UUID | None = None,
    user_id: str = SAMPLE_USER_ID,
    store_name: str = "New Claw Zone",
    address: str = "서울특별시 마포구 양화로 1",
    status: str = "pending",
    approved_store: MagicMock | None = None,
) -> MagicMock:
    """Return a mock that behaves like a StoreReport ORM object."""
    report = MagicMock()
    report.id = id or uuid.uuid4()
    report.user_id = user_id
    report.store_name = store_name
    report.address = address
    report.phone = None
    report.description = "Opened last week next to the station"
    report.latitude = 37.556
    report.longitude = 126.923
    report.status = status
    report.approved_store = approved_store
    report.created_at = BASE_TIME
    report.updated_at = BASE_TIME
    return report


def make_open_alert_row(
    *,
    id: uuid.UUID | None = None,
    user_id: str = SAMPLE_USER_ID,
    contacted: bool = False,
) -> MagicMock:
    """Return a mock that behaves like an OpenAlert ORM object."""
    alert = MagicMock()
    alert.id = id or uuid.uuid4()
    alert.user_id = user_id
    alert.store_name = "Doll Land Hongdae"
    alert.name = "Lee"
    alert.phone = "010-1111-2222"
    alert.contacted = contacted
    alert.created_at = BASE_TIME
    return alert
