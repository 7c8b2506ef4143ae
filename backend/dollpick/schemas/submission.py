"""
Pydantic schemas for records users submit about stores: ad requests,
store reports, and open-store alerts.
"""

from __future__ import annotations

import uuid
from datetime import date, datetime

from pydantic import BaseModel, ConfigDict, Field, ValidationInfo, field_validator

from dollpick.schemas.store import StoreSummary

OPEN_ALERT_PHONE_PATTERN = r"^[0-9-]+$"


class StoreRef(BaseModel):
    """Just enough of a store to label a submission."""

    id: int
    name: str
    address: str | None = None


# ═══════════════════════════════════════════════════════════════════
# Ad requests
# ═══════════════════════════════════════════════════════════════════
class AdRequestCreate(BaseModel):
    model_config = ConfigDict(str_strip_whitespace=True)

    store_id: int | None = None
    start_date: date
    end_date: date
    owner_name: str = Field(min_length=1)
    owner_phone: str = Field(min_length=1)
    business_license_url: str | None = None
    id_card_url: str | None = None

    @field_validator("end_date")
    @classmethod
    def end_after_start(cls, v: date, info: ValidationInfo) -> date:
        start = info.data.get("start_date")
        if start is not None and v <= start:
            raise ValueError("end_date must be after start_date")
        return v


class AdRequestOut(BaseModel):
    id: uuid.UUID
    store: StoreRef | None = None
    start_date: date
    end_date: date
    owner_name: str
    owner_phone: str
    status: str
    admin_note: str | None = None
    created_at: datetime | None = None
    approved_at: datetime | None = None


class AdRequestDetail(AdRequestOut):
    business_license_url: str | None = None
    id_card_url: str | None = None
    approved_by: str | None = None


class ActiveAd(BaseModel):
    """An approved ad that is live today, with a map-ready store pin."""

    id: uuid.UUID
    store: StoreSummary | None = None
    start_date: date
    end_date: date
    approved_at: datetime | None = None


# ═══════════════════════════════════════════════════════════════════
# Store reports
# ═══════════════════════════════════════════════════════════════════
class StoreReportIn(BaseModel):
    """Body for both creating and editing a report."""

    model_config = ConfigDict(str_strip_whitespace=True)

    store_name: str = Field(min_length=1)
    address: str = Field(min_length=1)
    phone: str | None = None
    description: str | None = None
    latitude: float | None = Field(default=None, ge=-90, le=90)
    longitude: float | None = Field(default=None, ge=-180, le=180)

    @field_validator("phone", "description")
    @classmethod
    def blank_to_none(cls, v: str | None) -> str | None:
        return v or None


class StoreReportOut(BaseModel):
    id: uuid.UUID
    store_name: str
    address: str
    phone: str | None = None
    description: str | None = None
    latitude: float | None = None
    longitude: float | None = None
    status: str
    approved_store: StoreSummary | None = None
    created_at: datetime | None = None
    updated_at: datetime | None = None


# ═══════════════════════════════════════════════════════════════════
# Open-store alerts
# ═══════════════════════════════════════════════════════════════════
class OpenAlertCreate(BaseModel):
    model_config = ConfigDict(str_strip_whitespace=True)

    store_name: str = Field(min_length=1, max_length=100)
    name: str = Field(min_length=1, max_length=50)
    phone: str = Field(min_length=10, max_length=15, pattern=OPEN_ALERT_PHONE_PATTERN)


class OpenAlertOut(BaseModel):
    model_config = ConfigDict(from_attributes=True)

    id: uuid.UUID
    store_name: str
    name: str
    phone: str
    contacted: bool = False
    created_at: datetime | None = None


class OpenAlertStatus(BaseModel):
    has_submitted: bool
    alert: OpenAlertOut | None = None
