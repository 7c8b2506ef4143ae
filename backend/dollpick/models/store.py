"""
SQLAlchemy ORM models for Users, Stores, Reviews, the review unlock
ledger, Favorites, and the records users submit about stores (ad
requests, store reports, open-store alerts).

Schema:
    Store  1──*  Review  *──1  User (optional; anonymous reviews carry user_name)
    Store  1──*  ReviewUnlock  *──1  User
    Store  1──*  Favorite      *──1  User
    Store  0..1──*  AdRequest     *──1  User
    Store  0..1──*  StoreReport   *──1  User (approved_store, once matched)
    OpenAlert  1──1  User

Store coordinates are kept exactly as the business registry exports
them (EPSG:5174 metres, as text) and converted to WGS84 on every read
by ``dollpick.spatial.transform``.
"""

from __future__ import annotations

import uuid
from datetime import date, datetime

from sqlalchemy import (
    BigInteger,
    Boolean,
    CheckConstraint,
    Date,
    DateTime,
    Float,
    ForeignKey,
    Index,
    Integer,
    SmallInteger,
    Text,
    UniqueConstraint,
    func,
)
from sqlalchemy.dialects.postgresql import JSONB, UUID
from sqlalchemy.orm import Mapped, mapped_column, relationship

from dollpick.models.database import Base


# ── Users ─────────────────────────────────────────────────────────
class User(Base):
    __tablename__ = "users"

    # Issued by the upstream auth provider.
    id: Mapped[str] = mapped_column(Text, primary_key=True)
    nickname: Mapped[str | None] = mapped_column(Text, nullable=True)
    avatar: Mapped[str | None] = mapped_column(Text, nullable=True)
    phone: Mapped[str | None] = mapped_column(Text, nullable=True)
    created_at: Mapped[datetime] = mapped_column(
        DateTime(timezone=True), server_default=func.now()
    )


# ── Stores ────────────────────────────────────────────────────────
class Store(Base):
    """A game arcade from the public business registry."""
    __tablename__ = "stores"

    id: Mapped[int] = mapped_column(Integer, primary_key=True, autoincrement=True)
    name: Mapped[str] = mapped_column(Text, nullable=False)
    lot_address: Mapped[str | None] = mapped_column(Text, nullable=True)
    road_address: Mapped[str | None] = mapped_column(Text, nullable=True)
    # Raw EPSG:5174 easting / northing
    coord_x: Mapped[str | None] = mapped_column(Text, nullable=True)
    coord_y: Mapped[str | None] = mapped_column(Text, nullable=True)
    business_status: Mapped[str | None] = mapped_column(Text, nullable=True)
    game_machine_count: Mapped[int | None] = mapped_column(Integer, nullable=True)
    facility_area: Mapped[str | None] = mapped_column(Text, nullable=True)
    phone: Mapped[str | None] = mapped_column(Text, nullable=True)
    created_at: Mapped[datetime] = mapped_column(
        DateTime(timezone=True), server_default=func.now()
    )

    # Relationships
    reviews: Mapped[list["Review"]] = relationship(
        back_populates="store", cascade="all, delete-orphan"
    )

    @property
    def address(self) -> str | None:
        return self.lot_address or self.road_address


# ── Reviews ───────────────────────────────────────────────────────
class Review(Base):
    __tablename__ = "reviews"
    __table_args__ = (
        Index("idx_reviews_store_created", "store_id", "created_at"),
        Index("idx_reviews_user_id", "user_id"),
        CheckConstraint("rating >= 1 AND rating <= 5", name="ck_reviews_rating_range"),
        CheckConstraint("doll_count >= 0", name="ck_reviews_doll_count_non_negative"),
        CheckConstraint("spent_amount >= 0", name="ck_reviews_spent_amount_non_negative"),
    )

    id: Mapped[uuid.UUID] = mapped_column(
        UUID(as_uuid=True), primary_key=True, default=uuid.uuid4
    )
    store_id: Mapped[int] = mapped_column(
        Integer, ForeignKey("stores.id", ondelete="CASCADE"), nullable=False
    )
    user_id: Mapped[str | None] = mapped_column(
        Text, ForeignKey("users.id", ondelete="SET NULL"), nullable=True
    )
    # Display name for anonymous submitters
    user_name: Mapped[str | None] = mapped_column(Text, nullable=True)
    rating: Mapped[int] = mapped_column(SmallInteger, nullable=False)
    content: Mapped[str] = mapped_column(Text, nullable=False)
    images: Mapped[list] = mapped_column(JSONB, nullable=False, default=list)
    tags: Mapped[list] = mapped_column(JSONB, nullable=False, default=list)

    # Doll showcase
    doll_count: Mapped[int] = mapped_column(Integer, nullable=False, default=0)
    spent_amount: Mapped[int] = mapped_column(BigInteger, nullable=False, default=0)
    doll_images: Mapped[list] = mapped_column(JSONB, nullable=False, default=list)

    created_at: Mapped[datetime] = mapped_column(
        DateTime(timezone=True), server_default=func.now()
    )
    updated_at: Mapped[datetime] = mapped_column(
        DateTime(timezone=True), server_default=func.now(), onupdate=func.now()
    )

    # Relationships
    store: Mapped["Store"] = relationship(back_populates="reviews")
    user: Mapped["User | None"] = relationship(lazy="joined")


# ── Review unlock ledger (append-only) ────────────────────────────
class ReviewUnlock(Base):
    """
    "This user has unlocked every review of this store."  Rows are
    inserted once per (user, store) and never updated or deleted.
    """
    __tablename__ = "review_unlocks"
    __table_args__ = (
        UniqueConstraint("user_id", "store_id", name="uq_review_unlocks_user_store"),
    )

    id: Mapped[int] = mapped_column(BigInteger, primary_key=True, autoincrement=True)
    user_id: Mapped[str] = mapped_column(
        Text, ForeignKey("users.id", ondelete="CASCADE"), nullable=False
    )
    store_id: Mapped[int] = mapped_column(
        Integer, ForeignKey("stores.id", ondelete="CASCADE"), nullable=False
    )
    unlocked_at: Mapped[datetime] = mapped_column(
        DateTime(timezone=True), server_default=func.now()
    )


# ── Favorites ─────────────────────────────────────────────────────
class Favorite(Base):
    __tablename__ = "favorites"
    __table_args__ = (
        UniqueConstraint("user_id", "store_id", name="uq_favorites_user_store"),
    )

    id: Mapped[int] = mapped_column(BigInteger, primary_key=True, autoincrement=True)
    user_id: Mapped[str] = mapped_column(
        Text, ForeignKey("users.id", ondelete="CASCADE"), nullable=False
    )
    store_id: Mapped[int] = mapped_column(
        Integer, ForeignKey("stores.id", ondelete="CASCADE"), nullable=False
    )
    created_at: Mapped[datetime] = mapped_column(
        DateTime(timezone=True), server_default=func.now()
    )

    store: Mapped["Store"] = relationship()


# ── Advertising requests ──────────────────────────────────────────
class AdRequest(Base):
    """
    A store owner's request to feature a store in the app banner.

    Requests start ``pending``; an approved request is live for every
    day in ``[start_date, end_date]``.
    """
    __tablename__ = "ad_requests"
    __table_args__ = (
        Index("idx_ad_requests_user_created", "user_id", "created_at"),
        Index("idx_ad_requests_status_period", "status", "start_date", "end_date"),
        CheckConstraint(
            "status IN ('pending', 'approved', 'rejected')",
            name="ck_ad_requests_status",
        ),
        CheckConstraint("end_date > start_date", name="ck_ad_requests_period"),
    )

    id: Mapped[uuid.UUID] = mapped_column(
        UUID(as_uuid=True), primary_key=True, default=uuid.uuid4
    )
    user_id: Mapped[str] = mapped_column(
        Text, ForeignKey("users.id", ondelete="CASCADE"), nullable=False
    )
    store_id: Mapped[int | None] = mapped_column(
        Integer, ForeignKey("stores.id", ondelete="SET NULL"), nullable=True
    )
    start_date: Mapped[date] = mapped_column(Date, nullable=False)
    end_date: Mapped[date] = mapped_column(Date, nullable=False)
    owner_name: Mapped[str] = mapped_column(Text, nullable=False)
    owner_phone: Mapped[str] = mapped_column(Text, nullable=False)
    # Documents are uploaded elsewhere; only their URLs are kept.
    business_license_url: Mapped[str | None] = mapped_column(Text, nullable=True)
    id_card_url: Mapped[str | None] = mapped_column(Text, nullable=True)
    status: Mapped[str] = mapped_column(Text, nullable=False, default="pending")
    admin_note: Mapped[str | None] = mapped_column(Text, nullable=True)
    approved_at: Mapped[datetime | None] = mapped_column(
        DateTime(timezone=True), nullable=True
    )
    approved_by: Mapped[str | None] = mapped_column(Text, nullable=True)
    created_at: Mapped[datetime] = mapped_column(
        DateTime(timezone=True), server_default=func.now()
    )

    store: Mapped["Store | None"] = relationship(lazy="joined")


# ── User-submitted store reports ──────────────────────────────────
class StoreReport(Base):
    """A user tip about an arcade missing from the registry."""
    __tablename__ = "store_reports"
    __table_args__ = (
        Index("idx_store_reports_user_created", "user_id", "created_at"),
        CheckConstraint(
            "status IN ('pending', 'reviewing', 'approved', 'rejected')",
            name="ck_store_reports_status",
        ),
    )

    id: Mapped[uuid.UUID] = mapped_column(
        UUID(as_uuid=True), primary_key=True, default=uuid.uuid4
    )
    user_id: Mapped[str] = mapped_column(
        Text, ForeignKey("users.id", ondelete="CASCADE"), nullable=False
    )
    store_name: Mapped[str] = mapped_column(Text, nullable=False)
    address: Mapped[str] = mapped_column(Text, nullable=False)
    phone: Mapped[str | None] = mapped_column(Text, nullable=True)
    description: Mapped[str | None] = mapped_column(Text, nullable=True)
    # As dropped on the client map (WGS84), not registry coordinates
    latitude: Mapped[float | None] = mapped_column(Float, nullable=True)
    longitude: Mapped[float | None] = mapped_column(Float, nullable=True)
    status: Mapped[str] = mapped_column(Text, nullable=False, default="pending")
    approved_store_id: Mapped[int | None] = mapped_column(
        Integer, ForeignKey("stores.id", ondelete="SET NULL"), nullable=True
    )
    created_at: Mapped[datetime] = mapped_column(
        DateTime(timezone=True), server_default=func.now()
    )
    updated_at: Mapped[datetime] = mapped_column(
        DateTime(timezone=True), server_default=func.now(), onupdate=func.now()
    )

    approved_store: Mapped["Store | None"] = relationship(lazy="joined")


# ── Open-store alerts ─────────────────────────────────────────────
class OpenAlert(Base):
    """Sign-up to be contacted when a named store opens.  One per user."""
    __tablename__ = "open_alerts"
    __table_args__ = (
        UniqueConstraint("user_id", name="uq_open_alerts_user"),
    )

    id: Mapped[uuid.UUID] = mapped_column(
        UUID(as_uuid=True), primary_key=True, default=uuid.uuid4
    )
    user_id: Mapped[str] = mapped_column(
        Text, ForeignKey("users.id", ondelete="CASCADE"), nullable=False
    )
    store_name: Mapped[str] = mapped_column(Text, nullable=False)
    name: Mapped[str] = mapped_column(Text, nullable=False)
    phone: Mapped[str] = mapped_column(Text, nullable=False)
    contacted: Mapped[bool] = mapped_column(Boolean, nullable=False, default=False)
    contacted_at: Mapped[datetime | None] = mapped_column(
        DateTime(timezone=True), nullable=True
    )
    created_at: Mapped[datetime] = mapped_column(
        DateTime(timezone=True), server_default=func.now()
    )
