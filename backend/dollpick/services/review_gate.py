"""
Review Visibility Gate
======================
Decides how much of a store's review page a viewer may see.

Unless the viewer has unlocked the store (by watching a reward ad),
only the first review of the page is shown in full; every later
review is *blinded*: its text is replaced by a call-to-action and its
media are dropped, while the rating and author label stay visible.
Which review counts as "first" is whatever the caller sorted to the
top.

Everything here is pure and synchronous.  Resolving whether the
viewer holds an unlock record is a storage concern and is injected
as an async lookup (see ``resolve_unlock``).
"""

from __future__ import annotations

from dataclasses import dataclass
from typing import Any, Awaitable, Callable, Sequence

from dollpick.schemas.review import ReviewOut

BLINDED_CONTENT = "광고를 시청하면 후기를 볼 수 있어요"
ANONYMOUS_NAME = "익명"

UnlockLookup = Callable[[str, int], Awaitable[bool]]


@dataclass(frozen=True, slots=True)
class Viewer:
    """The person requesting reviews; ``user_id`` is None when anonymous."""

    user_id: str | None = None

    @property
    def is_authenticated(self) -> bool:
        return self.user_id is not None

    def owns(self, review: Any) -> bool:
        return self.is_authenticated and review.user_id == self.user_id


ANONYMOUS = Viewer()


async def resolve_unlock(viewer: Viewer, store_id: int, lookup: UnlockLookup) -> bool:
    """Anonymous viewers can never hold an unlock record."""
    if not viewer.is_authenticated:
        return False
    return await lookup(viewer.user_id, store_id)


def author_name(review: Any) -> str | None:
    user = getattr(review, "user", None)
    if user is not None and user.nickname:
        return user.nickname
    return review.user_name


def present_review(review: Any, viewer: Viewer) -> ReviewOut:
    """Full, unredacted view of a review ORM row."""
    user = getattr(review, "user", None)
    return ReviewOut(
        id=review.id,
        store_id=review.store_id,
        rating=review.rating,
        content=review.content,
        images=list(review.images or []),
        tags=list(review.tags or []),
        doll_count=review.doll_count or 0,
        spent_amount=review.spent_amount or 0,
        doll_images=list(review.doll_images or []),
        user_name=author_name(review),
        user_avatar=user.avatar if user is not None else None,
        is_owner=viewer.owns(review),
        created_at=review.created_at,
        updated_at=review.updated_at,
    )


def blind(review: ReviewOut) -> ReviewOut:
    """Redact text and media; rating, author and ownership survive."""
    return review.model_copy(
        update={
            "content": BLINDED_CONTENT,
            "images": [],
            "tags": [],
            "doll_images": [],
            "is_blinded": True,
        }
    )


def gate(reviews: Sequence[Any], viewer: Viewer, is_unlocked: bool) -> list[ReviewOut]:
    """
    Apply the unlock gate to an already-sorted page of reviews.

    Parameters
    ----------
    reviews : sequence of Review rows
        In display order.  Position 0 is always shown in full.
    viewer : Viewer
    is_unlocked : bool
        Whether ``viewer`` holds an unlock record for the store.

    Returns
    -------
    list[ReviewOut]
        Same length and order as ``reviews``.
    """
    gated = []
    for index, review in enumerate(reviews):
        out = present_review(review, viewer)
        if not is_unlocked and index > 0:
            out = blind(out)
        gated.append(out)
    return gated
