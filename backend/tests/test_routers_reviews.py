"""
Tests for dollpick.routers.reviews — gated pages, CRUD, stats, unlocks.
"""
from __future__ import annotations

from datetime import datetime, timezone
from unittest.mock import AsyncMock, MagicMock, patch

import pytest
from fastapi import FastAPI
from httpx import ASGITransport, AsyncClient

from dollpick.routers.reviews import router
from dollpick.schemas.review import ReviewStats, TopCatcher, UnlockResult
from dollpick.services.review_gate import BLINDED_CONTENT
from tests.conftest import (
    OTHER_USER_ID,
    SAMPLE_REVIEW_ID,
    SAMPLE_STORE_ID,
    SAMPLE_USER_ID,
    make_review_page,
    make_review_row,
    make_store_row,
)

AUTH = {"X-User-Id": SAMPLE_USER_ID}


def _create_test_app() -> FastAPI:
    app = FastAPI()
    app.include_router(router, prefix="/api")
    return app


@pytest.fixture()
def app():
    return _create_test_app()


@pytest.fixture()
def mock_db():
    db = AsyncMock()
    db.add = MagicMock()
    return db


@pytest.fixture()
def client(app, mock_db):
    from dollpick.models.database import get_db

    async def override_get_db():
        yield mock_db

    app.dependency_overrides[get_db] = override_get_db
    transport = ASGITransport(app=app)
    return AsyncClient(transport=transport, base_url="http://testserver")


def _scalars(rows):
    result = MagicMock()
    result.scalars.return_value.all.return_value = rows
    return result


def _scalar_one(value):
    result = MagicMock()
    result.scalar_one.return_value = value
    return result


def _scalar_one_or_none(value):
    result = MagicMock()
    result.scalar_one_or_none.return_value = value
    return result


def _unlock_row():
    record = MagicMock()
    record.unlocked_at = datetime(2025, 2, 1, tzinfo=timezone.utc)
    return record


# ═══════════════════════════════════════════════════════════════════
# GET /reviews/store/{store_id}
# ═══════════════════════════════════════════════════════════════════
class TestListStoreReviews:
    @pytest.mark.asyncio
    async def test_anonymous_sees_one_free_review(self, client, mock_db):
        mock_db.execute.side_effect = [
            _scalars(make_review_page(3)),
            _scalar_one(3),
        ]
        resp = await client.get(f"/api/reviews/store/{SAMPLE_STORE_ID}")
        assert resp.status_code == 200
        body = resp.json()
        assert body["is_unlocked"] is False
        reviews = body["reviews"]
        assert [r["is_blinded"] for r in reviews] == [False, True, True]
        assert reviews[0]["content"] == "review 0"
        assert reviews[1]["content"] == BLINDED_CONTENT
        assert reviews[2]["images"] == []
        assert body["pagination"] == {
            "total": 3, "limit": 20, "offset": 0, "has_more": False,
        }
        # Anonymous viewers never hit the unlock ledger.
        assert mock_db.execute.await_count == 2

    @pytest.mark.asyncio
    async def test_unlocked_viewer_sees_everything(self, client, mock_db):
        mock_db.execute.side_effect = [
            _scalar_one_or_none(_unlock_row()),
            _scalars(make_review_page(3)),
            _scalar_one(3),
        ]
        resp = await client.get(
            f"/api/reviews/store/{SAMPLE_STORE_ID}", headers=AUTH
        )
        assert resp.status_code == 200
        body = resp.json()
        assert body["is_unlocked"] is True
        assert all(r["is_blinded"] is False for r in body["reviews"])

    @pytest.mark.asyncio
    async def test_logged_in_without_unlock_is_gated(self, client, mock_db):
        mock_db.execute.side_effect = [
            _scalar_one_or_none(None),
            _scalars(make_review_page(2, user_id=SAMPLE_USER_ID)),
            _scalar_one(2),
        ]
        resp = await client.get(
            f"/api/reviews/store/{SAMPLE_STORE_ID}", headers=AUTH
        )
        reviews = resp.json()["reviews"]
        assert reviews[1]["is_blinded"] is True
        assert reviews[1]["is_owner"] is True

    @pytest.mark.asyncio
    async def test_has_more(self, client, mock_db):
        mock_db.execute.side_effect = [
            _scalars(make_review_page(2)),
            _scalar_one(5),
        ]
        resp = await client.get(
            f"/api/reviews/store/{SAMPLE_STORE_ID}",
            params={"limit": 2, "offset": 2, "sort_by": "rating_high"},
        )
        assert resp.json()["pagination"]["has_more"] is True

    @pytest.mark.asyncio
    async def test_empty_page(self, client, mock_db):
        mock_db.execute.side_effect = [_scalars([]), _scalar_one(0)]
        resp = await client.get(f"/api/reviews/store/{SAMPLE_STORE_ID}")
        assert resp.status_code == 200
        assert resp.json()["reviews"] == []

    @pytest.mark.asyncio
    @pytest.mark.parametrize("params", [
        {"limit": 0},
        {"limit": 101},
        {"offset": -1},
        {"sort_by": "random"},
    ])
    async def test_invalid_query(self, client, params):
        resp = await client.get(
            f"/api/reviews/store/{SAMPLE_STORE_ID}", params=params
        )
        assert resp.status_code == 422



# ═══════════════════════════════════════════════════════════════════
# Viewer dependencies
# ═══════════════════════════════════════════════════════════════════
class TestViewerDeps:
    @pytest.mark.asyncio
    @pytest.mark.parametrize("header", [None, "", "   "])
    async def test_missing_or_blank_header_is_anonymous(self, header):
        from dollpick.routers.deps import get_viewer

        viewer = await get_viewer(x_user_id=header)
        assert viewer.is_authenticated is False

    @pytest.mark.asyncio
    async def test_header_is_stripped(self):
        from dollpick.routers.deps import get_viewer

        viewer = await get_viewer(x_user_id=f" {SAMPLE_USER_ID} ")
        assert viewer.user_id == SAMPLE_USER_ID

    @pytest.mark.asyncio
    async def test_require_viewer_rejects_anonymous(self):
        from fastapi import HTTPException

        from dollpick.routers.deps import require_viewer
        from dollpick.services.review_gate import ANONYMOUS

        with pytest.raises(HTTPException) as exc_info:
            await require_viewer(viewer=ANONYMOUS)
        assert exc_info.value.status_code == 401


# ═══════════════════════════════════════════════════════════════════
# POST /reviews
# ═══════════════════════════════════════════════════════════════════
class TestCreateReview:
    PAYLOAD = {
        "store_id": SAMPLE_STORE_ID,
        "rating": 4,
        "content": "Claws were strong today",
        "doll_count": 1,
        "spent_amount": 5000,
    }

    @pytest.mark.asyncio
    async def test_store_not_found(self, client, mock_db):
        mock_db.get.return_value = None
        resp = await client.post("/api/reviews", json=self.PAYLOAD)
        assert resp.status_code == 404

    @pytest.mark.asyncio
    @patch("dollpick.routers.reviews.ReviewService")
    async def test_created_by_logged_in_user(self, mock_svc_cls, client, mock_db):
        mock_db.get.return_value = make_store_row()
        mock_svc = MagicMock()
        mock_svc.create_review = AsyncMock(
            return_value=make_review_row(user_id=SAMPLE_USER_ID, rating=4)
        )
        mock_svc_cls.return_value = mock_svc

        resp = await client.post("/api/reviews", json=self.PAYLOAD, headers=AUTH)
        assert resp.status_code == 201
        body = resp.json()
        assert body["is_owner"] is True
        assert body["is_blinded"] is False
        assert body["rating"] == 4
        viewer = mock_svc.create_review.await_args.args[1]
        assert viewer.user_id == SAMPLE_USER_ID

    @pytest.mark.asyncio
    async def test_anonymous_review_defaults_name(self, client, mock_db):
        mock_db.get.return_value = make_store_row()

        async def fake_refresh(review):
            review.id = SAMPLE_REVIEW_ID

        mock_db.refresh.side_effect = fake_refresh
        resp = await client.post("/api/reviews", json=self.PAYLOAD)
        assert resp.status_code == 201
        body = resp.json()
        assert body["user_name"] == "익명"
        assert body["is_owner"] is False
        mock_db.commit.assert_awaited_once()

    @pytest.mark.asyncio
    @pytest.mark.parametrize("override", [
        {"rating": 0},
        {"rating": 6},
        {"content": ""},
        {"doll_count": -1},
        {"doll_images": ["a", "b", "c", "d", "e"]},
    ])
    async def test_validation(self, client, override):
        resp = await client.post("/api/reviews", json={**self.PAYLOAD, **override})
        assert resp.status_code == 422


# ═══════════════════════════════════════════════════════════════════
# PUT / DELETE /reviews/{review_id}
# ═══════════════════════════════════════════════════════════════════
class TestModifyReview:
    @pytest.mark.asyncio
    async def test_update_requires_login(self, client):
        resp = await client.put(
            f"/api/reviews/{SAMPLE_REVIEW_ID}", json={"rating": 3}
        )
        assert resp.status_code == 401

    @pytest.mark.asyncio
    async def test_update_not_found(self, client, mock_db):
        mock_db.get.return_value = None
        resp = await client.put(
            f"/api/reviews/{SAMPLE_REVIEW_ID}", json={"rating": 3}, headers=AUTH
        )
        assert resp.status_code == 404

    @pytest.mark.asyncio
    async def test_update_by_other_user_forbidden(self, client, mock_db):
        mock_db.get.return_value = make_review_row(user_id=OTHER_USER_ID)
        resp = await client.put(
            f"/api/reviews/{SAMPLE_REVIEW_ID}", json={"rating": 3}, headers=AUTH
        )
        assert resp.status_code == 403
        mock_db.commit.assert_not_awaited()

    @pytest.mark.asyncio
    async def test_update_by_owner(self, client, mock_db):
        review = make_review_row(id=SAMPLE_REVIEW_ID, user_id=SAMPLE_USER_ID)
        mock_db.get.return_value = review
        resp = await client.put(
            f"/api/reviews/{SAMPLE_REVIEW_ID}",
            json={"rating": 3, "content": "Edited"},
            headers=AUTH,
        )
        assert resp.status_code == 200
        body = resp.json()
        assert body["rating"] == 3
        assert body["content"] == "Edited"
        assert body["is_owner"] is True

    @pytest.mark.asyncio
    async def test_delete_by_owner(self, client, mock_db):
        review = make_review_row(user_id=SAMPLE_USER_ID)
        mock_db.get.return_value = review
        resp = await client.delete(f"/api/reviews/{SAMPLE_REVIEW_ID}", headers=AUTH)
        assert resp.status_code == 204
        mock_db.delete.assert_awaited_once_with(review)

    @pytest.mark.asyncio
    async def test_delete_by_other_user_forbidden(self, client, mock_db):
        mock_db.get.return_value = make_review_row(user_id=OTHER_USER_ID)
        resp = await client.delete(f"/api/reviews/{SAMPLE_REVIEW_ID}", headers=AUTH)
        assert resp.status_code == 403
        mock_db.delete.assert_not_awaited()

    @pytest.mark.asyncio
    async def test_delete_anonymous_review_forbidden(self, client, mock_db):
        mock_db.get.return_value = make_review_row(user_id=None)
        resp = await client.delete(f"/api/reviews/{SAMPLE_REVIEW_ID}", headers=AUTH)
        assert resp.status_code == 403

    @pytest.mark.asyncio
    async def test_invalid_review_id(self, client):
        resp = await client.delete("/api/reviews/not-a-uuid", headers=AUTH)
        assert resp.status_code == 422


# ═══════════════════════════════════════════════════════════════════
# Stats and leaderboard
# ═══════════════════════════════════════════════════════════════════
class TestStats:
    @pytest.mark.asyncio
    @patch("dollpick.routers.reviews.ReviewService")
    async def test_stats(self, mock_svc_cls, client):
        mock_svc = MagicMock()
        mock_svc.get_stats = AsyncMock(return_value=ReviewStats(
            store_id=SAMPLE_STORE_ID,
            total_reviews=2,
            average_rating=4.5,
            rating_distribution={1: 0, 2: 0, 3: 0, 4: 1, 5: 1},
        ))
        mock_svc_cls.return_value = mock_svc

        resp = await client.get(f"/api/reviews/stats/{SAMPLE_STORE_ID}")
        assert resp.status_code == 200
        body = resp.json()
        assert body["average_rating"] == 4.5
        assert body["rating_distribution"]["5"] == 1

    @pytest.mark.asyncio
    @patch("dollpick.routers.reviews.ReviewService")
    async def test_top_catchers(self, mock_svc_cls, client):
        mock_svc = MagicMock()
        mock_svc.top_catchers = AsyncMock(return_value=[
            TopCatcher(rank=1, masked_phone="56**", nickname="pro",
                       total_doll_count=12, total_spent_amount=80000),
        ])
        mock_svc_cls.return_value = mock_svc

        resp = await client.get("/api/reviews/top-catchers")
        assert resp.status_code == 200
        assert resp.json()[0]["masked_phone"] == "56**"


# ═══════════════════════════════════════════════════════════════════
# Unlock ledger
# ═══════════════════════════════════════════════════════════════════
class TestUnlock:
    @pytest.mark.asyncio
    async def test_status_requires_login(self, client):
        resp = await client.get(f"/api/reviews/unlock-status/{SAMPLE_STORE_ID}")
        assert resp.status_code == 401

    @pytest.mark.asyncio
    async def test_status(self, client, mock_db):
        mock_db.execute.return_value = _scalar_one_or_none(None)
        resp = await client.get(
            f"/api/reviews/unlock-status/{SAMPLE_STORE_ID}", headers=AUTH
        )
        assert resp.status_code == 200
        assert resp.json()["is_unlocked"] is False

    @pytest.mark.asyncio
    async def test_unlock_requires_login(self, client):
        resp = await client.post(f"/api/reviews/unlock/{SAMPLE_STORE_ID}")
        assert resp.status_code == 401

    @pytest.mark.asyncio
    async def test_unlock_store_not_found(self, client, mock_db):
        mock_db.get.return_value = None
        resp = await client.post(
            f"/api/reviews/unlock/{SAMPLE_STORE_ID}", headers=AUTH
        )
        assert resp.status_code == 404

    @pytest.mark.asyncio
    @patch("dollpick.routers.reviews.ReviewService")
    async def test_unlock_twice_is_success(self, mock_svc_cls, client, mock_db):
        mock_db.get.return_value = make_store_row()
        mock_svc = MagicMock()
        mock_svc.unlock = AsyncMock(return_value=UnlockResult(
            store_id=SAMPLE_STORE_ID,
            is_unlocked=True,
            unlocked_at=datetime(2025, 2, 1, tzinfo=timezone.utc),
            already_unlocked=True,
        ))
        mock_svc_cls.return_value = mock_svc

        resp = await client.post(
            f"/api/reviews/unlock/{SAMPLE_STORE_ID}", headers=AUTH
        )
        assert resp.status_code == 200
        body = resp.json()
        assert body["is_unlocked"] is True
        assert body["already_unlocked"] is True
        mock_svc.unlock.assert_awaited_once_with(SAMPLE_USER_ID, SAMPLE_STORE_ID)
