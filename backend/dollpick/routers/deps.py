"""
Shared router dependencies.

Token verification happens in the upstream auth gateway, which
forwards the verified user id in ``X-User-Id``.  Requests without it
are anonymous.
"""

from __future__ import annotations

from fastapi import Depends, Header, HTTPException

from dollpick.services.review_gate import ANONYMOUS, Viewer


async def get_viewer(x_user_id: str | None = Header(default=None)) -> Viewer:
    if x_user_id is None or not x_user_id.strip():
        return ANONYMOUS
    return Viewer(user_id=x_user_id.strip())


async def require_viewer(viewer: Viewer = Depends(get_viewer)) -> Viewer:
    if not viewer.is_authenticated:
        raise HTTPException(401, "Login required")
    return viewer
