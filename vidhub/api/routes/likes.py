"""
VidHub API — Like routes.
"""
from __future__ import annotations

from fastapi import APIRouter, Depends, Query
from sqlalchemy.ext.asyncio import AsyncSession

from vidhub.api.deps import get_current_actor
from vidhub.core.config import get_settings
from vidhub.core.database import get_db
from vidhub.models.models import RelationKind, User
from vidhub.schemas.schemas import ApiResponse, LikedVideo, Page, ToggleState, page_of
from vidhub.services.likes.like_service import like_service

settings = get_settings()
router = APIRouter(prefix="/likes", tags=["Likes"])


async def _toggle(db: AsyncSession, actor: User, target_id: str, kind: RelationKind, noun: str):
    result = await like_service.toggle(db, actor.id, target_id, kind)
    message = f"{noun} liked successfully" if result.is_active else f"{noun} unliked successfully"
    return ApiResponse[ToggleState](data=ToggleState(is_active=result.is_active), message=message)


@router.post("/toggle/v/{video_id}", response_model=ApiResponse[ToggleState])
async def toggle_video_like(
    video_id: str,
    actor: User = Depends(get_current_actor),
    db: AsyncSession = Depends(get_db),
):
    return await _toggle(db, actor, video_id, RelationKind.VIDEO, "Video")


@router.post("/toggle/c/{comment_id}", response_model=ApiResponse[ToggleState])
async def toggle_comment_like(
    comment_id: str,
    actor: User = Depends(get_current_actor),
    db: AsyncSession = Depends(get_db),
):
    return await _toggle(db, actor, comment_id, RelationKind.COMMENT, "Comment")


@router.post("/toggle/t/{tweet_id}", response_model=ApiResponse[ToggleState])
async def toggle_tweet_like(
    tweet_id: str,
    actor: User = Depends(get_current_actor),
    db: AsyncSession = Depends(get_db),
):
    return await _toggle(db, actor, tweet_id, RelationKind.TWEET, "Tweet")


@router.get("/videos", response_model=ApiResponse[Page[LikedVideo]])
async def get_liked_videos(
    page: int = Query(1, ge=1),
    limit: int = Query(settings.default_page_size, ge=1, le=settings.max_page_size),
    actor: User = Depends(get_current_actor),
    db: AsyncSession = Depends(get_db),
):
    """Videos liked by the current user."""
    result = await like_service.liked_videos(db, actor.id, page=page, page_size=limit)
    return ApiResponse[Page[LikedVideo]](data=page_of(LikedVideo, result), message="Liked videos fetched successfully")
