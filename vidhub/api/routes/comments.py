"""
VidHub API — Comment Routes
"""
from __future__ import annotations

from fastapi import APIRouter, Depends, Query
from sqlalchemy.ext.asyncio import AsyncSession

from vidhub.api.deps import get_current_actor
from vidhub.core.config import get_settings
from vidhub.core.database import get_db
from vidhub.models.models import User
from vidhub.schemas.schemas import (
    ApiResponse, CommentSchema, CommentWithOwner, ContentRequest, EmptyData, Page, page_of,
)
from vidhub.services.comments.comment_service import comment_service

settings = get_settings()
router = APIRouter(prefix="/comments", tags=["Comments"])


@router.get("/{video_id}", response_model=ApiResponse[Page[CommentWithOwner]])
async def list_video_comments(
    video_id: str,
    page: int = Query(1, ge=1),
    limit: int = Query(settings.default_page_size, ge=1, le=settings.max_page_size),
    actor: User = Depends(get_current_actor),
    db: AsyncSession = Depends(get_db),
):
    """List comments for a video, newest first."""
    result = await comment_service.list_comments(db, actor.id, video_id, page=page, page_size=limit)
    return ApiResponse[Page[CommentWithOwner]](
        data=page_of(CommentWithOwner, result), message="Comments fetched successfully",
    )


@router.post("/{video_id}", response_model=ApiResponse[CommentSchema])
async def add_comment(
    video_id: str,
    body: ContentRequest,
    actor: User = Depends(get_current_actor),
    db: AsyncSession = Depends(get_db),
):
    comment = await comment_service.add_comment(db, actor.id, video_id, body.content)
    return ApiResponse[CommentSchema](data=CommentSchema.from_model(comment), message="Comment created successfully")


@router.patch("/c/{comment_id}", response_model=ApiResponse[CommentSchema])
async def update_comment(
    comment_id: str,
    body: ContentRequest,
    actor: User = Depends(get_current_actor),
    db: AsyncSession = Depends(get_db),
):
    comment = await comment_service.update_comment(db, actor.id, comment_id, body.content)
    return ApiResponse[CommentSchema](data=CommentSchema.from_model(comment), message="Comment updated successfully")


@router.delete("/c/{comment_id}", response_model=ApiResponse[EmptyData])
async def delete_comment(
    comment_id: str,
    actor: User = Depends(get_current_actor),
    db: AsyncSession = Depends(get_db),
):
    await comment_service.delete_comment(db, actor.id, comment_id)
    return ApiResponse[EmptyData](data=EmptyData(), message="Comment deleted successfully")
