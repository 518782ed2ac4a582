"""
VidHub API — Video routes.
"""
from __future__ import annotations

from typing import Optional

from fastapi import APIRouter, Depends, File, Form, Query, UploadFile
from sqlalchemy.ext.asyncio import AsyncSession

from vidhub.api.deps import get_current_actor, get_uploader
from vidhub.core.config import get_settings
from vidhub.core.database import get_db
from vidhub.core.errors import require_text
from vidhub.models.models import User
from vidhub.schemas.schemas import (
    ApiResponse, EmptyData, Page, VideoDetail, VideoSchema, VideoSummary, page_of,
)
from vidhub.services.media.upload_service import MediaUploader, discard_uploads, store_upload
from vidhub.services.videos.video_service import video_service

settings = get_settings()
router = APIRouter(prefix="/videos", tags=["Videos"])


@router.get("", response_model=ApiResponse[Page[VideoSummary]])
async def list_videos(
    page: int = Query(1, ge=1),
    limit: int = Query(settings.default_page_size, ge=1, le=settings.max_page_size),
    query: Optional[str] = None,
    sort_by: Optional[str] = Query(None, alias="sortBy"),
    sort_type: Optional[str] = Query(None, alias="sortType"),
    user_id: Optional[str] = Query(None, alias="userId"),
    actor: User = Depends(get_current_actor),
    db: AsyncSession = Depends(get_db),
):
    """List videos with search, sorting and pagination."""
    result = await video_service.list_videos(
        db, actor.id, page=page, page_size=limit, query=query,
        sort_by=sort_by, sort_type=sort_type, user_id=user_id,
    )
    return ApiResponse[Page[VideoSummary]](data=page_of(VideoSummary, result), message="Fetched videos successfully")


@router.post("", response_model=ApiResponse[VideoSchema])
async def publish_video(
    title: Optional[str] = Form(None),
    description: Optional[str] = Form(None),
    video_file: Optional[UploadFile] = File(None, alias="videoFile"),
    thumbnail: Optional[UploadFile] = File(None),
    actor: User = Depends(get_current_actor),
    uploader: MediaUploader = Depends(get_uploader),
    db: AsyncSession = Depends(get_db),
):
    """Upload a video (and optional thumbnail) and publish it."""
    title = require_text(title, "title")
    video_url = await store_upload(video_file, uploader, "videos", "Video file")
    uploaded = [video_url]
    try:
        thumbnail_url = None
        if thumbnail is not None and thumbnail.filename:
            thumbnail_url = await store_upload(thumbnail, uploader, "thumbnails", "Thumbnail")
            uploaded.append(thumbnail_url)
        video = await video_service.publish(db, actor.id, title, description, video_url, thumbnail_url)
    except Exception:
        await discard_uploads(uploader, uploaded)
        raise
    return ApiResponse[VideoSchema](data=VideoSchema.from_model(video), message="Video published successfully")


@router.get("/{video_id}", response_model=ApiResponse[VideoDetail])
async def get_video(
    video_id: str,
    actor: User = Depends(get_current_actor),
    db: AsyncSession = Depends(get_db),
):
    video = await video_service.get_video(db, actor.id, video_id)
    return ApiResponse[VideoDetail](data=VideoDetail.model_validate(video), message="Video fetched successfully")


@router.patch("/{video_id}", response_model=ApiResponse[VideoSchema])
async def update_video(
    video_id: str,
    title: Optional[str] = Form(None),
    description: Optional[str] = Form(None),
    thumbnail: Optional[UploadFile] = File(None),
    actor: User = Depends(get_current_actor),
    uploader: MediaUploader = Depends(get_uploader),
    db: AsyncSession = Depends(get_db),
):
    """Update title, description and/or thumbnail."""
    # Ownership and fields are checked before anything reaches the bucket
    current = await video_service.require_owned(db, actor.id, video_id)
    if title is not None:
        require_text(title, "title")
    previous_thumbnail = current.thumbnail

    thumbnail_url = None
    if thumbnail is not None and thumbnail.filename:
        thumbnail_url = await store_upload(thumbnail, uploader, "thumbnails", "Thumbnail")
    try:
        video = await video_service.update_video(db, actor.id, video_id, title, description, thumbnail_url)
    except Exception:
        if thumbnail_url:
            await discard_uploads(uploader, [thumbnail_url])
        raise
    if thumbnail_url and previous_thumbnail:
        await discard_uploads(uploader, [previous_thumbnail])
    return ApiResponse[VideoSchema](data=VideoSchema.from_model(video), message="Video details updated successfully")


@router.delete("/{video_id}", response_model=ApiResponse[EmptyData])
async def delete_video(
    video_id: str,
    actor: User = Depends(get_current_actor),
    db: AsyncSession = Depends(get_db),
):
    await video_service.delete_video(db, actor.id, video_id)
    return ApiResponse[EmptyData](data=EmptyData(), message="Video deleted successfully")


@router.patch("/toggle/publish/{video_id}", response_model=ApiResponse[VideoSchema])
async def toggle_publish_status(
    video_id: str,
    actor: User = Depends(get_current_actor),
    db: AsyncSession = Depends(get_db),
):
    video = await video_service.toggle_publish(db, actor.id, video_id)
    message = "Video published" if video.is_published else "Video unpublished"
    return ApiResponse[VideoSchema](data=VideoSchema.from_model(video), message=message)
