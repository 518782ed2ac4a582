"""
VidHub API — Playlist routes.
"""
from __future__ import annotations

from fastapi import APIRouter, Depends, Query
from sqlalchemy.ext.asyncio import AsyncSession

from vidhub.api.deps import get_current_actor
from vidhub.core.config import get_settings
from vidhub.core.database import get_db
from vidhub.models.models import User
from vidhub.schemas.schemas import (
    ApiResponse, EmptyData, Page, PlaylistDetail, PlaylistRequest, PlaylistSchema, page_of,
)
from vidhub.services.playlists.playlist_service import playlist_service

settings = get_settings()
router = APIRouter(prefix="/playlist", tags=["Playlists"])


@router.post("", response_model=ApiResponse[PlaylistSchema])
async def create_playlist(
    body: PlaylistRequest,
    actor: User = Depends(get_current_actor),
    db: AsyncSession = Depends(get_db),
):
    playlist = await playlist_service.create_playlist(db, actor.id, body.name, body.description)
    return ApiResponse[PlaylistSchema](data=PlaylistSchema.from_model(playlist), message="Playlist created successfully")


@router.get("/user/{user_id}", response_model=ApiResponse[Page[PlaylistDetail]])
async def get_user_playlists(
    user_id: str,
    page: int = Query(1, ge=1),
    limit: int = Query(settings.default_page_size, ge=1, le=settings.max_page_size),
    actor: User = Depends(get_current_actor),
    db: AsyncSession = Depends(get_db),
):
    """A user's playlists with their ordered videos."""
    result = await playlist_service.user_playlists(db, actor.id, user_id, page=page, page_size=limit)
    return ApiResponse[Page[PlaylistDetail]](data=page_of(PlaylistDetail, result), message="Playlists fetched")


@router.get("/{playlist_id}", response_model=ApiResponse[PlaylistDetail])
async def get_playlist(
    playlist_id: str,
    actor: User = Depends(get_current_actor),
    db: AsyncSession = Depends(get_db),
):
    playlist = await playlist_service.get_playlist(db, actor.id, playlist_id)
    return ApiResponse[PlaylistDetail](data=PlaylistDetail.model_validate(playlist), message="Playlist fetched")


@router.patch("/add/{video_id}/{playlist_id}", response_model=ApiResponse[PlaylistSchema])
async def add_video_to_playlist(
    video_id: str,
    playlist_id: str,
    actor: User = Depends(get_current_actor),
    db: AsyncSession = Depends(get_db),
):
    playlist = await playlist_service.add_video(db, actor.id, playlist_id, video_id)
    return ApiResponse[PlaylistSchema](data=PlaylistSchema.from_model(playlist), message="Video added to playlist")


@router.patch("/remove/{video_id}/{playlist_id}", response_model=ApiResponse[PlaylistSchema])
async def remove_video_from_playlist(
    video_id: str,
    playlist_id: str,
    actor: User = Depends(get_current_actor),
    db: AsyncSession = Depends(get_db),
):
    playlist = await playlist_service.remove_video(db, actor.id, playlist_id, video_id)
    return ApiResponse[PlaylistSchema](data=PlaylistSchema.from_model(playlist), message="Video removed from playlist")


@router.patch("/{playlist_id}", response_model=ApiResponse[PlaylistSchema])
async def update_playlist(
    playlist_id: str,
    body: PlaylistRequest,
    actor: User = Depends(get_current_actor),
    db: AsyncSession = Depends(get_db),
):
    playlist = await playlist_service.update_playlist(db, actor.id, playlist_id, body.name, body.description)
    return ApiResponse[PlaylistSchema](data=PlaylistSchema.from_model(playlist), message="Playlist updated successfully")


@router.delete("/{playlist_id}", response_model=ApiResponse[EmptyData])
async def delete_playlist(
    playlist_id: str,
    actor: User = Depends(get_current_actor),
    db: AsyncSession = Depends(get_db),
):
    await playlist_service.delete_playlist(db, actor.id, playlist_id)
    return ApiResponse[EmptyData](data=EmptyData(), message="Playlist deleted successfully")
