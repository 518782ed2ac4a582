"""
VidHub Playlist Service — user playlists as ordered video collections.
"""
from __future__ import annotations

import logging
import uuid
from typing import Any, Dict, Optional

from sqlalchemy.exc import IntegrityError
from sqlalchemy.ext.asyncio import AsyncSession

from vidhub.core.errors import InvalidArgument, NotFound, parse_id, require_text
from vidhub.models.models import Playlist, PlaylistVideo, User, Video
from vidhub.services.query.fragments import VIDEO_CARD_FIELDS, owner_join, visible_videos
from vidhub.services.query.joined_page_query import (
    Eq, OneToMany, PagePlan, PageResult, Sort, joined_page_query,
)
from vidhub.services.records import commit_or_fail, get_existing, get_owned, get_visible_video

logger = logging.getLogger(__name__)

PLAYLIST_FIELDS = ("id", "name", "description", "created_at", "updated_at")


def playlist_videos(viewer_id: uuid.UUID) -> OneToMany:
    """Ordered playlist entries the viewer is allowed to see."""
    return OneToMany(
        alias="videos",
        target=Video,
        link=PlaylistVideo,
        link_parent_key="playlist_id",
        link_target_key="video_id",
        fields=VIDEO_CARD_FIELDS,
        order_by="position",
        owner=owner_join(),
        filters=(visible_videos(viewer_id),),
    )


class PlaylistService:

    def _plan(self, viewer_id: uuid.UUID, filters, page: int, page_size: int) -> PagePlan:
        return PagePlan(
            source=Playlist,
            projection=PLAYLIST_FIELDS,
            filters=filters,
            joins=[owner_join()],
            collections=[playlist_videos(viewer_id)],
            sort=Sort("created_at", descending=True),
            page=page,
            page_size=page_size,
        )

    async def create_playlist(
        self, db: AsyncSession, actor_id: uuid.UUID, name: Optional[str], description: Optional[str]
    ) -> Playlist:
        playlist = Playlist(
            name=require_text(name, "name"), description=description, owner_id=actor_id, entries=[],
        )
        db.add(playlist)
        await commit_or_fail(db, "Error while creating playlist")
        return playlist

    async def user_playlists(
        self,
        db: AsyncSession,
        viewer_id: uuid.UUID,
        user_id: Optional[str],
        page: int = 1,
        page_size: int = 10,
    ) -> PageResult:
        user = await get_existing(db, User, user_id, "user")
        plan = self._plan(viewer_id, [Eq("owner_id", user.id)], page, page_size)
        return await joined_page_query.run(db, plan)

    async def get_playlist(
        self, db: AsyncSession, viewer_id: uuid.UUID, playlist_id: Optional[str]
    ) -> Dict[str, Any]:
        pl_uuid = parse_id(playlist_id, "playlist id")
        result = await joined_page_query.run(db, self._plan(viewer_id, [Eq("id", pl_uuid)], 1, 1))
        if not result.items:
            raise NotFound("Playlist not found")
        return result.items[0]

    async def add_video(
        self, db: AsyncSession, actor_id: uuid.UUID, playlist_id: Optional[str], video_id: Optional[str]
    ) -> Playlist:
        playlist = await get_owned(db, Playlist, playlist_id, actor_id, "playlist")
        video = await get_visible_video(db, video_id, actor_id)
        if any(entry.video_id == video.id for entry in playlist.entries):
            raise InvalidArgument("Video already exists in the playlist")

        position = max((entry.position for entry in playlist.entries), default=-1) + 1
        playlist.entries.append(PlaylistVideo(video_id=video.id, position=position))
        try:
            await db.commit()
        except IntegrityError:
            await db.rollback()
            raise InvalidArgument("Video already exists in the playlist")
        return playlist

    async def remove_video(
        self, db: AsyncSession, actor_id: uuid.UUID, playlist_id: Optional[str], video_id: Optional[str]
    ) -> Playlist:
        playlist = await get_owned(db, Playlist, playlist_id, actor_id, "playlist")
        vid_uuid = parse_id(video_id, "video id")
        entry = next((e for e in playlist.entries if e.video_id == vid_uuid), None)
        if entry is None:
            raise NotFound("Video is not in the playlist")
        playlist.entries.remove(entry)
        await commit_or_fail(db, "Something went wrong while removing video from the playlist")
        return playlist

    async def update_playlist(
        self,
        db: AsyncSession,
        actor_id: uuid.UUID,
        playlist_id: Optional[str],
        name: Optional[str],
        description: Optional[str],
    ) -> Playlist:
        if not (name and name.strip()) or not (description and description.strip()):
            raise InvalidArgument("name and description are required")
        playlist = await get_owned(db, Playlist, playlist_id, actor_id, "playlist")
        playlist.name = name.strip()
        playlist.description = description.strip()
        await commit_or_fail(db, "Error while updating playlist")
        return playlist

    async def delete_playlist(self, db: AsyncSession, actor_id: uuid.UUID, playlist_id: Optional[str]) -> None:
        playlist = await get_owned(db, Playlist, playlist_id, actor_id, "playlist")
        await db.delete(playlist)
        await commit_or_fail(db, "Error while deleting the playlist")
        logger.info(f"Playlist deleted: {playlist.id}")


playlist_service = PlaylistService()
