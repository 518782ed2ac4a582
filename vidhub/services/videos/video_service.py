"""
VidHub Video Service — publishing, listing and managing videos.
"""
from __future__ import annotations

import logging
import uuid
from typing import Any, Dict, Optional

from sqlalchemy import func, select
from sqlalchemy.ext.asyncio import AsyncSession

from vidhub.core.errors import NotFound, parse_id, require_text
from vidhub.models.models import Comment, Relation, RelationKind, Video
from vidhub.services.query.fragments import VIDEO_SUMMARY_FIELDS, owner_join
from vidhub.services.query.joined_page_query import (
    Contains, Eq, PagePlan, PageResult, Sort, joined_page_query,
)
from vidhub.services.records import commit_or_fail, get_owned
from vidhub.services.relations.maintenance_service import relation_maintenance_service
from vidhub.services.relations.toggle_service import relation_toggle_service

logger = logging.getLogger(__name__)

SORTABLE_FIELDS = ("created_at", "updated_at", "title", "views", "duration")


class VideoService:

    async def list_videos(
        self,
        db: AsyncSession,
        actor_id: uuid.UUID,
        page: int = 1,
        page_size: int = 10,
        query: Optional[str] = None,
        sort_by: Optional[str] = None,
        sort_type: Optional[str] = None,
        user_id: Optional[str] = None,
    ) -> PageResult:
        """Page through videos, newest first by default.

        Unpublished videos are only visible to their owner listing their own channel.
        """
        filters = []
        owner_id = None
        if user_id:
            owner_id = parse_id(user_id, "user id")
            filters.append(Eq("owner_id", owner_id))
        if query and query.strip():
            filters.append(Contains("title", query.strip()))
        if owner_id != actor_id:
            filters.append(Eq("is_published", True))

        plan = PagePlan(
            source=Video,
            projection=VIDEO_SUMMARY_FIELDS,
            filters=filters,
            joins=[owner_join()],
            sort=Sort.parse(sort_by, sort_type),
            sortable=SORTABLE_FIELDS,
            page=page,
            page_size=page_size,
        )
        return await joined_page_query.run(db, plan)

    async def publish(
        self,
        db: AsyncSession,
        actor_id: uuid.UUID,
        title: Optional[str],
        description: Optional[str],
        video_url: str,
        thumbnail_url: Optional[str] = None,
        duration: Optional[float] = None,
    ) -> Video:
        video = Video(
            owner_id=actor_id,
            title=require_text(title, "title"),
            description=description,
            video_file=video_url,
            thumbnail=thumbnail_url,
            duration=duration,
            is_published=True,
        )
        db.add(video)
        await commit_or_fail(db, "Error while publishing the video")
        logger.info(f"Video published: {video.id} by {actor_id}")
        return video

    async def get_video(self, db: AsyncSession, actor_id: uuid.UUID, video_id: Optional[str]) -> Dict[str, Any]:
        vid_uuid = parse_id(video_id, "video id")
        plan = PagePlan(
            source=Video,
            projection=VIDEO_SUMMARY_FIELDS + ("updated_at", "owner_id"),
            filters=[Eq("id", vid_uuid)],
            joins=[owner_join()],
            page=1,
            page_size=1,
        )
        result = await joined_page_query.run(db, plan)
        if not result.items:
            raise NotFound("Video not found")
        video = result.items[0]
        if not video["is_published"] and video["owner_id"] != actor_id:
            raise NotFound("Video not found")

        video["likes"] = await db.scalar(
            select(func.count(Relation.id)).where(
                Relation.target_id == vid_uuid, Relation.target_kind == RelationKind.VIDEO
            )
        ) or 0
        video["is_liked"] = await relation_toggle_service.is_active(db, actor_id, vid_uuid, RelationKind.VIDEO)
        return video

    async def require_owned(self, db: AsyncSession, actor_id: uuid.UUID, video_id: Optional[str]) -> Video:
        return await get_owned(db, Video, video_id, actor_id, "video")

    async def update_video(
        self,
        db: AsyncSession,
        actor_id: uuid.UUID,
        video_id: Optional[str],
        title: Optional[str] = None,
        description: Optional[str] = None,
        thumbnail_url: Optional[str] = None,
    ) -> Video:
        video = await get_owned(db, Video, video_id, actor_id, "video")
        if title is not None:
            video.title = require_text(title, "title")
        if description is not None:
            video.description = description
        if thumbnail_url is not None:
            video.thumbnail = thumbnail_url
        await commit_or_fail(db, "Error while updating video")
        await db.refresh(video)
        return video

    async def delete_video(self, db: AsyncSession, actor_id: uuid.UUID, video_id: Optional[str]) -> None:
        """Delete a video with its likes and the likes on its comments."""
        video = await get_owned(db, Video, video_id, actor_id, "video")
        comment_ids = (await db.execute(select(Comment.id).where(Comment.video_id == video.id))).scalars().all()

        await relation_maintenance_service.delete_for_targets(db, RelationKind.COMMENT, comment_ids)
        await relation_maintenance_service.delete_for_targets(db, RelationKind.VIDEO, [video.id])
        await db.delete(video)
        await commit_or_fail(db, "Something went wrong while deleting the video")
        logger.info(f"Video deleted: {video.id} ({len(comment_ids)} comments cascaded)")

    async def toggle_publish(self, db: AsyncSession, actor_id: uuid.UUID, video_id: Optional[str]) -> Video:
        video = await get_owned(db, Video, video_id, actor_id, "video")
        video.is_published = not video.is_published
        await commit_or_fail(db, "Error while updating publish status")
        await db.refresh(video)
        return video


video_service = VideoService()
