"""
VidHub Comment Service — comments on videos.
"""
from __future__ import annotations

import logging
import uuid
from typing import Optional

from sqlalchemy.ext.asyncio import AsyncSession

from vidhub.core.errors import require_text
from vidhub.models.models import Comment, RelationKind
from vidhub.services.query.fragments import owner_join
from vidhub.services.query.joined_page_query import Eq, PagePlan, PageResult, Sort, joined_page_query
from vidhub.services.records import commit_or_fail, get_owned, get_visible_video
from vidhub.services.relations.maintenance_service import relation_maintenance_service

logger = logging.getLogger(__name__)


class CommentService:

    async def list_comments(
        self,
        db: AsyncSession,
        actor_id: uuid.UUID,
        video_id: Optional[str],
        page: int = 1,
        page_size: int = 10,
    ) -> PageResult:
        video = await get_visible_video(db, video_id, actor_id)
        plan = PagePlan(
            source=Comment,
            projection=("id", "content", "created_at", "updated_at"),
            filters=[Eq("video_id", video.id)],
            joins=[owner_join()],
            sort=Sort("created_at", descending=True),
            page=page,
            page_size=page_size,
        )
        return await joined_page_query.run(db, plan)

    async def add_comment(
        self, db: AsyncSession, actor_id: uuid.UUID, video_id: Optional[str], content: Optional[str]
    ) -> Comment:
        video = await get_visible_video(db, video_id, actor_id)
        comment = Comment(content=require_text(content, "content"), video_id=video.id, owner_id=actor_id)
        db.add(comment)
        await commit_or_fail(db, "Error while creating comment")
        return comment

    async def update_comment(
        self, db: AsyncSession, actor_id: uuid.UUID, comment_id: Optional[str], content: Optional[str]
    ) -> Comment:
        text = require_text(content, "content")
        comment = await get_owned(db, Comment, comment_id, actor_id, "comment")
        comment.content = text
        await commit_or_fail(db, "Error while updating comment")
        await db.refresh(comment)
        return comment

    async def delete_comment(self, db: AsyncSession, actor_id: uuid.UUID, comment_id: Optional[str]) -> None:
        comment = await get_owned(db, Comment, comment_id, actor_id, "comment")
        removed = await relation_maintenance_service.delete_for_targets(db, RelationKind.COMMENT, [comment.id])
        await db.delete(comment)
        await commit_or_fail(db, "Error while deleting comment")
        logger.debug(f"Comment {comment.id} deleted with {removed} likes")


comment_service = CommentService()
