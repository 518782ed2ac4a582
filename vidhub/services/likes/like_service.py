"""
VidHub Like Service — likes on videos, comments and tweets.
"""
from __future__ import annotations

import uuid
from typing import Optional

from sqlalchemy.ext.asyncio import AsyncSession

from vidhub.core.errors import InvalidArgument
from vidhub.models.models import Relation, RelationKind, Video
from vidhub.services.query.fragments import VIDEO_SUMMARY_FIELDS, owner_join, visible_videos
from vidhub.services.query.joined_page_query import (
    Eq, OneToOne, PagePlan, PageResult, Sort, joined_page_query,
)
from vidhub.services.relations.toggle_service import ToggleResult, relation_toggle_service


class LikeService:

    async def toggle(
        self, db: AsyncSession, actor_id: uuid.UUID, target_id: Optional[str], kind: RelationKind
    ) -> ToggleResult:
        if kind == RelationKind.CHANNEL:
            raise InvalidArgument("Channels are subscribed to, not liked")
        return await relation_toggle_service.toggle(db, actor_id, target_id, kind)

    async def liked_videos(
        self, db: AsyncSession, actor_id: uuid.UUID, page: int = 1, page_size: int = 10
    ) -> PageResult:
        """Videos the actor liked, most recent like first.

        Likes on deleted videos drop out through the inner join, and likes on
        videos since unpublished by someone else are hidden.
        """
        plan = PagePlan(
            source=Relation,
            projection=("id", "created_at"),
            filters=[
                Eq("actor_id", actor_id),
                Eq("target_kind", RelationKind.VIDEO),
                visible_videos(actor_id, on="video"),
            ],
            joins=[
                OneToOne(alias="video", target=Video, local_key="target_id", fields=VIDEO_SUMMARY_FIELDS),
                owner_join(parent="video"),
            ],
            sort=Sort("created_at", descending=True),
            page=page,
            page_size=page_size,
        )
        return await joined_page_query.run(db, plan)


like_service = LikeService()
