"""
VidHub Tweet Service — short text posts on a user's channel.
"""
from __future__ import annotations

import uuid
from typing import Optional

from sqlalchemy.ext.asyncio import AsyncSession

from vidhub.core.errors import require_text
from vidhub.models.models import RelationKind, Tweet, User
from vidhub.services.query.fragments import owner_join
from vidhub.services.query.joined_page_query import Eq, PagePlan, PageResult, Sort, joined_page_query
from vidhub.services.records import commit_or_fail, get_existing, get_owned
from vidhub.services.relations.maintenance_service import relation_maintenance_service


class TweetService:

    async def create_tweet(self, db: AsyncSession, actor_id: uuid.UUID, content: Optional[str]) -> Tweet:
        tweet = Tweet(content=require_text(content, "tweet content"), owner_id=actor_id)
        db.add(tweet)
        await commit_or_fail(db, "Error while creating tweet")
        return tweet

    async def user_tweets(
        self, db: AsyncSession, user_id: Optional[str], page: int = 1, page_size: int = 10
    ) -> PageResult:
        user = await get_existing(db, User, user_id, "user")
        plan = PagePlan(
            source=Tweet,
            projection=("id", "content", "created_at", "updated_at"),
            filters=[Eq("owner_id", user.id)],
            joins=[owner_join()],
            sort=Sort("created_at", descending=True),
            page=page,
            page_size=page_size,
        )
        return await joined_page_query.run(db, plan)

    async def update_tweet(
        self, db: AsyncSession, actor_id: uuid.UUID, tweet_id: Optional[str], content: Optional[str]
    ) -> Tweet:
        text = require_text(content, "tweet content")
        tweet = await get_owned(db, Tweet, tweet_id, actor_id, "tweet")
        tweet.content = text
        await commit_or_fail(db, "Error while updating tweet")
        await db.refresh(tweet)
        return tweet

    async def delete_tweet(self, db: AsyncSession, actor_id: uuid.UUID, tweet_id: Optional[str]) -> None:
        tweet = await get_owned(db, Tweet, tweet_id, actor_id, "tweet")
        await relation_maintenance_service.delete_for_targets(db, RelationKind.TWEET, [tweet.id])
        await db.delete(tweet)
        await commit_or_fail(db, "Error while deleting tweet")


tweet_service = TweetService()
