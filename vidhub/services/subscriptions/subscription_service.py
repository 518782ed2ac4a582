"""
VidHub Subscription Service — users subscribing to channels.

A channel is a user; a subscription is a relation of kind ``channel`` from
the subscriber (actor) to the channel (target).
"""
from __future__ import annotations

import uuid
from typing import Optional

from sqlalchemy.ext.asyncio import AsyncSession

from vidhub.core.errors import InvalidArgument, parse_id
from vidhub.models.models import Relation, RelationKind, User
from vidhub.services.query.fragments import CHANNEL_FIELDS, owner_join
from vidhub.services.query.joined_page_query import Eq, PagePlan, PageResult, Sort, joined_page_query
from vidhub.services.records import get_existing
from vidhub.services.relations.toggle_service import ToggleResult, relation_toggle_service


class SubscriptionService:

    async def toggle(self, db: AsyncSession, actor_id: uuid.UUID, channel_id: Optional[str]) -> ToggleResult:
        channel_uuid = parse_id(channel_id, "channel id")
        if channel_uuid == actor_id:
            raise InvalidArgument("You cannot subscribe to your own channel")
        return await relation_toggle_service.toggle(db, actor_id, str(channel_uuid), RelationKind.CHANNEL)

    async def channel_subscribers(
        self, db: AsyncSession, channel_id: Optional[str], page: int = 1, page_size: int = 10
    ) -> PageResult:
        channel = await get_existing(db, User, channel_id, "channel")
        plan = PagePlan(
            source=Relation,
            projection=("id", "created_at"),
            filters=[Eq("target_id", channel.id), Eq("target_kind", RelationKind.CHANNEL)],
            joins=[owner_join(alias="subscriber", local_key="actor_id")],
            sort=Sort("created_at", descending=True),
            page=page,
            page_size=page_size,
        )
        return await joined_page_query.run(db, plan)

    async def subscribed_channels(
        self, db: AsyncSession, subscriber_id: Optional[str], page: int = 1, page_size: int = 10
    ) -> PageResult:
        subscriber = await get_existing(db, User, subscriber_id, "subscriber")
        plan = PagePlan(
            source=Relation,
            projection=("id", "created_at"),
            filters=[Eq("actor_id", subscriber.id), Eq("target_kind", RelationKind.CHANNEL)],
            joins=[owner_join(alias="channel", local_key="target_id", fields=CHANNEL_FIELDS)],
            sort=Sort("created_at", descending=True),
            page=page,
            page_size=page_size,
        )
        return await joined_page_query.run(db, plan)


subscription_service = SubscriptionService()
