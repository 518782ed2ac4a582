"""
VidHub Relation Maintenance — keeps the relations table consistent with content.

Relations point at videos, comments, tweets or users without a foreign key,
so deleting content has to remove its relations explicitly. Content services
call ``delete_for_targets`` in the same transaction as the content delete; the
periodic sweep catches anything deleted outside the API and collapses
duplicates imported from stores that lacked the unique constraint.
"""
from __future__ import annotations

import logging
import uuid
from typing import Dict, Iterable

from sqlalchemy import delete, func, select
from sqlalchemy.ext.asyncio import AsyncSession

from vidhub.models.models import RELATION_TARGETS, Relation, RelationKind

logger = logging.getLogger(__name__)


class RelationMaintenanceService:

    async def delete_for_targets(
        self, db: AsyncSession, kind: RelationKind, target_ids: Iterable[uuid.UUID]
    ) -> int:
        """Delete every relation of ``kind`` pointing at one of ``target_ids``. Does not commit."""
        ids = list(target_ids)
        if not ids:
            return 0
        result = await db.execute(
            delete(Relation)
            .where(Relation.target_kind == kind, Relation.target_id.in_(ids))
            .execution_options(synchronize_session=False)
        )
        return result.rowcount or 0

    async def purge_orphans(self, db: AsyncSession) -> Dict[str, int]:
        """Remove relations whose target row no longer exists."""
        removed: Dict[str, int] = {}
        for kind, model in RELATION_TARGETS.items():
            live_targets = select(model.id)
            result = await db.execute(
                delete(Relation)
                .where(Relation.target_kind == kind, Relation.target_id.not_in(live_targets))
                .execution_options(synchronize_session=False)
            )
            removed[kind.value] = result.rowcount or 0
        await db.commit()
        logger.info(f"Purged orphaned relations: {removed}")
        return removed

    async def collapse_duplicates(self, db: AsyncSession) -> int:
        """Keep the earliest relation per (actor, target, kind) and delete the rest."""
        groups = await db.execute(
            select(Relation.actor_id, Relation.target_id, Relation.target_kind)
            .group_by(Relation.actor_id, Relation.target_id, Relation.target_kind)
            .having(func.count(Relation.id) > 1)
        )
        removed = 0
        for actor_id, target_id, kind in groups.all():
            rows = await db.execute(
                select(Relation.id)
                .where(
                    Relation.actor_id == actor_id,
                    Relation.target_id == target_id,
                    Relation.target_kind == kind,
                )
                .order_by(Relation.created_at.asc(), Relation.id.asc())
            )
            surplus = [row_id for row_id in rows.scalars().all()[1:]]
            if surplus:
                await db.execute(
                    delete(Relation)
                    .where(Relation.id.in_(surplus))
                    .execution_options(synchronize_session=False)
                )
                removed += len(surplus)
        await db.commit()
        if removed:
            logger.warning(f"Collapsed {removed} duplicate relation records")
        return removed


relation_maintenance_service = RelationMaintenanceService()
