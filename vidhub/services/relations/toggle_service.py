"""
VidHub Relation Toggle Service — like / unlike, subscribe / unsubscribe.

A toggle deletes the ``(actor, target, kind)`` relation when it exists and
creates it otherwise. The sequence is race-free without locks:

1. ``DELETE ... WHERE actor, target, kind``: atomic. If a row went away the
   relation was active and is now inactive.
2. Otherwise insert. The unique constraint rejects the insert when a
   concurrent caller created the same row first; the attempt is rolled back
   and step 1 runs again, removing that row.

Each successful call commits exactly one mutation.
"""
from __future__ import annotations

import logging
import uuid
from dataclasses import dataclass
from typing import Optional

from prometheus_client import Counter
from sqlalchemy import delete, or_, select
from sqlalchemy.exc import IntegrityError, SQLAlchemyError
from sqlalchemy.ext.asyncio import AsyncSession

from vidhub.core.config import get_settings
from vidhub.core.errors import NotFound, OperationFailed, parse_id
from vidhub.models.models import RELATION_TARGETS, Relation, RelationKind

logger = logging.getLogger(__name__)
settings = get_settings()

RELATION_TOGGLES = Counter(
    "vidhub_relation_toggles_total",
    "Relation toggles by kind and resulting state",
    ["kind", "state"],
)

_TARGET_LABELS = {
    RelationKind.VIDEO: "video",
    RelationKind.COMMENT: "comment",
    RelationKind.TWEET: "tweet",
    RelationKind.CHANNEL: "channel",
}


@dataclass(frozen=True)
class ToggleResult:
    is_active: bool


class RelationToggleService:
    """Check-and-act toggle on the relations table."""

    def __init__(self, max_attempts: int = 3):
        self.max_attempts = max_attempts

    async def toggle(
        self,
        db: AsyncSession,
        actor_id: uuid.UUID,
        target_id: Optional[str],
        kind: RelationKind,
    ) -> ToggleResult:
        label = _TARGET_LABELS[kind]
        target_uuid = parse_id(target_id, f"{label} id")
        await self._ensure_target(db, kind, target_uuid, actor_id)

        match = (
            Relation.actor_id == actor_id,
            Relation.target_id == target_uuid,
            Relation.target_kind == kind,
        )

        for attempt in range(1, self.max_attempts + 1):
            try:
                result = await db.execute(
                    delete(Relation).where(*match).execution_options(synchronize_session=False)
                )
                if result.rowcount:
                    await db.commit()
                    RELATION_TOGGLES.labels(kind=kind.value, state="inactive").inc()
                    return ToggleResult(is_active=False)

                db.add(Relation(actor_id=actor_id, target_id=target_uuid, target_kind=kind))
                await db.commit()
            except IntegrityError:
                await db.rollback()
                logger.info(
                    f"Concurrent {label} toggle detected (attempt {attempt}/{self.max_attempts}) "
                    f"actor={actor_id} target={target_uuid}"
                )
                continue
            except SQLAlchemyError as exc:
                await db.rollback()
                raise OperationFailed(f"Error while toggling {label}") from exc

            RELATION_TOGGLES.labels(kind=kind.value, state="active").inc()
            return ToggleResult(is_active=True)

        raise OperationFailed(f"Error while toggling {label}")

    async def is_active(
        self, db: AsyncSession, actor_id: uuid.UUID, target_id: uuid.UUID, kind: RelationKind
    ) -> bool:
        found = await db.scalar(
            select(Relation.id).where(
                Relation.actor_id == actor_id,
                Relation.target_id == target_id,
                Relation.target_kind == kind,
            )
        )
        return found is not None

    @staticmethod
    async def _ensure_target(
        db: AsyncSession, kind: RelationKind, target_id: uuid.UUID, actor_id: uuid.UUID
    ) -> None:
        model = RELATION_TARGETS[kind]
        stmt = select(model.id).where(model.id == target_id)
        if kind == RelationKind.VIDEO:
            # Unpublished videos only exist for their owner
            stmt = stmt.where(or_(model.is_published.is_(True), model.owner_id == actor_id))
        exists = await db.scalar(stmt)
        if exists is None:
            raise NotFound(f"{_TARGET_LABELS[kind].capitalize()} not found")


relation_toggle_service = RelationToggleService(max_attempts=settings.toggle_max_attempts)
