"""
Lookup and commit helpers shared by the content services.
"""
from __future__ import annotations

import uuid
from typing import Optional, Type, TypeVar

from sqlalchemy.exc import SQLAlchemyError
from sqlalchemy.ext.asyncio import AsyncSession

from vidhub.core.errors import Forbidden, NotFound, OperationFailed, parse_id
from vidhub.models.models import Video

M = TypeVar("M")


async def get_existing(db: AsyncSession, model: Type[M], raw_id: Optional[str], label: str) -> M:
    record = await db.get(model, parse_id(raw_id, f"{label} id"))
    if record is None:
        raise NotFound(f"{label.capitalize()} not found")
    return record


async def get_owned(
    db: AsyncSession, model: Type[M], raw_id: Optional[str], actor_id: uuid.UUID, label: str
) -> M:
    """Fetch a record the actor owns; other owners get Forbidden."""
    record = await get_existing(db, model, raw_id, label)
    if record.owner_id != actor_id:
        raise Forbidden(f"You are not allowed to modify this {label}")
    return record


async def get_visible_video(db: AsyncSession, raw_id: Optional[str], actor_id: uuid.UUID) -> Video:
    """Fetch a video the actor can see; unpublished videos exist only for their owner."""
    video = await get_existing(db, Video, raw_id, "video")
    if not video.is_published and video.owner_id != actor_id:
        raise NotFound("Video not found")
    return video


async def commit_or_fail(db: AsyncSession, message: str) -> None:
    try:
        await db.commit()
    except SQLAlchemyError as exc:
        await db.rollback()
        raise OperationFailed(message) from exc
