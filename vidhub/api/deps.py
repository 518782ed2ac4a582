"""
VidHub API dependencies — acting user and collaborators.
"""
from __future__ import annotations

import uuid

from fastapi import Depends, Request
from sqlalchemy.ext.asyncio import AsyncSession

from vidhub.core.config import get_settings
from vidhub.core.database import get_db
from vidhub.core.errors import Unauthorized
from vidhub.models.models import User
from vidhub.services.media.upload_service import MediaUploader, media_uploader

settings = get_settings()


async def get_current_actor(request: Request, db: AsyncSession = Depends(get_db)) -> User:
    """Resolve the user the authentication gateway vouched for."""
    raw = request.headers.get(settings.actor_header)
    if not raw:
        raise Unauthorized("Unauthorized request")
    try:
        actor_id = uuid.UUID(raw)
    except ValueError:
        raise Unauthorized("Invalid actor identity")
    actor = await db.get(User, actor_id)
    if actor is None:
        raise Unauthorized("Invalid actor identity")
    return actor


def get_uploader() -> MediaUploader:
    return media_uploader
