"""
Reusable plan pieces shared by the content services.
"""
from __future__ import annotations

import uuid
from typing import Optional

from vidhub.models.models import User
from vidhub.services.query.joined_page_query import AnyOf, Eq, OneToOne

OWNER_FIELDS = ("id", "username", "full_name", "avatar")
CHANNEL_FIELDS = OWNER_FIELDS + ("cover_image",)

VIDEO_CARD_FIELDS = (
    "id", "title", "description", "video_file", "thumbnail",
    "duration", "views", "created_at",
)
VIDEO_SUMMARY_FIELDS = VIDEO_CARD_FIELDS + ("is_published",)


def owner_join(
    alias: str = "owner",
    local_key: str = "owner_id",
    parent: Optional[str] = None,
    fields=OWNER_FIELDS,
) -> OneToOne:
    """Required join to the user owning (or acting on) a record."""
    return OneToOne(alias=alias, target=User, local_key=local_key, fields=fields, parent=parent)


def visible_videos(actor_id: uuid.UUID, on: Optional[str] = None) -> AnyOf:
    """Published videos, plus the actor's own unpublished ones."""
    return AnyOf((Eq("is_published", True, on=on), Eq("owner_id", actor_id, on=on)))
