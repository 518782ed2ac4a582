"""
VidHub API Schemas — Pydantic v2 models for request/response validation.

Wire format is camelCase; Python attributes stay snake_case.
"""
from __future__ import annotations

import uuid
from datetime import datetime
from typing import Generic, List, Optional, Type, TypeVar

from pydantic import BaseModel, ConfigDict
from pydantic.alias_generators import to_camel

T = TypeVar("T")


class ApiModel(BaseModel):
    model_config = ConfigDict(alias_generator=to_camel, populate_by_name=True)


# ═══════════════════════════════════════════════════════════════════════
# Envelope & pagination
# ═══════════════════════════════════════════════════════════════════════

class ApiResponse(ApiModel, Generic[T]):
    status_code: int = 200
    data: Optional[T] = None
    message: str = ""
    success: bool = True


class Page(ApiModel, Generic[T]):
    items: List[T] = []
    total_items: int = 0
    total_pages: int = 0
    current_page: int = 1
    page_size: int = 10


def page_of(schema: Type[BaseModel], result) -> Page:
    """Validate a ``PageResult``'s raw items into ``Page[schema]``."""
    return Page[schema](
        items=[schema.model_validate(item) for item in result.items],
        total_items=result.total_items,
        total_pages=result.total_pages,
        current_page=result.current_page,
        page_size=result.page_size,
    )


class ToggleState(ApiModel):
    is_active: bool


class EmptyData(ApiModel):
    pass


# ═══════════════════════════════════════════════════════════════════════
# Users
# ═══════════════════════════════════════════════════════════════════════

class OwnerSummary(ApiModel):
    id: uuid.UUID
    username: str
    full_name: str
    avatar: Optional[str] = None


class ChannelSummary(OwnerSummary):
    cover_image: Optional[str] = None


# ═══════════════════════════════════════════════════════════════════════
# Videos
# ═══════════════════════════════════════════════════════════════════════

class VideoSchema(ApiModel):
    id: uuid.UUID
    title: str
    description: Optional[str] = None
    video_file: str
    thumbnail: Optional[str] = None
    duration: Optional[float] = None
    views: int = 0
    is_published: bool = True
    owner: uuid.UUID
    created_at: datetime
    updated_at: datetime

    @classmethod
    def from_model(cls, video) -> "VideoSchema":
        return cls(
            id=video.id,
            title=video.title,
            description=video.description,
            video_file=video.video_file,
            thumbnail=video.thumbnail,
            duration=video.duration,
            views=video.views,
            is_published=video.is_published,
            owner=video.owner_id,
            created_at=video.created_at,
            updated_at=video.updated_at,
        )


class VideoCard(ApiModel):
    """Video as it appears inside playlists and like lists."""
    id: uuid.UUID
    title: str
    description: Optional[str] = None
    video_file: str
    thumbnail: Optional[str] = None
    duration: Optional[float] = None
    views: int = 0
    created_at: datetime
    owner: Optional[OwnerSummary] = None


class VideoSummary(VideoCard):
    is_published: bool = True
    owner: OwnerSummary


class VideoDetail(VideoSummary):
    updated_at: datetime
    likes: int = 0
    is_liked: bool = False


# ═══════════════════════════════════════════════════════════════════════
# Comments & tweets
# ═══════════════════════════════════════════════════════════════════════

class ContentRequest(ApiModel):
    content: Optional[str] = None


class CommentSchema(ApiModel):
    id: uuid.UUID
    content: str
    video: uuid.UUID
    owner: uuid.UUID
    created_at: datetime
    updated_at: datetime

    @classmethod
    def from_model(cls, comment) -> "CommentSchema":
        return cls(
            id=comment.id,
            content=comment.content,
            video=comment.video_id,
            owner=comment.owner_id,
            created_at=comment.created_at,
            updated_at=comment.updated_at,
        )


class CommentWithOwner(ApiModel):
    id: uuid.UUID
    content: str
    created_at: datetime
    updated_at: datetime
    owner: OwnerSummary


class TweetSchema(ApiModel):
    id: uuid.UUID
    content: str
    owner: uuid.UUID
    created_at: datetime
    updated_at: datetime

    @classmethod
    def from_model(cls, tweet) -> "TweetSchema":
        return cls(
            id=tweet.id,
            content=tweet.content,
            owner=tweet.owner_id,
            created_at=tweet.created_at,
            updated_at=tweet.updated_at,
        )


class TweetWithOwner(ApiModel):
    id: uuid.UUID
    content: str
    created_at: datetime
    updated_at: datetime
    owner: OwnerSummary


# ═══════════════════════════════════════════════════════════════════════
# Likes & subscriptions
# ═══════════════════════════════════════════════════════════════════════

class LikedVideo(ApiModel):
    id: uuid.UUID
    created_at: datetime
    video: VideoSummary


class SubscriberEntry(ApiModel):
    id: uuid.UUID
    created_at: datetime
    subscriber: OwnerSummary


class SubscribedChannel(ApiModel):
    id: uuid.UUID
    created_at: datetime
    channel: ChannelSummary


# ═══════════════════════════════════════════════════════════════════════
# Playlists
# ═══════════════════════════════════════════════════════════════════════

class PlaylistRequest(ApiModel):
    name: Optional[str] = None
    description: Optional[str] = None


class PlaylistSchema(ApiModel):
    id: uuid.UUID
    name: str
    description: Optional[str] = None
    owner: uuid.UUID
    videos: List[uuid.UUID] = []
    created_at: datetime
    updated_at: datetime

    @classmethod
    def from_model(cls, playlist) -> "PlaylistSchema":
        return cls(
            id=playlist.id,
            name=playlist.name,
            description=playlist.description,
            owner=playlist.owner_id,
            videos=[entry.video_id for entry in playlist.entries],
            created_at=playlist.created_at,
            updated_at=playlist.updated_at,
        )


class PlaylistDetail(ApiModel):
    id: uuid.UUID
    name: str
    description: Optional[str] = None
    created_at: datetime
    updated_at: datetime
    owner: OwnerSummary
    videos: List[VideoCard] = []
