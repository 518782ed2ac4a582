"""
VidHub API — Subscription routes.
"""
from __future__ import annotations

from fastapi import APIRouter, Depends, Query
from sqlalchemy.ext.asyncio import AsyncSession

from vidhub.api.deps import get_current_actor
from vidhub.core.config import get_settings
from vidhub.core.database import get_db
from vidhub.models.models import User
from vidhub.schemas.schemas import (
    ApiResponse, Page, SubscribedChannel, SubscriberEntry, ToggleState, page_of,
)
from vidhub.services.subscriptions.subscription_service import subscription_service

settings = get_settings()
router = APIRouter(prefix="/subscriptions", tags=["Subscriptions"])


@router.post("/c/{channel_id}", response_model=ApiResponse[ToggleState])
async def toggle_subscription(
    channel_id: str,
    actor: User = Depends(get_current_actor),
    db: AsyncSession = Depends(get_db),
):
    result = await subscription_service.toggle(db, actor.id, channel_id)
    message = "Channel subscribed successfully" if result.is_active else "Channel unsubscribed successfully"
    return ApiResponse[ToggleState](data=ToggleState(is_active=result.is_active), message=message)


@router.get("/c/{channel_id}", response_model=ApiResponse[Page[SubscriberEntry]])
async def get_channel_subscribers(
    channel_id: str,
    page: int = Query(1, ge=1),
    limit: int = Query(settings.default_page_size, ge=1, le=settings.max_page_size),
    actor: User = Depends(get_current_actor),
    db: AsyncSession = Depends(get_db),
):
    """Subscribers of a channel; ``totalItems`` is the subscriber count."""
    result = await subscription_service.channel_subscribers(db, channel_id, page=page, page_size=limit)
    return ApiResponse[Page[SubscriberEntry]](data=page_of(SubscriberEntry, result), message="Subscribers fetched")


@router.get("/u/{subscriber_id}", response_model=ApiResponse[Page[SubscribedChannel]])
async def get_subscribed_channels(
    subscriber_id: str,
    page: int = Query(1, ge=1),
    limit: int = Query(settings.default_page_size, ge=1, le=settings.max_page_size),
    actor: User = Depends(get_current_actor),
    db: AsyncSession = Depends(get_db),
):
    """Channels a user is subscribed to."""
    result = await subscription_service.subscribed_channels(db, subscriber_id, page=page, page_size=limit)
    return ApiResponse[Page[SubscribedChannel]](
        data=page_of(SubscribedChannel, result), message="Subscribed channels fetched",
    )
