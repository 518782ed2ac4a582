"""
VidHub API — Tweet routes.
"""
from __future__ import annotations

from fastapi import APIRouter, Depends, Query
from sqlalchemy.ext.asyncio import AsyncSession

from vidhub.api.deps import get_current_actor
from vidhub.core.config import get_settings
from vidhub.core.database import get_db
from vidhub.models.models import User
from vidhub.schemas.schemas import (
    ApiResponse, ContentRequest, EmptyData, Page, TweetSchema, TweetWithOwner, page_of,
)
from vidhub.services.tweets.tweet_service import tweet_service

settings = get_settings()
router = APIRouter(prefix="/tweets", tags=["Tweets"])


@router.post("", response_model=ApiResponse[TweetSchema])
async def create_tweet(
    body: ContentRequest,
    actor: User = Depends(get_current_actor),
    db: AsyncSession = Depends(get_db),
):
    tweet = await tweet_service.create_tweet(db, actor.id, body.content)
    return ApiResponse[TweetSchema](data=TweetSchema.from_model(tweet), message="Tweet created successfully")


@router.get("/user/{user_id}", response_model=ApiResponse[Page[TweetWithOwner]])
async def get_user_tweets(
    user_id: str,
    page: int = Query(1, ge=1),
    limit: int = Query(settings.default_page_size, ge=1, le=settings.max_page_size),
    actor: User = Depends(get_current_actor),
    db: AsyncSession = Depends(get_db),
):
    result = await tweet_service.user_tweets(db, user_id, page=page, page_size=limit)
    return ApiResponse[Page[TweetWithOwner]](data=page_of(TweetWithOwner, result), message="Tweets fetched successfully")


@router.patch("/{tweet_id}", response_model=ApiResponse[TweetSchema])
async def update_tweet(
    tweet_id: str,
    body: ContentRequest,
    actor: User = Depends(get_current_actor),
    db: AsyncSession = Depends(get_db),
):
    tweet = await tweet_service.update_tweet(db, actor.id, tweet_id, body.content)
    return ApiResponse[TweetSchema](data=TweetSchema.from_model(tweet), message="Tweet updated successfully")


@router.delete("/{tweet_id}", response_model=ApiResponse[EmptyData])
async def delete_tweet(
    tweet_id: str,
    actor: User = Depends(get_current_actor),
    db: AsyncSession = Depends(get_db),
):
    await tweet_service.delete_tweet(db, actor.id, tweet_id)
    return ApiResponse[EmptyData](data=EmptyData(), message="Tweet deleted successfully")
