# ╔══════════════════════════════════════════════════════════════════════════╗
# ║ VidShare · Tweets API                                                     ║
# ╠──────────────────────────────────────────────────────────────────────────╣
# ║  - POST   /tweets                 → Post a tweet (201)                    ║
# ║  - GET    /tweets/user/{userId}   → A user's tweets (paginated)           ║
# ║  - PATCH  /tweets/{tweetId}       → Edit own tweet                        ║
# ║  - DELETE /tweets/{tweetId}       → Delete own tweet                      ║
# ╚══════════════════════════════════════════════════════════════════════════╝
"""Short text posts on a user's channel."""

from typing import Optional
from uuid import UUID

from fastapi import APIRouter, Depends, status

from app.api.http_utils import envelope, page_payload
from app.core.dependencies import list_options, parse_uuid
from app.core.security import get_current_user_id, get_optional_user_id
from app.repositories.tweets import TweetRepository, get_tweet_repository
from app.schemas.tweet import TweetIn, TweetOut
from app.services.query_composer import ListOptions

router = APIRouter(prefix="/tweets", tags=["Tweets"])


@router.post("", status_code=status.HTTP_201_CREATED, summary="Post a tweet")
async def create_tweet(
    body: TweetIn,
    actor_id: UUID = Depends(get_current_user_id),
    repo: TweetRepository = Depends(get_tweet_repository),
):
    tweet = await repo.create(actor_id, body.content)
    return envelope(TweetOut.model_validate(tweet), "Tweet created successfully", status_code=status.HTTP_201_CREATED)


@router.get("/user/{user_id}", summary="List a user's tweets")
async def list_user_tweets(
    user_id: str,
    opts: ListOptions = Depends(list_options),
    actor_id: Optional[UUID] = Depends(get_optional_user_id),
    repo: TweetRepository = Depends(get_tweet_repository),
):
    uid = parse_uuid(user_id, "userId")
    result = await repo.list_for_user(uid, actor_id=actor_id, options=opts)
    return envelope(page_payload(result, TweetOut), "Tweets fetched successfully")


@router.patch("/{tweet_id}", summary="Edit a tweet")
async def update_tweet(
    tweet_id: str,
    body: TweetIn,
    actor_id: UUID = Depends(get_current_user_id),
    repo: TweetRepository = Depends(get_tweet_repository),
):
    tid = parse_uuid(tweet_id, "tweetId")
    tweet = await repo.update(tid, actor_id, body.content)
    return envelope(TweetOut.model_validate(tweet), "Tweet updated successfully")


@router.delete("/{tweet_id}", summary="Delete a tweet")
async def delete_tweet(
    tweet_id: str,
    actor_id: UUID = Depends(get_current_user_id),
    repo: TweetRepository = Depends(get_tweet_repository),
):
    tid = parse_uuid(tweet_id, "tweetId")
    tweet = await repo.delete(tid, actor_id)
    return envelope(TweetOut.model_validate(tweet), "Tweet deleted successfully")
