# ╔══════════════════════════════════════════════════════════════════════════╗
# ║ VidShare · Likes API                                                      ║
# ╠──────────────────────────────────────────────────────────────────────────╣
# ║  - POST /likes/toggle/v/{videoId}   → Like/unlike a video                 ║
# ║  - POST /likes/toggle/c/{commentId} → Like/unlike a comment               ║
# ║  - POST /likes/toggle/t/{tweetId}   → Like/unlike a tweet                 ║
# ║  - GET  /likes/videos               → Videos the caller liked             ║
# ╠──────────────────────────────────────────────────────────────────────────╣
# ║ Toggles are atomic per (user, target); a lost race answers 409.           ║
# ╚══════════════════════════════════════════════════════════════════════════╝
"""Like toggles and the liked-videos feed."""

from uuid import UUID

from fastapi import APIRouter, Depends

from app.api.http_utils import envelope, page_payload
from app.core.dependencies import list_options, parse_uuid
from app.core.security import get_current_user_id
from app.repositories.likes import LikeRepository, get_like_repository
from app.schemas.engagement import LikeToggleOut
from app.schemas.video import VideoOut
from app.services.query_composer import ListOptions
from app.services.toggle import ToggleResult

router = APIRouter(prefix="/likes", tags=["Likes"])


def _toggled(result: ToggleResult, noun: str):
    message = f"{noun} liked successfully" if result.active else f"{noun} unliked successfully"
    return envelope(LikeToggleOut(is_liked=result.active), message)


@router.post("/toggle/v/{video_id}", summary="Toggle a video like")
async def toggle_video_like(
    video_id: str,
    actor_id: UUID = Depends(get_current_user_id),
    repo: LikeRepository = Depends(get_like_repository),
):
    vid = parse_uuid(video_id, "videoId")
    return _toggled(await repo.toggle_video_like(actor_id, vid), "Video")


@router.post("/toggle/c/{comment_id}", summary="Toggle a comment like")
async def toggle_comment_like(
    comment_id: str,
    actor_id: UUID = Depends(get_current_user_id),
    repo: LikeRepository = Depends(get_like_repository),
):
    cid = parse_uuid(comment_id, "commentId")
    return _toggled(await repo.toggle_comment_like(actor_id, cid), "Comment")


@router.post("/toggle/t/{tweet_id}", summary="Toggle a tweet like")
async def toggle_tweet_like(
    tweet_id: str,
    actor_id: UUID = Depends(get_current_user_id),
    repo: LikeRepository = Depends(get_like_repository),
):
    tid = parse_uuid(tweet_id, "tweetId")
    return _toggled(await repo.toggle_tweet_like(actor_id, tid), "Tweet")


@router.get("/videos", summary="List liked videos")
async def liked_videos(
    opts: ListOptions = Depends(list_options),
    actor_id: UUID = Depends(get_current_user_id),
    repo: LikeRepository = Depends(get_like_repository),
):
    result = await repo.liked_videos(actor_id, opts)
    return envelope(page_payload(result, VideoOut), "Liked videos fetched successfully")
