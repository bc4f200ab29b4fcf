# ╔══════════════════════════════════════════════════════════════════════════╗
# ║ VidShare · Channel Dashboard API (caller's own channel)                   ║
# ╠──────────────────────────────────────────────────────────────────────────╣
# ║  - GET /dashboard/stats                           → Channel totals        ║
# ║  - GET /dashboard/videos                          → Own uploads + drafts  ║
# ║  - GET /dashboard/engagement/{videoId}/{channelId} → isLiked/isSubscribed ║
# ╚══════════════════════════════════════════════════════════════════════════╝
"""Channel owner dashboard."""

from uuid import UUID

from fastapi import APIRouter, Depends

from app.api.http_utils import envelope, page_payload
from app.core.dependencies import list_options, parse_uuid
from app.core.security import get_current_user_id
from app.repositories.dashboard import DashboardRepository, get_dashboard_repository
from app.schemas.engagement import ChannelStats, EngagementStatus
from app.schemas.video import VideoOut
from app.services.query_composer import ListOptions

router = APIRouter(prefix="/dashboard", tags=["Dashboard"])


@router.get("/stats", summary="Channel statistics")
async def channel_stats(
    actor_id: UUID = Depends(get_current_user_id),
    repo: DashboardRepository = Depends(get_dashboard_repository),
):
    stats = await repo.channel_stats(actor_id)
    return envelope(ChannelStats.model_validate(stats), "Channel stats fetched successfully")


@router.get("/videos", summary="Channel videos")
async def channel_videos(
    opts: ListOptions = Depends(list_options),
    actor_id: UUID = Depends(get_current_user_id),
    repo: DashboardRepository = Depends(get_dashboard_repository),
):
    result = await repo.channel_videos(actor_id, opts)
    return envelope(page_payload(result, VideoOut), "Channel videos fetched successfully")


@router.get("/engagement/{video_id}/{channel_id}", summary="Caller engagement with a video and channel")
async def engagement(
    video_id: str,
    channel_id: str,
    actor_id: UUID = Depends(get_current_user_id),
    repo: DashboardRepository = Depends(get_dashboard_repository),
):
    vid = parse_uuid(video_id, "videoId")
    cid = parse_uuid(channel_id, "channelId")
    status_ = await repo.engagement(actor_id, vid, cid)
    return envelope(EngagementStatus.model_validate(status_), "Engagement status fetched successfully")
