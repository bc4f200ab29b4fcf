# ╔══════════════════════════════════════════════════════════════════════════╗
# ║ VidShare · Subscriptions API                                              ║
# ╠──────────────────────────────────────────────────────────────────────────╣
# ║  - POST /subscriptions/c/{channelId} → Subscribe/unsubscribe              ║
# ║  - GET  /subscriptions/c             → Channels the caller follows        ║
# ║  - GET  /subscriptions/u/{channelId} → Subscribers of a channel           ║
# ╚══════════════════════════════════════════════════════════════════════════╝
"""Channel subscriptions."""

from uuid import UUID

from fastapi import APIRouter, Depends

from app.api.http_utils import envelope, page_payload
from app.core.dependencies import list_options, parse_uuid
from app.core.security import get_current_user_id
from app.repositories.subscriptions import SubscriptionRepository, get_subscription_repository
from app.schemas.common import ChannelProfile
from app.schemas.engagement import SubscriptionToggleOut
from app.services.query_composer import ListOptions

router = APIRouter(prefix="/subscriptions", tags=["Subscriptions"])


@router.post("/c/{channel_id}", summary="Toggle a subscription")
async def toggle_subscription(
    channel_id: str,
    actor_id: UUID = Depends(get_current_user_id),
    repo: SubscriptionRepository = Depends(get_subscription_repository),
):
    cid = parse_uuid(channel_id, "channelId")
    result = await repo.toggle(actor_id, cid)
    message = "Subscribed successfully" if result.active else "Unsubscribed successfully"
    return envelope(SubscriptionToggleOut(is_subscribed=result.active), message)


@router.get("/c", summary="List subscribed channels")
async def subscribed_channels(
    opts: ListOptions = Depends(list_options),
    actor_id: UUID = Depends(get_current_user_id),
    repo: SubscriptionRepository = Depends(get_subscription_repository),
):
    result = await repo.subscribed_channels(actor_id, opts)
    return envelope(page_payload(result, ChannelProfile), "Subscribed channels fetched successfully")


@router.get("/u/{channel_id}", summary="List channel subscribers")
async def channel_subscribers(
    channel_id: str,
    opts: ListOptions = Depends(list_options),
    actor_id: UUID = Depends(get_current_user_id),
    repo: SubscriptionRepository = Depends(get_subscription_repository),
):
    cid = parse_uuid(channel_id, "channelId")
    result = await repo.subscribers_of(cid, actor_id, opts)
    return envelope(page_payload(result, ChannelProfile), "Subscribers fetched successfully")
