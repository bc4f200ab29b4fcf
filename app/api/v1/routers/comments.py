# ╔══════════════════════════════════════════════════════════════════════════╗
# ║ VidShare · Comments API                                                   ║
# ╠──────────────────────────────────────────────────────────────────────────╣
# ║  - GET    /comments/{videoId}     → Comments on a visible video           ║
# ║  - POST   /comments/{videoId}     → Add a comment (201)                   ║
# ║  - PATCH  /comments/c/{commentId} → Edit own comment                      ║
# ║  - DELETE /comments/c/{commentId} → Delete own comment                    ║
# ╚══════════════════════════════════════════════════════════════════════════╝
"""Per-video comment threads."""

from typing import Optional
from uuid import UUID

from fastapi import APIRouter, Depends, status

from app.api.http_utils import envelope, page_payload
from app.core.dependencies import list_options, parse_uuid
from app.core.security import get_current_user_id, get_optional_user_id
from app.repositories.comments import CommentRepository, get_comment_repository
from app.schemas.comment import CommentIn, CommentOut
from app.services.query_composer import ListOptions

router = APIRouter(prefix="/comments", tags=["Comments"])


@router.get("/{video_id}", summary="List comments of a video")
async def list_comments(
    video_id: str,
    opts: ListOptions = Depends(list_options),
    actor_id: Optional[UUID] = Depends(get_optional_user_id),
    repo: CommentRepository = Depends(get_comment_repository),
):
    vid = parse_uuid(video_id, "videoId")
    result = await repo.list_for_video(vid, actor_id=actor_id, options=opts)
    return envelope(page_payload(result, CommentOut), "Comments fetched successfully")


@router.post("/{video_id}", status_code=status.HTTP_201_CREATED, summary="Add a comment")
async def add_comment(
    video_id: str,
    body: CommentIn,
    actor_id: UUID = Depends(get_current_user_id),
    repo: CommentRepository = Depends(get_comment_repository),
):
    vid = parse_uuid(video_id, "videoId")
    comment = await repo.add(vid, actor_id, body.content)
    return envelope(CommentOut.model_validate(comment), "Comment added successfully", status_code=status.HTTP_201_CREATED)


@router.patch("/c/{comment_id}", summary="Edit a comment")
async def update_comment(
    comment_id: str,
    body: CommentIn,
    actor_id: UUID = Depends(get_current_user_id),
    repo: CommentRepository = Depends(get_comment_repository),
):
    cid = parse_uuid(comment_id, "commentId")
    comment = await repo.update(cid, actor_id, body.content)
    return envelope(CommentOut.model_validate(comment), "Comment updated successfully")


@router.delete("/c/{comment_id}", summary="Delete a comment")
async def delete_comment(
    comment_id: str,
    actor_id: UUID = Depends(get_current_user_id),
    repo: CommentRepository = Depends(get_comment_repository),
):
    cid = parse_uuid(comment_id, "commentId")
    comment = await repo.delete(cid, actor_id)
    return envelope(CommentOut.model_validate(comment), "Comment deleted successfully")
