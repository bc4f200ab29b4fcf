# ╔══════════════════════════════════════════════════════════════════════════╗
# ║ VidShare · Videos API                                                     ║
# ╠──────────────────────────────────────────────────────────────────────────╣
# ║ Endpoints:                                                                ║
# ║  - GET    /videos                          → Public feed (paginated)      ║
# ║  - POST   /videos                          → Publish (multipart, 201)     ║
# ║  - GET    /videos/{videoId}                → Detail (+ view increment)    ║
# ║  - PATCH  /videos/{videoId}                → Update title/desc/thumbnail  ║
# ║  - DELETE /videos/{videoId}                → Delete (+ media cleanup)     ║
# ║  - PATCH  /videos/toggle/publish/{videoId} → Flip isPublished             ║
# ╠──────────────────────────────────────────────────────────────────────────╣
# ║ Practices                                                                 ║
# ║  - Reads accept anonymous callers; writes are owner-only.                 ║
# ║  - Drafts are visible to their owner only (404 for everyone else).        ║
# ║  - New media is stored before the row changes; old media is removed       ║
# ║    best-effort after the row change commits.                              ║
# ╚══════════════════════════════════════════════════════════════════════════╝
"""Video publishing, feed and owner management."""

import logging
from typing import Optional
from uuid import UUID

from fastapi import APIRouter, BackgroundTasks, Depends, File, Form, Query, UploadFile, status

from app.api.http_utils import envelope, page_payload
from app.core.dependencies import list_options, parse_uuid
from app.core.exceptions import InvalidInputError
from app.core.security import get_current_user_id, get_optional_user_id
from app.repositories.videos import VideoRepository, get_video_repository, increment_views
from app.schemas.video import VideoDeleted, VideoOut
from app.services.media_storage import (
    THUMBNAIL_FOLDER,
    VIDEO_FOLDER,
    MediaStore,
    get_media_store,
    remove_quietly,
    save_upload,
)
from app.services.query_composer import ListOptions

logger = logging.getLogger(__name__)

router = APIRouter(prefix="/videos", tags=["Videos"])


def _require_text(value: Optional[str], field: str) -> str:
    text = (value or "").strip()
    if not text:
        raise InvalidInputError(f"{field} is required", errors=[{"field": field, "message": "must not be blank"}])
    return text


# ─────────────────────────────────────────────────────────────────────────────
# 📺 Feed & detail
# ─────────────────────────────────────────────────────────────────────────────

@router.get("", summary="List published videos")
async def list_videos(
    user_id: Optional[str] = Query(None, alias="userId"),
    opts: ListOptions = Depends(list_options),
    actor_id: Optional[UUID] = Depends(get_optional_user_id),
    repo: VideoRepository = Depends(get_video_repository),
):
    owner_id = parse_uuid(user_id, "userId") if user_id else None
    result = await repo.list_videos(actor_id=actor_id, options=opts, owner_id=owner_id)
    return envelope(page_payload(result, VideoOut), "Videos fetched successfully")


@router.get("/{video_id}", summary="Get a video")
async def get_video(
    background: BackgroundTasks,
    video_id: str,
    actor_id: Optional[UUID] = Depends(get_optional_user_id),
    repo: VideoRepository = Depends(get_video_repository),
):
    """
    Video detail with owner channel info and like state.

    The view counter is bumped after the response is sent; a failed bump is
    logged and never affects this response.
    """
    vid = parse_uuid(video_id, "videoId")
    video = await repo.get_detail(vid, actor_id)
    background.add_task(increment_views, vid)
    return envelope(VideoOut.model_validate(video), "Video fetched successfully")


# ─────────────────────────────────────────────────────────────────────────────
# ⬆️ Publish
# ─────────────────────────────────────────────────────────────────────────────

@router.post("", status_code=status.HTTP_201_CREATED, summary="Publish a video")
async def publish_video(
    title: Optional[str] = Form(None),
    description: Optional[str] = Form(None),
    duration: Optional[float] = Form(None),
    video_file: Optional[UploadFile] = File(None, alias="videoFile"),
    thumbnail: Optional[UploadFile] = File(None),
    actor_id: UUID = Depends(get_current_user_id),
    repo: VideoRepository = Depends(get_video_repository),
    store: MediaStore = Depends(get_media_store),
):
    # 1) Validate text fields and stage both uploads
    title = _require_text(title, "title")
    description = _require_text(description, "description")
    video_path = await save_upload(video_file, "videoFile")
    try:
        thumb_path = await save_upload(thumbnail, "thumbnail")
    except Exception:
        video_path.unlink(missing_ok=True)
        raise

    # 2) Store media (a failure aborts the publish)
    try:
        stored_video = await store.store(video_path, folder=VIDEO_FOLDER)
    except Exception:
        thumb_path.unlink(missing_ok=True)
        raise
    try:
        stored_thumb = await store.store(thumb_path, folder=THUMBNAIL_FOLDER)
    except Exception:
        await remove_quietly(store, stored_video.url)
        raise

    # 3) Persist
    try:
        video = await repo.create(
            owner_id=actor_id,
            title=title,
            description=description,
            video_file=stored_video.url,
            thumbnail=stored_thumb.url,
            duration=duration if duration is not None else (stored_video.duration or 0),
        )
    except Exception:
        await remove_quietly(store, stored_video.url, stored_thumb.url)
        raise

    logger.info("Video %s published by %s", video["id"], actor_id)
    return envelope(VideoOut.model_validate(video), "Video published successfully", status_code=status.HTTP_201_CREATED)


# ─────────────────────────────────────────────────────────────────────────────
# ✏️ Owner writes
# ─────────────────────────────────────────────────────────────────────────────

@router.patch("/toggle/publish/{video_id}", summary="Toggle publish status")
async def toggle_publish(
    video_id: str,
    actor_id: UUID = Depends(get_current_user_id),
    repo: VideoRepository = Depends(get_video_repository),
):
    vid = parse_uuid(video_id, "videoId")
    video = await repo.toggle_publish(vid, actor_id)
    return envelope(VideoOut.model_validate(video), "Publish status toggled successfully")


@router.patch("/{video_id}", summary="Update a video")
async def update_video(
    video_id: str,
    title: Optional[str] = Form(None),
    description: Optional[str] = Form(None),
    thumbnail: Optional[UploadFile] = File(None),
    actor_id: UUID = Depends(get_current_user_id),
    repo: VideoRepository = Depends(get_video_repository),
    store: MediaStore = Depends(get_media_store),
):
    """
    Partial update by the owner.

    Steps
    -----
    1) Ownership check (404 before 403) before any upload is stored.
    2) New thumbnail stored; failure aborts with the row untouched.
    3) Row updated; previous thumbnail removed best-effort.
    """
    vid = parse_uuid(video_id, "videoId")
    current = await repo.get_owned(vid, actor_id)

    changes = {}
    if title is not None and title.strip():
        changes["title"] = title.strip()
    if description is not None and description.strip():
        changes["description"] = description.strip()

    if thumbnail is not None and thumbnail.filename:
        stored = await store.store(await save_upload(thumbnail, "thumbnail"), folder=THUMBNAIL_FOLDER)
        changes["thumbnail"] = stored.url

    if not changes:
        return envelope(VideoOut.model_validate(current), "No valid fields provided")

    try:
        video = await repo.update(vid, actor_id, **changes)
    except Exception:
        if "thumbnail" in changes:
            await remove_quietly(store, changes["thumbnail"])
        raise

    if "thumbnail" in changes:
        await remove_quietly(store, current["thumbnail"])
    return envelope(VideoOut.model_validate(video), "Video updated successfully")


@router.delete("/{video_id}", summary="Delete a video")
async def delete_video(
    video_id: str,
    actor_id: UUID = Depends(get_current_user_id),
    repo: VideoRepository = Depends(get_video_repository),
    store: MediaStore = Depends(get_media_store),
):
    vid = parse_uuid(video_id, "videoId")
    deleted = await repo.delete(vid, actor_id)
    await remove_quietly(store, deleted["video_file"], deleted["thumbnail"])
    logger.info("Video %s deleted by %s", vid, actor_id)
    return envelope(VideoDeleted(deleted_video_id=deleted["id"]), "Video deleted successfully")
