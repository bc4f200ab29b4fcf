# ╔══════════════════════════════════════════════════════════════════════════╗
# ║ VidShare · Playlists API                                                  ║
# ╠──────────────────────────────────────────────────────────────────────────╣
# ║  - POST   /playlists                            → Create (201)            ║
# ║  - GET    /playlists/user/{userId}              → A user's playlists      ║
# ║  - GET    /playlists/{playlistId}               → Playlist + its videos   ║
# ║  - PATCH  /playlists/{playlistId}               → Rename / redescribe     ║
# ║  - DELETE /playlists/{playlistId}               → Delete                  ║
# ║  - PATCH  /playlists/add/{videoId}/{playlistId}    → Add a video          ║
# ║  - PATCH  /playlists/remove/{videoId}/{playlistId} → Remove a video       ║
# ╚══════════════════════════════════════════════════════════════════════════╝
"""Owner-curated playlists."""

from typing import Optional
from uuid import UUID

from fastapi import APIRouter, Depends, status

from app.api.http_utils import envelope, page_payload
from app.core.dependencies import list_options, parse_uuid
from app.core.security import get_current_user_id, get_optional_user_id
from app.repositories.playlists import PlaylistRepository, get_playlist_repository
from app.schemas.playlist import PlaylistDetail, PlaylistIn, PlaylistOut, PlaylistUpdate
from app.services.query_composer import ListOptions

router = APIRouter(prefix="/playlists", tags=["Playlists"])


@router.post("", status_code=status.HTTP_201_CREATED, summary="Create a playlist")
async def create_playlist(
    body: PlaylistIn,
    actor_id: UUID = Depends(get_current_user_id),
    repo: PlaylistRepository = Depends(get_playlist_repository),
):
    playlist = await repo.create(actor_id, body.name, body.description)
    return envelope(PlaylistOut.model_validate(playlist), "Playlist created successfully", status_code=status.HTTP_201_CREATED)


@router.get("/user/{user_id}", summary="List a user's playlists")
async def list_user_playlists(
    user_id: str,
    opts: ListOptions = Depends(list_options),
    actor_id: Optional[UUID] = Depends(get_optional_user_id),
    repo: PlaylistRepository = Depends(get_playlist_repository),
):
    uid = parse_uuid(user_id, "userId")
    result = await repo.list_for_user(uid, actor_id=actor_id, options=opts)
    return envelope(page_payload(result, PlaylistOut), "Playlists fetched successfully")


# ── Membership (declared before /{playlistId} routes) ─────────────────────────

@router.patch("/add/{video_id}/{playlist_id}", summary="Add a video to a playlist")
async def add_video(
    video_id: str,
    playlist_id: str,
    actor_id: UUID = Depends(get_current_user_id),
    repo: PlaylistRepository = Depends(get_playlist_repository),
):
    vid = parse_uuid(video_id, "videoId")
    pid = parse_uuid(playlist_id, "playlistId")
    await repo.add_video(pid, vid, actor_id)
    return envelope(PlaylistDetail.model_validate(await repo.get_detail(pid, actor_id)), "Video added to playlist")


@router.patch("/remove/{video_id}/{playlist_id}", summary="Remove a video from a playlist")
async def remove_video(
    video_id: str,
    playlist_id: str,
    actor_id: UUID = Depends(get_current_user_id),
    repo: PlaylistRepository = Depends(get_playlist_repository),
):
    vid = parse_uuid(video_id, "videoId")
    pid = parse_uuid(playlist_id, "playlistId")
    await repo.remove_video(pid, vid, actor_id)
    return envelope(PlaylistDetail.model_validate(await repo.get_detail(pid, actor_id)), "Video removed from playlist")


# ── Single playlist ──────────────────────────────────────────────────────────

@router.get("/{playlist_id}", summary="Get a playlist")
async def get_playlist(
    playlist_id: str,
    actor_id: Optional[UUID] = Depends(get_optional_user_id),
    repo: PlaylistRepository = Depends(get_playlist_repository),
):
    pid = parse_uuid(playlist_id, "playlistId")
    return envelope(PlaylistDetail.model_validate(await repo.get_detail(pid, actor_id)), "Playlist fetched successfully")


@router.patch("/{playlist_id}", summary="Update a playlist")
async def update_playlist(
    playlist_id: str,
    body: PlaylistUpdate,
    actor_id: UUID = Depends(get_current_user_id),
    repo: PlaylistRepository = Depends(get_playlist_repository),
):
    pid = parse_uuid(playlist_id, "playlistId")
    changes = body.model_dump(exclude_none=True)
    if not changes:
        current = await repo.get_owned(pid, actor_id)
        return envelope(PlaylistOut.model_validate(current), "No valid fields provided")
    playlist = await repo.update(pid, actor_id, **changes)
    return envelope(PlaylistOut.model_validate(playlist), "Playlist updated successfully")


@router.delete("/{playlist_id}", summary="Delete a playlist")
async def delete_playlist(
    playlist_id: str,
    actor_id: UUID = Depends(get_current_user_id),
    repo: PlaylistRepository = Depends(get_playlist_repository),
):
    pid = parse_uuid(playlist_id, "playlistId")
    playlist = await repo.delete(pid, actor_id)
    return envelope(PlaylistOut.model_validate(playlist), "Playlist deleted successfully")
