# tests/test_repositories/test_engagement_repositories.py
import uuid

import pytest

from app.core.exceptions import ConflictError, ForbiddenError, InvalidInputError, NotFoundError
from app.db.models import Comment, Playlist, Tweet, User, Video
from app.repositories.likes import LikeRepository
from app.repositories.playlists import PlaylistRepository
from app.repositories.subscriptions import SubscriptionRepository

pytestmark = pytest.mark.anyio


# ─────────────────────────────────────────────────────────────────────────────
# Likes
# ─────────────────────────────────────────────────────────────────────────────

async def test_like_video_respects_visibility(edge_session, alice_id, bob_id):
    draft = edge_session.add_object(Video, id=uuid.uuid4(), owner_id=alice_id, is_published=False)
    repo = LikeRepository(edge_session)

    with pytest.raises(NotFoundError):
        await repo.toggle_video_like(bob_id, draft.id)
    assert edge_session.statements == []

    # Owner sees their own draft
    assert (await repo.toggle_video_like(alice_id, draft.id)).active is True


async def test_like_comment_and_tweet_require_existing_target(edge_session, alice_id):
    repo = LikeRepository(edge_session)
    with pytest.raises(NotFoundError):
        await repo.toggle_comment_like(alice_id, uuid.uuid4())
    with pytest.raises(NotFoundError):
        await repo.toggle_tweet_like(alice_id, uuid.uuid4())

    comment = edge_session.add_object(Comment, id=uuid.uuid4(), owner_id=alice_id)
    tweet = edge_session.add_object(Tweet, id=uuid.uuid4(), owner_id=alice_id)
    assert (await repo.toggle_comment_like(alice_id, comment.id)).active
    assert (await repo.toggle_tweet_like(alice_id, tweet.id)).active
    assert not (await repo.toggle_tweet_like(alice_id, tweet.id)).active


# ─────────────────────────────────────────────────────────────────────────────
# Subscriptions
# ─────────────────────────────────────────────────────────────────────────────

async def test_cannot_subscribe_to_self(edge_session, alice_id):
    edge_session.add_object(User, id=alice_id)
    with pytest.raises(InvalidInputError):
        await SubscriptionRepository(edge_session).toggle(alice_id, alice_id)
    assert edge_session.statements == []


async def test_subscribe_to_missing_channel(edge_session, alice_id):
    with pytest.raises(NotFoundError):
        await SubscriptionRepository(edge_session).toggle(alice_id, uuid.uuid4())


async def test_subscription_toggle_round_trip(edge_session, alice_id, bob_id):
    edge_session.add_object(User, id=bob_id)
    repo = SubscriptionRepository(edge_session)

    assert (await repo.toggle(alice_id, bob_id)).active is True
    assert (await repo.toggle(alice_id, bob_id)).active is False
    assert edge_session.rows("subscriptions") == []


# ─────────────────────────────────────────────────────────────────────────────
# Playlist membership
# ─────────────────────────────────────────────────────────────────────────────

@pytest.fixture()
def playlist_world(edge_session, alice_id, bob_id):
    playlist = edge_session.add_object(Playlist, id=uuid.uuid4(), owner_id=alice_id)
    video = edge_session.add_object(Video, id=uuid.uuid4(), owner_id=bob_id, is_published=True)
    draft = edge_session.add_object(Video, id=uuid.uuid4(), owner_id=bob_id, is_published=False)
    return PlaylistRepository(edge_session), playlist, video, draft


async def test_add_then_duplicate_add_conflicts(playlist_world, edge_session, alice_id):
    repo, playlist, video, _ = playlist_world

    await repo.add_video(playlist.id, video.id, alice_id)
    assert len(edge_session.rows("playlist_videos")) == 1

    with pytest.raises(ConflictError) as ei:
        await repo.add_video(playlist.id, video.id, alice_id)
    assert ei.value.message == "Video already exists in playlist"
    assert edge_session.rollbacks == 1
    assert len(edge_session.rows("playlist_videos")) == 1


async def test_remove_requires_membership(playlist_world, edge_session, alice_id):
    repo, playlist, video, _ = playlist_world

    with pytest.raises(NotFoundError) as ei:
        await repo.remove_video(playlist.id, video.id, alice_id)
    assert ei.value.message == "Video not found in playlist"

    await repo.add_video(playlist.id, video.id, alice_id)
    await repo.remove_video(playlist.id, video.id, alice_id)
    assert edge_session.rows("playlist_videos") == []


async def test_membership_changes_are_owner_only(playlist_world, bob_id):
    repo, playlist, video, _ = playlist_world

    with pytest.raises(ForbiddenError):
        await repo.add_video(playlist.id, video.id, bob_id)
    with pytest.raises(ForbiddenError):
        await repo.remove_video(playlist.id, video.id, bob_id)
    with pytest.raises(NotFoundError):
        await repo.add_video(uuid.uuid4(), video.id, bob_id)


async def test_cannot_add_missing_or_hidden_video(playlist_world, alice_id):
    repo, playlist, _, draft = playlist_world

    with pytest.raises(NotFoundError):
        await repo.add_video(playlist.id, uuid.uuid4(), alice_id)
    with pytest.raises(NotFoundError):
        await repo.add_video(playlist.id, draft.id, alice_id)
