# app/db/models/__init__.py
from .user import User
from .video import Video
from .comment import Comment
from .tweet import Tweet
from .like import Like
from .subscription import Subscription
from .playlist import Playlist, PlaylistVideo

__all__ = [
    "User",
    "Video",
    "Comment",
    "Tweet",
    "Like",
    "Subscription",
    "Playlist",
    "PlaylistVideo",
]
