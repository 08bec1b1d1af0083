"""
Models package initialization
"""

from .user import User
from .follow import UserFollow
from .friendship import Friendship
from .notification import Notification
from .post import Post
from .post_comment import Comment
from .post_like import PostLike
from .message import Message

__all__ = [
    "User", "UserFollow", "Friendship", "Notification",
    "Post", "Comment", "PostLike", "Message",
]
