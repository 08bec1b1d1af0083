"""
Enumeration definitions for relationship states, notification kinds and fixed options.
"""

from enum import Enum

class FriendshipStatus(str, Enum):
    PENDING = "pending"
    ACCEPTED = "accepted"
    BLOCKED = "blocked"
    RESTRICTED = "restricted"

    @classmethod
    def list(cls):
        return [item.value for item in cls]

class NotificationType(str, Enum):
    COMMENT = "comment"
    LIKE = "like"
    MESSAGE = "message"
    FRIEND_REQUEST = "friend_request"

    @classmethod
    def list(cls):
        return [item.value for item in cls]

class PostPrivacy(str, Enum):
    PUBLIC = "public"
    FRIENDS = "friends"
    PRIVATE = "private"

    @classmethod
    def list(cls):
        return [item.value for item in cls]

class FollowAction(str, Enum):
    FOLLOWED = "Followed"
    UNFOLLOWED = "Unfollowed"

class LikeAction(str, Enum):
    LIKED = "Liked"
    UNLIKED = "Unliked"
