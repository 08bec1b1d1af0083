from typing import List
from app.models.friendship import Friendship
from app.models.user import User
from app.schemas.friendship import FriendRead, FriendshipRead
from app.schemas.user import UserPublic


def _public(user: User) -> UserPublic:
    return UserPublic(id=str(user.id), name=user.name)


def format_friendship(row: Friendship, with_sender: bool = False, with_friend: bool = False) -> FriendshipRead:
    """Serialize a request row; incoming lists show the sender, outgoing ones the addressee"""
    return FriendshipRead(
        id=str(row.id),
        user_id=str(row.user_id),
        friend_id=str(row.friend_id),
        status=row.status,
        created_at=row.created_at,
        sender=_public(row.user) if with_sender and row.user else None,
        friend=_public(row.friend) if with_friend and row.friend else None,
    )


def format_friends(entries: List[dict]) -> List[FriendRead]:
    return [
        FriendRead(id=str(entry["id"]), status=entry["status"], friend=_public(entry["friend"]))
        for entry in entries
    ]
