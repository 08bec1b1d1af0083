from datetime import datetime
from typing import Optional, TYPE_CHECKING
from sqlmodel import SQLModel, Field, Relationship
from sqlalchemy import Column, String, UniqueConstraint
from app.models.user import generate_uuid
from app.schemas.enums import FriendshipStatus

if TYPE_CHECKING:
    from .user import User

class Friendship(SQLModel, table=True):
    """
    One directed half of a friendship.

    A mutual friendship is two accepted rows, (user_id, friend_id) and the
    reciprocal (friend_id, user_id). Blocked/restricted rows belong to the
    user who set them and have no counterpart.
    """

    __table_args__ = (
        UniqueConstraint("user_id", "friend_id", name="uq_friendship_pair"),
    )

    id: str = Field(default_factory=generate_uuid, primary_key=True)
    user_id: str = Field(foreign_key="user.id", index=True)
    friend_id: str = Field(foreign_key="user.id", index=True)

    # Store status as VARCHAR, not Enum
    status: str = Field(
        sa_column=Column(String(20), nullable=False, default=FriendshipStatus.PENDING.value)
    )

    created_at: datetime = Field(default_factory=datetime.utcnow)
    updated_at: datetime = Field(default_factory=datetime.utcnow)

    user: Optional["User"] = Relationship(sa_relationship_kwargs={"foreign_keys": "[Friendship.user_id]"})
    friend: Optional["User"] = Relationship(sa_relationship_kwargs={"foreign_keys": "[Friendship.friend_id]"})
