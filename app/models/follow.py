from datetime import datetime
from sqlalchemy import CheckConstraint
from sqlmodel import SQLModel, Field


class UserFollow(SQLModel, table=True):
    """Directed follow edge; existence of the row is the whole state"""

    __table_args__ = (
        CheckConstraint("follower_id != following_id", name="ck_userfollow_not_self"),
    )

    follower_id: str = Field(
        foreign_key="user.id",
        primary_key=True,
        index=True  # For faster following queries
    )
    following_id: str = Field(
        foreign_key="user.id",
        primary_key=True,
        index=True  # For faster follower queries
    )
    created_at: datetime = Field(default_factory=datetime.utcnow)
