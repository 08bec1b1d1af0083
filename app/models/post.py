from datetime import datetime
from typing import Optional, List, TYPE_CHECKING
from sqlmodel import SQLModel, Field, Relationship
from sqlalchemy import Column, String, Text

from app.models.user import generate_uuid
from app.schemas.enums import PostPrivacy

if TYPE_CHECKING:
    from .user import User
    from .post_comment import Comment

class Post(SQLModel, table=True):
    id: str = Field(default_factory=generate_uuid, primary_key=True)
    user_id: str = Field(foreign_key="user.id", index=True)
    content: Optional[str] = Field(default=None, sa_column=Column(Text, nullable=True))
    image_url: Optional[str] = Field(default=None)
    video_url: Optional[str] = Field(default=None)
    privacy: str = Field(
        sa_column=Column(String(20), nullable=False, default=PostPrivacy.PUBLIC.value)
    )
    created_at: datetime = Field(default_factory=datetime.utcnow)
    updated_at: datetime = Field(default_factory=datetime.utcnow)

    user: Optional["User"] = Relationship()
    comments: List["Comment"] = Relationship(
        back_populates="post",
        sa_relationship_kwargs={"order_by": "Comment.created_at"}
    )
