from datetime import datetime
from typing import Optional, TYPE_CHECKING
from sqlmodel import SQLModel, Field, Relationship

from app.models.user import generate_uuid

if TYPE_CHECKING:
    from .post import Post
    from .user import User

class Comment(SQLModel, table=True):
    id: str = Field(default_factory=generate_uuid, primary_key=True)
    content: str = Field(..., max_length=2000)
    post_id: str = Field(foreign_key="post.id", index=True)
    user_id: str = Field(foreign_key="user.id")
    parent_comment_id: Optional[str] = Field(default=None, foreign_key="comment.id", index=True)
    created_at: datetime = Field(default_factory=datetime.utcnow)
    updated_at: datetime = Field(default_factory=datetime.utcnow)

    post: Optional["Post"] = Relationship(back_populates="comments")
    user: Optional["User"] = Relationship()
