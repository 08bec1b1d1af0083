from datetime import datetime
from sqlmodel import SQLModel, Field

class PostLike(SQLModel, table=True):
    post_id: str = Field(foreign_key="post.id", primary_key=True)
    user_id: str = Field(foreign_key="user.id", primary_key=True)
    created_at: datetime = Field(default_factory=datetime.utcnow)
