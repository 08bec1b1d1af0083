from datetime import datetime
from typing import Optional, List
from pydantic import BaseModel, Field
from app.schemas.enums import LikeAction, PostPrivacy
from app.schemas.user import UserPublic
from app.schemas.post_comment import CommentRead

class PostCreate(BaseModel):
    content: Optional[str] = Field(None, max_length=5000)
    image_url: Optional[str] = None
    video_url: Optional[str] = None
    privacy: PostPrivacy = PostPrivacy.PUBLIC

class PostUpdate(BaseModel):
    content: Optional[str] = Field(None, max_length=5000)
    image_url: Optional[str] = None
    video_url: Optional[str] = None
    privacy: Optional[PostPrivacy] = None

class PostRead(BaseModel):
    id: str
    user_id: str
    content: Optional[str] = None
    image_url: Optional[str] = None
    video_url: Optional[str] = None
    privacy: PostPrivacy
    created_at: datetime
    updated_at: datetime

    class Config:
        from_attributes = True

class PostDetail(PostRead):
    user: Optional[UserPublic] = None
    comments: List[CommentRead] = []

class PostMutationResponse(BaseModel):
    message: str
    post: PostRead

class LikeToggleResponse(BaseModel):
    message: LikeAction
    likes_count: int
