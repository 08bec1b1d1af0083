from datetime import datetime
from typing import Optional
from uuid import UUID
from pydantic import BaseModel, Field, field_validator

class CommentCreate(BaseModel):
    post_id: UUID
    content: str = Field(..., min_length=1, max_length=2000)
    parent_comment_id: Optional[UUID] = None

class CommentUpdate(BaseModel):
    content: str = Field(..., min_length=1, max_length=2000)

    @field_validator("content")
    @classmethod
    def strip_content(cls, v: str) -> str:
        v = v.strip()
        if not v:
            raise ValueError("Content must not be blank")
        return v

class CommentRead(BaseModel):
    id: str
    post_id: str
    user_id: str
    parent_comment_id: Optional[str] = None
    content: str
    created_at: datetime
    updated_at: datetime

    class Config:
        from_attributes = True

class CommentMutationResponse(BaseModel):
    message: str
    comment: CommentRead
