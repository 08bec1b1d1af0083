from datetime import datetime
from typing import Optional
from uuid import UUID
from pydantic import BaseModel, Field, field_validator
from app.schemas.user import UserPublic

class MessageCreate(BaseModel):
    receiver_id: UUID
    content: str = Field(..., min_length=1, max_length=2000)

class MessageUpdate(BaseModel):
    content: str = Field(..., min_length=1, max_length=2000)

    @field_validator("content")
    @classmethod
    def strip_content(cls, v: str) -> str:
        v = v.strip()
        if not v:
            raise ValueError("Content must not be blank")
        return v

class MessageRead(BaseModel):
    id: str
    sender_id: str
    receiver_id: str
    content: str
    created_at: datetime
    updated_at: datetime
    sender: Optional[UserPublic] = None
    receiver: Optional[UserPublic] = None

    class Config:
        from_attributes = True

class MessageMutationResponse(BaseModel):
    message: str
    data: MessageRead
