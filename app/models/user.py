import uuid
from datetime import datetime
from typing import Optional

from sqlmodel import SQLModel, Field


def generate_uuid() -> str:
    return str(uuid.uuid4())


class UserBase(SQLModel):
    """Base fields shared across all user schemas"""
    name: str = Field(..., min_length=1, max_length=255)
    email: str = Field(..., max_length=255, unique=True, index=True)


class User(UserBase, table=True):
    """Identity anchor for every relationship, post and message"""
    id: str = Field(default_factory=generate_uuid, primary_key=True)
    hashed_password: str
    is_active: bool = Field(default=True)
    created_at: datetime = Field(default_factory=datetime.utcnow)
    updated_at: Optional[datetime] = Field(default=None)
