from datetime import datetime
from typing import Optional
from uuid import UUID
from pydantic import BaseModel
from app.schemas.enums import FriendshipStatus
from app.schemas.user import UserPublic

class FriendTarget(BaseModel):
    """Body of send/unfriend/block/restrict"""
    friend_id: UUID

class FriendRequestAccept(BaseModel):
    request_id: UUID

class FriendshipRead(BaseModel):
    id: str
    user_id: str
    friend_id: str
    status: FriendshipStatus
    created_at: datetime
    sender: Optional[UserPublic] = None
    friend: Optional[UserPublic] = None

class FriendRead(BaseModel):
    """An accepted friendship seen from the actor's side"""
    id: str
    status: FriendshipStatus
    friend: UserPublic

class FriendActionResponse(BaseModel):
    message: str
    request_id: Optional[str] = None
