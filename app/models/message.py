from datetime import datetime
from typing import Optional, TYPE_CHECKING
from sqlmodel import SQLModel, Field, Relationship

from app.models.user import generate_uuid

if TYPE_CHECKING:
    from .user import User

class Message(SQLModel, table=True):
    id: str = Field(default_factory=generate_uuid, primary_key=True)
    sender_id: str = Field(foreign_key="user.id", index=True)
    receiver_id: str = Field(foreign_key="user.id", index=True)
    content: str = Field(..., max_length=2000)
    created_at: datetime = Field(default_factory=datetime.utcnow)
    updated_at: datetime = Field(default_factory=datetime.utcnow)

    sender: Optional["User"] = Relationship(sa_relationship_kwargs={"foreign_keys": "[Message.sender_id]"})
    receiver: Optional["User"] = Relationship(sa_relationship_kwargs={"foreign_keys": "[Message.receiver_id]"})
