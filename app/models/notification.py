from datetime import datetime
from typing import Optional, TYPE_CHECKING
from sqlmodel import SQLModel, Field, Relationship
from sqlalchemy import Column, String

from app.models.user import generate_uuid
from app.schemas.notification import NotificationReference, load_reference

if TYPE_CHECKING:
    from .user import User

class Notification(SQLModel, table=True):
    id: str = Field(default_factory=generate_uuid, primary_key=True)

    user_id: str = Field(foreign_key="user.id", index=True)  # recipient
    actor_id: Optional[str] = Field(default=None, foreign_key="user.id")

    # Tag of the causing entity; reference_id is interpreted according to it
    type: str = Field(sa_column=Column(String(32), nullable=False, index=True))
    reference_id: str = Field(index=True)
    is_read: bool = Field(default=False)

    created_at: datetime = Field(default_factory=datetime.utcnow)

    # Relationships
    actor: Optional["User"] = Relationship(sa_relationship_kwargs={"foreign_keys": "[Notification.actor_id]"})

    @property
    def reference(self) -> NotificationReference:
        return load_reference(self.type, self.reference_id)
