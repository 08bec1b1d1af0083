from datetime import datetime
from typing import Optional, List, Literal, Union, Annotated
from pydantic import BaseModel, Field, TypeAdapter

from app.schemas.enums import NotificationType
from app.schemas.user import UserPublic


# Typed references to the entity that caused a notification. Stored as
# (type, reference_id); the tag selects which id the reference carries.

class CommentRef(BaseModel):
    type: Literal["comment"] = NotificationType.COMMENT.value
    comment_id: str

    @property
    def reference_id(self) -> str:
        return self.comment_id

class LikeRef(BaseModel):
    """A like is referenced through the liked post"""
    type: Literal["like"] = NotificationType.LIKE.value
    post_id: str

    @property
    def reference_id(self) -> str:
        return self.post_id

class MessageRef(BaseModel):
    type: Literal["message"] = NotificationType.MESSAGE.value
    message_id: str

    @property
    def reference_id(self) -> str:
        return self.message_id

class FriendRequestRef(BaseModel):
    type: Literal["friend_request"] = NotificationType.FRIEND_REQUEST.value
    friendship_id: str

    @property
    def reference_id(self) -> str:
        return self.friendship_id


NotificationReference = Annotated[
    Union[CommentRef, LikeRef, MessageRef, FriendRequestRef],
    Field(discriminator="type"),
]

_REFERENCE_ID_FIELDS = {
    NotificationType.COMMENT.value: "comment_id",
    NotificationType.LIKE.value: "post_id",
    NotificationType.MESSAGE.value: "message_id",
    NotificationType.FRIEND_REQUEST.value: "friendship_id",
}

_reference_adapter = TypeAdapter(NotificationReference)


def load_reference(type_: str, reference_id: str) -> NotificationReference:
    """Rebuild the typed reference from its stored (type, reference_id) pair"""
    try:
        id_field = _REFERENCE_ID_FIELDS[type_]
    except KeyError:
        raise ValueError(f"Unknown notification type: {type_}")
    return _reference_adapter.validate_python({"type": type_, id_field: reference_id})


class NotificationRead(BaseModel):
    id: str
    type: NotificationType
    reference_id: str
    reference: NotificationReference
    is_read: bool
    created_at: datetime
    actor: Optional[UserPublic] = None

    class Config:
        from_attributes = True

class NotificationResponse(BaseModel):
    unread_count: int
    notifications: List[NotificationRead]
