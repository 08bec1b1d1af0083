import logging
from datetime import datetime
from typing import List
from sqlalchemy.ext.asyncio import AsyncSession
from sqlalchemy.exc import SQLAlchemyError
from sqlalchemy.orm import selectinload
from sqlmodel import select, or_
from app.models.message import Message
from app.schemas.message import MessageCreate, MessageUpdate
from app.schemas.enums import NotificationType
from app.schemas.notification import MessageRef
from app.core.exceptions import CustomHTTPException, ForbiddenError, NotFoundError
from app.crud.user import require_user
from app.crud.notification import emit_notification, delete_source_notifications

logger = logging.getLogger(__name__)


def _with_parties(statement):
    return statement.options(selectinload(Message.sender), selectinload(Message.receiver))


async def list_messages(db: AsyncSession, user_id: str) -> List[Message]:
    """Messages the user sent or received, newest first"""
    result = await db.execute(
        _with_parties(select(Message))
        .where(or_(Message.sender_id == user_id, Message.receiver_id == user_id))
        .order_by(Message.created_at.desc())
    )
    return result.scalars().all()


async def get_message(db: AsyncSession, message_id: str) -> Message:
    result = await db.execute(_with_parties(select(Message)).where(Message.id == message_id))
    message = result.scalar_one_or_none()
    if not message:
        raise NotFoundError("Message not found")
    return message


async def send_message(db: AsyncSession, sender_id: str, data: MessageCreate) -> Message:
    receiver_id = str(data.receiver_id)
    await require_user(db, receiver_id, "Receiver not found")

    message = Message(sender_id=sender_id, receiver_id=receiver_id, content=data.content)
    try:
        db.add(message)
        await db.commit()
    except SQLAlchemyError:
        await db.rollback()
        logger.error(f"Failed to send message {sender_id} -> {receiver_id}", exc_info=True)
        raise CustomHTTPException(500, "Failed to send message")

    logger.info(f"Message {message.id} sent from {sender_id} to {receiver_id}")
    await emit_notification(db, recipient_id=receiver_id, actor_id=sender_id, reference=MessageRef(message_id=message.id))
    await db.refresh(message, attribute_names=["sender", "receiver"])
    return message


async def _own_message(db: AsyncSession, message_id: str, user_id: str, action: str) -> Message:
    message = await get_message(db, message_id)
    if message.sender_id != user_id:
        raise ForbiddenError(f"You are not allowed to {action} this message")
    return message


async def update_message(db: AsyncSession, message_id: str, user_id: str, data: MessageUpdate) -> Message:
    message = await _own_message(db, message_id, user_id, "update")
    message.content = data.content
    message.updated_at = datetime.utcnow()
    try:
        await db.commit()
    except SQLAlchemyError:
        await db.rollback()
        logger.error(f"Failed to update message {message_id}", exc_info=True)
        raise CustomHTTPException(500, "Failed to update message")
    return message


async def delete_message(db: AsyncSession, message_id: str, user_id: str) -> None:
    message = await _own_message(db, message_id, user_id, "delete")
    try:
        await delete_source_notifications(db, NotificationType.MESSAGE, [message_id])
        await db.delete(message)
        await db.commit()
    except SQLAlchemyError:
        await db.rollback()
        logger.error(f"Failed to delete message {message_id}", exc_info=True)
        raise CustomHTTPException(500, "Failed to delete message")
    logger.info(f"User {user_id} deleted message {message_id}")
