import logging
from typing import Iterable, List, Optional
from sqlmodel.ext.asyncio.session import AsyncSession as AsyncSessionSQLModel
from sqlalchemy.ext.asyncio import AsyncSession
from sqlalchemy import delete
from sqlalchemy.orm import selectinload
from sqlmodel import select, func

from app.core.exceptions import NotFoundError
from app.core.ws_manager import manager
from app.models.notification import Notification
from app.schemas.enums import NotificationType
from app.schemas.notification import NotificationReference

logger = logging.getLogger(__name__)


def format_notification(notification: Notification) -> dict:
    actor_data = None
    if notification.actor:
        actor_data = {"id": notification.actor.id, "name": notification.actor.name}
    return {
        "id": notification.id,
        "type": notification.type,
        "reference_id": notification.reference_id,
        "reference": notification.reference.model_dump(),
        "is_read": notification.is_read,
        "created_at": notification.created_at,
        "actor": actor_data,
    }


async def _store_notification(db: AsyncSession, notification: Notification) -> Notification:
    """Persist on a session of its own so a failure cannot touch the caller's unit of work"""
    async with AsyncSessionSQLModel(bind=db.bind, expire_on_commit=False, autoflush=False) as session:
        session.add(notification)
        await session.commit()
        await session.refresh(notification)
        return notification


async def emit_notification(
    db: AsyncSession,
    recipient_id: str,
    actor_id: str,
    reference: NotificationReference,
) -> Optional[Notification]:
    """
    Record a notification caused by `actor_id` for `recipient_id`.

    Fire-and-forget: self-notifications are skipped, and storage or push
    failures are logged and reported as None instead of raised, so the
    action that caused the notification always stands.
    """
    if recipient_id == actor_id:
        logger.debug(f"Skipping self-notification for user {actor_id} ({reference.type})")
        return None

    try:
        notification = await _store_notification(
            db,
            Notification(
                user_id=recipient_id,
                actor_id=actor_id,
                type=reference.type,
                reference_id=reference.reference_id,
            ),
        )
    except Exception:
        logger.error(
            f"Failed to create {reference.type} notification for user {recipient_id}",
            exc_info=True
        )
        return None

    ws_payload = {
        "id": notification.id,
        "type": notification.type,
        "reference_id": notification.reference_id,
        "actor_id": notification.actor_id,
        "is_read": notification.is_read,
        "created_at": notification.created_at.isoformat(),
    }

    # Send via WebSocket (fail silently if error occurs)
    try:
        await manager.send_personal_notification(recipient_id, ws_payload)
        await manager.send_unread_count(
            recipient_id, await get_unread_notification_count(db, recipient_id), "+1"
        )
    except Exception as ws_error:
        logger.error(f"Failed to push notification {notification.id}: {ws_error}")

    return notification


async def delete_source_notifications(
    db: AsyncSession,
    type_: NotificationType,
    reference_ids: Iterable[str],
    recipient_id: Optional[str] = None,
) -> None:
    """
    Remove notifications whose source entity is going away.
    Runs inside the caller's transaction; the caller commits.
    """
    reference_ids = list(reference_ids)
    if not reference_ids:
        return
    statement = delete(Notification).where(
        Notification.type == type_.value,
        Notification.reference_id.in_(reference_ids),
    )
    if recipient_id is not None:
        statement = statement.where(Notification.user_id == recipient_id)
    await db.execute(statement)


async def get_user_notifications(db: AsyncSession, user_id: str) -> List[Notification]:
    """All notifications for the user, newest first, with actors loaded"""
    result = await db.execute(
        select(Notification)
        .where(Notification.user_id == user_id)
        .options(selectinload(Notification.actor))
        .order_by(Notification.created_at.desc())
    )
    return result.scalars().all()


async def get_unread_notification_count(db: AsyncSession, user_id: str) -> int:
    result = await db.execute(
        select(func.count(Notification.id))
        .where(
            Notification.user_id == user_id,
            Notification.is_read == False  # noqa: E712
        )
    )
    return result.scalar()


async def _get_own_notification(db: AsyncSession, notif_id: str, user_id: str) -> Notification:
    result = await db.execute(
        select(Notification).where(
            Notification.id == notif_id,
            Notification.user_id == user_id
        )
    )
    notification = result.scalar_one_or_none()
    if not notification:
        raise NotFoundError("Notification not found")
    return notification


async def mark_as_read(db: AsyncSession, notif_id: str, user_id: str) -> Notification:
    """Mark notification as read; reading an already-read notification is a no-op"""
    notification = await _get_own_notification(db, notif_id, user_id)

    if not notification.is_read:
        notification.is_read = True
        await db.commit()

        try:
            await manager.send_unread_count(
                user_id, await get_unread_notification_count(db, user_id), "-1"
            )
        except Exception as ws_error:
            logger.error(f"Failed to push unread count to {user_id}: {ws_error}")

    return notification


async def delete_notification(db: AsyncSession, notif_id: str, user_id: str) -> None:
    notification = await _get_own_notification(db, notif_id, user_id)
    await db.delete(notification)
    await db.commit()
