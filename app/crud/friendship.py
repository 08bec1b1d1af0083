import logging
from datetime import datetime
from typing import List, Optional
from sqlalchemy.ext.asyncio import AsyncSession
from sqlalchemy.exc import IntegrityError, SQLAlchemyError
from sqlalchemy.orm import selectinload
from sqlalchemy import delete
from sqlmodel import select, or_, and_
from app.models.friendship import Friendship
from app.schemas.enums import FriendshipStatus, NotificationType
from app.schemas.notification import FriendRequestRef
from app.core.exceptions import (
    CustomHTTPException,
    DuplicateRequestError,
    ForbiddenError,
    NotFoundError,
    SelfReferenceError,
)
from app.crud.user import require_user
from app.crud.notification import emit_notification, delete_source_notifications

logger = logging.getLogger(__name__)


def _between(user_a: str, user_b: str):
    """Match rows linking the two users in either direction"""
    return or_(
        and_(Friendship.user_id == user_a, Friendship.friend_id == user_b),
        and_(Friendship.user_id == user_b, Friendship.friend_id == user_a),
    )


async def _get_directed(db: AsyncSession, user_id: str, friend_id: str) -> Optional[Friendship]:
    result = await db.execute(
        select(Friendship).where(
            Friendship.user_id == user_id,
            Friendship.friend_id == friend_id
        )
    )
    return result.scalar_one_or_none()


async def _check_target(db: AsyncSession, actor_id: str, target_id: str, self_detail: str) -> None:
    if actor_id == target_id:
        raise SelfReferenceError(self_detail)
    await require_user(db, target_id)


async def send_request(db: AsyncSession, actor_id: str, target_id: str) -> Friendship:
    """
    Open a pending friend request from actor to target.

    Any existing row between the pair, in either direction and whatever its
    status, makes the request a duplicate.
    """
    await _check_target(db, actor_id, target_id, "You cannot send a friend request to yourself")

    try:
        result = await db.execute(select(Friendship).where(_between(actor_id, target_id)))
        if result.scalars().first():
            raise DuplicateRequestError()

        friend_request = Friendship(
            user_id=actor_id,
            friend_id=target_id,
            status=FriendshipStatus.PENDING.value
        )
        db.add(friend_request)
        await db.commit()
    except CustomHTTPException:
        raise
    except IntegrityError:
        await db.rollback()
        raise DuplicateRequestError()
    except SQLAlchemyError:
        await db.rollback()
        logger.error(f"Failed to send friend request {actor_id} -> {target_id}", exc_info=True)
        raise CustomHTTPException(500, "Failed to send friend request")

    logger.info(f"Friend request {friend_request.id} sent from {actor_id} to {target_id}")
    await emit_notification(
        db,
        recipient_id=target_id,
        actor_id=actor_id,
        reference=FriendRequestRef(friendship_id=friend_request.id),
    )
    return friend_request


def _mark_accepted(db: AsyncSession, friend_request: Friendship, reciprocal: Optional[Friendship]) -> None:
    now = datetime.utcnow()
    friend_request.status = FriendshipStatus.ACCEPTED.value
    friend_request.updated_at = now
    if reciprocal is None:
        db.add(Friendship(
            user_id=friend_request.friend_id,
            friend_id=friend_request.user_id,
            status=FriendshipStatus.ACCEPTED.value
        ))
    else:
        reciprocal.status = FriendshipStatus.ACCEPTED.value
        reciprocal.updated_at = now


async def _accept_existing_pair(db: AsyncSession, sender_id: str, addressee_id: str) -> Friendship:
    """Retry an accept whose reciprocal row was inserted concurrently"""
    try:
        friend_request = await _get_directed(db, sender_id, addressee_id)
        reciprocal = await _get_directed(db, addressee_id, sender_id)
        if friend_request is None or reciprocal is None:
            raise DuplicateRequestError()
        _mark_accepted(db, friend_request, reciprocal)
        await db.commit()
    except CustomHTTPException:
        raise
    except IntegrityError:
        await db.rollback()
        raise DuplicateRequestError()
    except SQLAlchemyError:
        await db.rollback()
        logger.error(f"Failed to accept friend request {sender_id} -> {addressee_id}", exc_info=True)
        raise CustomHTTPException(500, "Failed to accept friend request")
    return friend_request


async def accept_request(db: AsyncSession, actor_id: str, request_id: str) -> Friendship:
    """Accept a request addressed to the actor and create the reciprocal row"""
    result = await db.execute(select(Friendship).where(Friendship.id == request_id))
    friend_request = result.scalar_one_or_none()
    if not friend_request:
        raise NotFoundError("Friend request not found")
    if friend_request.friend_id != actor_id:
        raise ForbiddenError("You cannot accept this request")
    if friend_request.status in (FriendshipStatus.BLOCKED.value, FriendshipStatus.RESTRICTED.value):
        raise ForbiddenError("This request can no longer be accepted")

    sender_id = friend_request.user_id
    reciprocal = await _get_directed(db, actor_id, sender_id)
    if (
        friend_request.status == FriendshipStatus.ACCEPTED.value
        and reciprocal is not None
        and reciprocal.status == FriendshipStatus.ACCEPTED.value
    ):
        return friend_request

    try:
        _mark_accepted(db, friend_request, reciprocal)
        await db.commit()
    except IntegrityError:
        await db.rollback()
        logger.warning(f"Reciprocal row for request {request_id} appeared concurrently, updating it")
        friend_request = await _accept_existing_pair(db, sender_id, actor_id)
    except SQLAlchemyError:
        await db.rollback()
        logger.error(f"Failed to accept friend request {request_id}", exc_info=True)
        raise CustomHTTPException(500, "Failed to accept friend request")

    logger.info(f"Friend request {request_id} accepted by {actor_id}")
    return friend_request


async def unfriend(db: AsyncSession, actor_id: str, target_id: str) -> int:
    """Delete every row between the pair, both directions, any status. Returns rows removed."""
    await _check_target(db, actor_id, target_id, "You cannot unfriend yourself")

    try:
        result = await db.execute(select(Friendship.id).where(_between(actor_id, target_id)))
        row_ids = result.scalars().all()
        if row_ids:
            await delete_source_notifications(db, NotificationType.FRIEND_REQUEST, row_ids)
            await db.execute(delete(Friendship).where(Friendship.id.in_(row_ids)))
        await db.commit()
    except SQLAlchemyError:
        await db.rollback()
        logger.error(f"Failed to unfriend {actor_id} / {target_id}", exc_info=True)
        raise CustomHTTPException(500, "Failed to unfriend user")

    logger.info(f"User {actor_id} unfriended {target_id} ({len(row_ids)} rows removed)")
    return len(row_ids)


async def _set_status(db: AsyncSession, actor_id: str, target_id: str, status: FriendshipStatus) -> Friendship:
    """Upsert the actor's own directed row; the reverse row is left alone"""
    for attempt in range(2):
        try:
            row = await _get_directed(db, actor_id, target_id)
            if row is None:
                row = Friendship(user_id=actor_id, friend_id=target_id, status=status.value)
                db.add(row)
            else:
                row.status = status.value
                row.updated_at = datetime.utcnow()
            await db.commit()
            break
        except IntegrityError:
            await db.rollback()
            # A concurrent insert created the row; update it on the second pass
            if attempt:
                raise DuplicateRequestError()
        except SQLAlchemyError:
            await db.rollback()
            logger.error(f"Failed to set {status.value} for {actor_id} -> {target_id}", exc_info=True)
            raise CustomHTTPException(500, f"Failed to set status {status.value}")

    logger.info(f"User {actor_id} set {target_id} to {status.value}")
    return row


async def block_user(db: AsyncSession, actor_id: str, target_id: str) -> Friendship:
    await _check_target(db, actor_id, target_id, "You cannot block yourself")
    return await _set_status(db, actor_id, target_id, FriendshipStatus.BLOCKED)


async def restrict_user(db: AsyncSession, actor_id: str, target_id: str) -> Friendship:
    await _check_target(db, actor_id, target_id, "You cannot restrict yourself")
    return await _set_status(db, actor_id, target_id, FriendshipStatus.RESTRICTED)


async def list_friends(db: AsyncSession, actor_id: str) -> List[dict]:
    """
    Accepted friendships involving the actor, one entry per friend.

    Each entry surfaces the other party as ``friend`` whichever column the
    actor sits in.
    """
    result = await db.execute(
        select(Friendship)
        .options(selectinload(Friendship.user), selectinload(Friendship.friend))
        .where(
            or_(Friendship.user_id == actor_id, Friendship.friend_id == actor_id),
            Friendship.status == FriendshipStatus.ACCEPTED.value
        )
        .order_by(Friendship.created_at.desc())
    )

    friends = []
    seen = set()
    for row in result.scalars().all():
        other = row.friend if row.user_id == actor_id else row.user
        if other.id in seen:
            continue
        seen.add(other.id)
        friends.append({"id": row.id, "status": row.status, "friend": other})
    return friends


async def friend_requests(db: AsyncSession, actor_id: str) -> List[Friendship]:
    """Incoming pending requests, newest first"""
    result = await db.execute(
        select(Friendship)
        .options(selectinload(Friendship.user))
        .where(
            Friendship.friend_id == actor_id,
            Friendship.status == FriendshipStatus.PENDING.value
        )
        .order_by(Friendship.created_at.desc())
    )
    return result.scalars().all()


async def list_pending(db: AsyncSession, actor_id: str) -> List[Friendship]:
    """Outgoing pending requests, newest first"""
    result = await db.execute(
        select(Friendship)
        .options(selectinload(Friendship.friend))
        .where(
            Friendship.user_id == actor_id,
            Friendship.status == FriendshipStatus.PENDING.value
        )
        .order_by(Friendship.created_at.desc())
    )
    return result.scalars().all()
