import logging
from typing import List
from sqlalchemy.ext.asyncio import AsyncSession
from sqlalchemy.exc import IntegrityError, SQLAlchemyError
from sqlmodel import select
from app.models.follow import UserFollow
from app.models.user import User
from app.schemas.enums import FollowAction
from app.core.exceptions import CustomHTTPException, SelfReferenceError
from app.crud.user import require_user

logger = logging.getLogger(__name__)

async def toggle_follow(db: AsyncSession, actor_id: str, target_id: str) -> FollowAction:
    """Follow `target_id` if not yet followed, otherwise unfollow"""
    if actor_id == target_id:
        raise SelfReferenceError("You cannot follow yourself")
    await require_user(db, target_id)

    try:
        result = await db.execute(
            select(UserFollow).where(
                UserFollow.follower_id == actor_id,
                UserFollow.following_id == target_id
            )
        )
        existing = result.scalar_one_or_none()

        if existing:
            await db.delete(existing)
            await db.commit()
            logger.info(f"User {actor_id} unfollowed {target_id}")
            return FollowAction.UNFOLLOWED

        db.add(UserFollow(follower_id=actor_id, following_id=target_id))
        await db.commit()
        logger.info(f"User {actor_id} followed {target_id}")
        return FollowAction.FOLLOWED
    except IntegrityError:
        # A concurrent toggle inserted the same edge first
        await db.rollback()
        return FollowAction.FOLLOWED
    except SQLAlchemyError:
        await db.rollback()
        logger.error(f"Follow toggle failed for {actor_id} -> {target_id}", exc_info=True)
        raise CustomHTTPException(500, "Failed to update follow status")


async def is_following(db: AsyncSession, follower_id: str, following_id: str) -> bool:
    result = await db.execute(
        select(UserFollow).where(
            UserFollow.follower_id == follower_id,
            UserFollow.following_id == following_id
        )
    )
    return result.scalar_one_or_none() is not None


async def list_following(db: AsyncSession, user_id: str) -> List[User]:
    """Get all users that a given user is following"""
    result = await db.execute(
        select(User)
        .join(UserFollow, User.id == UserFollow.following_id)
        .where(UserFollow.follower_id == user_id)
        .order_by(UserFollow.created_at.desc())
    )
    return result.scalars().all()


async def list_followers(db: AsyncSession, user_id: str) -> List[User]:
    """Get all users following a given user"""
    result = await db.execute(
        select(User)
        .join(UserFollow, User.id == UserFollow.follower_id)
        .where(UserFollow.following_id == user_id)
        .order_by(UserFollow.created_at.desc())
    )
    return result.scalars().all()
