import logging
from sqlalchemy.ext.asyncio import AsyncSession
from sqlalchemy.exc import IntegrityError, SQLAlchemyError
from sqlmodel import select, func
from app.models.post import Post
from app.models.post_like import PostLike
from app.schemas.enums import LikeAction, NotificationType
from app.schemas.notification import LikeRef
from app.core.exceptions import CustomHTTPException, NotFoundError
from app.crud.notification import emit_notification, delete_source_notifications

logger = logging.getLogger(__name__)

async def toggle_like(db: AsyncSession, user_id: str, post_id: str) -> LikeAction:
    """
    Like the post, or remove an existing like.

    Liking notifies the post owner. Unliking also clears the owner's like
    notifications for the post.
    """
    result = await db.execute(select(Post).where(Post.id == post_id))
    post = result.scalar_one_or_none()
    if not post:
        raise NotFoundError("Post not found")
    owner_id = post.user_id

    try:
        result = await db.execute(
            select(PostLike).where(
                PostLike.post_id == post_id,
                PostLike.user_id == user_id
            )
        )
        existing = result.scalar_one_or_none()

        if existing:
            await db.delete(existing)
            await delete_source_notifications(
                db,
                NotificationType.LIKE,
                [post_id],
                recipient_id=owner_id,
            )
            await db.commit()
            logger.info(f"User {user_id} unliked post {post_id}")
            return LikeAction.UNLIKED

        db.add(PostLike(post_id=post_id, user_id=user_id))
        await db.commit()
    except IntegrityError:
        await db.rollback()
        return LikeAction.LIKED
    except SQLAlchemyError:
        await db.rollback()
        logger.error(f"Like toggle failed for {user_id} on {post_id}", exc_info=True)
        raise CustomHTTPException(500, "Failed to update like")

    logger.info(f"User {user_id} liked post {post_id}")
    await emit_notification(db, recipient_id=owner_id, actor_id=user_id, reference=LikeRef(post_id=post_id))
    return LikeAction.LIKED


async def count_likes(db: AsyncSession, post_id: str) -> int:
    result = await db.execute(
        select(func.count()).select_from(PostLike).where(PostLike.post_id == post_id)
    )
    return result.scalar()
