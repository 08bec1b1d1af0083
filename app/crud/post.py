import logging
from datetime import datetime
from typing import List, Optional
from sqlalchemy.ext.asyncio import AsyncSession
from sqlalchemy.exc import SQLAlchemyError
from sqlalchemy.orm import selectinload
from sqlalchemy import delete
from sqlmodel import select
from app.models.post import Post
from app.models.post_comment import Comment
from app.models.post_like import PostLike
from app.schemas.post import PostCreate, PostUpdate
from app.schemas.enums import NotificationType
from app.core.exceptions import CustomHTTPException, ForbiddenError, NotFoundError
from app.crud.notification import delete_source_notifications

logger = logging.getLogger(__name__)


def _with_details(statement):
    return statement.options(selectinload(Post.user), selectinload(Post.comments))


async def get_post(db: AsyncSession, post_id: str) -> Optional[Post]:
    result = await db.execute(_with_details(select(Post)).where(Post.id == post_id))
    return result.scalar_one_or_none()


async def require_post(db: AsyncSession, post_id: str) -> Post:
    post = await get_post(db, post_id)
    if not post:
        raise NotFoundError("Post not found")
    return post


async def list_posts(db: AsyncSession) -> List[Post]:
    """All posts, newest first, with author and comments"""
    result = await db.execute(_with_details(select(Post)).order_by(Post.created_at.desc()))
    return result.scalars().all()


async def create_post(db: AsyncSession, user_id: str, data: PostCreate) -> Post:
    post = Post(
        user_id=user_id,
        content=data.content,
        image_url=data.image_url,
        video_url=data.video_url,
        privacy=data.privacy.value
    )
    try:
        db.add(post)
        await db.commit()
    except SQLAlchemyError:
        await db.rollback()
        logger.error(f"Failed to create post for {user_id}", exc_info=True)
        raise CustomHTTPException(500, "Failed to create post")
    logger.info(f"User {user_id} created post {post.id}")
    return post


async def _owned_post(db: AsyncSession, post_id: str, user_id: str, action: str) -> Post:
    post = await require_post(db, post_id)
    if post.user_id != user_id:
        raise ForbiddenError(f"You are not allowed to {action} this post")
    return post


async def update_post(db: AsyncSession, post_id: str, user_id: str, data: PostUpdate) -> Post:
    post = await _owned_post(db, post_id, user_id, "update")

    update_data = data.model_dump(exclude_unset=True)
    if "privacy" in update_data:
        privacy = update_data.pop("privacy")
        if privacy is not None:
            update_data["privacy"] = privacy.value
    for field, value in update_data.items():
        setattr(post, field, value)
    post.updated_at = datetime.utcnow()

    try:
        await db.commit()
    except SQLAlchemyError:
        await db.rollback()
        logger.error(f"Failed to update post {post_id}", exc_info=True)
        raise CustomHTTPException(500, "Failed to update post")
    return post


async def delete_post(db: AsyncSession, post_id: str, user_id: str) -> None:
    """Delete a post with its comments, likes and the notifications they caused"""
    result = await db.execute(select(Post.user_id).where(Post.id == post_id))
    owner_id = result.scalar_one_or_none()
    if owner_id is None:
        raise NotFoundError("Post not found")
    if owner_id != user_id:
        raise ForbiddenError("You are not allowed to delete this post")

    try:
        result = await db.execute(select(Comment.id).where(Comment.post_id == post_id))
        comment_ids = result.scalars().all()

        await delete_source_notifications(db, NotificationType.COMMENT, comment_ids)
        await delete_source_notifications(db, NotificationType.LIKE, [post_id])
        await db.execute(delete(PostLike).where(PostLike.post_id == post_id))
        await db.execute(delete(Comment).where(Comment.post_id == post_id))
        await db.execute(delete(Post).where(Post.id == post_id))
        await db.commit()
    except SQLAlchemyError:
        await db.rollback()
        logger.error(f"Failed to delete post {post_id}", exc_info=True)
        raise CustomHTTPException(500, "Failed to delete post")
    logger.info(f"User {user_id} deleted post {post_id}")
