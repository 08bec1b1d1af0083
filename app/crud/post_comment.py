import logging
from datetime import datetime
from typing import List, Optional
from sqlalchemy.ext.asyncio import AsyncSession
from sqlalchemy.exc import SQLAlchemyError
from sqlalchemy import delete
from sqlmodel import select
from app.models.post import Post
from app.models.post_comment import Comment
from app.schemas.post_comment import CommentCreate, CommentUpdate
from app.schemas.enums import NotificationType
from app.schemas.notification import CommentRef
from app.core.exceptions import CustomHTTPException, ForbiddenError, NotFoundError, ValidationError
from app.crud.notification import emit_notification, delete_source_notifications

logger = logging.getLogger(__name__)


async def get_comment_by_id(db: AsyncSession, comment_id: str) -> Optional[Comment]:
    result = await db.execute(select(Comment).where(Comment.id == comment_id))
    return result.scalar_one_or_none()


async def create_comment(db: AsyncSession, user_id: str, data: CommentCreate) -> Comment:
    post_id = str(data.post_id)
    result = await db.execute(select(Post).where(Post.id == post_id))
    post = result.scalar_one_or_none()
    if not post:
        raise NotFoundError("Post not found")

    parent_id = str(data.parent_comment_id) if data.parent_comment_id else None
    if parent_id:
        parent = await get_comment_by_id(db, parent_id)
        if not parent:
            raise NotFoundError("Parent comment not found")
        if parent.post_id != post_id:
            raise ValidationError("Parent comment belongs to a different post")

    comment = Comment(
        user_id=user_id,
        post_id=post_id,
        parent_comment_id=parent_id,
        content=data.content
    )
    try:
        db.add(comment)
        await db.commit()
    except SQLAlchemyError:
        await db.rollback()
        logger.error(f"Failed to create comment on post {post_id}", exc_info=True)
        raise CustomHTTPException(500, "Failed to create comment")

    logger.info(f"User {user_id} commented on post {post_id}")
    # Create notification for post owner (if not commenting on own post)
    await emit_notification(db, recipient_id=post.user_id, actor_id=user_id, reference=CommentRef(comment_id=comment.id))
    return comment


async def _owned_comment(db: AsyncSession, comment_id: str, user_id: str, action: str) -> Comment:
    comment = await get_comment_by_id(db, comment_id)
    if not comment:
        raise NotFoundError("Comment not found")
    if comment.user_id != user_id:
        raise ForbiddenError(f"You are not allowed to {action} this comment")
    return comment


async def update_comment(db: AsyncSession, comment_id: str, user_id: str, data: CommentUpdate) -> Comment:
    comment = await _owned_comment(db, comment_id, user_id, "update")
    comment.content = data.content
    comment.updated_at = datetime.utcnow()
    try:
        await db.commit()
    except SQLAlchemyError:
        await db.rollback()
        logger.error(f"Failed to update comment {comment_id}", exc_info=True)
        raise CustomHTTPException(500, "Failed to update comment")
    return comment


async def _reply_tree_ids(db: AsyncSession, comment_id: str) -> List[str]:
    """The comment id followed by the ids of every reply below it"""
    ids = [comment_id]
    frontier = [comment_id]
    while frontier:
        result = await db.execute(select(Comment.id).where(Comment.parent_comment_id.in_(frontier)))
        frontier = result.scalars().all()
        ids.extend(frontier)
    return ids


async def delete_comment(db: AsyncSession, comment_id: str, user_id: str) -> None:
    """Delete a comment, its replies and their comment notifications"""
    await _owned_comment(db, comment_id, user_id, "delete")
    try:
        ids = await _reply_tree_ids(db, comment_id)
        await delete_source_notifications(db, NotificationType.COMMENT, ids)
        await db.execute(delete(Comment).where(Comment.id.in_(ids)))
        await db.commit()
    except SQLAlchemyError:
        await db.rollback()
        logger.error(f"Failed to delete comment {comment_id}", exc_info=True)
        raise CustomHTTPException(500, "Failed to delete comment")
    logger.info(f"User {user_id} deleted comment {comment_id} ({len(ids)} comments removed)")
