from typing import List
from fastapi import APIRouter, Depends, status
from sqlalchemy.ext.asyncio import AsyncSession
from app.db.database import get_db
from app.core.security import get_current_active_user
from app.models.user import User
from app.schemas.post import (
    LikeToggleResponse,
    PostCreate,
    PostDetail,
    PostMutationResponse,
    PostRead,
    PostUpdate,
)
from app.crud import post as post_crud
from app.crud.post_like import toggle_like, count_likes
from app.utils.validators import validate_and_convert_uuid

router = APIRouter(prefix="/posts", tags=["Posts"])

@router.get("", response_model=List[PostDetail])
async def list_posts(
    db: AsyncSession = Depends(get_db),
    current_user: User = Depends(get_current_active_user)
):
    return await post_crud.list_posts(db)

@router.post("", response_model=PostMutationResponse, status_code=status.HTTP_201_CREATED)
async def create_post(
    payload: PostCreate,
    db: AsyncSession = Depends(get_db),
    current_user: User = Depends(get_current_active_user)
):
    post = await post_crud.create_post(db, str(current_user.id), payload)
    return PostMutationResponse(message="Post created successfully", post=PostRead.model_validate(post))

@router.get("/{post_id}", response_model=PostDetail)
async def get_post(
    post_id: str,
    db: AsyncSession = Depends(get_db),
    current_user: User = Depends(get_current_active_user)
):
    return await post_crud.require_post(db, validate_and_convert_uuid(post_id))

@router.put("/{post_id}", response_model=PostMutationResponse)
async def update_post(
    post_id: str,
    payload: PostUpdate,
    db: AsyncSession = Depends(get_db),
    current_user: User = Depends(get_current_active_user)
):
    post = await post_crud.update_post(db, validate_and_convert_uuid(post_id), str(current_user.id), payload)
    return PostMutationResponse(message="Post updated successfully", post=PostRead.model_validate(post))

@router.delete("/{post_id}", response_model=dict)
async def delete_post(
    post_id: str,
    db: AsyncSession = Depends(get_db),
    current_user: User = Depends(get_current_active_user)
):
    await post_crud.delete_post(db, validate_and_convert_uuid(post_id), str(current_user.id))
    return {"message": "Post deleted successfully"}

@router.post("/{post_id}/like", response_model=LikeToggleResponse)
async def like_post(
    post_id: str,
    db: AsyncSession = Depends(get_db),
    current_user: User = Depends(get_current_active_user)
):
    """Like the post, or unlike it if already liked"""
    post_id = validate_and_convert_uuid(post_id)
    action = await toggle_like(db, str(current_user.id), post_id)
    return LikeToggleResponse(message=action, likes_count=await count_likes(db, post_id))
