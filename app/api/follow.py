from typing import List
from fastapi import APIRouter, Depends
from sqlalchemy.ext.asyncio import AsyncSession
from app.db.database import get_db
from app.core.security import get_current_active_user
from app.models.user import User
from app.schemas.follow import FollowToggleResponse
from app.schemas.user import UserPublic
from app.crud import follow as follow_crud
from app.utils.validators import validate_and_convert_uuid

router = APIRouter(tags=["follow"])

@router.post("/follow/{user_id}", response_model=FollowToggleResponse)
async def toggle_follow(
    user_id: str,
    db: AsyncSession = Depends(get_db),
    current_user: User = Depends(get_current_active_user)
):
    """Follow the user, or unfollow if already following"""
    target_id = validate_and_convert_uuid(user_id)
    action = await follow_crud.toggle_follow(db, str(current_user.id), target_id)
    return FollowToggleResponse(message=action)

@router.get("/followers", response_model=List[UserPublic])
async def get_followers(
    db: AsyncSession = Depends(get_db),
    current_user: User = Depends(get_current_active_user)
):
    return await follow_crud.list_followers(db, str(current_user.id))

@router.get("/following", response_model=List[UserPublic])
async def get_following(
    db: AsyncSession = Depends(get_db),
    current_user: User = Depends(get_current_active_user)
):
    return await follow_crud.list_following(db, str(current_user.id))
