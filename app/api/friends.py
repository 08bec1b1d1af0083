import logging
from typing import List
from fastapi import APIRouter, Depends
from sqlalchemy.ext.asyncio import AsyncSession
from app.db.database import get_db
from app.core.security import get_current_active_user
from app.models.user import User
from app.schemas.friendship import (
    FriendActionResponse,
    FriendRead,
    FriendRequestAccept,
    FriendshipRead,
    FriendTarget,
)
from app.crud import friendship as friendship_crud
from app.utils.friendship_helpers import format_friends, format_friendship

logger = logging.getLogger(__name__)

router = APIRouter(prefix="/friends", tags=["Friends"])


@router.get("", response_model=List[FriendRead])
async def list_friends(
    db: AsyncSession = Depends(get_db),
    current_user: User = Depends(get_current_active_user)
):
    """Accepted friends, each seen from the current user's side"""
    return format_friends(await friendship_crud.list_friends(db, str(current_user.id)))


@router.get("/requests", response_model=List[FriendshipRead])
async def incoming_requests(
    db: AsyncSession = Depends(get_db),
    current_user: User = Depends(get_current_active_user)
):
    requests = await friendship_crud.friend_requests(db, str(current_user.id))
    return [format_friendship(row, with_sender=True) for row in requests]


@router.get("/pending", response_model=List[FriendshipRead])
async def sent_requests(
    db: AsyncSession = Depends(get_db),
    current_user: User = Depends(get_current_active_user)
):
    pending = await friendship_crud.list_pending(db, str(current_user.id))
    return [format_friendship(row, with_friend=True) for row in pending]


@router.post("/send", response_model=FriendActionResponse)
@router.post("/request", response_model=FriendActionResponse)
async def send_request(
    payload: FriendTarget,
    db: AsyncSession = Depends(get_db),
    current_user: User = Depends(get_current_active_user)
):
    friend_request = await friendship_crud.send_request(db, str(current_user.id), str(payload.friend_id))
    return FriendActionResponse(message="Friend request sent", request_id=friend_request.id)


@router.post("/accept", response_model=FriendActionResponse)
async def accept_request(
    payload: FriendRequestAccept,
    db: AsyncSession = Depends(get_db),
    current_user: User = Depends(get_current_active_user)
):
    friend_request = await friendship_crud.accept_request(db, str(current_user.id), str(payload.request_id))
    return FriendActionResponse(message="Friend request accepted", request_id=friend_request.id)


@router.post("/unfriend", response_model=FriendActionResponse)
async def unfriend(
    payload: FriendTarget,
    db: AsyncSession = Depends(get_db),
    current_user: User = Depends(get_current_active_user)
):
    await friendship_crud.unfriend(db, str(current_user.id), str(payload.friend_id))
    return FriendActionResponse(message="Unfriended successfully")


@router.post("/block", response_model=FriendActionResponse)
async def block(
    payload: FriendTarget,
    db: AsyncSession = Depends(get_db),
    current_user: User = Depends(get_current_active_user)
):
    await friendship_crud.block_user(db, str(current_user.id), str(payload.friend_id))
    return FriendActionResponse(message="User blocked")


@router.post("/restrict", response_model=FriendActionResponse)
async def restrict(
    payload: FriendTarget,
    db: AsyncSession = Depends(get_db),
    current_user: User = Depends(get_current_active_user)
):
    await friendship_crud.restrict_user(db, str(current_user.id), str(payload.friend_id))
    return FriendActionResponse(message="User restricted")
