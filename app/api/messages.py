from typing import List
from fastapi import APIRouter, Depends, status
from sqlalchemy.ext.asyncio import AsyncSession
from app.db.database import get_db
from app.core.security import get_current_active_user
from app.models.user import User
from app.schemas.message import MessageCreate, MessageMutationResponse, MessageRead, MessageUpdate
from app.crud import message as message_crud
from app.utils.validators import validate_and_convert_uuid

router = APIRouter(prefix="/messages", tags=["Messages"])

@router.get("", response_model=List[MessageRead])
async def list_messages(
    db: AsyncSession = Depends(get_db),
    current_user: User = Depends(get_current_active_user)
):
    """Sent and received messages, newest first"""
    return await message_crud.list_messages(db, str(current_user.id))

@router.post("", response_model=MessageMutationResponse, status_code=status.HTTP_201_CREATED)
async def send_message(
    payload: MessageCreate,
    db: AsyncSession = Depends(get_db),
    current_user: User = Depends(get_current_active_user)
):
    message = await message_crud.send_message(db, str(current_user.id), payload)
    return MessageMutationResponse(message="Message sent successfully", data=MessageRead.model_validate(message))

@router.put("/{message_id}", response_model=MessageMutationResponse)
async def update_message(
    message_id: str,
    payload: MessageUpdate,
    db: AsyncSession = Depends(get_db),
    current_user: User = Depends(get_current_active_user)
):
    message = await message_crud.update_message(
        db, validate_and_convert_uuid(message_id), str(current_user.id), payload
    )
    return MessageMutationResponse(message="Message updated successfully", data=MessageRead.model_validate(message))

@router.delete("/{message_id}", response_model=dict)
async def delete_message(
    message_id: str,
    db: AsyncSession = Depends(get_db),
    current_user: User = Depends(get_current_active_user)
):
    await message_crud.delete_message(db, validate_and_convert_uuid(message_id), str(current_user.id))
    return {"message": "Message deleted successfully"}
