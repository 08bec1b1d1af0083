from fastapi import APIRouter, Depends, status
from sqlalchemy.ext.asyncio import AsyncSession
from app.db.database import get_db
from app.core.security import get_current_active_user
from app.models.user import User
from app.schemas.post_comment import CommentCreate, CommentMutationResponse, CommentRead, CommentUpdate
from app.crud import post_comment as comment_crud
from app.utils.validators import validate_and_convert_uuid

router = APIRouter(prefix="/comments", tags=["Comments"])

@router.post("", response_model=CommentMutationResponse, status_code=status.HTTP_201_CREATED)
async def create_comment(
    payload: CommentCreate,
    db: AsyncSession = Depends(get_db),
    current_user: User = Depends(get_current_active_user)
):
    comment = await comment_crud.create_comment(db, str(current_user.id), payload)
    return CommentMutationResponse(message="Comment added successfully", comment=CommentRead.model_validate(comment))

@router.put("/{comment_id}", response_model=CommentMutationResponse)
async def update_comment(
    comment_id: str,
    payload: CommentUpdate,
    db: AsyncSession = Depends(get_db),
    current_user: User = Depends(get_current_active_user)
):
    comment = await comment_crud.update_comment(
        db, validate_and_convert_uuid(comment_id), str(current_user.id), payload
    )
    return CommentMutationResponse(message="Comment updated successfully", comment=CommentRead.model_validate(comment))

@router.delete("/{comment_id}", response_model=dict)
async def delete_comment(
    comment_id: str,
    db: AsyncSession = Depends(get_db),
    current_user: User = Depends(get_current_active_user)
):
    await comment_crud.delete_comment(db, validate_and_convert_uuid(comment_id), str(current_user.id))
    return {"message": "Comment deleted successfully"}
