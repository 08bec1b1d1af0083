import logging
from fastapi import APIRouter, Depends, status, HTTPException, WebSocket, WebSocketDisconnect, Query
from sqlalchemy.ext.asyncio import AsyncSession
from app.db.database import get_db
from app.core.security import verify_token, get_current_active_user
from app.models.user import User
from app.crud.user import get_user_by_id
from app.schemas.notification import NotificationRead, NotificationResponse
from app.crud import notification as notif_crud
from app.core.ws_manager import manager
from app.utils.validators import validate_and_convert_uuid

logger = logging.getLogger(__name__)

router = APIRouter(prefix="/notifications", tags=["notifications"])

@router.websocket("/ws")
async def websocket_notifications(
    websocket: WebSocket,
    token: str = Query(...),
    db: AsyncSession = Depends(get_db)
):
    """Push channel for new notifications and unread count updates"""
    user = None
    try:
        payload = verify_token(token, expected_type="access")
        user = await get_user_by_id(db, payload["sub"])
        if not user or not user.is_active:
            await websocket.close(code=status.WS_1008_POLICY_VIOLATION)
            return

        await manager.connect(websocket, str(user.id))

        # Connection maintenance loop
        while True:
            data = await websocket.receive_text()
            if data == "ping":
                await websocket.send_text("pong")
            else:
                logger.warning(f"Unexpected WebSocket message: {data}")

    except HTTPException as e:
        logger.warning(f"WebSocket auth failed: {e.detail}")
        await websocket.close(code=status.WS_1008_POLICY_VIOLATION)
    except WebSocketDisconnect:
        if user:
            manager.disconnect(str(user.id))
            logger.info(f"User {user.id} disconnected")

@router.get("", response_model=NotificationResponse)
async def get_notifications(
    db: AsyncSession = Depends(get_db),
    current_user: User = Depends(get_current_active_user)
):
    """Get notifications with current unread count"""
    user_id = str(current_user.id)
    notifications = await notif_crud.get_user_notifications(db, user_id)
    return {
        "unread_count": await notif_crud.get_unread_notification_count(db, user_id),
        "notifications": [notif_crud.format_notification(n) for n in notifications]
    }

@router.post("/{notif_id}/read", response_model=NotificationRead)
async def mark_notification_as_read(
    notif_id: str,
    db: AsyncSession = Depends(get_db),
    current_user: User = Depends(get_current_active_user)
):
    """Mark notification as read and push count update"""
    notification = await notif_crud.mark_as_read(db, validate_and_convert_uuid(notif_id), str(current_user.id))
    await db.refresh(notification, attribute_names=["actor"])
    return notif_crud.format_notification(notification)

@router.delete("/{notif_id}", response_model=dict)
async def delete_notification(
    notif_id: str,
    db: AsyncSession = Depends(get_db),
    current_user: User = Depends(get_current_active_user)
):
    await notif_crud.delete_notification(db, validate_and_convert_uuid(notif_id), str(current_user.id))
    return {"message": "Notification deleted successfully"}
