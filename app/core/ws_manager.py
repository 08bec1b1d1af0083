import json
from collections import deque
from typing import Deque, Dict
from fastapi import WebSocket
import logging

logger = logging.getLogger(__name__)

# Per-user cap on notifications queued while the user is offline
MAX_PENDING_PER_USER = 50
# Cap on offline users holding a queue; the oldest queue is dropped first
MAX_PENDING_USERS = 1000

class NotificationManager:
    def __init__(self, max_pending: int = MAX_PENDING_PER_USER, max_pending_users: int = MAX_PENDING_USERS):
        self.active_connections: Dict[str, WebSocket] = {}
        self.pending_notifications: Dict[str, Deque[dict]] = {}
        self.max_pending = max_pending
        self.max_pending_users = max_pending_users

    async def connect(self, websocket: WebSocket, user_id: str):
        await websocket.accept()
        self.active_connections[user_id] = websocket
        await self._flush_pending(user_id)

    async def _flush_pending(self, user_id: str):
        pending = self.pending_notifications.pop(user_id, None)
        if pending:
            for notification in pending:
                await self._send_notification(user_id, notification)

    def disconnect(self, user_id: str):
        if user_id in self.active_connections:
            del self.active_connections[user_id]

    async def _send_notification(self, user_id: str, notification: dict):
        try:
            if user_id in self.active_connections:
                await self.active_connections[user_id].send_text(json.dumps(notification, default=str))
            else:
                self._store_pending(user_id, notification)
        except Exception as e:
            logger.error(f"Error sending notification to {user_id}: {str(e)}")
            self.disconnect(user_id)

    def _store_pending(self, user_id: str, notification: dict):
        if user_id not in self.pending_notifications:
            if len(self.pending_notifications) >= self.max_pending_users:
                dropped = next(iter(self.pending_notifications))
                del self.pending_notifications[dropped]
                logger.warning(f"Pending queue full, dropped queued notifications for {dropped}")
            self.pending_notifications[user_id] = deque(maxlen=self.max_pending)
        self.pending_notifications[user_id].append(notification)

    async def send_personal_notification(self, user_id: str, notification_data: dict):
        notification = {
            "type": "notification",
            "data": notification_data
        }
        await self._send_notification(user_id, notification)

    async def send_unread_count(self, user_id: str, count: int, change: str):
        await self._send_notification(user_id, {
            "type": "unread_count_update",
            "count": count,
            "change": change,
        })

# Singleton instance
manager = NotificationManager()
