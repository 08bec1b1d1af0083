import json
import uuid
import pytest
from unittest.mock import AsyncMock, patch
from sqlmodel import select
from app.crud import notification as notif_crud
from app.crud import friendship as friendship_crud
from app.crud.post import create_post
from app.crud.post_comment import create_comment
from app.crud.post_like import toggle_like
from app.crud.message import send_message
from app.models.friendship import Friendship
from app.models.notification import Notification
from app.models.post_comment import Comment
from app.models.post_like import PostLike
from app.schemas.notification import (
    CommentRef,
    FriendRequestRef,
    LikeRef,
    MessageRef,
    load_reference,
)
from app.schemas.post import PostCreate
from app.schemas.post_comment import CommentCreate
from app.schemas.message import MessageCreate
from app.schemas.enums import LikeAction


async def notification_count(db) -> int:
    result = await db.execute(select(Notification.id))
    return len(result.all())


class MockWebSocket:
    """Mock WebSocket for testing"""
    def __init__(self):
        self.messages_sent = []
        self.accepted = False

    async def accept(self):
        self.accepted = True

    async def send_text(self, data: str):
        self.messages_sent.append(data)


class TestNotificationReference:
    """Tagged references stored as (type, reference_id)"""

    @pytest.mark.parametrize("reference", [
        CommentRef(comment_id="c-1"),
        LikeRef(post_id="p-1"),
        MessageRef(message_id="m-1"),
        FriendRequestRef(friendship_id="f-1"),
    ])
    def test_reference_rebuilds_from_stored_pair(self, reference):
        assert load_reference(reference.type, reference.reference_id) == reference

    def test_unknown_type_rejected(self):
        with pytest.raises(ValueError):
            load_reference("poke", "x")

    def test_model_property(self):
        notification = Notification(user_id="u", actor_id="a", type="like", reference_id="p-9")
        assert notification.reference == LikeRef(post_id="p-9")


@pytest.mark.asyncio
class TestEmitNotification:

    async def test_self_notification_suppressed(self, db_session, create_user):
        alice = await create_user()

        result = await notif_crud.emit_notification(db_session, alice.id, alice.id, MessageRef(message_id="m"))

        assert result is None
        assert await notification_count(db_session) == 0

    async def test_storage_failure_is_swallowed(self, db_session, create_user, caplog):
        alice, bob = await create_user(), await create_user()

        with patch("app.crud.notification._store_notification", AsyncMock(side_effect=RuntimeError("db down"))):
            result = await notif_crud.emit_notification(db_session, bob.id, alice.id, MessageRef(message_id="m"))

        assert result is None
        assert "Failed to create message notification" in caplog.text

    async def test_push_failure_keeps_notification(self, db_session, create_user, ws_manager):
        alice, bob = await create_user(), await create_user()

        with patch.object(ws_manager, "send_personal_notification", AsyncMock(side_effect=RuntimeError("socket gone"))):
            result = await notif_crud.emit_notification(db_session, bob.id, alice.id, LikeRef(post_id="p"))

        assert result is not None
        assert await notification_count(db_session) == 1

    async def test_offline_recipient_gets_queued_push(self, db_session, create_user, ws_manager):
        alice, bob = await create_user(), await create_user()

        notification = await notif_crud.emit_notification(db_session, bob.id, alice.id, LikeRef(post_id="p"))

        queued = list(ws_manager.pending_notifications[bob.id])
        assert queued[0]["type"] == "notification"
        assert queued[0]["data"]["id"] == notification.id
        assert queued[1] == {"type": "unread_count_update", "count": 1, "change": "+1"}

    async def test_online_recipient_receives_push(self, db_session, create_user, ws_manager):
        alice, bob = await create_user(), await create_user()
        socket = MockWebSocket()
        await ws_manager.connect(socket, bob.id)

        await notif_crud.emit_notification(db_session, bob.id, alice.id, CommentRef(comment_id="c"))

        payload = json.loads(socket.messages_sent[0])
        assert payload["data"]["type"] == "comment"
        assert payload["data"]["reference_id"] == "c"


@pytest.mark.asyncio
class TestNotifyingActions:
    """Each notifying action stores one notification, never for the actor"""

    async def test_self_actions_never_notify(self, db_session, create_user):
        alice = await create_user()
        post = await create_post(db_session, alice.id, PostCreate(content="mine"))

        await create_comment(db_session, alice.id, CommentCreate(post_id=post.id, content="me again"))
        await toggle_like(db_session, alice.id, post.id)
        await send_message(db_session, alice.id, MessageCreate(receiver_id=alice.id, content="note to self"))
        await notif_crud.emit_notification(
            db_session, alice.id, alice.id, FriendRequestRef(friendship_id=str(uuid.uuid4()))
        )

        assert await notification_count(db_session) == 0

    async def test_each_action_notifies_recipient(self, db_session, create_user):
        alice, bob = await create_user(), await create_user()
        post = await create_post(db_session, alice.id, PostCreate(content="hello"))

        comment = await create_comment(db_session, bob.id, CommentCreate(post_id=post.id, content="hi"))
        await toggle_like(db_session, bob.id, post.id)
        message = await send_message(db_session, bob.id, MessageCreate(receiver_id=alice.id, content="psst"))
        request = await friendship_crud.send_request(db_session, bob.id, alice.id)

        result = await db_session.execute(
            select(Notification.type, Notification.reference_id)
            .where(Notification.user_id == alice.id, Notification.actor_id == bob.id)
        )
        assert set(result.all()) == {
            ("comment", comment.id),
            ("like", post.id),
            ("message", message.id),
            ("friend_request", request.id),
        }

    async def test_like_then_unlike_leaves_no_like_notification(self, db_session, create_user):
        alice, bob = await create_user(), await create_user()
        post = await create_post(db_session, alice.id, PostCreate(content="hello"))

        assert await toggle_like(db_session, bob.id, post.id) == LikeAction.LIKED
        assert await toggle_like(db_session, bob.id, post.id) == LikeAction.UNLIKED

        result = await db_session.execute(
            select(Notification.id).where(
                Notification.type == "like",
                Notification.reference_id == post.id,
                Notification.user_id == alice.id,
            )
        )
        assert result.all() == []
        likes = await db_session.execute(select(PostLike.user_id))
        assert likes.all() == []

    async def test_unlike_clears_all_like_notifications_for_post(self, db_session, create_user):
        alice, bob, carol = await create_user(), await create_user(), await create_user()
        post = await create_post(db_session, alice.id, PostCreate(content="hello"))
        other_post = await create_post(db_session, alice.id, PostCreate(content="another"))
        await toggle_like(db_session, bob.id, post.id)
        await toggle_like(db_session, carol.id, post.id)
        await toggle_like(db_session, carol.id, other_post.id)

        await toggle_like(db_session, bob.id, post.id)

        result = await db_session.execute(
            select(Notification.reference_id).where(
                Notification.type == "like",
                Notification.user_id == alice.id,
            )
        )
        assert result.scalars().all() == [other_post.id]
        # Carol's like itself is untouched
        likes = await db_session.execute(select(PostLike.user_id).where(PostLike.post_id == post.id))
        assert likes.scalars().all() == [carol.id]

    async def test_failed_notification_does_not_undo_action(self, db_session, create_user):
        alice, bob = await create_user(), await create_user()

        with patch("app.crud.notification._store_notification", AsyncMock(side_effect=RuntimeError("boom"))):
            request = await friendship_crud.send_request(db_session, alice.id, bob.id)

        result = await db_session.execute(select(Friendship.status).where(Friendship.id == request.id))
        assert result.scalar_one() == "pending"
        assert await notification_count(db_session) == 0


@pytest.mark.asyncio
class TestNotificationEndpoints:

    async def _seed(self, db_session, create_user):
        alice, bob = await create_user(), await create_user()
        post = await create_post(db_session, alice.id, PostCreate(content="hello"))
        await toggle_like(db_session, bob.id, post.id)
        await create_comment(db_session, bob.id, CommentCreate(post_id=post.id, content="nice"))
        return alice, bob, post

    async def test_list_with_unread_count(self, client, db_session, create_user, headers_for):
        alice, bob, post = await self._seed(db_session, create_user)

        response = await client.get("/api/notifications", headers=headers_for(alice))

        body = response.json()
        assert response.status_code == 200
        assert body["unread_count"] == 2
        assert {n["type"] for n in body["notifications"]} == {"like", "comment"}
        like = next(n for n in body["notifications"] if n["type"] == "like")
        assert like["reference"] == {"type": "like", "post_id": post.id}
        assert like["actor"] == {"id": bob.id, "name": bob.name}

    async def test_mark_read_is_idempotent(self, client, db_session, create_user, headers_for):
        alice, _, _ = await self._seed(db_session, create_user)
        listing = (await client.get("/api/notifications", headers=headers_for(alice))).json()
        notif_id = listing["notifications"][0]["id"]

        first = await client.post(f"/api/notifications/{notif_id}/read", headers=headers_for(alice))
        second = await client.post(f"/api/notifications/{notif_id}/read", headers=headers_for(alice))

        assert first.status_code == second.status_code == 200
        assert second.json()["is_read"] is True
        listing = (await client.get("/api/notifications", headers=headers_for(alice))).json()
        assert listing["unread_count"] == 1

    async def test_other_users_notifications_are_404(self, client, db_session, create_user, headers_for):
        alice, bob, _ = await self._seed(db_session, create_user)
        listing = (await client.get("/api/notifications", headers=headers_for(alice))).json()
        notif_id = listing["notifications"][0]["id"]

        read = await client.post(f"/api/notifications/{notif_id}/read", headers=headers_for(bob))
        delete = await client.delete(f"/api/notifications/{notif_id}", headers=headers_for(bob))

        assert read.status_code == 404
        assert delete.status_code == 404

    async def test_delete(self, client, db_session, create_user, headers_for):
        alice, _, _ = await self._seed(db_session, create_user)
        listing = (await client.get("/api/notifications", headers=headers_for(alice))).json()
        notif_id = listing["notifications"][0]["id"]

        response = await client.delete(f"/api/notifications/{notif_id}", headers=headers_for(alice))

        assert response.status_code == 200
        listing = (await client.get("/api/notifications", headers=headers_for(alice))).json()
        assert notif_id not in [n["id"] for n in listing["notifications"]]

    async def test_comment_delete_removes_its_notification(self, client, db_session, create_user, headers_for):
        alice, bob, _ = await self._seed(db_session, create_user)
        result = await db_session.execute(select(Comment.id))
        comment_id = result.scalar_one()

        response = await client.delete(f"/api/comments/{comment_id}", headers=headers_for(bob))

        assert response.status_code == 200
        listing = (await client.get("/api/notifications", headers=headers_for(alice))).json()
        assert [n["type"] for n in listing["notifications"]] == ["like"]
