import uuid
import pytest
from sqlmodel import select
from app.models.post import Post
from app.models.post_comment import Comment
from app.models.post_like import PostLike
from app.models.notification import Notification


async def create_post(client, headers, **payload):
    payload.setdefault("content", "Hello world")
    response = await client.post("/api/posts", json=payload, headers=headers)
    assert response.status_code == 201
    return response.json()["post"]


@pytest.mark.asyncio
class TestPosts:

    async def test_create_defaults_to_public(self, client, create_user, headers_for):
        alice = await create_user()

        post = await create_post(client, headers_for(alice))

        assert post["user_id"] == alice.id
        assert post["privacy"] == "public"

    async def test_invalid_privacy_rejected(self, client, create_user, headers_for):
        alice = await create_user()

        response = await client.post(
            "/api/posts", json={"content": "x", "privacy": "secret"}, headers=headers_for(alice)
        )

        assert response.status_code == 422

    async def test_list_and_show_include_author_and_comments(self, client, create_user, headers_for):
        alice, bob = await create_user(), await create_user()
        older = await create_post(client, headers_for(alice), content="first")
        newer = await create_post(client, headers_for(bob), content="second", privacy="friends")
        await client.post(
            "/api/comments", json={"post_id": older["id"], "content": "nice"}, headers=headers_for(bob)
        )

        listing = (await client.get("/api/posts", headers=headers_for(alice))).json()
        shown = (await client.get(f"/api/posts/{older['id']}", headers=headers_for(alice))).json()

        assert {p["id"] for p in listing} == {older["id"], newer["id"]}
        assert shown["user"] == {"id": alice.id, "name": alice.name}
        assert [c["content"] for c in shown["comments"]] == ["nice"]

    async def test_unknown_post_is_404(self, client, create_user, headers_for):
        alice = await create_user()

        response = await client.get(f"/api/posts/{uuid.uuid4()}", headers=headers_for(alice))

        assert response.status_code == 404

    async def test_only_owner_may_update_or_delete(self, client, create_user, headers_for):
        alice, bob = await create_user(), await create_user()
        post = await create_post(client, headers_for(alice))

        update = await client.put(f"/api/posts/{post['id']}", json={"content": "hijack"}, headers=headers_for(bob))
        delete = await client.delete(f"/api/posts/{post['id']}", headers=headers_for(bob))

        assert update.status_code == 403
        assert delete.status_code == 403
        assert update.json()["error_code"] == "FORBIDDEN"

    async def test_partial_update(self, client, create_user, headers_for):
        alice = await create_user()
        post = await create_post(client, headers_for(alice), content="draft", image_url="http://img")

        response = await client.put(
            f"/api/posts/{post['id']}", json={"privacy": "private"}, headers=headers_for(alice)
        )

        updated = response.json()["post"]
        assert updated["privacy"] == "private"
        assert updated["content"] == "draft"
        assert updated["image_url"] == "http://img"

    async def test_delete_cascades_to_comments_likes_and_notifications(
        self, client, db_session, create_user, headers_for
    ):
        alice, bob = await create_user(), await create_user()
        post = await create_post(client, headers_for(alice))
        await client.post("/api/comments", json={"post_id": post["id"], "content": "hi"}, headers=headers_for(bob))
        await client.post(f"/api/posts/{post['id']}/like", headers=headers_for(bob))

        response = await client.delete(f"/api/posts/{post['id']}", headers=headers_for(alice))

        assert response.status_code == 200
        for column in (Post.id, Comment.id, PostLike.user_id, Notification.id):
            result = await db_session.execute(select(column))
            assert result.all() == []


@pytest.mark.asyncio
class TestLikes:

    async def test_like_toggle(self, client, create_user, headers_for):
        alice, bob = await create_user(), await create_user()
        post = await create_post(client, headers_for(alice))

        liked = await client.post(f"/api/posts/{post['id']}/like", headers=headers_for(bob))
        unliked = await client.post(f"/api/posts/{post['id']}/like", headers=headers_for(bob))

        assert liked.json() == {"message": "Liked", "likes_count": 1}
        assert unliked.json() == {"message": "Unliked", "likes_count": 0}

    async def test_like_unknown_post(self, client, create_user, headers_for):
        alice = await create_user()

        response = await client.post(f"/api/posts/{uuid.uuid4()}/like", headers=headers_for(alice))

        assert response.status_code == 404

    async def test_like_notifies_owner_once(self, client, create_user, headers_for):
        alice, bob = await create_user(), await create_user()
        post = await create_post(client, headers_for(alice))

        await client.post(f"/api/posts/{post['id']}/like", headers=headers_for(bob))
        await client.post(f"/api/posts/{post['id']}/like", headers=headers_for(alice))

        notifications = (await client.get("/api/notifications", headers=headers_for(alice))).json()
        assert [(n["type"], n["actor"]["id"]) for n in notifications["notifications"]] == [("like", bob.id)]
