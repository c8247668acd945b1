"""HTTP surface: routers, dependency guards and the JSON error envelope."""

import pytest
from fastapi import HTTPException

from eifound.dependencies.auth import user_supabase_client


async def test_health(client):
    response = await client.get("/health")
    assert response.status_code == 200
    assert response.json() == {"status": "ok"}


async def test_feed_is_newest_first_with_like_flags(client, db, seed_tweet):
    seed_tweet("first", user_id="user-2")
    seed_tweet("second", user_id="user-2")
    db.seed("likes", {"user_id": "user-1", "tweet_id": "first"})

    response = await client.get("/tweets")

    assert response.status_code == 200
    body = response.json()
    assert [t["id"] for t in body] == ["second", "first"]
    assert body[1]["user_liked"] is True
    assert body[0]["profiles"]["display_name"] == "Grace"


async def test_create_tweet(client, db):
    response = await client.post("/tweets", json={"content": "  hello  "})

    assert response.status_code == 201
    assert response.json()["content"] == "hello"
    assert db.tables["tweets"][0]["user_id"] == "user-1"


async def test_create_tweet_over_limit_is_rejected(client, db):
    response = await client.post("/tweets", json={"content": "x" * 281})

    assert response.status_code == 400
    error = response.json()["error"]
    assert error["code"] == "VALIDATION_ERROR"
    assert error["category"] == "validation"
    assert "tweets" not in db.tables


async def test_missing_body_field_uses_error_envelope(client):
    response = await client.post("/tweets", json={})

    assert response.status_code == 400
    error = response.json()["error"]
    assert error["code"] == "VALIDATION_ERROR"
    assert error["details"][0]["field"] == "body.content"


async def test_get_unknown_tweet(client):
    response = await client.get("/tweets/nope")
    assert response.status_code == 404
    assert response.json()["error"]["code"] == "RESOURCE_NOT_FOUND"


async def test_cannot_delete_someone_elses_tweet(client, db, seed_tweet):
    seed_tweet("theirs", user_id="user-2")

    response = await client.delete("/tweets/theirs")

    assert response.status_code == 404
    assert [t["id"] for t in db.tables["tweets"]] == ["theirs"]


async def test_delete_own_tweet(client, db, seed_tweet):
    seed_tweet("mine", user_id="user-1")

    response = await client.delete("/tweets/mine")

    assert response.status_code == 200
    assert db.tables["tweets"] == []


async def test_like_and_unlike(client, db, seed_tweet):
    seed_tweet("t1")

    assert (await client.post("/tweets/t1/like")).json() == {"liked": True}
    assert len(db.tables["likes"]) == 1

    assert (await client.delete("/tweets/t1/like")).json() == {"liked": False}
    assert db.tables["likes"] == []


async def test_like_failure_is_a_bad_gateway(client, db, seed_tweet):
    seed_tweet("t1")
    db.fail("likes", "insert")

    response = await client.post("/tweets/t1/like")

    assert response.status_code == 502
    assert response.json()["error"] == {
        "code": "REMOTE_CALL_FAILED",
        "message": "Failed to like tweet",
        "category": "remote",
    }


async def test_comment_thread(client, db, seed_tweet):
    seed_tweet("t1")

    created = await client.post("/tweets/t1/comments", json={"content": "nice"})
    assert created.status_code == 201
    comment_id = created.json()["id"]

    thread = await client.get("/tweets/t1/comments")
    assert [c["id"] for c in thread.json()] == [comment_id]
    assert thread.json()[0]["profiles"]["display_name"] == "Ada"

    edited = await client.put(f"/comments/{comment_id}", json={"content": "very nice"})
    assert edited.json()["content"] == "very nice"

    deleted = await client.delete(f"/comments/{comment_id}")
    assert deleted.status_code == 200
    assert db.tables["comments"] == []


async def test_members_search_excludes_caller(client):
    response = await client.get("/profiles", params={"search": "a"})

    assert response.status_code == 200
    assert [p["user_id"] for p in response.json()] == ["user-2"]


async def test_update_my_profile(client, db):
    response = await client.put("/profiles/me", json={"program": "CS"})

    assert response.status_code == 200
    assert response.json()["program"] == "CS"
    assert response.json()["display_name"] == "Ada"


async def test_avatar_upload_rejects_non_images(client):
    response = await client.post(
        "/profiles/me/avatar",
        files={"file": ("notes.txt", b"hello", "text/plain")},
    )

    assert response.status_code == 400
    assert "JPEG, PNG" in response.json()["error"]["message"]


async def test_avatar_upload(client, db):
    response = await client.post(
        "/profiles/me/avatar",
        files={"file": ("me.png", b"\x89PNG", "image/png")},
    )

    assert response.status_code == 200
    assert response.json()["avatar_url"].startswith("https://cdn.test/storage/v1/object/public/avatars/user-1/")


async def test_signup_rejected_for_email_not_on_allowlist(client, db):
    response = await client.post("/auth/signup", json={
        "email": "stranger@example.com",
        "password": "secret1",
        "confirm_password": "secret1",
        "name": "Stranger",
    })

    assert response.status_code == 403
    assert response.json()["error"]["code"] == "EMAIL_NOT_AUTHORIZED"
    db.auth.sign_up.assert_not_awaited()


async def test_signup_for_allowlisted_email(client, db):
    db.seed("email_allowlist", {"id": "a1", "email": "new@example.com"})

    response = await client.post("/auth/signup", json={
        "email": "new@example.com",
        "password": "secret1",
        "confirm_password": "secret1",
        "name": "Newbie",
    })

    assert response.status_code == 201
    assert response.json()["user_id"] == "new-user"


async def test_login(client):
    response = await client.post("/auth/login", json={"email": "ada@example.com", "password": "secret1"})

    assert response.status_code == 200
    assert response.json()["access_token"] == "access"


async def test_me_merges_identity_and_profile(client):
    response = await client.get("/auth/me")

    assert response.status_code == 200
    assert response.json()["name"] == "Ada"
    assert response.json()["is_admin"] is False


async def test_allowlist_admin_requires_admin(client):
    response = await client.get("/admin/allowlist")

    assert response.status_code == 403
    assert response.json()["error"]["message"] == "Access denied"


async def test_admin_manages_allowlist(admin_client, db):
    added = await admin_client.post("/admin/allowlist", json={"email": "New@Example.com"})
    assert added.status_code == 201
    assert added.json()["email"] == "new@example.com"

    duplicate = await admin_client.post("/admin/allowlist", json={"email": "new@example.com"})
    assert duplicate.status_code == 400

    listed = await admin_client.get("/admin/allowlist")
    assert [e["email"] for e in listed.json()] == ["new@example.com"]

    removed = await admin_client.delete("/admin/allowlist/new@example.com")
    assert removed.status_code == 200
    assert db.tables["email_allowlist"] == []


async def test_user_client_rejects_malformed_header():
    with pytest.raises(HTTPException) as exc:
        await user_supabase_client("Token abc")
    assert exc.value.status_code == 401
