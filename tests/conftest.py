"""Shared fixtures: a fake supabase client, a signed-in session and an API test client."""

import os

import pytest
from httpx import ASGITransport, AsyncClient

# Ensure tests never talk to a real project
os.environ.setdefault("SUPABASE_URL", "http://supabase.test")
os.environ.setdefault("SUPABASE_KEY", "anon-test-key")

from eifound.client.context import SessionContext
from eifound.client.notifications import Notifier
from eifound.dependencies.auth import anon_supabase_client, user_supabase_client
from eifound.main import app
from eifound.schemas.auth import CurrentUser
from tests.fakes import FakeSupabase, identity


@pytest.fixture
def db():
    db = FakeSupabase()
    db.seed(
        "profiles",
        {"id": "p-1", "user_id": "user-1", "display_name": "Ada", "avatar_url": None,
         "email": "ada@example.com", "bio": "Loves compilers", "is_admin": False},
        {"id": "p-2", "user_id": "user-2", "display_name": "Grace", "avatar_url": "https://cdn.test/g.png",
         "email": "grace@example.com", "bio": "Navy", "is_admin": True},
    )
    return db


@pytest.fixture
def session(db):
    session = SessionContext(db)
    session.user = CurrentUser(id="user-1", name="Ada", email="ada@example.com")
    session.loading = False
    return session


@pytest.fixture
def notifier():
    return Notifier()


@pytest.fixture
def seed_tweet(db):
    def _seed(tweet_id, user_id="user-2", content="hello", likes_count=0, comments_count=0, created_at=None):
        row = {
            "id": tweet_id,
            "user_id": user_id,
            "content": content,
            "likes_count": likes_count,
            "comments_count": comments_count,
            "created_at": created_at or db.now(),
        }
        db.seed("tweets", row)
        return row
    return _seed


def _api_client(db, user_id):
    async def override_user_client():
        return {
            "supabase": db,
            "user_id": user_id,
            "user": identity(user_id, f"{user_id}@example.com"),
            "access_token": "access",
        }

    async def override_anon_client():
        return db

    app.dependency_overrides[user_supabase_client] = override_user_client
    app.dependency_overrides[anon_supabase_client] = override_anon_client
    return AsyncClient(transport=ASGITransport(app=app), base_url="http://test")


@pytest.fixture
async def client(db):
    """API client authenticated as user-1 (not an admin)."""
    async with _api_client(db, "user-1") as c:
        yield c
    app.dependency_overrides.clear()


@pytest.fixture
async def admin_client(db):
    """API client authenticated as user-2 (an admin)."""
    async with _api_client(db, "user-2") as c:
        yield c
    app.dependency_overrides.clear()
