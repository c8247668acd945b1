from typing import List, Set
import asyncio
import logging

from eifound.errors import EIFoundError, InputValidationError, NotFoundError
from eifound.schemas.tweet import Tweet
from eifound.services.profiles import fetch_display_profiles
from eifound.services.supabase import execute

logger = logging.getLogger(__name__)

MAX_TWEET_LENGTH = 280
TWEET_COLUMNS = "id, user_id, content, likes_count, comments_count, created_at, updated_at"


def validate_tweet_content(content: str) -> str:
    text = (content or "").strip()
    if not text:
        raise InputValidationError("Tweet cannot be empty", field="content")
    if len(text) > MAX_TWEET_LENGTH:
        raise InputValidationError(
            f"Tweet cannot be longer than {MAX_TWEET_LENGTH} characters", field="content",
        )
    return text


async def fetch_liked_tweet_ids(supabase, user_id: str) -> Set[str]:
    """Tweets the user has liked. A failed lookup degrades to none liked."""
    try:
        response = await execute(
            supabase.table("likes").select("tweet_id").eq("user_id", user_id),
            "fetch user likes",
        )
    except EIFoundError:
        return set()
    return {row["tweet_id"] for row in response.data}


async def decorate_tweets(supabase, rows: List[dict], user_id: str) -> List[Tweet]:
    # Authors and the caller's likes are fetched in parallel once the tweets are known
    profiles, liked_ids = await asyncio.gather(
        fetch_display_profiles(supabase, [row["user_id"] for row in rows]),
        fetch_liked_tweet_ids(supabase, user_id),
    )
    return [
        Tweet(
            **row,
            profiles=profiles.get(row["user_id"]),
            user_liked=row["id"] in liked_ids,
        )
        for row in rows
    ]


# Reverse-chronological feed
async def list_feed(supabase, user_id: str) -> List[Tweet]:
    response = await execute(
        supabase.table("tweets").select(TWEET_COLUMNS).order("created_at", desc=True),
        "fetch tweets",
    )
    return await decorate_tweets(supabase, response.data, user_id)


async def get_tweet(supabase, tweet_id: str, user_id: str) -> Tweet:
    response = await execute(
        supabase.table("tweets").select(TWEET_COLUMNS).eq("id", tweet_id).limit(1),
        "fetch tweet",
    )
    if not response.data:
        raise NotFoundError("Tweet", tweet_id)
    return (await decorate_tweets(supabase, response.data, user_id))[0]


async def create_tweet(supabase, user_id: str, content: str) -> dict:
    text = validate_tweet_content(content)
    response = await execute(
        supabase.table("tweets").insert({"user_id": user_id, "content": text}),
        "send tweet",
    )
    logger.info(f"User {user_id} posted tweet {response.data[0]['id']}")
    return response.data[0]


async def delete_tweet(supabase, tweet_id: str, user_id: str) -> None:
    # Verify tweet belongs to the user
    existing = await execute(
        supabase.table("tweets").select("id").eq("id", tweet_id).eq("user_id", user_id),
        "fetch tweet",
    )
    if not existing.data:
        raise NotFoundError("Tweet", tweet_id)

    await execute(
        supabase.table("tweets").delete().eq("id", tweet_id).eq("user_id", user_id),
        "delete tweet",
    )
    logger.info(f"User {user_id} deleted tweet {tweet_id}")
