import logging

from eifound.services.supabase import execute

logger = logging.getLogger(__name__)


# Each call is exactly one write; the likes_count trigger does the counting
async def like_tweet(supabase, tweet_id: str, user_id: str) -> None:
    await execute(
        supabase.table("likes").insert({"tweet_id": tweet_id, "user_id": user_id}),
        "like tweet",
    )
    logger.info(f"User {user_id} liked tweet {tweet_id}")


async def unlike_tweet(supabase, tweet_id: str, user_id: str) -> None:
    await execute(
        supabase.table("likes").delete().eq("tweet_id", tweet_id).eq("user_id", user_id),
        "unlike tweet",
    )
    logger.info(f"User {user_id} unliked tweet {tweet_id}")
