from typing import List
import logging

from eifound.errors import InputValidationError, NotFoundError
from eifound.schemas.comment import Comment
from eifound.services.profiles import fetch_display_profiles
from eifound.services.supabase import execute

logger = logging.getLogger(__name__)

COMMENT_COLUMNS = "id, user_id, tweet_id, content, created_at, updated_at"


def validate_comment_content(content: str) -> str:
    text = (content or "").strip()
    if not text:
        raise InputValidationError("Comment cannot be empty", field="content")
    return text


# Oldest first, so a thread reads top to bottom
async def list_comments(supabase, tweet_id: str) -> List[Comment]:
    response = await execute(
        supabase.table("comments")
        .select(COMMENT_COLUMNS)
        .eq("tweet_id", tweet_id)
        .order("created_at", desc=False),
        "fetch comments",
    )
    profiles = await fetch_display_profiles(supabase, [row["user_id"] for row in response.data])
    return [Comment(**row, profiles=profiles.get(row["user_id"])) for row in response.data]


async def create_comment(supabase, tweet_id: str, user_id: str, content: str) -> dict:
    text = validate_comment_content(content)
    response = await execute(
        supabase.table("comments").insert({
            "user_id": user_id,
            "tweet_id": tweet_id,
            "content": text,
        }),
        "send comment",
    )
    logger.info(f"User {user_id} commented on tweet {tweet_id}")
    return response.data[0]


async def _verify_owner(supabase, comment_id: str, user_id: str) -> None:
    existing = await execute(
        supabase.table("comments").select("id").eq("id", comment_id).eq("user_id", user_id),
        "fetch comment",
    )
    if not existing.data:
        raise NotFoundError("Comment", comment_id)


async def update_comment(supabase, comment_id: str, user_id: str, content: str) -> dict:
    text = validate_comment_content(content)
    await _verify_owner(supabase, comment_id, user_id)
    response = await execute(
        supabase.table("comments")
        .update({"content": text})
        .eq("id", comment_id)
        .eq("user_id", user_id),
        "update comment",
    )
    return response.data[0]


async def delete_comment(supabase, comment_id: str, user_id: str) -> None:
    await _verify_owner(supabase, comment_id, user_id)
    await execute(
        supabase.table("comments").delete().eq("id", comment_id).eq("user_id", user_id),
        "delete comment",
    )
    logger.info(f"User {user_id} deleted comment {comment_id}")
