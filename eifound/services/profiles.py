from typing import Dict, Iterable, List, Optional
import logging

from eifound.errors import EIFoundError, NotFoundError
from eifound.schemas.profile import DisplayProfile, Profile, ProfileUpdate
from eifound.services.supabase import execute

logger = logging.getLogger(__name__)

DISPLAY_COLUMNS = "user_id, display_name, avatar_url"


async def get_profile(supabase, user_id: str) -> Profile:
    response = await execute(
        supabase.table("profiles").select("*").eq("user_id", user_id).limit(1),
        "fetch profile",
    )
    if not response.data:
        raise NotFoundError("Profile", user_id)
    return Profile(**response.data[0])


async def find_profile(supabase, user_id: str) -> Optional[Profile]:
    """Like get_profile, but a missing row is None rather than an error."""
    try:
        return await get_profile(supabase, user_id)
    except NotFoundError:
        return None


async def fetch_display_profile(supabase, user_id: str) -> Optional[DisplayProfile]:
    response = await execute(
        supabase.table("profiles").select(DISPLAY_COLUMNS).eq("user_id", user_id).limit(1),
        "fetch author profile",
    )
    if not response.data:
        return None
    return DisplayProfile(**response.data[0])


async def fetch_display_profiles(supabase, user_ids: Iterable[str]) -> Dict[str, DisplayProfile]:
    """Author blocks keyed by user_id. A failed lookup degrades to no authors."""
    unique_ids = list(dict.fromkeys(user_ids))
    if not unique_ids:
        return {}
    try:
        response = await execute(
            supabase.table("profiles").select(DISPLAY_COLUMNS).in_("user_id", unique_ids),
            "fetch author profiles",
        )
    except EIFoundError:
        return {}
    return {row["user_id"]: DisplayProfile(**row) for row in response.data}


async def update_profile(supabase, user_id: str, updates: ProfileUpdate) -> Profile:
    # Only fields the caller actually sent are written
    changes = updates.model_dump(exclude_unset=True)
    if not changes:
        return await get_profile(supabase, user_id)

    response = await execute(
        supabase.table("profiles").update(changes).eq("user_id", user_id),
        "update profile",
    )
    if not response.data:
        raise NotFoundError("Profile", user_id)
    logger.info(f"Updated profile fields {sorted(changes)} for user {user_id}")
    return Profile(**response.data[0])


def search_members(profiles: List[Profile], current_user_id: Optional[str], term: str = "") -> List[Profile]:
    """Members directory: everyone else who has a display name, matched on name, email or bio."""
    needle = (term or "").lower()
    members = [
        p for p in profiles
        if p.user_id and p.user_id != current_user_id and p.display_name
    ]
    if not needle:
        return members
    return [
        p for p in members
        if needle in (p.display_name or "").lower()
        or needle in (p.email or "").lower()
        or needle in (p.bio or "").lower()
    ]


async def list_members(supabase, current_user_id: str, term: str = "") -> List[Profile]:
    response = await execute(supabase.table("profiles").select("*"), "fetch members")
    profiles = [Profile(**row) for row in response.data]
    return search_members(profiles, current_user_id, term)


async def is_admin(supabase, user_id: str) -> bool:
    profile = await find_profile(supabase, user_id)
    return bool(profile and profile.is_admin)
