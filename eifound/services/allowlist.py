from typing import List
import logging

from eifound.errors import InputValidationError, NotFoundError, RemoteCallError
from eifound.schemas.allowlist import AllowlistEntry
from eifound.services.supabase import DATA_API_ERRORS, error_message, execute

logger = logging.getLogger(__name__)


def normalize_email(email: str) -> str:
    return (email or "").strip().lower()


async def is_email_allowed(supabase, email: str) -> bool:
    """Ask the server-side is_email_allowed() predicate about a candidate email."""
    try:
        response = await supabase.rpc(
            "is_email_allowed", {"email_to_check": normalize_email(email)}
        ).execute()
    except DATA_API_ERRORS as e:
        logger.error(f"Allowlist check error: {error_message(e)}")
        raise RemoteCallError("Unable to verify email authorization. Please try again.") from e
    return response.data is True


# --- Admin management; RLS only lets admins read or write email_allowlist ---

async def list_allowed_emails(supabase) -> List[AllowlistEntry]:
    response = await execute(
        supabase.table("email_allowlist").select("*").order("created_at", desc=False),
        "fetch allowlist",
    )
    return [AllowlistEntry(**row) for row in response.data]


async def add_allowed_email(supabase, email: str) -> AllowlistEntry:
    address = normalize_email(email)
    if not address:
        raise InputValidationError("Email is required", field="email")

    existing = await execute(
        supabase.table("email_allowlist").select("id").eq("email", address),
        "fetch allowlist",
    )
    if existing.data:
        raise InputValidationError("This email is already in the allowlist.", field="email")

    response = await execute(
        supabase.table("email_allowlist").insert({"email": address}),
        "add email to allowlist",
    )
    logger.info(f"{address} has been added to the allowlist")
    return AllowlistEntry(**response.data[0])


async def remove_allowed_email(supabase, email: str) -> None:
    address = normalize_email(email)
    response = await execute(
        supabase.table("email_allowlist").delete().eq("email", address),
        "remove email from allowlist",
    )
    if not response.data:
        raise NotFoundError("Allowlist email", address)
    logger.info(f"{address} has been removed from the allowlist")
