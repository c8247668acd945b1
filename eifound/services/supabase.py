from typing import Optional
import logging
import time

import httpx
from supabase import AsyncClient, PostgrestAPIError, acreate_client
from supabase.lib.client_options import AsyncClientOptions

from eifound import config
from eifound.errors import RemoteCallError

logger = logging.getLogger(__name__)

# Errors raised by the data API for a failed select/insert/update/delete/rpc
DATA_API_ERRORS = (PostgrestAPIError, httpx.HTTPError)


async def create_supabase(access_token: Optional[str] = None) -> AsyncClient:
    """Create an async Supabase client, acting as the given user when a token is passed."""
    supabase_url, supabase_key = config.supabase_credentials()

    if not access_token:
        return await acreate_client(supabase_url, supabase_key)

    # Row-level security evaluates auth.uid() from this bearer token
    options = AsyncClientOptions(headers={"Authorization": f"Bearer {access_token}"})
    supabase = await acreate_client(supabase_url, supabase_key, options=options)
    supabase.postgrest.auth(access_token)
    return supabase


def error_message(exc: Exception) -> str:
    message = getattr(exc, "message", None)
    return message if isinstance(message, str) and message else str(exc)


async def execute(query, action: str):
    """Run a query builder and turn platform failures into RemoteCallError."""
    start_time = time.time()
    try:
        response = await query.execute()
    except DATA_API_ERRORS as e:
        logger.error(f"Supabase error while trying to {action}: {error_message(e)}")
        raise RemoteCallError(f"Failed to {action}") from e
    logger.debug(f"{action} completed in {time.time() - start_time:.2f} seconds")
    return response
