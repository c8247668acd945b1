from fastapi import Depends, Header, HTTPException
import httpx
import time
import logging

from supabase import AuthError

from eifound.errors import AuthorizationError, ConfigurationError
from eifound.services.profiles import is_admin
from eifound.services.supabase import create_supabase, error_message

logger = logging.getLogger(__name__)


async def anon_supabase_client():
    try:
        return await create_supabase()
    except ConfigurationError as e:
        logger.error(e.message)
        raise HTTPException(status_code=500, detail="Server configuration error")


async def user_supabase_client(authorization: str = Header(...)):
    if not authorization.startswith("Bearer "):
        raise HTTPException(status_code=401, detail="Invalid token format")

    token = authorization.split(" ")[1]

    try:
        supabase = await create_supabase(token)
    except ConfigurationError as e:
        logger.error(e.message)
        raise HTTPException(status_code=500, detail="Server configuration error")

    try:
        start_time = time.time()
        logger.info("Validating token with Supabase")
        user_res = await supabase.auth.get_user(token)
        end_time = time.time()
        logger.info(f"Token validation completed in {end_time - start_time:.2f} seconds")
    except httpx.TimeoutException as e:
        logger.error(f"Supabase token validation timed out: {str(e)}")
        raise HTTPException(
            status_code=504,
            detail="Connection to authentication service timed out. Please try again later."
        )
    except (AuthError, httpx.HTTPError) as e:
        logger.error(f"Supabase token validation error: {error_message(e)}")
        raise HTTPException(status_code=401, detail=f"Authentication error: {error_message(e)}")

    if not user_res or not user_res.user:
        logger.warning("User not found after successful token validation")
        raise HTTPException(status_code=401, detail="User not found")

    logger.info(f"Successfully authenticated user: {user_res.user.id}")
    return {
        "supabase": supabase,
        "user_id": user_res.user.id,
        "user": user_res.user,
        "access_token": token,
    }


async def admin_supabase_client(context=Depends(user_supabase_client)):
    if not await is_admin(context["supabase"], context["user_id"]):
        logger.warning(f"Non-admin user {context['user_id']} requested an admin view")
        raise AuthorizationError("Access denied")
    return context
