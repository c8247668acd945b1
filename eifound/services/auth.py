from typing import Optional
import logging

import httpx
from supabase import AuthError

from eifound import config
from eifound.errors import (
    AuthenticationError,
    EmailNotAuthorizedError,
    InputValidationError,
    RemoteCallError,
)
from eifound.schemas.auth import CurrentUser, SessionTokens
from eifound.schemas.profile import Profile
from eifound.services.allowlist import is_email_allowed, normalize_email
from eifound.services.supabase import error_message

logger = logging.getLogger(__name__)

MIN_PASSWORD_LENGTH = 6
AUTH_API_ERRORS = (AuthError, httpx.HTTPError)


def validate_new_password(password: str, confirm_password: str) -> None:
    if password != confirm_password:
        raise InputValidationError("Passwords don't match", field="confirm_password")
    if len(password or "") < MIN_PASSWORD_LENGTH:
        raise InputValidationError(
            f"Password must be at least {MIN_PASSWORD_LENGTH} characters long.", field="password",
        )


def session_tokens(session) -> SessionTokens:
    return SessionTokens(
        access_token=session.access_token,
        refresh_token=session.refresh_token,
        expires_at=session.expires_at,
        user_id=session.user.id,
    )


def build_current_user(user, profile: Optional[Profile]) -> CurrentUser:
    """Merge the identity with its profile row; the profile may not exist yet."""
    email = user.email or ""
    name = (profile.display_name if profile else None) or email.split("@")[0] or "User"
    if profile is None:
        return CurrentUser(id=user.id, name=name, email=email)
    return CurrentUser(
        id=user.id,
        name=name,
        email=email,
        avatar=profile.avatar_url,
        bio=profile.bio,
        is_admin=profile.is_admin,
        program=profile.program,
        section=profile.section,
        batch=profile.batch,
        hobby=profile.hobby,
        website=profile.website,
        instagram=profile.instagram,
        linkedin=profile.linkedin,
        twitter=profile.twitter,
        about=profile.about,
    )


async def signup(supabase, email: str, password: str, confirm_password: str, name: str):
    validate_new_password(password, confirm_password)
    address = normalize_email(email)
    if not address:
        raise InputValidationError("Email is required", field="email")

    # Checked before the identity exists; a rejected email never reaches sign_up
    if not await is_email_allowed(supabase, address):
        logger.warning(f"Signup rejected for email not on allowlist: {address}")
        raise EmailNotAuthorizedError()

    try:
        response = await supabase.auth.sign_up({
            "email": address,
            "password": password,
            "options": {
                "email_redirect_to": f"{config.frontend_url()}/",
                "data": {"full_name": name},
            },
        })
    except AUTH_API_ERRORS as e:
        logger.error(f"Signup error: {error_message(e)}")
        raise RemoteCallError(error_message(e), http_status=400) from e

    logger.info(f"Created account for {address}")
    return response.user


async def sign_in(supabase, email: str, password: str) -> SessionTokens:
    try:
        response = await supabase.auth.sign_in_with_password({
            "email": normalize_email(email),
            "password": password,
        })
    except AuthError as e:
        logger.warning(f"Login error: {error_message(e)}")
        raise AuthenticationError(error_message(e)) from e
    except httpx.HTTPError as e:
        logger.error(f"Login error: {str(e)}")
        raise RemoteCallError("Unable to reach the authentication service. Please try again.") from e

    if response.session is None:
        raise AuthenticationError()
    logger.info(f"User {response.user.id} signed in")
    return session_tokens(response.session)


async def sign_out(supabase) -> None:
    try:
        await supabase.auth.sign_out()
    except AUTH_API_ERRORS as e:
        logger.error(f"Logout error: {error_message(e)}")
        raise RemoteCallError("Failed to sign out") from e


async def change_password(supabase, access_token: str, refresh_token: str,
                          new_password: str, confirm_password: str) -> None:
    validate_new_password(new_password, confirm_password)
    try:
        await supabase.auth.set_session(access_token, refresh_token)
        await supabase.auth.update_user({"password": new_password})
    except AUTH_API_ERRORS as e:
        logger.error(f"Password change error: {error_message(e)}")
        raise RemoteCallError(error_message(e), http_status=400) from e
    logger.info("Password updated")


async def send_password_reset(supabase, email: str) -> None:
    address = normalize_email(email)
    if not address:
        raise InputValidationError("Please enter your email address.", field="email")
    try:
        await supabase.auth.reset_password_for_email(
            address, {"redirect_to": f"{config.frontend_url()}/reset-password"},
        )
    except AUTH_API_ERRORS as e:
        logger.error(f"Password reset error: {error_message(e)}")
        raise RemoteCallError("Failed to send reset email. Please try again.") from e
    logger.info(f"Password reset email sent to {address}")
