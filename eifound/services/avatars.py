from typing import Optional
import logging
import uuid

import httpx
from supabase import StorageException

from eifound import config
from eifound.errors import InputValidationError, RemoteCallError
from eifound.schemas.profile import Profile, ProfileUpdate
from eifound.services.profiles import update_profile
from eifound.services.supabase import error_message

logger = logging.getLogger(__name__)

ALLOWED_AVATAR_TYPES = {
    "image/jpeg": "jpg",
    "image/jpg": "jpg",
    "image/png": "png",
    "image/webp": "webp",
    "image/gif": "gif",
}
AVATAR_EXTENSIONS = {"jpg", "jpeg", "png", "webp", "gif"}
MAX_AVATAR_BYTES = 5 * 1024 * 1024
STORAGE_ERRORS = (StorageException, httpx.HTTPError)


def validate_avatar(content_type: Optional[str], size: int) -> None:
    if content_type not in ALLOWED_AVATAR_TYPES:
        raise InputValidationError("Please upload a JPEG, PNG, WebP, or GIF image.", field="file")
    if size > MAX_AVATAR_BYTES:
        raise InputValidationError("Please upload an image smaller than 5MB.", field="file")


def avatar_object_path(user_id: str, filename: Optional[str], content_type: str) -> str:
    # Storage policies only accept objects inside the owner's folder
    ext = filename.rsplit(".", 1)[-1].lower() if filename and "." in filename else ""
    if ext not in AVATAR_EXTENSIONS:
        ext = ALLOWED_AVATAR_TYPES[content_type]
    return f"{user_id}/{uuid.uuid4().hex}.{ext}"


def previous_avatar_path(user_id: str, avatar_url: Optional[str]) -> Optional[str]:
    if not avatar_url:
        return None
    name = avatar_url.split("?")[0].rstrip("/").split("/")[-1]
    return f"{user_id}/{name}" if name else None


async def upload_avatar(supabase, user_id: str, filename: Optional[str], content_type: Optional[str],
                        data: bytes, current_avatar_url: Optional[str] = None) -> Profile:
    """Replace the user's avatar and save its public URL to the profile."""
    validate_avatar(content_type, len(data))
    bucket = supabase.storage.from_(config.AVATAR_BUCKET)

    # Delete old avatar if exists
    old_path = previous_avatar_path(user_id, current_avatar_url)
    if old_path:
        try:
            await bucket.remove([old_path])
        except STORAGE_ERRORS as e:
            logger.warning(f"Could not remove old avatar {old_path}: {error_message(e)}")

    file_path = avatar_object_path(user_id, filename, content_type)
    try:
        await bucket.upload(file_path, data, {"content-type": content_type})
        public_url = await bucket.get_public_url(file_path)
    except STORAGE_ERRORS as e:
        logger.error(f"Upload error: {error_message(e)}")
        raise RemoteCallError("Failed to upload image. Please try again.") from e

    public_url = public_url.rstrip("?")
    logger.info(f"Image uploaded to: {public_url}")
    return await update_profile(supabase, user_id, ProfileUpdate(avatar_url=public_url))
