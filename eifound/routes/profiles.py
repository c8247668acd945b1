from fastapi import APIRouter, Depends, File, Query, UploadFile
from typing import List
from eifound.schemas.profile import Profile, ProfileUpdate
from eifound.dependencies.auth import user_supabase_client
from eifound.services import profiles as profile_service
from eifound.services.avatars import upload_avatar

router = APIRouter()

# Members directory
@router.get("", response_model=List[Profile])
async def list_members(
    search: str = Query(""),
    context=Depends(user_supabase_client)
):
    return await profile_service.list_members(context["supabase"], context["user_id"], search)

# Update own profile; the owner always comes from the token
@router.put("/me", response_model=Profile)
async def update_my_profile(updates: ProfileUpdate, context=Depends(user_supabase_client)):
    return await profile_service.update_profile(context["supabase"], context["user_id"], updates)

# Upload avatar
@router.post("/me/avatar", response_model=Profile)
async def upload_my_avatar(
    file: UploadFile = File(...),
    context=Depends(user_supabase_client)
):
    supabase = context["supabase"]
    user_id = context["user_id"]

    current = await profile_service.find_profile(supabase, user_id)
    data = await file.read()
    return await upload_avatar(
        supabase,
        user_id,
        file.filename,
        file.content_type,
        data,
        current.avatar_url if current else None,
    )

# Single profile
@router.get("/{user_id}", response_model=Profile)
async def get_profile(user_id: str, context=Depends(user_supabase_client)):
    return await profile_service.get_profile(context["supabase"], user_id)
