from fastapi import APIRouter, Depends
from typing import List
from eifound.schemas.allowlist import AllowlistAdd, AllowlistEntry
from eifound.dependencies.auth import admin_supabase_client
from eifound.services import allowlist as allowlist_service

router = APIRouter()

@router.get("/allowlist", response_model=List[AllowlistEntry])
async def get_allowlist(context=Depends(admin_supabase_client)):
    return await allowlist_service.list_allowed_emails(context["supabase"])

@router.post("/allowlist", response_model=AllowlistEntry, status_code=201)
async def add_to_allowlist(entry: AllowlistAdd, context=Depends(admin_supabase_client)):
    return await allowlist_service.add_allowed_email(context["supabase"], entry.email)

@router.delete("/allowlist/{email}")
async def remove_from_allowlist(email: str, context=Depends(admin_supabase_client)):
    await allowlist_service.remove_allowed_email(context["supabase"], email)
    return {"message": f"{email} has been removed from the allowlist."}
