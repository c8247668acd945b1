from fastapi import APIRouter, Depends
from eifound.schemas.auth import (
    CurrentUser,
    LoginRequest,
    PasswordChangeRequest,
    PasswordResetRequest,
    SessionTokens,
    SignupRequest,
)
from eifound.dependencies.auth import anon_supabase_client, user_supabase_client
from eifound.services import auth as auth_service
from eifound.services.profiles import find_profile

router = APIRouter()

# Sign up (allowlist gated)
@router.post("/signup", status_code=201)
async def signup(form: SignupRequest, supabase=Depends(anon_supabase_client)):
    user = await auth_service.signup(
        supabase, form.email, form.password, form.confirm_password, form.name,
    )
    return {
        "message": "Account created successfully! You can now sign in.",
        "user_id": user.id if user else None,
    }

# Sign in
@router.post("/login", response_model=SessionTokens)
async def login(form: LoginRequest, supabase=Depends(anon_supabase_client)):
    return await auth_service.sign_in(supabase, form.email, form.password)

# Sign out
@router.post("/logout")
async def logout(context=Depends(user_supabase_client)):
    await auth_service.sign_out(context["supabase"])
    return {"message": "Signed out"}

# Current user
@router.get("/me", response_model=CurrentUser)
async def get_me(context=Depends(user_supabase_client)):
    profile = await find_profile(context["supabase"], context["user_id"])
    return auth_service.build_current_user(context["user"], profile)

# Change password
@router.post("/password")
async def change_password(form: PasswordChangeRequest, context=Depends(user_supabase_client)):
    await auth_service.change_password(
        context["supabase"],
        context["access_token"],
        form.refresh_token,
        form.new_password,
        form.confirm_password,
    )
    return {"message": "Your password has been updated successfully."}

# Password reset email
@router.post("/password-reset")
async def password_reset(form: PasswordResetRequest, supabase=Depends(anon_supabase_client)):
    await auth_service.send_password_reset(supabase, form.email)
    return {"message": "Check your email for password reset instructions."}
