from pydantic import BaseModel
from typing import Optional

# --- Signup / sign-in forms ---
class SignupRequest(BaseModel):
    email: str
    password: str
    confirm_password: str
    name: str


class LoginRequest(BaseModel):
    email: str
    password: str


class PasswordChangeRequest(BaseModel):
    new_password: str
    confirm_password: str
    # The platform only changes the password of a live session, so the refresh token rides along
    refresh_token: str


class PasswordResetRequest(BaseModel):
    email: str = ""


class SessionTokens(BaseModel):
    access_token: str
    refresh_token: str
    expires_at: Optional[int] = None
    user_id: str


# --- Signed-in user (auth.users joined with profiles) ---
class CurrentUser(BaseModel):
    id: str
    name: str
    email: str
    avatar: Optional[str] = None
    bio: Optional[str] = None
    is_admin: bool = False
    program: Optional[str] = None
    section: Optional[str] = None
    batch: Optional[str] = None
    hobby: Optional[str] = None
    website: Optional[str] = None
    instagram: Optional[str] = None
    linkedin: Optional[str] = None
    twitter: Optional[str] = None
    about: Optional[str] = None
