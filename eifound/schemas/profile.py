from pydantic import BaseModel
from typing import Optional
from datetime import datetime

# --- Profiles (auth.users.id -> profiles.user_id) ---
class Profile(BaseModel):
    id: Optional[str] = None
    user_id: str
    display_name: Optional[str] = None
    avatar_url: Optional[str] = None
    bio: Optional[str] = None
    about: Optional[str] = None
    program: Optional[str] = None
    section: Optional[str] = None
    batch: Optional[str] = None
    hobby: Optional[str] = None
    website: Optional[str] = None
    instagram: Optional[str] = None
    linkedin: Optional[str] = None
    twitter: Optional[str] = None
    is_admin: bool = False
    email: Optional[str] = None
    created_at: Optional[datetime] = None
    updated_at: Optional[datetime] = None


class ProfileUpdate(BaseModel):
    display_name: Optional[str] = None
    avatar_url: Optional[str] = None
    bio: Optional[str] = None
    about: Optional[str] = None
    program: Optional[str] = None
    section: Optional[str] = None
    batch: Optional[str] = None
    hobby: Optional[str] = None
    website: Optional[str] = None
    instagram: Optional[str] = None
    linkedin: Optional[str] = None
    twitter: Optional[str] = None


# Author block shown next to tweets and comments
class DisplayProfile(BaseModel):
    user_id: Optional[str] = None
    display_name: Optional[str] = None
    avatar_url: Optional[str] = None
