from pydantic import BaseModel
from typing import Optional
from datetime import datetime

from eifound.schemas.profile import DisplayProfile

# --- Tweets ---
class TweetCreate(BaseModel):
    content: str


class Tweet(BaseModel):
    id: str
    user_id: str
    content: str
    likes_count: int = 0
    comments_count: int = 0
    created_at: Optional[datetime] = None
    updated_at: Optional[datetime] = None
    # Local-only fields, never written back to the tweets table
    profiles: Optional[DisplayProfile] = None
    user_liked: bool = False
