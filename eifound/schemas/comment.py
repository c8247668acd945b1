from pydantic import BaseModel
from typing import Optional
from datetime import datetime

from eifound.schemas.profile import DisplayProfile

# --- Comments ---
class CommentCreate(BaseModel):
    content: str


class Comment(BaseModel):
    id: str
    user_id: str
    tweet_id: Optional[str] = None
    content: str
    created_at: Optional[datetime] = None
    updated_at: Optional[datetime] = None
    profiles: Optional[DisplayProfile] = None
