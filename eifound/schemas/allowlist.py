from pydantic import BaseModel
from typing import Optional
from datetime import datetime

# --- Email allowlist (admin only) ---
class AllowlistEntry(BaseModel):
    id: Optional[str] = None
    email: str
    created_at: Optional[datetime] = None


class AllowlistAdd(BaseModel):
    email: str
