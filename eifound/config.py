from dotenv import load_dotenv
import os

from eifound.errors import ConfigurationError

load_dotenv()

LOG_LEVEL = os.getenv("LOG_LEVEL", "INFO")
AVATAR_BUCKET = os.getenv("AVATAR_BUCKET", "avatars")

# Supabase credentials are read per call so a restarted worker picks up rotated keys
def supabase_credentials():
    supabase_url = os.getenv("SUPABASE_URL")
    supabase_key = os.getenv("SUPABASE_KEY")
    if not supabase_url or not supabase_key:
        raise ConfigurationError("Supabase URL or Key not found in environment variables")
    return supabase_url, supabase_key


def frontend_url() -> str:
    return os.getenv("FRONTEND_URL", "http://localhost:5173").rstrip("/")
