from datetime import datetime, timezone
from typing import Optional, Union

from dateutil.parser import isoparse


def parse_timestamp(value: Union[str, datetime]) -> datetime:
    """Supabase returns timestamptz as ISO-8601 strings; naive values are taken as UTC."""
    parsed = isoparse(value) if isinstance(value, str) else value
    if parsed.tzinfo is None:
        parsed = parsed.replace(tzinfo=timezone.utc)
    return parsed


def format_timestamp(value: Union[str, datetime], now: Optional[datetime] = None) -> str:
    """Clock time for the last 24 hours, otherwise month and day ("Jul 8"), in the viewer's local time."""
    moment = parse_timestamp(value)
    now = now or datetime.now(timezone.utc)
    recent = (now - moment).total_seconds() < 24 * 60 * 60
    moment = moment.astimezone()
    if recent:
        return moment.strftime("%H:%M")
    return f"{moment.strftime('%b')} {moment.day}"
