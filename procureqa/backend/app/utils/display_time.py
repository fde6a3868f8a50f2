"""
Timestamps in list payloads are shown the way the admin panel expects them:
en-IN short form ("5/3/2024, 2:07:09 pm") in settings.DISPLAY_TIMEZONE.
"""
from datetime import datetime, timezone
from typing import Any, Dict, Optional
from zoneinfo import ZoneInfo

from app.config import settings


def format_display_time(value: Optional[datetime]) -> Optional[str]:
    if value is None:
        return None
    if value.tzinfo is None:
        # SQLite hands back naive values; they were written as UTC
        value = value.replace(tzinfo=timezone.utc)
    local = value.astimezone(ZoneInfo(settings.DISPLAY_TIMEZONE))
    hour = local.hour % 12 or 12
    meridiem = "am" if local.hour < 12 else "pm"
    return f"{local.day}/{local.month}/{local.year}, {hour}:{local.minute:02d}:{local.second:02d} {meridiem}"


def with_display_dates(payload: Dict[str, Any]) -> Dict[str, Any]:
    """Replace created_at/updated_at in a serialized row with display strings."""
    for key in ("created_at", "updated_at"):
        if isinstance(payload.get(key), datetime):
            payload[key] = format_display_time(payload[key])
    return payload
