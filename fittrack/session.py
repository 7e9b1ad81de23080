# backend/fittrack/session.py
from dataclasses import dataclass, field
from datetime import date, datetime
from typing import Optional
from zoneinfo import ZoneInfo, ZoneInfoNotFoundError

from flask import current_app, request
from flask_jwt_extended import get_jwt_identity

TIMEZONE_HEADER = "X-Client-Timezone"


def _zone_or_none(tz_name: Optional[str]) -> Optional[ZoneInfo]:
    if not tz_name:
        return None
    try:
        return ZoneInfo(tz_name)
    except (ZoneInfoNotFoundError, ValueError):
        return None


def today_in(tz_name: Optional[str]) -> date:
    """
    Calendar date "now" in the given IANA zone.
    Falls back to the server's local date when the zone is empty or unknown.
    """
    zone = _zone_or_none(tz_name)
    if zone is None:
        return date.today()
    return datetime.now(zone).date()


@dataclass(frozen=True)
class UserSession:
    """Who is asking, and which calendar day it is for them."""

    user_id: int
    today: date = field(default_factory=date.today)

    @classmethod
    def from_request(cls) -> "UserSession":
        # must run inside a @jwt_required() view
        user_id = int(get_jwt_identity())

        # client zone wins when it is a real zone, then the app default
        tz_name = request.headers.get(TIMEZONE_HEADER)
        if _zone_or_none(tz_name) is None:
            tz_name = current_app.config.get("APP_TIMEZONE")

        return cls(user_id=user_id, today=today_in(tz_name))
