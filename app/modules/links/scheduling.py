"""
Link lifecycle resolution for scheduled and expiring links.

Every place that shows or serves a link (owner dashboard, public profile,
admin scheduled-links view, click tracking, password check) goes through
these functions so a link never reports two different states at the same
instant. All functions are pure: the clock is passed in as ``now``.
"""

import re
from dataclasses import dataclass
from datetime import datetime, timezone, tzinfo
from typing import Any, List, Optional, Union

from pydantic import TypeAdapter, ValidationError

STATUS_ACTIVE = "Active"
STATUS_INACTIVE = "Inactive"
STATUS_SCHEDULED = "Scheduled"
STATUS_EXPIRED = "Expired"

BADGE_PASSWORD_PROTECTED = "Password Protected"
BADGE_EXPIRED = "Expired"

_TIMESTAMP_ADAPTER = TypeAdapter(Optional[datetime])
# Postgres renders a whole-hour offset as "+00"
_HOUR_ONLY_OFFSET = re.compile(r"([+-]\d{2})$")


@dataclass(frozen=True)
class LinkScheduleStatus:
    is_scheduled: bool
    is_expired: bool
    is_live: bool
    is_clickable: bool
    display_status: str
    scheduled_at: Optional[datetime] = None
    expires_at: Optional[datetime] = None


def _utcnow() -> datetime:
    return datetime.now(timezone.utc)


def _field(link: Any, name: str, default: Any = None) -> Any:
    """Read a field from a Supabase row (dict) or a model instance."""
    if isinstance(link, dict):
        return link.get(name, default)
    return getattr(link, name, default)


def parse_timestamp(value: Any) -> Optional[datetime]:
    """Parse a stored timestamp into an aware datetime.

    Accepts datetimes and ISO-8601 / Postgres ``timestamptz`` strings. Naive
    values are taken as UTC. Anything that cannot be parsed counts as
    "no constraint" and yields None.
    """
    if isinstance(value, str):
        value = value.strip()
        if not value:
            return None
        if "T" in value or " " in value:
            value = _HOUR_ONLY_OFFSET.sub(r"\1:00", value)
    elif not isinstance(value, datetime):
        return None
    try:
        parsed = _TIMESTAMP_ADAPTER.validate_python(value)
    except ValidationError:
        return None
    if parsed is None:
        return None
    if parsed.tzinfo is None:
        parsed = parsed.replace(tzinfo=timezone.utc)
    return parsed


def _resolve_now(now: Union[datetime, str, None]) -> datetime:
    if now is None:
        return _utcnow()
    parsed = parse_timestamp(now)
    if parsed is None:
        raise ValueError(f"Invalid evaluation instant: {now!r}")
    return parsed


def resolve(link: Any, now: Union[datetime, str, None] = None) -> LinkScheduleStatus:
    """Evaluate every lifecycle predicate of a link against one instant.

    Each timestamp field is parsed once; all predicates and the label are
    derived from those values.
    """
    now = _resolve_now(now)
    scheduled_at = parse_timestamp(_field(link, "scheduled_at"))
    expires_at = parse_timestamp(_field(link, "expires_at"))
    active = bool(_field(link, "is_active", False))

    scheduled = scheduled_at is not None and scheduled_at > now
    expired = expires_at is not None and expires_at <= now

    # Expired is checked first so links with expiry before go-live read "Expired"
    if expired:
        label = STATUS_EXPIRED
    elif scheduled:
        label = STATUS_SCHEDULED
    else:
        label = STATUS_ACTIVE if active else STATUS_INACTIVE

    return LinkScheduleStatus(
        is_scheduled=scheduled,
        is_expired=expired,
        is_live=active and not scheduled and not expired,
        is_clickable=not scheduled and not expired,
        display_status=label,
        scheduled_at=scheduled_at,
        expires_at=expires_at,
    )


def is_scheduled(link: Any, now: Union[datetime, str, None] = None) -> bool:
    return resolve(link, now).is_scheduled


def is_expired(link: Any, now: Union[datetime, str, None] = None) -> bool:
    return resolve(link, now).is_expired


def is_live(link: Any, now: Union[datetime, str, None] = None) -> bool:
    return resolve(link, now).is_live


def is_clickable(link: Any, now: Union[datetime, str, None] = None) -> bool:
    """Whether a visitor may open the link.

    Does not look at is_active: inactive links are filtered out of public
    listings before this is asked.
    """
    return resolve(link, now).is_clickable


def get_display_status(link: Any, now: Union[datetime, str, None] = None) -> str:
    return resolve(link, now).display_status


def format_schedule_date(value: Any, tz: tzinfo = timezone.utc) -> str:
    """Format a timestamp for display, e.g. ``1 Jan 2099, 00:00 UTC``."""
    parsed = parse_timestamp(value)
    if parsed is None:
        return ""
    local = parsed.astimezone(tz)
    return f"{local.day} {local.strftime('%b %Y, %H:%M')} {local.tzname() or ''}".rstrip()


def _format_countdown(seconds: float) -> str:
    minutes_total = int(seconds // 60)
    days, remainder = divmod(minutes_total, 60 * 24)
    hours, minutes = divmod(remainder, 60)
    if days > 0:
        return f"{days}d {hours}h {minutes}m"
    if hours > 0:
        return f"{hours}h {minutes}m"
    return f"{minutes}m"


def time_until_live(scheduled_at: Any, now: Union[datetime, str, None] = None) -> str:
    target = parse_timestamp(scheduled_at)
    if target is None:
        return "Live now"
    diff = (target - _resolve_now(now)).total_seconds()
    if diff <= 0:
        return "Live now"
    return _format_countdown(diff)


def time_until_expiry(expires_at: Any, now: Union[datetime, str, None] = None) -> str:
    target = parse_timestamp(expires_at)
    if target is None:
        return ""
    diff = (target - _resolve_now(now)).total_seconds()
    if diff <= 0:
        return STATUS_EXPIRED
    return _format_countdown(diff)


def normalize_url(url: str) -> str:
    """Prepend https:// to URLs stored without a scheme."""
    url = (url or "").strip()
    if url.lower().startswith(("http://", "https://")):
        return url
    return f"https://{url}"


def get_public_badge(link: Any, now: Union[datetime, str, None] = None, tz: tzinfo = timezone.utc) -> Optional[str]:
    """Single badge shown next to a link on a public profile."""
    status = resolve(link, now)
    if status.is_expired:
        return BADGE_EXPIRED
    if status.is_scheduled:
        return f"Scheduled for {format_schedule_date(status.scheduled_at, tz)}"
    if _field(link, "password"):
        return BADGE_PASSWORD_PROTECTED
    return None


def schedule_details(link: Any, now: Union[datetime, str, None] = None, tz: tzinfo = timezone.utc) -> List[str]:
    """Human-readable schedule lines for admin listings."""
    status = resolve(link, now)
    details = []
    if status.scheduled_at is not None:
        prefix = "Scheduled for" if status.is_scheduled else "Went live on"
        details.append(f"{prefix} {format_schedule_date(status.scheduled_at, tz)}")
    if status.expires_at is not None:
        prefix = "Expired on" if status.is_expired else "Expires on"
        details.append(f"{prefix} {format_schedule_date(status.expires_at, tz)}")
    return details
