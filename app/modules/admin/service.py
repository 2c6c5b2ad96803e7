from supabase import Client
from app.modules.admin.schemas import (
    ScheduledLinkFilter, LinkOwner, ScheduledLinkResponse, ScheduledLinkStats, ScheduledLinksResponse
)
from app.modules.links.scheduling import (
    LinkScheduleStatus, resolve, schedule_details, time_until_live, time_until_expiry
)
from app.modules.links.service import LINKS_TABLE
from typing import Any, Dict, List, Optional, Tuple
from fastapi import HTTPException
from datetime import datetime, timezone
import logging

logger = logging.getLogger(__name__)

SCHEDULED_LINK_COLUMNS = (
    "id, title, url, is_active, scheduled_at, expires_at, password, created_at, "
    "user:user_id(id, username, display_name)"
)


def _matches_search(row: Dict[str, Any], search: Optional[str]) -> bool:
    if not search:
        return True
    term = search.lower()
    user = row.get("user") or {}
    candidates = [row.get("title"), user.get("username"), user.get("display_name")]
    return any(term in value.lower() for value in candidates if value)


def _in_bucket(status: LinkScheduleStatus, bucket: ScheduledLinkFilter) -> bool:
    if bucket == "scheduled":
        return status.is_scheduled
    if bucket == "expired":
        return status.is_expired
    if bucket == "active":
        return status.is_live
    return True


def build_scheduled_link(row: Dict[str, Any], status: LinkScheduleStatus, now: datetime) -> ScheduledLinkResponse:
    user = row.get("user")
    return ScheduledLinkResponse(
        id=row["id"],
        title=row["title"],
        url=row["url"],
        is_active=bool(row.get("is_active", False)),
        scheduled_at=status.scheduled_at,
        expires_at=status.expires_at,
        is_password_protected=bool(row.get("password")),
        created_at=row.get("created_at"),
        user=LinkOwner(**user) if user else None,
        is_scheduled=status.is_scheduled,
        is_expired=status.is_expired,
        is_live=status.is_live,
        display_status=status.display_status,
        details=schedule_details(row, now),
        time_until_live=time_until_live(status.scheduled_at, now) if status.is_scheduled else None,
        time_until_expiry=time_until_expiry(status.expires_at, now) if status.expires_at else None,
    )


class AdminLinkService:
    def __init__(self, supabase: Client):
        self.supabase = supabase

    def _fetch_scheduled_rows(self) -> List[Dict[str, Any]]:
        result = self.supabase.table(LINKS_TABLE)\
            .select(SCHEDULED_LINK_COLUMNS)\
            .or_("scheduled_at.not.is.null,expires_at.not.is.null")\
            .order("created_at", desc=True)\
            .execute()
        return result.data or []

    def list_scheduled_links(
        self,
        bucket: ScheduledLinkFilter = "all",
        search: Optional[str] = None,
        now: Optional[datetime] = None,
    ) -> ScheduledLinksResponse:
        """Links with a go-live or expiry time, filtered by lifecycle bucket and search term"""
        now = now or datetime.now(timezone.utc)
        try:
            rows = self._fetch_scheduled_rows()
        except Exception as e:
            logger.error(f"Error fetching scheduled links: {e}")
            raise HTTPException(status_code=500, detail="Failed to fetch scheduled links")

        resolved: List[Tuple[Dict[str, Any], LinkScheduleStatus]] = [
            (row, resolve(row, now)) for row in rows if _matches_search(row, search)
        ]
        stats = ScheduledLinkStats(
            total=len(resolved),
            scheduled=sum(1 for _, s in resolved if s.is_scheduled),
            expired=sum(1 for _, s in resolved if s.is_expired),
            active=sum(1 for _, s in resolved if s.is_live),
        )
        links = [
            build_scheduled_link(row, status, now)
            for row, status in resolved
            if _in_bucket(status, bucket)
        ]
        return ScheduledLinksResponse(links=links, count=len(links), stats=stats)
