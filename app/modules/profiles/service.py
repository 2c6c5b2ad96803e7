from supabase import Client
from app.modules.profiles.schemas import PublicLink, PublicProfile, PublicProfileResponse
from app.modules.links.scheduling import resolve, get_public_badge
from app.modules.links.service import LINKS_TABLE
from typing import Any, Dict, Optional
from fastapi import HTTPException
from datetime import datetime, timezone
import logging

logger = logging.getLogger(__name__)


def build_public_link(row: Dict[str, Any], now: datetime) -> PublicLink:
    status = resolve(row, now)
    return PublicLink(
        id=row["id"],
        title=row["title"],
        url=row["url"],
        order=row.get("order") or 0,
        is_clickable=status.is_clickable,
        is_scheduled=status.is_scheduled,
        is_expired=status.is_expired,
        is_password_protected=bool(row.get("password")),
        badge=get_public_badge(row, now),
    )


class ProfileService:
    def __init__(self, supabase: Client):
        self.supabase = supabase

    def get_public_profile(self, username: str, now: Optional[datetime] = None) -> PublicProfileResponse:
        """Public profile with its active links; each link carries clickability and badge"""
        now = now or datetime.now(timezone.utc)
        try:
            user_result = self.supabase.table("profiles")\
                .select("id, username, display_name, bio, profile_image, theme")\
                .eq("username", username)\
                .maybe_single()\
                .execute()
            if not user_result or not user_result.data:
                raise HTTPException(status_code=404, detail="User not found")
            user = user_result.data

            links_result = self.supabase.table(LINKS_TABLE)\
                .select("*")\
                .eq("user_id", user["id"])\
                .eq("is_active", True)\
                .order("order")\
                .execute()

            return PublicProfileResponse(
                user=PublicProfile(**user),
                links=[build_public_link(row, now) for row in (links_result.data or [])],
            )
        except HTTPException:
            raise
        except Exception as e:
            logger.error(f"Error fetching public profile {username}: {e}")
            raise HTTPException(status_code=500, detail="Internal server error")
