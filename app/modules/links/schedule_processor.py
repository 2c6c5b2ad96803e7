import asyncio
import logging
from datetime import datetime, timezone
from typing import Any, Dict, Optional

from supabase import Client

from app.config import settings
from app.database.supabase_client import get_service_supabase
from app.modules.links.scheduling import is_expired
from app.modules.links.service import LINKS_TABLE

logger = logging.getLogger(__name__)


def _set_active(supabase: Client, link_ids, is_active: bool) -> int:
    if not link_ids:
        return 0
    supabase.table(LINKS_TABLE)\
        .update({"is_active": is_active})\
        .in_("id", link_ids)\
        .execute()
    return len(link_ids)


def process_scheduled_links(supabase: Client, now: Optional[datetime] = None) -> Dict[str, Any]:
    """Flip is_active for links whose go-live or expiry instant has passed.

    Inactive links with scheduled_at <= now are activated; active links with
    expires_at <= now are deactivated. A failure in one batch is logged and
    the other batch still runs.
    """
    now = now or datetime.now(timezone.utc)
    timestamp = now.isoformat()
    activated = 0
    deactivated = 0

    try:
        due = supabase.table(LINKS_TABLE)\
            .select("id, scheduled_at, expires_at")\
            .lte("scheduled_at", timestamp)\
            .eq("is_active", False)\
            .execute()
        # Links already past expiry stay inactive
        ids = [row["id"] for row in (due.data or []) if not is_expired(row, now)]
        activated = _set_active(supabase, ids, True)
        if activated:
            logger.info(f"Activated {activated} scheduled link(s)")
    except Exception as e:
        logger.error(f"Error activating scheduled links: {e}")

    try:
        expired = supabase.table(LINKS_TABLE)\
            .select("id")\
            .lte("expires_at", timestamp)\
            .eq("is_active", True)\
            .execute()
        deactivated = _set_active(supabase, [row["id"] for row in (expired.data or [])], False)
        if deactivated:
            logger.info(f"Deactivated {deactivated} expired link(s)")
    except Exception as e:
        logger.error(f"Error deactivating expired links: {e}")

    return {
        "success": True,
        "message": f"Processed {activated} scheduled links and {deactivated} expired links",
        "activated": activated,
        "deactivated": deactivated,
        "timestamp": timestamp,
    }


async def schedule_processor_loop(interval_seconds: Optional[int] = None):
    """Background task that periodically processes scheduled and expired links"""
    interval = interval_seconds or settings.schedule_processor_interval_seconds
    while True:
        try:
            process_scheduled_links(get_service_supabase())
        except Exception as e:
            logger.error(f"Error in schedule processor loop: {e}")
        await asyncio.sleep(interval)
