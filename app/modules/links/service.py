from supabase import Client
from app.modules.links.schemas import (
    LinkCreate, LinkUpdate, LinkResponse, PasswordCheckResponse, ClickRequest, ClickResponse, QRCodeResponse
)
from app.modules.links.qr import make_qr_data_url
from app.modules.links.scheduling import resolve, normalize_url
from typing import Any, Dict, List, Optional
from fastapi import HTTPException
from datetime import datetime, timezone
import hmac
import logging

logger = logging.getLogger(__name__)

LINKS_TABLE = "links"
ANALYTICS_TABLE = "link_analytics"


def build_link_response(row: Dict[str, Any], now: Optional[datetime] = None) -> LinkResponse:
    """Turn a links row into a response carrying its lifecycle state. The password itself is never exposed."""
    status = resolve(row, now)
    return LinkResponse(
        id=row["id"],
        user_id=row["user_id"],
        title=row["title"],
        url=row["url"],
        is_active=bool(row.get("is_active", False)),
        order=row.get("order") or 0,
        clicks=row.get("clicks") or 0,
        scheduled_at=status.scheduled_at,
        expires_at=status.expires_at,
        is_password_protected=bool(row.get("password")),
        created_at=row.get("created_at"),
        updated_at=row.get("updated_at"),
        is_scheduled=status.is_scheduled,
        is_expired=status.is_expired,
        is_live=status.is_live,
        is_clickable=status.is_clickable,
        display_status=status.display_status,
    )


def _iso(value: Optional[datetime]) -> Optional[str]:
    return value.isoformat() if value is not None else None


class LinkService:
    def __init__(self, supabase: Client):
        self.supabase = supabase

    def _get_row(self, link_id: str, user_id: Optional[str] = None) -> Dict[str, Any]:
        """Fetch a link row, optionally scoped to its owner. 404 when not found."""
        query = self.supabase.table(LINKS_TABLE)\
            .select("*")\
            .eq("id", link_id)
        if user_id is not None:
            query = query.eq("user_id", user_id)
        result = query.maybe_single().execute()
        if not result or not result.data:
            raise HTTPException(status_code=404, detail="Link not found")
        return result.data

    def list_links(self, user_id: str, now: Optional[datetime] = None) -> List[LinkResponse]:
        """List the owner's links in display order"""
        try:
            result = self.supabase.table(LINKS_TABLE)\
                .select("*")\
                .eq("user_id", user_id)\
                .order("order")\
                .execute()
            return [build_link_response(row, now) for row in (result.data or [])]
        except HTTPException:
            raise
        except Exception as e:
            logger.error(f"Error fetching links for user {user_id}: {e}")
            raise HTTPException(status_code=500, detail="Failed to fetch links")

    def get_link(self, link_id: str, user_id: str, now: Optional[datetime] = None) -> LinkResponse:
        try:
            return build_link_response(self._get_row(link_id, user_id), now)
        except HTTPException:
            raise
        except Exception as e:
            raise HTTPException(status_code=500, detail=str(e))

    def _next_order(self, user_id: str) -> int:
        result = self.supabase.table(LINKS_TABLE)\
            .select("order")\
            .eq("user_id", user_id)\
            .order("order", desc=True)\
            .limit(1)\
            .execute()
        if not result.data:
            return 0
        return (result.data[0].get("order") or 0) + 1

    def create_link(self, link_data: LinkCreate, user_id: str) -> LinkResponse:
        """Create a link at the end of the owner's list"""
        try:
            insert_data = {
                "title": link_data.title,
                "url": link_data.url,
                "order": self._next_order(user_id),
                "user_id": user_id,
                "scheduled_at": _iso(link_data.scheduled_at),
                "expires_at": _iso(link_data.expires_at),
                "password": link_data.password or None,
            }
            result = self.supabase.table(LINKS_TABLE).insert(insert_data).execute()
            if not result.data:
                raise HTTPException(status_code=500, detail="Failed to create link")
            logger.info(f"Created link {result.data[0]['id']} for user {user_id}")
            return build_link_response(result.data[0])
        except HTTPException:
            raise
        except Exception as e:
            logger.error(f"Error creating link: {e}")
            raise HTTPException(status_code=500, detail=str(e))

    def update_link(self, link_id: str, link_data: LinkUpdate, user_id: str) -> LinkResponse:
        """Update a link; scheduled_at, expires_at and password may be cleared with null"""
        try:
            self._get_row(link_id, user_id)
            provided = link_data.model_dump(exclude_unset=True)
            update_data: Dict[str, Any] = {}
            for key in ("title", "url", "is_active"):
                if provided.get(key) is not None:
                    update_data[key] = provided[key]
            for key in ("scheduled_at", "expires_at"):
                if key in provided:
                    update_data[key] = _iso(provided[key])
            if "password" in provided:
                update_data["password"] = provided["password"] or None

            if not update_data:
                return self.get_link(link_id, user_id)

            update_data["updated_at"] = datetime.now(timezone.utc).isoformat()
            result = self.supabase.table(LINKS_TABLE)\
                .update(update_data)\
                .eq("id", link_id)\
                .eq("user_id", user_id)\
                .execute()
            if not result.data:
                raise HTTPException(status_code=404, detail="Link not found")
            return build_link_response(result.data[0])
        except HTTPException:
            raise
        except Exception as e:
            raise HTTPException(status_code=500, detail=str(e))

    def delete_link(self, link_id: str, user_id: str) -> bool:
        try:
            result = self.supabase.table(LINKS_TABLE)\
                .delete()\
                .eq("id", link_id)\
                .eq("user_id", user_id)\
                .execute()
            if not result.data:
                raise HTTPException(status_code=404, detail="Link not found")
            return True
        except HTTPException:
            raise
        except Exception as e:
            raise HTTPException(status_code=500, detail=str(e))

    def reorder_links(self, user_id: str, link_ids: List[str]) -> List[LinkResponse]:
        """Set each link's order to its index in link_ids and return the reordered list"""
        try:
            for index, link_id in enumerate(link_ids):
                self.supabase.table(LINKS_TABLE)\
                    .update({"order": index})\
                    .eq("id", link_id)\
                    .eq("user_id", user_id)\
                    .execute()
        except Exception as e:
            logger.error(f"Error updating link orders for user {user_id}: {e}")
            raise HTTPException(status_code=500, detail="Failed to reorder links")
        return self.list_links(user_id)

    def check_password(self, link_id: str, password: Optional[str], now: Optional[datetime] = None) -> PasswordCheckResponse:
        """Verify a visitor-supplied password for a live link"""
        if not password:
            raise HTTPException(status_code=400, detail="Password is required")
        try:
            row = self._get_row(link_id)
        except HTTPException:
            raise
        except Exception as e:
            logger.error(f"Error fetching link {link_id} for password check: {e}")
            raise HTTPException(status_code=500, detail="Internal server error")

        if not resolve(row, now).is_live:
            raise HTTPException(status_code=403, detail="Link is not accessible")

        stored = row.get("password")
        if stored and not hmac.compare_digest(stored.encode("utf-8"), password.encode("utf-8")):
            raise HTTPException(status_code=401, detail="Incorrect password")
        return PasswordCheckResponse(success=True)

    def record_click(
        self,
        link_id: str,
        click_data: ClickRequest,
        ip_address: Optional[str] = None,
        now: Optional[datetime] = None,
    ) -> ClickResponse:
        """Count a click on a clickable link and return its destination URL"""
        try:
            row = self._get_row(link_id)
            if not resolve(row, now).is_clickable:
                raise HTTPException(status_code=403, detail="Link is not accessible")

            self.supabase.rpc("increment_link_clicks", {"link_id": link_id}).execute()
            self.supabase.table(ANALYTICS_TABLE).insert({
                "link_id": link_id,
                "user_id": row["user_id"],
                "ip_address": ip_address,
                "user_agent": click_data.user_agent,
                "referer": click_data.referer,
            }).execute()
            return ClickResponse(success=True, url=normalize_url(row["url"]))
        except HTTPException:
            raise
        except Exception as e:
            logger.error(f"Error tracking click on link {link_id}: {e}")
            raise HTTPException(status_code=500, detail="Failed to track click")

    def get_link_qr(self, link_id: str, user_id: str) -> QRCodeResponse:
        """QR code pointing at the owner's link destination"""
        try:
            row = self._get_row(link_id, user_id)
            url = normalize_url(row["url"])
            qr_code = make_qr_data_url(url)
        except HTTPException:
            raise
        except Exception as e:
            logger.error(f"Error generating QR code for link {link_id}: {e}")
            raise HTTPException(status_code=500, detail="Failed to generate QR code")
        return QRCodeResponse(qr_code=qr_code, url=url, link_title=row["title"])
