from pydantic import BaseModel
from typing import Optional, List, Literal
from datetime import datetime

ScheduledLinkFilter = Literal["all", "scheduled", "expired", "active"]


class LinkOwner(BaseModel):
    id: str
    username: str
    display_name: Optional[str] = None


class ScheduledLinkResponse(BaseModel):
    id: str
    title: str
    url: str
    is_active: bool
    scheduled_at: Optional[datetime] = None
    expires_at: Optional[datetime] = None
    is_password_protected: bool = False
    created_at: Optional[datetime] = None
    user: Optional[LinkOwner] = None
    is_scheduled: bool
    is_expired: bool
    is_live: bool
    display_status: str
    details: List[str] = []  # e.g. "Scheduled for 1 Jan 2099, 00:00 UTC"
    time_until_live: Optional[str] = None
    time_until_expiry: Optional[str] = None


class ScheduledLinkStats(BaseModel):
    total: int
    scheduled: int
    expired: int
    active: int


class ScheduledLinksResponse(BaseModel):
    links: List[ScheduledLinkResponse]
    count: int
    stats: ScheduledLinkStats
