from pydantic import BaseModel, Field
from typing import Optional, List
from datetime import datetime


class LinkCreate(BaseModel):
    title: str = Field(..., min_length=1)
    url: str = Field(..., min_length=1)
    scheduled_at: Optional[datetime] = None
    expires_at: Optional[datetime] = None
    password: Optional[str] = None


class LinkUpdate(BaseModel):
    title: Optional[str] = None
    url: Optional[str] = None
    is_active: Optional[bool] = None
    scheduled_at: Optional[datetime] = None  # explicit null clears the schedule
    expires_at: Optional[datetime] = None  # explicit null clears the expiry
    password: Optional[str] = None  # explicit null or "" removes protection


class LinkResponse(BaseModel):
    id: str
    user_id: str
    title: str
    url: str
    is_active: bool
    order: int = 0
    clicks: int = 0
    scheduled_at: Optional[datetime] = None
    expires_at: Optional[datetime] = None
    is_password_protected: bool = False
    created_at: Optional[datetime] = None
    updated_at: Optional[datetime] = None
    # Lifecycle, computed at response time
    is_scheduled: bool = False
    is_expired: bool = False
    is_live: bool = False
    is_clickable: bool = True
    display_status: str

    class Config:
        from_attributes = True


class LinkReorderRequest(BaseModel):
    link_ids: List[str]


class PasswordCheckRequest(BaseModel):
    password: Optional[str] = None


class PasswordCheckResponse(BaseModel):
    success: bool


class ClickRequest(BaseModel):
    user_agent: Optional[str] = None
    referer: Optional[str] = None


class ClickResponse(BaseModel):
    success: bool
    url: str


class QRCodeResponse(BaseModel):
    qr_code: str  # data:image/png;base64,...
    url: str
    link_title: str
