from pydantic import BaseModel
from typing import Optional, List


class PublicLink(BaseModel):
    id: str
    title: str
    url: str
    order: int = 0
    is_clickable: bool
    is_scheduled: bool = False
    is_expired: bool = False
    is_password_protected: bool = False
    badge: Optional[str] = None  # "Password Protected", "Scheduled for <date>" or "Expired"


class PublicProfile(BaseModel):
    id: str
    username: str
    display_name: Optional[str] = None
    bio: Optional[str] = None
    profile_image: Optional[str] = None
    theme: Optional[str] = None


class PublicProfileResponse(BaseModel):
    user: PublicProfile
    links: List[PublicLink]
