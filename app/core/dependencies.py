"""
Core dependencies for route protection
"""

from fastapi import Depends, HTTPException, Security, status
from fastapi.security import HTTPBearer, HTTPAuthorizationCredentials
from app.config import settings
from app.database.supabase_client import get_supabase
from app.modules.auth.service import AuthService
from supabase import Client
from typing import Optional
import hmac
import logging

logger = logging.getLogger(__name__)

security = HTTPBearer()
optional_security = HTTPBearer(auto_error=False)


def get_auth_service(supabase: Client = Depends(get_supabase)) -> AuthService:
    return AuthService(supabase)


def get_current_user_id(
    credentials: HTTPAuthorizationCredentials = Security(security),
    auth_service: AuthService = Depends(get_auth_service)
) -> dict:
    """Extract current user info from JWT token"""
    return auth_service.get_current_user(credentials.credentials)


def is_admin(user_data: dict, supabase: Client) -> bool:
    """True if the user's email is listed in admin_users"""
    email = user_data.get("email")
    if not email:
        return False
    try:
        result = supabase.table("admin_users")\
            .select("id")\
            .eq("email", email)\
            .limit(1)\
            .execute()
        return bool(result.data)
    except Exception as e:
        logger.error(f"Error checking admin status for {email}: {e}")
        return False


def require_admin(
    user_data: dict = Depends(get_current_user_id),
    supabase: Client = Depends(get_supabase)
) -> dict:
    """Dependency that only lets admin users through"""
    if not is_admin(user_data, supabase):
        raise HTTPException(
            status_code=status.HTTP_403_FORBIDDEN,
            detail="Admin access required"
        )
    return user_data


def verify_cron_secret(
    credentials: Optional[HTTPAuthorizationCredentials] = Security(optional_security)
) -> None:
    """Check the Bearer token sent by the cron runner against CRON_SECRET"""
    if not settings.cron_secret:
        raise HTTPException(
            status_code=status.HTTP_503_SERVICE_UNAVAILABLE,
            detail="Cron secret not configured"
        )
    if credentials is None or not hmac.compare_digest(
        credentials.credentials.encode("utf-8"), settings.cron_secret.encode("utf-8")
    ):
        raise HTTPException(status_code=status.HTTP_401_UNAUTHORIZED, detail="Unauthorized")
