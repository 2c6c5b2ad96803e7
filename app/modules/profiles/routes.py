from fastapi import APIRouter, Depends
from app.database.supabase_client import get_supabase
from app.modules.profiles.schemas import PublicProfileResponse
from app.modules.profiles.service import ProfileService
from supabase import Client

router = APIRouter(prefix="/public", tags=["public"])


def get_profile_service(supabase: Client = Depends(get_supabase)) -> ProfileService:
    return ProfileService(supabase)


@router.get("/{username}", response_model=PublicProfileResponse)
async def get_public_profile(
    username: str,
    service: ProfileService = Depends(get_profile_service)
):
    """Public link-in-bio page data; no authentication"""
    return service.get_public_profile(username)
