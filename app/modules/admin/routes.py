from fastapi import APIRouter, Depends
from app.database.supabase_client import get_supabase
from app.modules.admin.schemas import ScheduledLinkFilter, ScheduledLinksResponse
from app.modules.admin.service import AdminLinkService
from app.core.dependencies import require_admin
from supabase import Client
from typing import Dict, Optional

router = APIRouter(prefix="/admin", tags=["admin"])


def get_admin_link_service(supabase: Client = Depends(get_supabase)) -> AdminLinkService:
    return AdminLinkService(supabase)


@router.get("/scheduled-links", response_model=ScheduledLinksResponse)
async def list_scheduled_links(
    filter: ScheduledLinkFilter = "all",
    search: Optional[str] = None,
    admin: Dict = Depends(require_admin),
    service: AdminLinkService = Depends(get_admin_link_service)
):
    """All links with scheduling information (admin only)"""
    return service.list_scheduled_links(bucket=filter, search=search)
