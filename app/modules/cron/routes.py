from fastapi import APIRouter, Depends
from app.database.supabase_client import get_service_supabase
from app.modules.links.schedule_processor import process_scheduled_links
from app.core.dependencies import verify_cron_secret
from supabase import Client

router = APIRouter(prefix="/cron", tags=["cron"])


@router.post("/process-scheduled-links", dependencies=[Depends(verify_cron_secret)])
async def run_scheduled_links(supabase: Client = Depends(get_service_supabase)):
    """Activate links that reached their go-live time and deactivate expired ones"""
    return process_scheduled_links(supabase)


@router.get("/process-scheduled-links")
async def describe_scheduled_links():
    return {
        "message": "Scheduled links processor endpoint",
        "note": "Use POST with proper authorization to process links",
    }
