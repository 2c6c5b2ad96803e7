from fastapi import APIRouter, Depends, Request
from app.database.supabase_client import get_supabase
from app.modules.links.schemas import (
    LinkCreate, LinkUpdate, LinkResponse, LinkReorderRequest,
    PasswordCheckRequest, PasswordCheckResponse, ClickRequest, ClickResponse, QRCodeResponse
)
from app.modules.links.service import LinkService
from app.core.dependencies import get_current_user_id
from supabase import Client
from typing import List, Dict

router = APIRouter(prefix="/links", tags=["links"])


def get_link_service(supabase: Client = Depends(get_supabase)) -> LinkService:
    return LinkService(supabase)


@router.get("", response_model=List[LinkResponse])
async def list_links(
    user_data: Dict = Depends(get_current_user_id),
    service: LinkService = Depends(get_link_service)
):
    """List the current user's links with their schedule status"""
    return service.list_links(user_data["id"])


@router.post("", response_model=LinkResponse, status_code=201)
async def create_link(
    link_data: LinkCreate,
    user_data: Dict = Depends(get_current_user_id),
    service: LinkService = Depends(get_link_service)
):
    """Create a link at the end of the current user's list"""
    return service.create_link(link_data, user_data["id"])


@router.put("/reorder", response_model=List[LinkResponse])
async def reorder_links(
    reorder: LinkReorderRequest,
    user_data: Dict = Depends(get_current_user_id),
    service: LinkService = Depends(get_link_service)
):
    """Persist a drag-and-drop ordering"""
    return service.reorder_links(user_data["id"], reorder.link_ids)


@router.get("/{link_id}", response_model=LinkResponse)
async def get_link(
    link_id: str,
    user_data: Dict = Depends(get_current_user_id),
    service: LinkService = Depends(get_link_service)
):
    return service.get_link(link_id, user_data["id"])


@router.get("/{link_id}/qr", response_model=QRCodeResponse)
async def get_link_qr(
    link_id: str,
    user_data: Dict = Depends(get_current_user_id),
    service: LinkService = Depends(get_link_service)
):
    """QR code for one of the current user's links"""
    return service.get_link_qr(link_id, user_data["id"])


@router.put("/{link_id}", response_model=LinkResponse)
async def update_link(
    link_id: str,
    link_data: LinkUpdate,
    user_data: Dict = Depends(get_current_user_id),
    service: LinkService = Depends(get_link_service)
):
    return service.update_link(link_id, link_data, user_data["id"])


@router.delete("/{link_id}", status_code=204)
async def delete_link(
    link_id: str,
    user_data: Dict = Depends(get_current_user_id),
    service: LinkService = Depends(get_link_service)
):
    service.delete_link(link_id, user_data["id"])
    return None


@router.post("/{link_id}/check-password", response_model=PasswordCheckResponse)
async def check_password(
    link_id: str,
    body: PasswordCheckRequest,
    service: LinkService = Depends(get_link_service)
):
    """Public: verify the password of a protected link before a visitor opens it"""
    return service.check_password(link_id, body.password)


@router.post("/{link_id}/click", response_model=ClickResponse)
async def track_click(
    link_id: str,
    body: ClickRequest,
    request: Request,
    service: LinkService = Depends(get_link_service)
):
    """Public: record a click and return the destination URL"""
    ip_address = request.client.host if request.client else None
    return service.record_click(link_id, body, ip_address=ip_address)
