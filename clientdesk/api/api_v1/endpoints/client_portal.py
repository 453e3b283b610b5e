from typing import Any, Dict
import logging
from fastapi import APIRouter, Depends, HTTPException, status, Path, Request, Query
from supabase import AsyncClient
from clientdesk.api.deps import portal_origin, require_confirmation, store_failure
from clientdesk.core.auth import get_current_user
from clientdesk.core.exceptions import StoreError
from clientdesk.core.notifications import NotificationChannel, get_notifications
from clientdesk.core.supabase import get_supabase_client
from clientdesk.crud import project as project_crud
from clientdesk.schemas.client_portal import ClientPortal, ClientPortalLink, PortalToggle, PortalView
from clientdesk.schemas.user import User
from clientdesk.services.client_portal_service import client_portal_service

logger = logging.getLogger(__name__)

# Signed-in management of a project's portal
router = APIRouter()
# Unauthenticated, token-based read access
public_router = APIRouter()

PORTAL_UNAVAILABLE = "Portal access unavailable"

def _with_url(portal: ClientPortal, request: Request) -> ClientPortalLink:
    return ClientPortalLink(
        **portal.model_dump(),
        url=client_portal_service.generate_portal_url(portal.access_token, portal_origin(request)),
    )

async def _ensure_project(supabase: AsyncClient, project_id: int) -> None:
    project = await project_crud.get_project(supabase, project_id)
    if not project:
        raise HTTPException(
            status_code=status.HTTP_404_NOT_FOUND,
            detail="Project not found"
        )

@router.get("/{project_id}/portal", response_model=ClientPortalLink)
async def read_portal(
    *,
    request: Request,
    project_id: int = Path(..., description="The ID of the project"),
    current_user: User = Depends(get_current_user),
    supabase: AsyncClient = Depends(get_supabase_client),
    notifications: NotificationChannel = Depends(get_notifications)
) -> Any:
    try:
        portal = await client_portal_service.get_portal_by_project(supabase, project_id)
    except StoreError as e:
        raise store_failure(notifications, "Failed to Load Client Portal", e)

    if not portal:
        raise HTTPException(
            status_code=status.HTTP_404_NOT_FOUND,
            detail="Client portal not found"
        )
    return _with_url(portal, request)

@router.post("/{project_id}/portal", response_model=ClientPortalLink, status_code=status.HTTP_201_CREATED)
async def create_portal(
    *,
    request: Request,
    project_id: int = Path(..., description="The ID of the project"),
    current_user: User = Depends(get_current_user),
    supabase: AsyncClient = Depends(get_supabase_client),
    notifications: NotificationChannel = Depends(get_notifications)
) -> Any:
    """
    Create the client portal for a project, or issue it a new token if it
    already exists. Any previously shared link stops working.
    """
    try:
        await _ensure_project(supabase, project_id)
        portal = await client_portal_service.create_or_update_portal(supabase, project_id)
    except StoreError as e:
        raise store_failure(notifications, "Failed to Create Client Portal", e)

    notifications.show_success("Client Portal Ready", "Share the portal link with your client")
    return _with_url(portal, request)

@router.patch("/{project_id}/portal", response_model=ClientPortalLink)
async def toggle_portal(
    *,
    request: Request,
    project_id: int = Path(..., description="The ID of the project"),
    toggle_in: PortalToggle,
    confirm: bool = Query(False, description="Required when disabling the portal"),
    current_user: User = Depends(get_current_user),
    supabase: AsyncClient = Depends(get_supabase_client),
    notifications: NotificationChannel = Depends(get_notifications)
) -> Any:
    """
    Enable or disable the portal. The token stays the same either way.
    """
    if not toggle_in.is_enabled:
        require_confirmation(confirm)

    try:
        portal = await client_portal_service.toggle_portal_status(supabase, project_id, toggle_in.is_enabled)
    except StoreError as e:
        raise store_failure(notifications, "Failed to Update Client Portal", e)

    if not portal:
        raise HTTPException(
            status_code=status.HTTP_404_NOT_FOUND,
            detail="Client portal not found"
        )

    if portal.is_enabled:
        notifications.show_success("Client Portal Enabled", "Your client can open the portal again")
    else:
        notifications.show_success("Client Portal Disabled", "The portal link no longer works")
    return _with_url(portal, request)

@router.delete(
    "/{project_id}/portal",
    response_model=Dict[str, bool],
    dependencies=[Depends(require_confirmation)]
)
async def delete_portal(
    *,
    project_id: int = Path(..., description="The ID of the project"),
    current_user: User = Depends(get_current_user),
    supabase: AsyncClient = Depends(get_supabase_client),
    notifications: NotificationChannel = Depends(get_notifications)
) -> Any:
    try:
        deleted = await client_portal_service.delete_portal(supabase, project_id)
    except StoreError as e:
        raise store_failure(notifications, "Failed to Delete Client Portal", e)

    if not deleted:
        raise HTTPException(
            status_code=status.HTTP_404_NOT_FOUND,
            detail="Client portal not found"
        )

    notifications.show_success("Client Portal Deleted", "The portal has been removed")
    return {"success": True}

@public_router.get("/{access_token}", response_model=PortalView)
async def read_portal_by_token(
    *,
    access_token: str = Path(..., min_length=1, description="Portal access token"),
    supabase: AsyncClient = Depends(get_supabase_client)
) -> Any:
    """
    Read-only project view for the holder of an enabled portal token.

    Unknown and disabled tokens get the same 404.
    """
    try:
        view = await client_portal_service.get_portal_by_token(supabase, access_token)
    except StoreError as e:
        logger.error(f"Portal lookup failed: {e}")
        raise HTTPException(
            status_code=status.HTTP_503_SERVICE_UNAVAILABLE,
            detail=PORTAL_UNAVAILABLE
        )

    if not view:
        raise HTTPException(
            status_code=status.HTTP_404_NOT_FOUND,
            detail=PORTAL_UNAVAILABLE
        )
    return view
