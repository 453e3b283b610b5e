from typing import Any, Dict, Optional
import logging
from fastapi import APIRouter, Depends, HTTPException, status, Query, Path
from supabase import AsyncClient
from clientdesk.api.deps import require_confirmation, store_failure
from clientdesk.core.auth import get_current_user
from clientdesk.core.exceptions import StoreError
from clientdesk.core.notifications import NotificationChannel, get_notifications
from clientdesk.core.supabase import get_supabase_client
from clientdesk.crud import client as client_crud
from clientdesk.schemas.client import Client, ClientCreate, ClientUpdate, ClientWithStats, ClientWithProjects
from clientdesk.schemas.user import User
from clientdesk.utils.pagination import ShowMorePage, paginate, search_filter

logger = logging.getLogger(__name__)
router = APIRouter()

SEARCH_FIELDS = ("full_name", "company_name", "email")

@router.post("/", response_model=Client, status_code=status.HTTP_201_CREATED)
async def create_client(
    *,
    client_in: ClientCreate,
    current_user: User = Depends(get_current_user),
    supabase: AsyncClient = Depends(get_supabase_client),
    notifications: NotificationChannel = Depends(get_notifications)
) -> Any:
    """
    Create new client.
    """
    try:
        client = await client_crud.create_client(supabase, client_in)
    except StoreError as e:
        raise store_failure(notifications, "Failed to Add Client", e)

    notifications.show_success("Client Added", f"{client.full_name} has been added successfully")
    return client

@router.get("/", response_model=ShowMorePage[ClientWithStats])
async def get_clients(
    *,
    search: Optional[str] = Query(None, description="Match name, company or email"),
    visible: Optional[int] = Query(None, ge=1, description="How many clients to show"),
    current_user: User = Depends(get_current_user),
    supabase: AsyncClient = Depends(get_supabase_client),
    notifications: NotificationChannel = Depends(get_notifications)
) -> Any:
    """
    Retrieve clients with project counts and revenue, newest first.
    """
    try:
        clients = await client_crud.get_all_clients_with_stats(supabase)
    except StoreError as e:
        raise store_failure(notifications, "Failed to Load Clients", e)

    return paginate(search_filter(clients, search, SEARCH_FIELDS), visible)

@router.get("/{client_id}", response_model=ClientWithProjects)
async def read_client(
    *,
    client_id: int = Path(..., description="The ID of the client to retrieve"),
    current_user: User = Depends(get_current_user),
    supabase: AsyncClient = Depends(get_supabase_client),
    notifications: NotificationChannel = Depends(get_notifications)
) -> Any:
    """
    Get client by ID, with all of its projects.
    """
    try:
        client = await client_crud.get_client_with_projects(supabase, client_id)
    except StoreError as e:
        raise store_failure(notifications, "Failed to Load Client", e)

    if not client:
        raise HTTPException(
            status_code=status.HTTP_404_NOT_FOUND,
            detail="Client not found"
        )
    return client

@router.put("/{client_id}", response_model=Client)
async def update_client(
    *,
    client_id: int = Path(..., description="The ID of the client to update"),
    client_in: ClientUpdate,
    current_user: User = Depends(get_current_user),
    supabase: AsyncClient = Depends(get_supabase_client),
    notifications: NotificationChannel = Depends(get_notifications)
) -> Any:
    """
    Update client. Only the fields sent are replaced.
    """
    try:
        client = await client_crud.update_client(supabase, client_id, client_in)
    except StoreError as e:
        raise store_failure(notifications, "Failed to Update Client", e)

    if not client:
        raise HTTPException(
            status_code=status.HTTP_404_NOT_FOUND,
            detail="Client not found"
        )

    notifications.show_success("Client Updated", "Client information has been updated successfully")
    return client

@router.delete("/{client_id}", response_model=Dict[str, bool], dependencies=[Depends(require_confirmation)])
async def delete_client(
    *,
    client_id: int = Path(..., description="The ID of the client to delete"),
    current_user: User = Depends(get_current_user),
    supabase: AsyncClient = Depends(get_supabase_client),
    notifications: NotificationChannel = Depends(get_notifications)
) -> Any:
    """
    Delete client, together with its projects.
    """
    logger.info(f"Client deletion requested for {client_id} by user: {current_user.id}")

    try:
        client = await client_crud.get_client(supabase, client_id)
        if not client:
            raise HTTPException(
                status_code=status.HTTP_404_NOT_FOUND,
                detail="Client not found"
            )
        await client_crud.delete_client(supabase, client_id)
    except StoreError as e:
        raise store_failure(notifications, "Failed to Delete Client", e)

    notifications.show_success("Client Deleted", f"{client.full_name} has been removed")
    return {"success": True}
