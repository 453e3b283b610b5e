from typing import Any, Dict, Optional
import logging
from fastapi import APIRouter, Depends, HTTPException, status, Query, Path
from supabase import AsyncClient
from clientdesk.api.deps import require_confirmation, store_failure
from clientdesk.core.auth import get_current_user
from clientdesk.core.exceptions import StoreError
from clientdesk.core.notifications import NotificationChannel, get_notifications
from clientdesk.core.supabase import get_supabase_client
from clientdesk.crud import project as project_crud
from clientdesk.crud import project_update as project_update_crud
from clientdesk.schemas.project_update import ProjectUpdate, ProjectUpdateCreate, ProjectUpdateWithDetails
from clientdesk.schemas.user import User
from clientdesk.utils.pagination import ShowMorePage, paginate

logger = logging.getLogger(__name__)
router = APIRouter()

@router.get("/updates", response_model=ShowMorePage[ProjectUpdateWithDetails])
async def get_updates(
    *,
    visible: Optional[int] = Query(None, ge=1, description="How many updates to show"),
    current_user: User = Depends(get_current_user),
    supabase: AsyncClient = Depends(get_supabase_client),
    notifications: NotificationChannel = Depends(get_notifications)
) -> Any:
    """
    Retrieve all project updates with their project and client, newest first.
    """
    try:
        updates = await project_update_crud.get_all_updates_with_details(supabase)
    except StoreError as e:
        raise store_failure(notifications, "Failed to Load Updates", e)
    return paginate(updates, visible)

@router.get("/projects/{project_id}/updates", response_model=ShowMorePage[ProjectUpdate])
async def get_project_updates(
    *,
    project_id: int = Path(..., description="The ID of the project"),
    visible: Optional[int] = Query(None, ge=1, description="How many updates to show"),
    current_user: User = Depends(get_current_user),
    supabase: AsyncClient = Depends(get_supabase_client),
    notifications: NotificationChannel = Depends(get_notifications)
) -> Any:
    try:
        project = await project_crud.get_project(supabase, project_id)
        if not project:
            raise HTTPException(
                status_code=status.HTTP_404_NOT_FOUND,
                detail="Project not found"
            )
        updates = await project_update_crud.get_updates_by_project(supabase, project_id)
    except StoreError as e:
        raise store_failure(notifications, "Failed to Load Updates", e)
    return paginate(updates, visible)

@router.post(
    "/projects/{project_id}/updates",
    response_model=ProjectUpdate,
    status_code=status.HTTP_201_CREATED
)
async def add_project_update(
    *,
    project_id: int = Path(..., description="The ID of the project"),
    update_in: ProjectUpdateCreate,
    current_user: User = Depends(get_current_user),
    supabase: AsyncClient = Depends(get_supabase_client),
    notifications: NotificationChannel = Depends(get_notifications)
) -> Any:
    try:
        project = await project_crud.get_project(supabase, project_id)
        if not project:
            raise HTTPException(
                status_code=status.HTTP_404_NOT_FOUND,
                detail="Project not found"
            )
        update = await project_update_crud.create_project_update(supabase, project_id, update_in.description)
    except StoreError as e:
        raise store_failure(notifications, "Failed to Add Update", e)

    notifications.show_success("Update Added", "Project update has been added successfully")
    return update

@router.delete(
    "/updates/{update_id}",
    response_model=Dict[str, bool],
    dependencies=[Depends(require_confirmation)]
)
async def delete_project_update(
    *,
    update_id: int = Path(..., description="The ID of the update to delete"),
    current_user: User = Depends(get_current_user),
    supabase: AsyncClient = Depends(get_supabase_client),
    notifications: NotificationChannel = Depends(get_notifications)
) -> Any:
    try:
        deleted = await project_update_crud.delete_project_update(supabase, update_id)
    except StoreError as e:
        raise store_failure(notifications, "Failed to Delete Update", e)

    if not deleted:
        raise HTTPException(
            status_code=status.HTTP_404_NOT_FOUND,
            detail="Project update not found"
        )

    notifications.show_success("Update Deleted", "Project update has been removed")
    return {"success": True}
