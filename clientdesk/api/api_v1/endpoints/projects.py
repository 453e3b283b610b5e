from typing import Any, Dict, Optional
import logging
from fastapi import APIRouter, Depends, HTTPException, status, Query, Path, UploadFile, File
from supabase import AsyncClient
from clientdesk.api.deps import require_confirmation, store_failure
from clientdesk.core.auth import get_current_user
from clientdesk.core.exceptions import StoreError
from clientdesk.core.notifications import NotificationChannel, get_notifications
from clientdesk.core.supabase import get_supabase_client
from clientdesk.crud import client as client_crud
from clientdesk.crud import project as project_crud
from clientdesk.schemas.project import Project, ProjectCreate, ProjectPatch, ProjectStatus, ProjectWithStats
from clientdesk.schemas.project_detail import ProjectDetail
from clientdesk.schemas.user import User
from clientdesk.services import file_service
from clientdesk.services.project_service import get_project_detail
from clientdesk.utils.pagination import ShowMorePage, paginate, search_filter

logger = logging.getLogger(__name__)
router = APIRouter()

SEARCH_FIELDS = ("title", "client.full_name", "client.company_name")

@router.post("/", response_model=Project, status_code=status.HTTP_201_CREATED)
async def create_project(
    *,
    project_in: ProjectCreate,
    current_user: User = Depends(get_current_user),
    supabase: AsyncClient = Depends(get_supabase_client),
    notifications: NotificationChannel = Depends(get_notifications)
) -> Any:
    """
    Create new project for an existing client.
    """
    try:
        client = await client_crud.get_client(supabase, project_in.client_id)
        if not client:
            raise HTTPException(
                status_code=status.HTTP_404_NOT_FOUND,
                detail="Client not found"
            )
        project = await project_crud.create_project(supabase, project_in)
    except StoreError as e:
        raise store_failure(notifications, "Failed to Create Project", e)

    notifications.show_success("Project Created", f"{project.title} has been created for {client.full_name}")
    return project

@router.get("/", response_model=ShowMorePage[ProjectWithStats])
async def get_projects(
    *,
    search: Optional[str] = Query(None, description="Match title, client name or company"),
    project_status: Optional[ProjectStatus] = Query(None, alias="status", description="Filter by project status"),
    client_id: Optional[int] = Query(None, description="Filter by client ID"),
    visible: Optional[int] = Query(None, ge=1, description="How many projects to show"),
    current_user: User = Depends(get_current_user),
    supabase: AsyncClient = Depends(get_supabase_client),
    notifications: NotificationChannel = Depends(get_notifications)
) -> Any:
    """
    Retrieve projects with client, payment and update statistics, newest first.
    """
    try:
        projects = await project_crud.get_all_projects_with_stats(supabase)
    except StoreError as e:
        raise store_failure(notifications, "Failed to Load Projects", e)

    if project_status:
        projects = [p for p in projects if p.status == project_status]
    if client_id:
        projects = [p for p in projects if p.client_id == client_id]

    return paginate(search_filter(projects, search, SEARCH_FIELDS), visible)

@router.get("/{project_id}", response_model=ProjectDetail)
async def read_project(
    *,
    project_id: int = Path(..., description="The ID of the project to retrieve"),
    current_user: User = Depends(get_current_user),
    supabase: AsyncClient = Depends(get_supabase_client),
    notifications: NotificationChannel = Depends(get_notifications)
) -> Any:
    """
    Get project by ID with client, payments, updates, payment progress and
    deadline status.
    """
    try:
        project = await get_project_detail(supabase, project_id)
    except StoreError as e:
        raise store_failure(notifications, "Failed to Load Project", e)

    if not project:
        raise HTTPException(
            status_code=status.HTTP_404_NOT_FOUND,
            detail="Project not found"
        )
    return project

@router.put("/{project_id}", response_model=Project)
async def update_project(
    *,
    project_id: int = Path(..., description="The ID of the project to update"),
    project_in: ProjectPatch,
    current_user: User = Depends(get_current_user),
    supabase: AsyncClient = Depends(get_supabase_client),
    notifications: NotificationChannel = Depends(get_notifications)
) -> Any:
    """
    Update project. Only the fields sent are replaced.

    A status set here is kept as is, even if payments say otherwise.
    """
    try:
        project = await project_crud.update_project(supabase, project_id, project_in)
    except StoreError as e:
        raise store_failure(notifications, "Failed to Update Project", e)

    if not project:
        raise HTTPException(
            status_code=status.HTTP_404_NOT_FOUND,
            detail="Project not found"
        )

    notifications.show_success("Project Updated", "Project information has been updated successfully")
    return project

@router.delete("/{project_id}", response_model=Dict[str, bool], dependencies=[Depends(require_confirmation)])
async def delete_project(
    *,
    project_id: int = Path(..., description="The ID of the project to delete"),
    current_user: User = Depends(get_current_user),
    supabase: AsyncClient = Depends(get_supabase_client),
    notifications: NotificationChannel = Depends(get_notifications)
) -> Any:
    """
    Delete project, with its payments, updates and portal.
    """
    logger.info(f"Project deletion requested for {project_id} by user: {current_user.id}")

    try:
        project = await project_crud.get_project(supabase, project_id)
        if not project:
            raise HTTPException(
                status_code=status.HTTP_404_NOT_FOUND,
                detail="Project not found"
            )
        await project_crud.delete_project(supabase, project_id)
    except StoreError as e:
        raise store_failure(notifications, "Failed to Delete Project", e)

    notifications.show_success("Project Deleted", f"{project.title} has been removed")
    return {"success": True}

@router.post("/{project_id}/invoice", response_model=Project)
async def upload_invoice(
    *,
    project_id: int = Path(..., description="The ID of the project the invoice belongs to"),
    file: UploadFile = File(...),
    current_user: User = Depends(get_current_user),
    supabase: AsyncClient = Depends(get_supabase_client),
    notifications: NotificationChannel = Depends(get_notifications)
) -> Any:
    """
    Upload an invoice file and attach its public URL to the project.
    """
    try:
        project = await project_crud.get_project(supabase, project_id)
        if not project:
            raise HTTPException(
                status_code=status.HTTP_404_NOT_FOUND,
                detail="Project not found"
            )
        content = await file.read()
        invoice_url = await file_service.upload_invoice(
            supabase,
            project_id,
            file.filename,
            content,
            file.content_type or "application/pdf",
        )
        project = await project_crud.update_project(supabase, project_id, {"invoice_url": invoice_url})
    except StoreError as e:
        raise store_failure(notifications, "Failed to Upload Invoice", e)

    if not project:
        raise HTTPException(
            status_code=status.HTTP_404_NOT_FOUND,
            detail="Project not found"
        )

    notifications.show_success("Invoice Uploaded", "The invoice has been attached to the project")
    return project
