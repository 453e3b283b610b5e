from typing import List
import logging
from supabase import AsyncClient
from clientdesk.core.exceptions import StoreError
from clientdesk.crud.base import gather_queries, run_query
from clientdesk.crud.project import build_project_summaries, CLIENT_SUMMARY_COLUMNS
from clientdesk.schemas.project_update import ProjectUpdate, ProjectUpdateWithDetails

logger = logging.getLogger(__name__)

TABLE = "project_updates"

async def create_project_update(supabase: AsyncClient, project_id: int, description: str) -> ProjectUpdate:
    rows = await run_query(
        supabase.table(TABLE).insert({"project_id": project_id, "description": description}),
        "Failed to add project update"
    )
    if not rows:
        raise StoreError("Failed to add project update: no row returned")
    return ProjectUpdate.model_validate(rows[0])

async def get_updates_by_project(supabase: AsyncClient, project_id: int) -> List[ProjectUpdate]:
    rows = await run_query(
        supabase.table(TABLE).select("*").eq("project_id", project_id).order("created_at", desc=True),
        "Failed to fetch project updates"
    )
    return [ProjectUpdate.model_validate(row) for row in rows]

async def get_all_updates_with_details(supabase: AsyncClient) -> List[ProjectUpdateWithDetails]:
    failure = "Failed to fetch project updates"
    update_rows, project_rows, client_rows = await gather_queries(
        run_query(supabase.table(TABLE).select("*").order("created_at", desc=True), failure),
        run_query(supabase.table("projects").select("id, title, client_id"), failure),
        run_query(supabase.table("clients").select(CLIENT_SUMMARY_COLUMNS), failure),
    )
    projects = build_project_summaries(project_rows, client_rows)
    return [
        ProjectUpdateWithDetails(**row, project=projects.get(row["project_id"]))
        for row in update_rows
    ]

async def delete_project_update(supabase: AsyncClient, update_id: int) -> bool:
    rows = await run_query(
        supabase.table(TABLE).delete().eq("id", update_id),
        "Failed to delete project update"
    )
    return bool(rows)
