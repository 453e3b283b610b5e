from typing import List, Optional, Dict, Any, Iterable, Union
from collections import defaultdict
import logging
from supabase import AsyncClient
from clientdesk.core.exceptions import StoreError
from clientdesk.crud.base import gather_queries, run_query
from clientdesk.schemas.project import (
    Project, ProjectCreate, ProjectPatch, ProjectWithStats, ProjectSummary, ClientInfo
)

logger = logging.getLogger(__name__)

TABLE = "projects"
CLIENT_SUMMARY_COLUMNS = "id, full_name, company_name, email"

def build_project_summaries(
    project_rows: Iterable[Dict[str, Any]],
    client_rows: Iterable[Dict[str, Any]]
) -> Dict[int, ProjectSummary]:
    """Map project id to its title and owning client, for lists that show both."""
    clients = {c["id"]: ClientInfo.model_validate(c) for c in client_rows}
    return {
        p["id"]: ProjectSummary(id=p["id"], title=p["title"], client=clients.get(p.get("client_id")))
        for p in project_rows
    }

async def create_project(supabase: AsyncClient, project_in: ProjectCreate) -> Project:
    rows = await run_query(
        supabase.table(TABLE).insert(project_in.model_dump(mode="json")),
        "Failed to create project"
    )
    if not rows:
        raise StoreError("Failed to create project: no row returned")
    logger.info(f"Project created: {rows[0]['id']}")
    return Project.model_validate(rows[0])

async def get_project(supabase: AsyncClient, project_id: int) -> Optional[Project]:
    rows = await run_query(
        supabase.table(TABLE).select("*").eq("id", project_id).limit(1),
        "Failed to fetch project"
    )
    return Project.model_validate(rows[0]) if rows else None

async def get_projects_by_client(supabase: AsyncClient, client_id: int) -> List[Project]:
    rows = await run_query(
        supabase.table(TABLE).select("*").eq("client_id", client_id).order("created_at", desc=True),
        "Failed to fetch projects"
    )
    return [Project.model_validate(row) for row in rows]

def _with_stats(
    project: Dict[str, Any],
    client: Optional[Dict[str, Any]],
    payments: List[Dict[str, Any]],
    update_count: int
) -> ProjectWithStats:
    return ProjectWithStats(
        **project,
        client=ClientInfo.model_validate(client) if client else None,
        payment_count=len(payments),
        total_paid=sum(p.get("amount") or 0 for p in payments),
        update_count=update_count,
    )

async def get_all_projects_with_stats(supabase: AsyncClient) -> List[ProjectWithStats]:
    """
    Get all projects, newest first, with client summary, payment count,
    total paid and update count.
    """
    failure = "Failed to fetch projects with clients"
    project_rows, client_rows, payment_rows, update_rows = await gather_queries(
        run_query(supabase.table(TABLE).select("*").order("created_at", desc=True), failure),
        run_query(supabase.table("clients").select(CLIENT_SUMMARY_COLUMNS), failure),
        run_query(supabase.table("payments").select("project_id, amount"), failure),
        run_query(supabase.table("project_updates").select("id, project_id"), failure),
    )

    clients = {c["id"]: c for c in client_rows}
    payments_by_project: Dict[int, List[Dict[str, Any]]] = defaultdict(list)
    for payment in payment_rows:
        payments_by_project[payment["project_id"]].append(payment)
    updates_by_project: Dict[int, int] = defaultdict(int)
    for update in update_rows:
        updates_by_project[update["project_id"]] += 1

    return [
        _with_stats(
            row,
            clients.get(row["client_id"]),
            payments_by_project.get(row["id"], []),
            updates_by_project.get(row["id"], 0),
        )
        for row in project_rows
    ]

async def get_project_with_stats(supabase: AsyncClient, project_id: int) -> Optional[ProjectWithStats]:
    project = await get_project(supabase, project_id)
    if not project:
        return None

    failure = "Failed to fetch project"
    client_rows, payment_rows, update_rows = await gather_queries(
        run_query(supabase.table("clients").select("*").eq("id", project.client_id).limit(1), failure),
        run_query(supabase.table("payments").select("project_id, amount").eq("project_id", project_id), failure),
        run_query(supabase.table("project_updates").select("id").eq("project_id", project_id), failure),
    )
    return _with_stats(
        project.model_dump(),
        client_rows[0] if client_rows else None,
        payment_rows,
        len(update_rows),
    )

async def update_project(
    supabase: AsyncClient,
    project_id: int,
    project_in: Union[ProjectPatch, Dict[str, Any]]
) -> Optional[Project]:
    if isinstance(project_in, dict):
        update_data = project_in
    else:
        update_data = project_in.model_dump(exclude_unset=True, mode="json")

    if not update_data:
        return await get_project(supabase, project_id)

    rows = await run_query(
        supabase.table(TABLE).update(update_data).eq("id", project_id),
        "Failed to update project"
    )
    if not rows:
        logger.warning(f"Project not found for update: {project_id}")
        return None
    logger.info(f"Project updated: {project_id}")
    return Project.model_validate(rows[0])

async def delete_project(supabase: AsyncClient, project_id: int) -> bool:
    rows = await run_query(
        supabase.table(TABLE).delete().eq("id", project_id),
        "Failed to delete project"
    )
    if rows:
        logger.info(f"Project deleted: {project_id}")
    return bool(rows)
