from typing import List, Optional, Dict, Any, Union
from collections import defaultdict
import logging
from supabase import AsyncClient
from clientdesk.core.exceptions import StoreError
from clientdesk.crud.base import gather_queries, run_query
from clientdesk.schemas.client import Client, ClientCreate, ClientUpdate, ClientWithStats, ClientWithProjects
from clientdesk.crud import project as project_crud
from clientdesk.schemas.project import ProjectStatus

logger = logging.getLogger(__name__)

TABLE = "clients"

async def create_client(supabase: AsyncClient, client_in: ClientCreate) -> Client:
    rows = await run_query(
        supabase.table(TABLE).insert(client_in.model_dump(mode="json")),
        "Failed to create client"
    )
    if not rows:
        raise StoreError("Failed to create client: no row returned")
    logger.info(f"Client created: {rows[0]['id']}")
    return Client.model_validate(rows[0])

async def get_client(supabase: AsyncClient, client_id: int) -> Optional[Client]:
    rows = await run_query(
        supabase.table(TABLE).select("*").eq("id", client_id).limit(1),
        "Failed to fetch client"
    )
    return Client.model_validate(rows[0]) if rows else None

async def get_all_clients_with_stats(supabase: AsyncClient) -> List[ClientWithStats]:
    """
    Get all clients, newest first, with project counts and total revenue.

    Total revenue is the sum of project budgets; active projects are the ones
    still Started.
    """
    client_rows, project_rows = await gather_queries(
        run_query(
            supabase.table(TABLE).select("*").order("created_at", desc=True),
            "Failed to fetch clients"
        ),
        run_query(
            supabase.table("projects").select("client_id, status, budget"),
            "Failed to fetch clients"
        ),
    )

    projects_by_client: Dict[int, List[Dict[str, Any]]] = defaultdict(list)
    for project in project_rows:
        projects_by_client[project["client_id"]].append(project)

    clients = []
    for row in client_rows:
        projects = projects_by_client.get(row["id"], [])
        clients.append(ClientWithStats(
            **row,
            project_count=len(projects),
            active_project_count=len([p for p in projects if p["status"] == ProjectStatus.started.value]),
            total_revenue=sum(p.get("budget") or 0 for p in projects),
        ))
    return clients

async def get_client_with_projects(supabase: AsyncClient, client_id: int) -> Optional[ClientWithProjects]:
    client = await get_client(supabase, client_id)
    if not client:
        return None

    projects = await project_crud.get_projects_by_client(supabase, client_id)
    project_ids = [p.id for p in projects]

    total_paid = 0
    total_updates = 0
    if project_ids:
        payment_rows, update_rows = await gather_queries(
            run_query(
                supabase.table("payments").select("project_id, amount").in_("project_id", project_ids),
                "Failed to fetch client"
            ),
            run_query(
                supabase.table("project_updates").select("id, project_id").in_("project_id", project_ids),
                "Failed to fetch client"
            ),
        )
        total_paid = sum(p.get("amount") or 0 for p in payment_rows)
        total_updates = len(update_rows)

    return ClientWithProjects(
        **client.model_dump(),
        projects=projects,
        total_paid=total_paid,
        total_updates=total_updates,
    )

async def update_client(
    supabase: AsyncClient,
    client_id: int,
    client_in: Union[ClientUpdate, Dict[str, Any]]
) -> Optional[Client]:
    if isinstance(client_in, dict):
        update_data = client_in
    else:
        update_data = client_in.model_dump(exclude_unset=True, mode="json")

    if not update_data:
        return await get_client(supabase, client_id)

    rows = await run_query(
        supabase.table(TABLE).update(update_data).eq("id", client_id),
        "Failed to update client"
    )
    if not rows:
        logger.warning(f"Client not found for update: {client_id}")
        return None
    logger.info(f"Client updated: {client_id}")
    return Client.model_validate(rows[0])

async def delete_client(supabase: AsyncClient, client_id: int) -> bool:
    """Delete a client. Its projects (and their payments, updates and portal) go with it."""
    rows = await run_query(
        supabase.table(TABLE).delete().eq("id", client_id),
        "Failed to delete client"
    )
    if rows:
        logger.info(f"Client deleted: {client_id}")
    return bool(rows)

async def count_clients(supabase: AsyncClient) -> int:
    rows = await run_query(supabase.table(TABLE).select("id"), "Failed to fetch clients")
    return len(rows)
