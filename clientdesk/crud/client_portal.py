from typing import Any, Dict, Optional
from supabase import AsyncClient
from clientdesk.crud.base import run_query
from clientdesk.schemas.client_portal import ClientPortal

TABLE = "client_portals"

async def get_by_project(supabase: AsyncClient, project_id: int) -> Optional[ClientPortal]:
    rows = await run_query(
        supabase.table(TABLE).select("*").eq("project_id", project_id).limit(1),
        "Failed to fetch client portal"
    )
    return ClientPortal.model_validate(rows[0]) if rows else None

async def get_enabled_by_token(supabase: AsyncClient, access_token: str) -> Optional[ClientPortal]:
    # Disabled portals are filtered in the query so they look exactly like unknown tokens
    rows = await run_query(
        supabase.table(TABLE).select("*").eq("access_token", access_token).eq("is_enabled", True).limit(1),
        "Failed to fetch client portal"
    )
    return ClientPortal.model_validate(rows[0]) if rows else None

async def insert_portal(supabase: AsyncClient, data: Dict[str, Any]) -> Optional[ClientPortal]:
    rows = await run_query(supabase.table(TABLE).insert(data), "Failed to create client portal")
    return ClientPortal.model_validate(rows[0]) if rows else None

async def update_by_project(supabase: AsyncClient, project_id: int, data: Dict[str, Any], failure: str) -> Optional[ClientPortal]:
    rows = await run_query(supabase.table(TABLE).update(data).eq("project_id", project_id), failure)
    return ClientPortal.model_validate(rows[0]) if rows else None

async def delete_by_project(supabase: AsyncClient, project_id: int) -> bool:
    rows = await run_query(
        supabase.table(TABLE).delete().eq("project_id", project_id),
        "Failed to delete client portal"
    )
    return bool(rows)
