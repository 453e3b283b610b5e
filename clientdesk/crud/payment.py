from typing import List, Optional
import logging
from supabase import AsyncClient
from clientdesk.core.exceptions import StoreError
from clientdesk.crud.base import gather_queries, run_query
from clientdesk.crud.project import build_project_summaries, CLIENT_SUMMARY_COLUMNS
from clientdesk.schemas.payment import Payment, PaymentCreate, PaymentWithDetails

logger = logging.getLogger(__name__)

TABLE = "payments"

async def create_payment(supabase: AsyncClient, project_id: int, payment_in: PaymentCreate) -> Payment:
    rows = await run_query(
        supabase.table(TABLE).insert({"project_id": project_id, **payment_in.model_dump(mode="json")}),
        "Failed to record payment"
    )
    if not rows:
        raise StoreError("Failed to record payment: no row returned")
    logger.info(f"Payment recorded: {rows[0]['id']} for project {project_id}")
    return Payment.model_validate(rows[0])

async def get_payment(supabase: AsyncClient, payment_id: int) -> Optional[Payment]:
    rows = await run_query(
        supabase.table(TABLE).select("*").eq("id", payment_id).limit(1),
        "Failed to fetch payment"
    )
    return Payment.model_validate(rows[0]) if rows else None

async def get_payments_by_project(supabase: AsyncClient, project_id: int) -> List[Payment]:
    """Payments for one project, latest payment date first."""
    rows = await run_query(
        supabase.table(TABLE).select("*").eq("project_id", project_id).order("payment_date", desc=True),
        "Failed to fetch payments"
    )
    return [Payment.model_validate(row) for row in rows]

async def get_all_payments_with_details(supabase: AsyncClient) -> List[PaymentWithDetails]:
    failure = "Failed to fetch payments"
    payment_rows, project_rows, client_rows = await gather_queries(
        run_query(supabase.table(TABLE).select("*").order("payment_date", desc=True), failure),
        run_query(supabase.table("projects").select("id, title, client_id"), failure),
        run_query(supabase.table("clients").select(CLIENT_SUMMARY_COLUMNS), failure),
    )
    projects = build_project_summaries(project_rows, client_rows)
    return [
        PaymentWithDetails(**row, project=projects.get(row["project_id"]))
        for row in payment_rows
    ]

async def delete_payment(supabase: AsyncClient, payment_id: int) -> Optional[Payment]:
    """Delete a payment and return the removed row, or None if it did not exist."""
    rows = await run_query(
        supabase.table(TABLE).delete().eq("id", payment_id),
        "Failed to delete payment"
    )
    if not rows:
        return None
    logger.info(f"Payment deleted: {payment_id}")
    return Payment.model_validate(rows[0])
