from typing import Optional
from datetime import datetime
from supabase import AsyncClient
from clientdesk.crud.base import gather_queries
from clientdesk.crud import payment as payment_crud
from clientdesk.crud import project as project_crud
from clientdesk.crud import project_update as project_update_crud
from clientdesk.schemas.project_detail import ProjectDetail
from clientdesk.utils.calculations import (
    calculate_payment_progress,
    get_deadline_status,
    is_payment_completed,
    sum_payments,
)

async def get_project_detail(
    supabase: AsyncClient,
    project_id: int,
    now: Optional[datetime] = None
) -> Optional[ProjectDetail]:
    """
    Load a project with its client, payments (latest first) and updates
    (newest first), plus payment progress and deadline urgency.
    """
    project = await project_crud.get_project_with_stats(supabase, project_id)
    if not project:
        return None

    payments, updates = await gather_queries(
        payment_crud.get_payments_by_project(supabase, project_id),
        project_update_crud.get_updates_by_project(supabase, project_id),
    )
    total_paid = sum_payments(payments)

    return ProjectDetail(
        **project.model_dump(exclude={"total_paid", "payment_count", "update_count"}),
        payments=payments,
        updates=updates,
        total_paid=total_paid,
        payment_count=len(payments),
        update_count=len(updates),
        progress=calculate_payment_progress(total_paid, project.budget),
        payment_completed=is_payment_completed(total_paid, project.budget),
        deadline_status=get_deadline_status(project.deadline, now),
    )
