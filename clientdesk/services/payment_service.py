"""
Payment write path.

Recording or removing a payment can move a project across its budget. When
that happens the project status follows (Started -> Finished on full payment,
Finished -> Started when a removal leaves it short) and an automatic project
update records the change. Those follow-up writes are best-effort: if they
fail the payment change still stands.
"""

from typing import Optional
import logging
from supabase import AsyncClient
from clientdesk.core.exceptions import StoreError
from clientdesk.crud import payment as payment_crud
from clientdesk.crud import project as project_crud
from clientdesk.crud import project_update as project_update_crud
from clientdesk.schemas.payment import PaymentCreate, PaymentOutcome
from clientdesk.schemas.project import Project, ProjectStatus
from clientdesk.utils.calculations import (
    calculate_payment_progress,
    is_payment_completed,
    should_revert_project_status,
    sum_payments,
)

logger = logging.getLogger(__name__)

AUTO_COMPLETED_MESSAGE = "Project automatically marked as completed - full payment received."
AUTO_REVERTED_MESSAGE = "Project status reverted to 'Started' - payment was removed and total is now below budget."


async def _transition_status(
    supabase: AsyncClient,
    project: Project,
    new_status: ProjectStatus,
    description: str
) -> bool:
    """Change the project status and log an automatic update. Returns whether the status was written."""
    try:
        updated = await project_crud.update_project(supabase, project.id, {"status": new_status.value})
    except StoreError as e:
        logger.error(f"Error auto-updating status of project {project.id} to {new_status.value}: {e}")
        return False
    if not updated:
        logger.warning(f"Project {project.id} disappeared before its status could change")
        return False

    logger.info(f"Project {project.id} status changed automatically: {project.status.value} -> {new_status.value}")

    try:
        await project_update_crud.create_project_update(supabase, project.id, description)
    except StoreError as e:
        logger.error(f"Error recording automatic update for project {project.id}: {e}")
    return True


async def record_payment(
    supabase: AsyncClient,
    project: Project,
    payment_in: PaymentCreate
) -> PaymentOutcome:
    """
    Record a payment against ``project``.

    If the project is Started and payments now cover the budget, it is marked
    Finished and an automatic update is appended.
    """
    payment = await payment_crud.create_payment(supabase, project.id, payment_in)

    payments = await payment_crud.get_payments_by_project(supabase, project.id)
    total_paid = sum_payments(payments)

    status = project.status
    status_changed = False
    if project.status == ProjectStatus.started and is_payment_completed(total_paid, project.budget):
        status_changed = await _transition_status(
            supabase, project, ProjectStatus.finished, AUTO_COMPLETED_MESSAGE
        )
        if status_changed:
            status = ProjectStatus.finished

    return PaymentOutcome(
        payment=payment,
        project_status=status,
        status_changed=status_changed,
        total_paid=total_paid,
        progress=calculate_payment_progress(total_paid, project.budget),
    )


async def remove_payment(supabase: AsyncClient, payment_id: int) -> Optional[PaymentOutcome]:
    """
    Delete a payment.

    If its project was Finished and the remaining payments fall below the
    budget, the project goes back to Started and an automatic update is
    appended. Returns None when the payment does not exist.
    """
    payment = await payment_crud.get_payment(supabase, payment_id)
    if not payment:
        return None

    deleted = await payment_crud.delete_payment(supabase, payment_id)
    if not deleted:
        return None

    project = await project_crud.get_project(supabase, payment.project_id)
    if not project:
        # Project removed concurrently; nothing left to reconcile
        return PaymentOutcome(
            payment=deleted,
            project_status=ProjectStatus.started,
            total_paid=0,
            progress=0,
        )

    payments = await payment_crud.get_payments_by_project(supabase, project.id)
    total_paid = sum_payments(payments)

    status = project.status
    status_changed = False
    if should_revert_project_status(project.status, total_paid, project.budget):
        status_changed = await _transition_status(
            supabase, project, ProjectStatus.started, AUTO_REVERTED_MESSAGE
        )
        if status_changed:
            status = ProjectStatus.started

    return PaymentOutcome(
        payment=deleted,
        project_status=status,
        status_changed=status_changed,
        total_paid=total_paid,
        progress=calculate_payment_progress(total_paid, project.budget),
    )
