from typing import Any, Optional
import logging
from fastapi import APIRouter, Depends, HTTPException, status, Query, Path
from supabase import AsyncClient
from clientdesk.api.deps import require_confirmation, store_failure
from clientdesk.core.auth import get_current_user
from clientdesk.core.exceptions import StoreError
from clientdesk.core.notifications import NotificationChannel, get_notifications
from clientdesk.core.supabase import get_supabase_client
from clientdesk.crud import payment as payment_crud
from clientdesk.crud import project as project_crud
from clientdesk.schemas.payment import Payment, PaymentCreate, PaymentOutcome, PaymentWithDetails
from clientdesk.schemas.project import ProjectStatus
from clientdesk.schemas.user import User
from clientdesk.services import payment_service
from clientdesk.utils.formatters import format_currency
from clientdesk.utils.pagination import ShowMorePage, paginate

logger = logging.getLogger(__name__)
router = APIRouter()

@router.get("/payments", response_model=ShowMorePage[PaymentWithDetails])
async def get_payments(
    *,
    visible: Optional[int] = Query(None, ge=1, description="How many payments to show"),
    current_user: User = Depends(get_current_user),
    supabase: AsyncClient = Depends(get_supabase_client),
    notifications: NotificationChannel = Depends(get_notifications)
) -> Any:
    """
    Retrieve all payments with their project and client, latest first.
    """
    try:
        payments = await payment_crud.get_all_payments_with_details(supabase)
    except StoreError as e:
        raise store_failure(notifications, "Failed to Load Payments", e)
    return paginate(payments, visible)

@router.get("/projects/{project_id}/payments", response_model=ShowMorePage[Payment])
async def get_project_payments(
    *,
    project_id: int = Path(..., description="The ID of the project"),
    visible: Optional[int] = Query(None, ge=1, description="How many payments to show"),
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
        payments = await payment_crud.get_payments_by_project(supabase, project_id)
    except StoreError as e:
        raise store_failure(notifications, "Failed to Load Payments", e)
    return paginate(payments, visible)

@router.post(
    "/projects/{project_id}/payments",
    response_model=PaymentOutcome,
    status_code=status.HTTP_201_CREATED
)
async def record_payment(
    *,
    project_id: int = Path(..., description="The ID of the project being paid"),
    payment_in: PaymentCreate,
    current_user: User = Depends(get_current_user),
    supabase: AsyncClient = Depends(get_supabase_client),
    notifications: NotificationChannel = Depends(get_notifications)
) -> Any:
    """
    Record a payment.

    When payments reach the budget of a Started project, the project is
    marked Finished and an automatic update is added.
    """
    try:
        project = await project_crud.get_project(supabase, project_id)
        if not project:
            raise HTTPException(
                status_code=status.HTTP_404_NOT_FOUND,
                detail="Project not found"
            )
        outcome = await payment_service.record_payment(supabase, project, payment_in)
    except StoreError as e:
        raise store_failure(notifications, "Failed to Record Payment", e)

    if outcome.status_changed:
        notifications.show_success(
            "Project Completed!",
            "Project has been automatically marked as finished since full payment has been received."
        )
    else:
        notifications.show_success(
            "Payment Recorded",
            f"Payment of {format_currency(outcome.payment.amount)} has been recorded successfully"
        )
    return outcome

@router.delete(
    "/payments/{payment_id}",
    response_model=PaymentOutcome,
    dependencies=[Depends(require_confirmation)]
)
async def delete_payment(
    *,
    payment_id: int = Path(..., description="The ID of the payment to delete"),
    current_user: User = Depends(get_current_user),
    supabase: AsyncClient = Depends(get_supabase_client),
    notifications: NotificationChannel = Depends(get_notifications)
) -> Any:
    """
    Delete a payment.

    When a Finished project drops below its budget it goes back to Started
    and an automatic update is added.
    """
    logger.info(f"Payment deletion requested for {payment_id} by user: {current_user.id}")

    try:
        outcome = await payment_service.remove_payment(supabase, payment_id)
    except StoreError as e:
        raise store_failure(notifications, "Failed to Delete Payment", e)

    if not outcome:
        raise HTTPException(
            status_code=status.HTTP_404_NOT_FOUND,
            detail="Payment not found"
        )

    amount = format_currency(outcome.payment.amount)
    if outcome.status_changed and outcome.project_status == ProjectStatus.started:
        notifications.show_success(
            "Payment Deleted & Status Updated",
            f"Payment of {amount} has been removed. Project status reverted to 'Started'."
        )
    else:
        notifications.show_success("Payment Deleted", f"Payment of {amount} has been removed")
    return outcome
