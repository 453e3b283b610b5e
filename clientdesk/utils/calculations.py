"""
Calculations and business rules derived from payments, budgets and deadlines.

These are pure functions; the write paths in ``clientdesk.services`` decide
what to do with their answers.
"""

import math
from datetime import date, datetime, time, timezone
from typing import Iterable, Optional

from clientdesk.schemas.project import DeadlineStatus, ProjectStatus

WARNING_THRESHOLD_DAYS = 7
SECONDS_PER_DAY = 60 * 60 * 24


def calculate_payment_progress(total_paid: float, budget: float) -> float:
    if budget == 0:
        return 0
    return min((total_paid / budget) * 100, 100)


def calculate_days_until_deadline(deadline: date, now: Optional[datetime] = None) -> int:
    """Whole days until ``deadline`` (midnight UTC), rounded up. Negative once it has passed."""
    if now is None:
        now = datetime.now(timezone.utc)
    elif now.tzinfo is None:
        now = now.replace(tzinfo=timezone.utc)
    deadline_at = datetime.combine(deadline, time.min, tzinfo=timezone.utc)
    return math.ceil((deadline_at - now).total_seconds() / SECONDS_PER_DAY)


def get_deadline_status(deadline: date, now: Optional[datetime] = None) -> DeadlineStatus:
    days = calculate_days_until_deadline(deadline, now)
    is_overdue = days < 0

    if is_overdue:
        status = "overdue"
    elif days <= WARNING_THRESHOLD_DAYS:
        status = "warning"
    else:
        status = "normal"

    return DeadlineStatus(
        days=abs(days),
        is_overdue=is_overdue,
        status=status,
        message=f"{abs(days)} days overdue" if is_overdue else f"{days} days remaining",
    )


def is_payment_completed(total_paid: float, budget: float) -> bool:
    return total_paid >= budget


def should_revert_project_status(current_status: str, total_paid: float, budget: float) -> bool:
    """True when a Finished project is no longer fully paid, e.g. after a payment was deleted."""
    return current_status == ProjectStatus.finished and total_paid < budget


def sum_payments(payments: Iterable) -> float:
    return sum(payment.amount or 0 for payment in payments)
