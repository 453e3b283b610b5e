from typing import List, Optional
from datetime import datetime, timedelta, timezone
import logging
from supabase import AsyncClient
from clientdesk.core.config import settings
from clientdesk.core.exceptions import StoreError
from clientdesk.crud import client as client_crud
from clientdesk.crud.base import gather_queries
from clientdesk.crud import payment as payment_crud
from clientdesk.crud import project as project_crud
from clientdesk.crud import project_update as project_update_crud
from clientdesk.schemas.dashboard import (
    Activity,
    ActivityType,
    DashboardData,
    DashboardStats,
    FinancialStats,
    ProjectStatusStats,
)
from clientdesk.schemas.payment import PaymentWithDetails
from clientdesk.schemas.project import ProjectStatus, ProjectWithStats
from clientdesk.schemas.project_update import ProjectUpdateWithDetails
from clientdesk.utils.formatters import format_currency, truncate_text

logger = logging.getLogger(__name__)

TITLE_LENGTH = 30

def _as_utc(value: datetime) -> datetime:
    return value if value.tzinfo else value.replace(tzinfo=timezone.utc)

class DashboardService:
    """Headline numbers and the recent activity feed for the dashboard page."""

    async def get_dashboard_data(self, supabase: AsyncClient, now: Optional[datetime] = None) -> DashboardData:
        now = _as_utc(now) if now else datetime.now(timezone.utc)
        window_start = now - timedelta(days=settings.ACTIVITY_WINDOW_DAYS)

        total_clients, projects, payments, updates = await gather_queries(
            client_crud.count_clients(supabase),
            project_crud.get_all_projects_with_stats(supabase),
            payment_crud.get_all_payments_with_details(supabase),
            self._get_updates_for_feed(supabase),
        )

        monthly_revenue = sum(
            p.amount for p in payments if p.payment_date >= window_start.date()
        )
        total_revenue = sum(p.amount for p in payments)
        total_budget = sum(p.budget or 0 for p in projects)
        total_paid = sum(p.total_paid or 0 for p in projects)

        return DashboardData(
            stats=DashboardStats(
                total_clients=total_clients,
                total_projects=len(projects),
                monthly_revenue=monthly_revenue,
                total_revenue=total_revenue,
            ),
            project_status=ProjectStatusStats(
                started=len([p for p in projects if p.status == ProjectStatus.started]),
                finished=len([p for p in projects if p.status == ProjectStatus.finished]),
                total=len(projects),
            ),
            financials=FinancialStats(
                total_budget=total_budget,
                total_paid=total_paid,
                outstanding=total_budget - total_paid,
            ),
            activities=self.build_recent_activities(
                projects, payments, updates, window_start, settings.RECENT_ACTIVITY_LIMIT
            ),
        )

    async def _get_updates_for_feed(self, supabase: AsyncClient) -> List[ProjectUpdateWithDetails]:
        # The feed is optional; the dashboard still loads without it
        try:
            return await project_update_crud.get_all_updates_with_details(supabase)
        except StoreError as e:
            logger.error(f"Error fetching recent activities: {e}")
            return []

    def build_recent_activities(
        self,
        projects: List[ProjectWithStats],
        payments: List[PaymentWithDetails],
        updates: List[ProjectUpdateWithDetails],
        since: datetime,
        limit: int = 4
    ) -> List[Activity]:
        """
        Merge payments, updates and project starts/finishes created since
        ``since`` into one feed, newest first. Entries whose client is
        unknown are skipped.
        """
        since = _as_utc(since)
        activities: List[Activity] = []

        for payment in payments:
            if _as_utc(payment.created_at) < since or not payment.project or not payment.project.client:
                continue
            activities.append(Activity(
                id=f"payment-{payment.id}",
                type=ActivityType.payment,
                client_name=payment.project.client.full_name,
                project_title=payment.project.title,
                project_id=payment.project_id,
                message=f"Payment received {format_currency(payment.amount)} for {truncate_text(payment.project.title, TITLE_LENGTH)}",
                date=_as_utc(payment.created_at),
                amount=payment.amount,
            ))

        for update in updates:
            if _as_utc(update.created_at) < since or not update.project or not update.project.client:
                continue
            activities.append(Activity(
                id=f"update-{update.id}",
                type=ActivityType.update,
                client_name=update.project.client.full_name,
                project_title=update.project.title,
                project_id=update.project_id,
                message=f"Project updates for {truncate_text(update.project.title, TITLE_LENGTH)}",
                date=_as_utc(update.created_at),
                update_description=update.description,
            ))

        for project in projects:
            if _as_utc(project.created_at) < since or not project.client:
                continue
            title = truncate_text(project.title, TITLE_LENGTH)
            if project.status == ProjectStatus.finished:
                activities.append(Activity(
                    id=f"project-finished-{project.id}",
                    type=ActivityType.project_finished,
                    client_name=project.client.full_name,
                    project_title=project.title,
                    project_id=project.id,
                    message=f"Project completed for {title}",
                    date=_as_utc(project.created_at),
                ))
            else:
                activities.append(Activity(
                    id=f"project-started-{project.id}",
                    type=ActivityType.project_started,
                    client_name=project.client.full_name,
                    project_title=project.title,
                    project_id=project.id,
                    message=f"New project started from {project.client.full_name} for {title}",
                    date=_as_utc(project.created_at),
                ))

        activities.sort(key=lambda a: a.date, reverse=True)
        return activities[:limit]

dashboard_service = DashboardService()
