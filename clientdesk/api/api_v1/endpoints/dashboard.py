from typing import Any
from fastapi import APIRouter, Depends
from supabase import AsyncClient
from clientdesk.api.deps import store_failure
from clientdesk.core.auth import get_current_user
from clientdesk.core.exceptions import StoreError
from clientdesk.core.notifications import NotificationChannel, get_notifications
from clientdesk.core.supabase import get_supabase_client
from clientdesk.schemas.dashboard import DashboardData
from clientdesk.schemas.user import User
from clientdesk.services.dashboard_service import dashboard_service

router = APIRouter()

@router.get("", response_model=DashboardData)
async def get_dashboard(
    current_user: User = Depends(get_current_user),
    supabase: AsyncClient = Depends(get_supabase_client),
    notifications: NotificationChannel = Depends(get_notifications)
) -> Any:
    """
    Totals, project status split, financials and the recent activity feed.
    """
    try:
        return await dashboard_service.get_dashboard_data(supabase)
    except StoreError as e:
        raise store_failure(notifications, "Failed to Load Dashboard", e)
