from typing import Any, Dict, List
from fastapi import APIRouter, Depends, HTTPException, status
from clientdesk.core.auth import get_current_user
from clientdesk.core.notifications import NotificationChannel, get_notifications
from clientdesk.schemas.notification import Toast
from clientdesk.schemas.user import User

router = APIRouter()

@router.get("", response_model=List[Toast])
async def list_notifications(
    current_user: User = Depends(get_current_user),
    notifications: NotificationChannel = Depends(get_notifications)
) -> Any:
    """
    Toasts still on screen, oldest first.
    """
    return notifications.active()

@router.delete("/{toast_id}", response_model=Dict[str, bool])
async def dismiss_notification(
    toast_id: str,
    current_user: User = Depends(get_current_user),
    notifications: NotificationChannel = Depends(get_notifications)
) -> Any:
    if not notifications.remove(toast_id):
        raise HTTPException(
            status_code=status.HTTP_404_NOT_FOUND,
            detail="Notification not found"
        )
    return {"success": True}
