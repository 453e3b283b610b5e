import logging
from fastapi import HTTPException, Query, Request, status
from clientdesk.core.config import settings
from clientdesk.core.exceptions import StoreError
from clientdesk.core.notifications import NotificationChannel
from clientdesk.utils.logging import log_store_error

logger = logging.getLogger(__name__)

def require_confirmation(
    confirm: bool = Query(False, description="Must be true; destructive actions need an explicit confirmation")
) -> None:
    if not confirm:
        raise HTTPException(
            status_code=status.HTTP_400_BAD_REQUEST,
            detail="This action must be confirmed with confirm=true"
        )

def store_failure(notifications: NotificationChannel, title: str, error: StoreError) -> HTTPException:
    """Report a failed store operation as an error toast and build the matching 400 response."""
    log_store_error(title, error, logger)
    notifications.show_error(title, error.message)
    return HTTPException(
        status_code=status.HTTP_400_BAD_REQUEST,
        detail=error.message
    )

def portal_origin(request: Request) -> str:
    return settings.PORTAL_ORIGIN or str(request.base_url).rstrip("/")
