"""
Notification channel.

Endpoints report the outcome of every user action here as a toast. Toasts are
shown oldest first and expire after their duration; the channel holds a
bounded number of them and evicts the oldest when full.
"""

import logging
import uuid
from collections import deque
from datetime import datetime, timedelta, timezone
from typing import Deque, List, Optional

from fastapi import Request

from clientdesk.schemas.notification import Toast, ToastType

logger = logging.getLogger(__name__)

DEFAULT_DURATION_MS = 4000


class NotificationChannel:
    def __init__(self, capacity: Optional[int] = 50, default_duration: int = DEFAULT_DURATION_MS):
        self.default_duration = default_duration
        self._toasts: Deque[Toast] = deque(maxlen=capacity)

    def _push(self, toast_type: ToastType, title: str, message: Optional[str], duration: Optional[int]) -> Toast:
        toast = Toast(
            id=uuid.uuid4().hex,
            type=toast_type,
            title=title,
            message=message,
            duration=duration or self.default_duration,
            created_at=datetime.now(timezone.utc),
        )
        self._toasts.append(toast)
        return toast

    def show_success(self, title: str, message: Optional[str] = None, duration: Optional[int] = None) -> Toast:
        return self._push(ToastType.success, title, message, duration)

    def show_error(self, title: str, message: Optional[str] = None, duration: Optional[int] = None) -> Toast:
        logger.debug(f"Error notification: {title}: {message}")
        return self._push(ToastType.error, title, message, duration)

    def remove(self, toast_id: str) -> bool:
        for toast in self._toasts:
            if toast.id == toast_id:
                self._toasts.remove(toast)
                return True
        return False

    def active(self, now: Optional[datetime] = None) -> List[Toast]:
        """Toasts still on screen, oldest first. Expired ones are dropped."""
        now = now or datetime.now(timezone.utc)
        expired = [
            t for t in self._toasts
            if t.created_at + timedelta(milliseconds=t.duration) <= now
        ]
        for toast in expired:
            self._toasts.remove(toast)
        return list(self._toasts)

    def clear(self) -> None:
        self._toasts.clear()


def get_notifications(request: Request) -> NotificationChannel:
    return request.app.state.notifications
