from typing import List, Optional
from datetime import datetime
from pydantic import BaseModel
from clientdesk.schemas.project import Project, ClientInfo, DeadlineStatus
from clientdesk.schemas.payment import Payment
from clientdesk.schemas.project_update import ProjectUpdate

class ClientPortal(BaseModel):
    id: int
    project_id: int
    access_token: str
    is_enabled: bool
    created_at: datetime
    expires_at: Optional[datetime] = None

    class Config:
        from_attributes = True

class ClientPortalLink(ClientPortal):
    url: str

class PortalToggle(BaseModel):
    is_enabled: bool

class PortalProject(Project):
    client: Optional[ClientInfo] = None

class PortalView(BaseModel):
    """Read-only project view served to whoever holds an enabled portal token."""
    project: PortalProject
    payments: List[Payment] = []
    updates: List[ProjectUpdate] = []
    total_paid: float = 0
    progress: float = 0
    payment_completed: bool = False
    deadline_status: DeadlineStatus
