from typing import List
from clientdesk.schemas.project import ProjectWithStats, DeadlineStatus
from clientdesk.schemas.payment import Payment
from clientdesk.schemas.project_update import ProjectUpdate

class ProjectDetail(ProjectWithStats):
    """Everything the project page shows: stats, client, payments and updates."""
    payments: List[Payment] = []
    updates: List[ProjectUpdate] = []
    progress: float = 0
    payment_completed: bool = False
    deadline_status: DeadlineStatus
