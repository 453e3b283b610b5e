from clientdesk.schemas.user import User
from clientdesk.schemas.project import (
    ProjectStatus, ProjectCreate, ProjectPatch, Project, ProjectSummary,
    ProjectWithStats, ClientInfo, DeadlineStatus
)
from clientdesk.schemas.client import (
    Client, ClientCreate, ClientUpdate, ClientWithStats, ClientWithProjects
)
from clientdesk.schemas.payment import (
    PaymentMethod, PaymentCreate, Payment, PaymentWithDetails, PaymentOutcome
)
from clientdesk.schemas.project_update import (
    ProjectUpdateCreate, ProjectUpdate, ProjectUpdateWithDetails
)
from clientdesk.schemas.project_detail import ProjectDetail
from clientdesk.schemas.client_portal import (
    ClientPortal, ClientPortalLink, PortalToggle, PortalProject, PortalView
)
from clientdesk.schemas.dashboard import (
    ActivityType, Activity, DashboardStats, ProjectStatusStats, FinancialStats, DashboardData
)
from clientdesk.schemas.notification import ToastType, Toast

# Export all schemas
__all__ = [
    'User',
    'ProjectStatus', 'ProjectCreate', 'ProjectPatch', 'Project', 'ProjectSummary',
    'ProjectWithStats', 'ClientInfo', 'DeadlineStatus',
    'Client', 'ClientCreate', 'ClientUpdate', 'ClientWithStats', 'ClientWithProjects',
    'PaymentMethod', 'PaymentCreate', 'Payment', 'PaymentWithDetails', 'PaymentOutcome',
    'ProjectUpdateCreate', 'ProjectUpdate', 'ProjectUpdateWithDetails',
    'ProjectDetail',
    'ClientPortal', 'ClientPortalLink', 'PortalToggle', 'PortalProject', 'PortalView',
    'ActivityType', 'Activity', 'DashboardStats', 'ProjectStatusStats', 'FinancialStats', 'DashboardData',
    'ToastType', 'Toast',
]
