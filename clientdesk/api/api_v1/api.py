from fastapi import APIRouter
from clientdesk.api.api_v1.endpoints import (
    client_portal,
    clients,
    dashboard,
    health,
    notifications,
    payments,
    project_updates,
    projects,
)

api_router = APIRouter()
api_router.include_router(health.router, prefix="/health", tags=["health"])
api_router.include_router(dashboard.router, prefix="/dashboard", tags=["dashboard"])
api_router.include_router(clients.router, prefix="/clients", tags=["clients"])
api_router.include_router(projects.router, prefix="/projects", tags=["projects"])
api_router.include_router(client_portal.router, prefix="/projects", tags=["client portal"])
api_router.include_router(payments.router, tags=["payments"])
api_router.include_router(project_updates.router, tags=["project updates"])
api_router.include_router(notifications.router, prefix="/notifications", tags=["notifications"])
api_router.include_router(client_portal.public_router, prefix="/portal", tags=["client portal"])
