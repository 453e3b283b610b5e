from typing import Optional
from datetime import datetime
import logging
import secrets
import string
import time
from supabase import AsyncClient
from clientdesk.core.exceptions import StoreError
from clientdesk.crud import client as client_crud
from clientdesk.crud import client_portal as portal_crud
from clientdesk.crud.base import gather_queries
from clientdesk.crud import payment as payment_crud
from clientdesk.crud import project as project_crud
from clientdesk.crud import project_update as project_update_crud
from clientdesk.schemas.client_portal import ClientPortal, PortalProject, PortalView
from clientdesk.schemas.project import ClientInfo
from clientdesk.utils.calculations import (
    calculate_payment_progress,
    get_deadline_status,
    is_payment_completed,
    sum_payments,
)

logger = logging.getLogger(__name__)

BASE36_ALPHABET = string.digits + string.ascii_lowercase
RANDOM_CHUNK_LENGTH = 13
PORTAL_PATH = "client-portal"

def to_base36(number: int) -> str:
    if number < 0:
        raise ValueError("number must be non-negative")
    if number == 0:
        return "0"
    digits = []
    while number:
        number, remainder = divmod(number, 36)
        digits.append(BASE36_ALPHABET[remainder])
    return "".join(reversed(digits))

class ClientPortalService:
    """Token-based, read-only access to one project's status, payments and updates."""

    def generate_access_token(self) -> str:
        """Two random base-36 chunks followed by the base-36 millisecond timestamp."""
        def chunk() -> str:
            return "".join(secrets.choice(BASE36_ALPHABET) for _ in range(RANDOM_CHUNK_LENGTH))
        return chunk() + chunk() + to_base36(int(time.time() * 1000))

    async def create_or_update_portal(self, supabase: AsyncClient, project_id: int) -> ClientPortal:
        """
        Enable the portal for a project with a fresh token.

        A project has at most one portal; calling this again rotates the token.
        """
        existing = await portal_crud.get_by_project(supabase, project_id)
        portal_data = {
            "access_token": self.generate_access_token(),
            "is_enabled": True,
            "expires_at": None,
        }

        if existing:
            portal = await portal_crud.update_by_project(
                supabase, project_id, portal_data, "Failed to update client portal"
            )
            if not portal:
                raise StoreError("Failed to update client portal: no row returned")
            logger.info(f"Client portal token rotated for project {project_id}")
        else:
            portal = await portal_crud.insert_portal(supabase, {"project_id": project_id, **portal_data})
            if not portal:
                raise StoreError("Failed to create client portal: no row returned")
            logger.info(f"Client portal created for project {project_id}")
        return portal

    async def get_portal_by_project(self, supabase: AsyncClient, project_id: int) -> Optional[ClientPortal]:
        return await portal_crud.get_by_project(supabase, project_id)

    async def get_portal_by_token(
        self,
        supabase: AsyncClient,
        access_token: str,
        now: Optional[datetime] = None
    ) -> Optional[PortalView]:
        """
        Resolve a portal token to its project view.

        Unknown and disabled tokens both give None.
        """
        portal = await portal_crud.get_enabled_by_token(supabase, access_token)
        if not portal:
            return None

        project = await project_crud.get_project(supabase, portal.project_id)
        if not project:
            return None

        client, payments, updates = await gather_queries(
            client_crud.get_client(supabase, project.client_id),
            payment_crud.get_payments_by_project(supabase, project.id),
            project_update_crud.get_updates_by_project(supabase, project.id),
        )
        total_paid = sum_payments(payments)

        return PortalView(
            project=PortalProject(
                **project.model_dump(),
                client=ClientInfo(
                    id=client.id,
                    full_name=client.full_name,
                    company_name=client.company_name,
                    email=client.email,
                ) if client else None,
            ),
            payments=payments,
            updates=updates,
            total_paid=total_paid,
            progress=calculate_payment_progress(total_paid, project.budget),
            payment_completed=is_payment_completed(total_paid, project.budget),
            deadline_status=get_deadline_status(project.deadline, now),
        )

    async def toggle_portal_status(
        self,
        supabase: AsyncClient,
        project_id: int,
        is_enabled: bool
    ) -> Optional[ClientPortal]:
        """Enable or disable a portal. The token is kept as is."""
        portal = await portal_crud.update_by_project(
            supabase, project_id, {"is_enabled": is_enabled}, "Failed to toggle portal status"
        )
        if portal:
            logger.info(f"Client portal for project {project_id} {'enabled' if is_enabled else 'disabled'}")
        return portal

    async def delete_portal(self, supabase: AsyncClient, project_id: int) -> bool:
        return await portal_crud.delete_by_project(supabase, project_id)

    def generate_portal_url(self, access_token: str, origin: str) -> str:
        return f"{origin.rstrip('/')}/{PORTAL_PATH}/{access_token}"

client_portal_service = ClientPortalService()
