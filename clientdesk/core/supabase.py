from fastapi import Request
from supabase import acreate_client, AsyncClient
from supabase.lib.client_options import AsyncClientOptions
from clientdesk.core.config import settings

async def create_supabase_client() -> AsyncClient:
    # One client per process; created in the application lifespan
    return await acreate_client(
        settings.SUPABASE_URL,
        settings.SUPABASE_KEY,
        options=AsyncClientOptions(
            postgrest_client_timeout=settings.SUPABASE_CLIENT_TIMEOUT,
            storage_client_timeout=settings.SUPABASE_CLIENT_TIMEOUT,
            auto_refresh_token=False,
            persist_session=False,
        )
    )

def get_supabase_client(request: Request) -> AsyncClient:
    return request.app.state.supabase
