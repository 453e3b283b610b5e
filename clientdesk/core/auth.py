import logging
from fastapi import Depends, HTTPException, status
from fastapi.security import HTTPBearer, HTTPAuthorizationCredentials
from supabase import AsyncClient
from clientdesk.core.supabase import get_supabase_client
from clientdesk.schemas.user import User

logger = logging.getLogger(__name__)
security = HTTPBearer(auto_error=False)

async def get_current_user(
    credentials: HTTPAuthorizationCredentials = Depends(security),
    supabase: AsyncClient = Depends(get_supabase_client)
) -> User:
    """
    Resolve the bearer token to a Supabase Auth user.
    """
    credentials_exception = HTTPException(
        status_code=status.HTTP_401_UNAUTHORIZED,
        detail="Could not validate credentials",
        headers={"WWW-Authenticate": "Bearer"},
    )
    if credentials is None or not credentials.credentials:
        raise credentials_exception

    try:
        response = await supabase.auth.get_user(credentials.credentials)
    except Exception as e:
        if "timeout" in str(e).lower():
            raise HTTPException(
                status_code=status.HTTP_504_GATEWAY_TIMEOUT,
                detail="Authentication service timeout. Please try again."
            )
        logger.error(f"Supabase authentication error: {e}")
        raise credentials_exception

    if not response or not response.user:
        raise credentials_exception

    return User(
        id=str(response.user.id),
        email=response.user.email,
        role=getattr(response.user, "role", None),
    )
