"""
Security and Authentication
Validates the caller's Supabase JWT and builds the request-scoped UserContext

The sync engine never looks the user up on its own: whatever this module
returns is passed down explicitly, so there is no process-wide "current
user" state.
"""
import logging
from typing import Optional
from fastapi import Depends, Header, HTTPException, status
from fastapi.security import HTTPAuthorizationCredentials, HTTPBearer
from supabase import Client

from gitpoor.core.dependencies import get_supabase
from gitpoor.models.schemas.auth import UserContext

logger = logging.getLogger(__name__)

# Security scheme (auto_error=False so a missing header is reported as 401, not 403)
bearer_scheme = HTTPBearer(auto_error=False)


# ============================================================================
# JWT AUTHENTICATION (Supabase)
# ============================================================================

async def get_current_user_context(
    credentials: Optional[HTTPAuthorizationCredentials] = Depends(bearer_scheme),
    provider_token: Optional[str] = Header(default=None, alias="X-Provider-Token"),
    provider_refresh_token: Optional[str] = Header(default=None, alias="X-Provider-Refresh-Token"),
    supabase: Client = Depends(get_supabase)
) -> UserContext:
    """
    Get the authenticated caller.

    Flow:
    1. Validate JWT with Supabase Auth
    2. Extract user_id from the JWT subject
    3. Extract the GitHub login from user_metadata.user_name
    4. Attach the live session's GitHub tokens when the frontend forwards them

    Returns:
        UserContext for this request only
    """
    if not credentials:
        logger.warning("No authorization credentials provided")
        raise HTTPException(
            status_code=status.HTTP_401_UNAUTHORIZED,
            detail="Authorization header required"
        )

    token = credentials.credentials

    try:
        response = supabase.auth.get_user(token)

        if not response or not response.user:
            logger.warning("JWT validation failed: no user returned")
            raise HTTPException(
                status_code=status.HTTP_401_UNAUTHORIZED,
                detail="Invalid authentication token"
            )

        user = response.user
        user_metadata = user.user_metadata or {}
        github_login = user_metadata.get("user_name")

        logger.info(f"✅ User authenticated: {user.id[:8]}... (github: {github_login or 'unknown'})")

        return UserContext(
            user_id=user.id,
            email=user.email,
            github_login=github_login,
            session_provider_token=provider_token or None,
            session_refresh_token=provider_refresh_token or None,
        )

    except HTTPException:
        raise
    except Exception as e:
        logger.error(f"JWT validation error: {e}", exc_info=True)
        raise HTTPException(
            status_code=status.HTTP_401_UNAUTHORIZED,
            detail="Authentication failed"
        )


async def get_current_user_id(
    user_context: UserContext = Depends(get_current_user_context)
) -> str:
    """Convenience dependency for endpoints that only need user_id."""
    return user_context.user_id


def mask_token(token: Optional[str], visible: int = 6) -> str:
    """
    Mask an access token for logging.

    Example:
        "gho_abcdef123456" -> "gho_ab..."
    """
    if not token:
        return "<none>"
    return f"{token[:visible]}..."
