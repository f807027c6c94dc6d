"""
GitHub token supplier
Resolves the access token a sync run authenticates with

Order of preference:
1. The live session's provider token forwarded by the frontend
2. The stored github_infos record, refreshed first when it expires within
   settings.token_refresh_window_seconds

A failed refresh exchange is not fatal: the stale token is returned and the
run proceeds (a later GitHub 401 is reported, not retried).
"""
import logging
from datetime import datetime, timedelta
from typing import Optional

import httpx
from supabase import Client

from gitpoor.core.config import settings
from gitpoor.core.errors import Unauthenticated
from gitpoor.core.security import mask_token
from gitpoor.models.schemas.auth import UserContext
from gitpoor.models.schemas.github import AccessCredential
from gitpoor.services.github.client import GitHubAPIError
from gitpoor.services.github.oauth import refresh_github_token
from gitpoor.services.sync.clock import parse_instant, utc_now
from gitpoor.services.sync.database import get_github_info, save_github_tokens

logger = logging.getLogger(__name__)


def needs_refresh(expires_at: Optional[datetime], now: datetime) -> bool:
    """True when the token expires within the refresh window (unknown expiry never does)."""
    if expires_at is None:
        return False
    return expires_at - now <= timedelta(seconds=settings.token_refresh_window_seconds)


async def current_token(
    supabase: Client,
    http_client: httpx.AsyncClient,
    user: UserContext,
    now: Optional[datetime] = None
) -> AccessCredential:
    """
    Get a usable GitHub access token for `user`.

    Args:
        supabase: Supabase client instance
        http_client: Async HTTP client instance
        user: Request-scoped caller
        now: Current instant (tests)

    Returns:
        AccessCredential

    Raises:
        Unauthenticated: If neither the session nor the stored record has any token material
        StorageFailure: If the record cannot be read or a refreshed pair cannot be stored
    """
    now = now or utc_now()

    if user.session_provider_token:
        logger.info(f"🔑 Using live session token {mask_token(user.session_provider_token)}")
        return AccessCredential(
            access_token=user.session_provider_token,
            refresh_token=user.session_refresh_token,
            source="session",
        )

    info = await get_github_info(supabase, user.user_id) or {}
    access_token = info.get("access_token")
    refresh_token = info.get("refresh_token") or user.session_refresh_token
    expires_at = parse_instant(info["token_expires_at"]) if info.get("token_expires_at") else None

    if not access_token and not refresh_token:
        logger.warning(f"No GitHub token material for user {user.user_id[:8]}...")
        raise Unauthenticated()

    if access_token and not needs_refresh(expires_at, now):
        return AccessCredential(
            access_token=access_token,
            refresh_token=refresh_token,
            expires_at=expires_at,
            source="stored",
        )

    if not refresh_token:
        logger.warning(f"Stored token {mask_token(access_token)} is near expiry and no refresh token exists")
        return AccessCredential(access_token=access_token, expires_at=expires_at, source="stored")

    logger.info(f"🔄 Refreshing GitHub token for user {user.user_id[:8]}... (expires_at={expires_at})")
    try:
        grant = await refresh_github_token(http_client, refresh_token)
    except GitHubAPIError as e:
        if not access_token:
            logger.error(f"Token refresh failed and no access token is stored: {e}")
            raise Unauthenticated(details=str(e)) from e
        logger.warning(f"⚠️  Token refresh failed, continuing with stale token: {e}")
        return AccessCredential(
            access_token=access_token,
            refresh_token=refresh_token,
            expires_at=expires_at,
            source="stored",
        )

    new_refresh_token = grant.refresh_token or refresh_token
    new_expires_at = now + timedelta(seconds=grant.expires_in) if grant.expires_in else None

    await save_github_tokens(supabase, user.user_id, grant.access_token, new_refresh_token, new_expires_at)

    return AccessCredential(
        access_token=grant.access_token,
        refresh_token=new_refresh_token,
        expires_at=new_expires_at,
        source="refreshed",
    )
