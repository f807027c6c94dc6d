"""
Sync Routes
On-demand GitHub commit sync for the authenticated caller
"""
import logging
import httpx
from fastapi import APIRouter, Depends, Query, Request
from supabase import Client

from gitpoor.core.config import settings
from gitpoor.core.dependencies import get_http_client, get_supabase
from gitpoor.core.security import get_current_user_context
from gitpoor.middleware.rate_limit import limiter
from gitpoor.models.schemas.auth import UserContext
from gitpoor.models.schemas.sync import SyncResponse, SyncStatusResponse
from gitpoor.services.sync.database import get_github_info
from gitpoor.services.sync.orchestrator import run_commit_sync
from gitpoor.services.sync.sync_check import should_run_auto_sync

logger = logging.getLogger(__name__)

router = APIRouter(prefix="/api/commits/sync", tags=["sync"])


@router.post("", response_model=SyncResponse)
@limiter.limit(settings.sync_rate_limit)
async def sync_commits(
    request: Request,  # Required for rate limiting
    user: UserContext = Depends(get_current_user_context),
    supabase: Client = Depends(get_supabase),
    http_client: httpx.AsyncClient = Depends(get_http_client)
):
    """
    Pull today's GitHub commits, store them and credit today's streak.

    Runs synchronously: the response is sent when the whole sync is done.
    A day without pushes is a normal result (commit_count 0, is_success false).
    """
    logger.info(f"Sync requested by user {user.user_id[:8]}...")

    summary = await run_commit_sync(supabase, http_client, user)

    message = "Sync complete" if summary.is_success else "No commits today"
    return SyncResponse(success=True, message=message, data=summary)


@router.get("/status", response_model=SyncStatusResponse)
async def sync_status(
    scope: str = Query("personal", pattern="^(personal|group)$", description="personal (60 min) or group (180 min) cool-down"),
    user: UserContext = Depends(get_current_user_context),
    supabase: Client = Depends(get_supabase)
):
    """Whether the dashboard should auto-sync now, based on the last sync time."""
    threshold = settings.group_sync_threshold_minutes if scope == "group" else settings.auto_sync_threshold_minutes

    info = await get_github_info(supabase, user.user_id) or {}
    last_sync = info.get("last_sync_date")

    return SyncStatusResponse(
        last_sync_date=last_sync,
        should_sync=should_run_auto_sync(last_sync, threshold),
        threshold_minutes=threshold,
    )
