"""
Commit Routes
Read-only views over the caller's commit ledger
"""
import logging
from typing import Dict, List, Optional
from fastapi import APIRouter, Depends, Query
from supabase import Client

from gitpoor.core.dependencies import get_supabase
from gitpoor.core.security import get_current_user_id
from gitpoor.models.schemas.commits import CommitDetail, DailyStat
from gitpoor.models.schemas.sync import SyncSummary
from gitpoor.services.history import get_commits_on, get_history_map, get_today_summary, parse_day

logger = logging.getLogger(__name__)

router = APIRouter(prefix="/api/commits", tags=["commits"])


@router.get("/today", response_model=SyncSummary)
async def today_commits(
    user_id: str = Depends(get_current_user_id),
    supabase: Client = Depends(get_supabase)
):
    """Today's summary card, computed from stored commits (no GitHub calls)."""
    return await get_today_summary(supabase, user_id)


@router.get("/history")
async def commit_history(
    from_: Optional[str] = Query(None, alias="from", description="Start date (YYYY-MM-DD)"),
    to: Optional[str] = Query(None, description="End date (YYYY-MM-DD)"),
    user_id: str = Depends(get_current_user_id),
    supabase: Client = Depends(get_supabase)
):
    """
    Per-day commit stats for the calendar view.

    Example: /api/commits/history?from=2026-02-01&to=2026-02-28
    Response: {"success": true, "data": {"2026-02-01": {"commit_date", "commit_count", "total_changes"}}}
    """
    start = parse_day(from_, "from")
    end = parse_day(to, "to")

    history: Dict[str, DailyStat] = await get_history_map(supabase, user_id, start, end)
    return {"success": True, "data": {day: stat.model_dump(mode="json") for day, stat in history.items()}}


@router.get("", response_model=List[CommitDetail])
async def commits_on_day(
    date: Optional[str] = Query(None, description="Logical day (YYYY-MM-DD)"),
    user_id: str = Depends(get_current_user_id),
    supabase: Client = Depends(get_supabase)
):
    """All commits of one logical day, newest first."""
    day = parse_day(date, "date")
    return await get_commits_on(supabase, user_id, day)
