"""
Database helper functions for the sync engine
Token records, sync cursor, streak rows and the commit ledger (Supabase)

Tables:
- github_infos: user_id, access_token, refresh_token, token_expires_at, last_sync_date
- users:        id, current_streak, longest_streak, last_streak_date
- commits:      one row per (user_id, commit_sha)
"""
import logging
from datetime import date, datetime
from typing import Any, Dict, List, Optional

from supabase import Client

from gitpoor.core.errors import StorageFailure
from gitpoor.models.schemas.sync import CommitRecord

logger = logging.getLogger(__name__)

COMMITS_TABLE = "commits"
USERS_TABLE = "users"
GITHUB_INFOS_TABLE = "github_infos"


def _single(result) -> Optional[Dict[str, Any]]:
    # maybe_single() yields None (not an empty response) when no row matches
    if result is None or not result.data:
        return None
    data = result.data
    return data[0] if isinstance(data, list) else data


# ============================================================================
# TOKEN RECORD + SYNC CURSOR (github_infos)
# ============================================================================

async def get_github_info(supabase: Client, user_id: str) -> Optional[Dict[str, Any]]:
    """Token record and last_sync_date for a user, or None if never connected."""
    try:
        result = supabase.table(GITHUB_INFOS_TABLE)\
            .select("user_id, access_token, refresh_token, token_expires_at, last_sync_date")\
            .eq("user_id", user_id)\
            .maybe_single()\
            .execute()
    except Exception as e:
        logger.error(f"Failed to read github_infos for {user_id}: {e}")
        raise StorageFailure("Failed to read GitHub connection info.", details=str(e)) from e

    return _single(result)


async def save_github_tokens(
    supabase: Client,
    user_id: str,
    access_token: str,
    refresh_token: Optional[str],
    expires_at: Optional[datetime]
):
    """Persist a refreshed token pair (refresh_token=None keeps the stored one)."""
    values: Dict[str, Any] = {
        "access_token": access_token,
        "token_expires_at": expires_at.isoformat() if expires_at else None,
    }
    if refresh_token:
        values["refresh_token"] = refresh_token

    try:
        supabase.table(GITHUB_INFOS_TABLE).update(values).eq("user_id", user_id).execute()
    except Exception as e:
        logger.error(f"Failed to save refreshed GitHub token for {user_id}: {e}")
        raise StorageFailure("Failed to store refreshed GitHub token.", details=str(e)) from e

    logger.info(f"Saved refreshed GitHub token for user {user_id[:8]}...")


async def touch_last_sync(supabase: Client, user_id: str, synced_at: datetime):
    """Move the sync cursor to `synced_at`."""
    try:
        supabase.table(GITHUB_INFOS_TABLE)\
            .update({"last_sync_date": synced_at.isoformat()})\
            .eq("user_id", user_id)\
            .execute()
    except Exception as e:
        logger.error(f"Failed to update last_sync_date for {user_id}: {e}")
        raise StorageFailure("Failed to record sync time.", details=str(e)) from e


# ============================================================================
# STREAK ROW (users)
# ============================================================================

async def get_streak_row(supabase: Client, user_id: str) -> Dict[str, Any]:
    """current_streak, longest_streak, last_streak_date (zeros when the row has none)."""
    try:
        result = supabase.table(USERS_TABLE)\
            .select("current_streak, longest_streak, last_streak_date")\
            .eq("id", user_id)\
            .maybe_single()\
            .execute()
    except Exception as e:
        logger.error(f"Failed to read streak for {user_id}: {e}")
        raise StorageFailure("Failed to read streak info.", details=str(e)) from e

    row = _single(result) or {}
    return {
        "current_streak": row.get("current_streak") or 0,
        "longest_streak": row.get("longest_streak") or 0,
        "last_streak_date": row.get("last_streak_date"),
    }


async def save_streak_row(
    supabase: Client,
    user_id: str,
    current_streak: int,
    longest_streak: int,
    streak_date: date
) -> bool:
    """
    Write the counters and the credited day in one row update.

    Returns:
        False when no users row matched (nothing was persisted)
    """
    try:
        result = supabase.table(USERS_TABLE)\
            .update({
                "current_streak": current_streak,
                "longest_streak": longest_streak,
                "last_streak_date": streak_date.isoformat(),
            })\
            .eq("id", user_id)\
            .execute()
    except Exception as e:
        logger.error(f"Failed to update streak for {user_id}: {e}")
        raise StorageFailure("Failed to update streak.", details=str(e)) from e

    if result is None or not result.data:
        logger.warning(f"⚠️  No users row for {user_id}; streak {current_streak} on {streak_date} was not saved")
        return False
    return True


# ============================================================================
# COMMIT LEDGER (commits)
# ============================================================================

async def upsert_commits(supabase: Client, records: List[CommitRecord]) -> int:
    """
    Batched upsert keyed by (user_id, commit_sha).

    Re-inserting a sha overwrites the row with the latest values, so a repeated
    sync never creates duplicates.

    Returns:
        Number of rows written
    """
    if not records:
        return 0

    rows = [record.to_row() for record in records]
    try:
        supabase.table(COMMITS_TABLE).upsert(rows, on_conflict="user_id,commit_sha").execute()
    except Exception as e:
        logger.error(f"❌ Failed to upsert {len(rows)} commits: {e}")
        raise StorageFailure("Failed to save commits.", details=str(e)) from e

    logger.info(f"💾 Upserted {len(rows)} commits")
    return len(rows)


async def get_commits_for_day(supabase: Client, user_id: str, day: date) -> List[Dict[str, Any]]:
    """All ledger rows of one logical day, newest committed_at first."""
    try:
        result = supabase.table(COMMITS_TABLE)\
            .select("repo_name, commit_sha, commit_url, total_changes, additions, deletions, languages, committed_at, commit_date")\
            .eq("user_id", user_id)\
            .eq("commit_date", day.isoformat())\
            .order("committed_at", desc=True)\
            .execute()
    except Exception as e:
        logger.error(f"Failed to read commits for {user_id} on {day}: {e}")
        raise StorageFailure("Failed to load commits.", details=str(e)) from e

    return result.data or []


async def get_commit_stats_in_range(supabase: Client, user_id: str, start: date, end: date) -> List[Dict[str, Any]]:
    """commit_date + total_changes of every row with start <= commit_date <= end."""
    try:
        result = supabase.table(COMMITS_TABLE)\
            .select("commit_date, total_changes")\
            .eq("user_id", user_id)\
            .gte("commit_date", start.isoformat())\
            .lte("commit_date", end.isoformat())\
            .execute()
    except Exception as e:
        logger.error(f"Failed to read commit history for {user_id}: {e}")
        raise StorageFailure("Failed to load commit history.", details=str(e)) from e

    return result.data or []
