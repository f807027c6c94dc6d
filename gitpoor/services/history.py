"""
Commit history reads
Calendar aggregates and the today card, computed from the ledger only
"""
import logging
from datetime import date, datetime
from typing import Dict, List, Optional

from supabase import Client

from gitpoor.core.errors import ValidationFailed
from gitpoor.models.schemas.commits import CommitDetail, DailyStat
from gitpoor.models.schemas.sync import StreakState, SyncSummary
from gitpoor.services.sync.clock import logical_day, utc_now
from gitpoor.services.sync.database import get_commit_stats_in_range, get_commits_for_day
from gitpoor.services.sync.streak import get_streak

logger = logging.getLogger(__name__)


def parse_day(value: Optional[str], name: str) -> date:
    """Parse a YYYY-MM-DD query parameter or raise a VALIDATION error."""
    if not value:
        raise ValidationFailed(f"'{name}' is required (YYYY-MM-DD).")
    try:
        return date.fromisoformat(value)
    except ValueError:
        raise ValidationFailed(f"'{name}' must be a date in YYYY-MM-DD format.", details={name: value})


async def get_history_map(supabase: Client, user_id: str, start: date, end: date) -> Dict[str, DailyStat]:
    """
    Per-day commit count and total_changes for start..end (inclusive).

    Days without commits are absent from the map.
    """
    if start > end:
        raise ValidationFailed("'from' must not be after 'to'.", details={"from": str(start), "to": str(end)})

    rows = await get_commit_stats_in_range(supabase, user_id, start, end)

    history: Dict[str, DailyStat] = {}
    for row in rows:
        key = str(row["commit_date"])[:10]
        stat = history.setdefault(key, DailyStat(commit_date=key))
        stat.commit_count += 1
        stat.total_changes += row.get("total_changes") or 0

    logger.debug(f"History {start}..{end} for {user_id[:8]}...: {len(history)} active days")
    return history


async def get_commits_on(supabase: Client, user_id: str, day: date) -> List[CommitDetail]:
    rows = await get_commits_for_day(supabase, user_id, day)
    return [CommitDetail(**row) for row in rows]


async def get_today_summary(supabase: Client, user_id: str, now: Optional[datetime] = None) -> SyncSummary:
    """Today's card from stored rows (no GitHub calls)."""
    day = logical_day(now or utc_now())
    rows = await get_commits_for_day(supabase, user_id, day)
    streak: StreakState = await get_streak(supabase, user_id)

    languages: List[str] = []
    for row in rows:
        for language in row.get("languages") or []:
            if language not in languages:
                languages.append(language)

    return SyncSummary(
        date=day,
        commit_count=len(rows),
        total_changes=sum(row.get("total_changes") or 0 for row in rows),
        languages=languages,
        is_success=len(rows) > 0,
        streak=streak,
    )
