"""
Streak engine
Advances current/longest streak at most once per logical day

The "last synchronized day" is the day the streak was last credited
(users.last_streak_date, written in the same row update as the counters).
A null last_streak_date means the streak was never credited. The sync cursor
(github_infos.last_sync_date) is never consulted: it also moves on runs
without commits, so it says nothing about the streak.
"""
import logging
from datetime import date, datetime
from typing import Any, Dict, Optional, Tuple

from supabase import Client

from gitpoor.models.schemas.sync import StreakState
from gitpoor.services.sync.clock import logical_day, previous_day, utc_now
from gitpoor.services.sync.database import get_streak_row, save_streak_row, touch_last_sync

logger = logging.getLogger(__name__)


def last_synced_day(streak_row: Dict[str, Any]) -> Optional[date]:
    """Day the streak was last credited, or None for a first-ever sync."""
    if streak_row.get("last_streak_date"):
        return date.fromisoformat(str(streak_row["last_streak_date"])[:10])
    return None


def compute_next_streak(state: StreakState, last_day: Optional[date], today: date) -> Tuple[StreakState, bool]:
    """
    Pure streak transition.

    Returns:
        (new state, whether anything changed)

    - last_day == today:      unchanged (already credited today)
    - last_day == today - 1:  current + 1
    - otherwise:              current = 1 (gap or first sync)
    """
    if last_day == today:
        return state, False

    if last_day == previous_day(today):
        current = state.current_streak + 1
    else:
        current = 1

    return StreakState(current_streak=current, longest_streak=max(current, state.longest_streak)), True


async def get_streak(supabase: Client, user_id: str) -> StreakState:
    row = await get_streak_row(supabase, user_id)
    return StreakState(current_streak=row["current_streak"], longest_streak=row["longest_streak"])


async def advance_streak(supabase: Client, user_id: str, now: Optional[datetime] = None) -> StreakState:
    """
    Credit today's streak for `user_id`; safe to call any number of times per day.

    Args:
        supabase: Supabase client instance
        user_id: User whose streak to advance
        now: Current instant (tests)

    Returns:
        StreakState after the call

    Raises:
        StorageFailure: If reading or writing the streak/cursor rows fails
    """
    now = now or utc_now()
    today = logical_day(now)

    row = await get_streak_row(supabase, user_id)
    state = StreakState(current_streak=row["current_streak"], longest_streak=row["longest_streak"])
    last_day = last_synced_day(row)

    new_state, changed = compute_next_streak(state, last_day, today)

    if changed and not await save_streak_row(supabase, user_id, new_state.current_streak, new_state.longest_streak, today):
        new_state = state
    elif changed:
        logger.info(
            f"🔥 Streak for {user_id[:8]}...: {state.current_streak} → {new_state.current_streak} "
            f"(longest {new_state.longest_streak}, last day {last_day}, today {today})"
        )
    else:
        logger.info(f"Streak for {user_id[:8]}... already credited on {today}, unchanged ({state.current_streak})")

    await touch_last_sync(supabase, user_id, now)
    return new_state
