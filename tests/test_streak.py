"""Tests for the once-per-day streak transition."""
from datetime import date

import pytest

from conftest import NOW, USER_ID
from gitpoor.core.errors import StorageFailure
from gitpoor.models.schemas.sync import StreakState
from gitpoor.services.sync.streak import advance_streak, compute_next_streak, last_synced_day

TODAY = date(2026, 3, 10)


def _set_streak(supabase, current, longest, last_streak_date=None):
    supabase.row("users", id=USER_ID).update({
        "current_streak": current,
        "longest_streak": longest,
        "last_streak_date": last_streak_date,
    })


# ============================================================================
# PURE TRANSITION
# ============================================================================

def test_consecutive_day_increments():
    state, changed = compute_next_streak(StreakState(current_streak=3, longest_streak=5), date(2026, 3, 9), TODAY)

    assert changed
    assert state == StreakState(current_streak=4, longest_streak=5)


def test_gap_resets_to_one():
    state, changed = compute_next_streak(StreakState(current_streak=7, longest_streak=7), date(2026, 3, 8), TODAY)

    assert changed
    assert state == StreakState(current_streak=1, longest_streak=7)


def test_same_day_is_a_no_op():
    before = StreakState(current_streak=2, longest_streak=4)

    state, changed = compute_next_streak(before, TODAY, TODAY)

    assert not changed
    assert state == before


def test_first_sync_starts_at_one():
    state, changed = compute_next_streak(StreakState(), None, TODAY)

    assert changed
    assert state == StreakState(current_streak=1, longest_streak=1)


def test_longest_follows_current():
    state, _ = compute_next_streak(StreakState(current_streak=5, longest_streak=5), date(2026, 3, 9), TODAY)

    assert state.longest_streak == 6


def test_last_synced_day_reads_streak_date():
    assert last_synced_day({"last_streak_date": "2026-03-08"}) == date(2026, 3, 8)


def test_uncredited_streak_has_no_last_day():
    assert last_synced_day({"last_streak_date": None}) is None
    assert last_synced_day({}) is None


# ============================================================================
# PERSISTED ADVANCE
# ============================================================================

async def test_advance_after_yesterday(supabase):
    _set_streak(supabase, 3, 5, "2026-03-09")

    state = await advance_streak(supabase, USER_ID, NOW)

    assert state == StreakState(current_streak=4, longest_streak=5)
    row = supabase.row("users", id=USER_ID)
    assert row["current_streak"] == 4
    assert row["last_streak_date"] == "2026-03-10"
    assert supabase.row("github_infos", user_id=USER_ID)["last_sync_date"] == NOW.isoformat()


async def test_advance_after_two_day_gap(supabase):
    _set_streak(supabase, 9, 9, "2026-03-08")

    state = await advance_streak(supabase, USER_ID, NOW)

    assert state == StreakState(current_streak=1, longest_streak=9)


async def test_second_advance_same_day_is_idempotent(supabase):
    _set_streak(supabase, 3, 5, "2026-03-09")

    first = await advance_streak(supabase, USER_ID, NOW)
    second = await advance_streak(supabase, USER_ID, NOW)

    assert first == second == StreakState(current_streak=4, longest_streak=5)
    assert supabase.row("users", id=USER_ID)["current_streak"] == 4


async def test_same_day_cursor_does_not_block_first_credit(supabase):
    # an empty sync earlier today already moved the cursor
    supabase.row("github_infos", user_id=USER_ID)["last_sync_date"] = "2026-03-10T00:00:00+00:00"

    state = await advance_streak(supabase, USER_ID, NOW)

    assert state == StreakState(current_streak=1, longest_streak=1)
    assert supabase.row("users", id=USER_ID)["last_streak_date"] == "2026-03-10"


async def test_missing_users_row_is_not_reported_as_credited(supabase, caplog):
    supabase.tables["users"] = []

    with caplog.at_level("WARNING", logger="gitpoor.services.sync.database"):
        state = await advance_streak(supabase, USER_ID, NOW)

    assert state == StreakState(current_streak=0, longest_streak=0)
    assert "No users row" in caplog.text


async def test_failed_streak_write_raises(supabase):
    supabase.failing_tables.add("users")

    with pytest.raises(StorageFailure):
        await advance_streak(supabase, USER_ID, NOW)
