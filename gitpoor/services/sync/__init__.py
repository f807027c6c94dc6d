"""
Commit Sync Engine
Today's GitHub commits → deduplicated ledger rows → once-per-day streak
"""
from gitpoor.services.sync.clock import logical_day, parse_instant
from gitpoor.services.sync.orchestrator import SyncStage, run_commit_sync
from gitpoor.services.sync.streak import advance_streak, compute_next_streak, get_streak
from gitpoor.services.sync.sync_check import should_run_auto_sync
from gitpoor.services.sync.tokens import current_token

__all__ = [
    "logical_day",
    "parse_instant",
    "SyncStage",
    "run_commit_sync",
    "advance_streak",
    "compute_next_streak",
    "get_streak",
    "should_run_auto_sync",
    "current_token",
]
