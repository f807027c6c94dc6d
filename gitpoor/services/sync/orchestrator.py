"""
Commit sync orchestration engine
One request/response sync of today's GitHub commits into the ledger + streak

Stages:
    START → TOKEN_RESOLVED → EVENTS_FETCHED → (NO_ACTIVITY | RANGES_RESOLVED)
          → DETAILS_FETCHED → PERSISTED → STREAK_ADVANCED → SUMMARIZED
Any stage may end in FAILED. Only credential resolution, the activity listing
and storage writes are run-fatal; per-event and per-commit failures are
absorbed into SkipReasons.
"""
import asyncio
import logging
from collections import Counter
from datetime import datetime
from enum import Enum
from typing import List, Optional

import httpx
from supabase import Client

from gitpoor.core.config import settings
from gitpoor.core.errors import AppError
from gitpoor.models.schemas.auth import UserContext
from gitpoor.models.schemas.github import AccessCredential, PushEvent
from gitpoor.models.schemas.sync import CommitOutcome, CommitRecord, SyncSummary
from gitpoor.services.sync.activity import recent_push_events
from gitpoor.services.sync.clock import logical_day, utc_now
from gitpoor.services.sync.commits import CommitDeduplicator, fetch_commit_outcome
from gitpoor.services.sync.database import touch_last_sync, upsert_commits
from gitpoor.services.sync.ranges import resolve_commit_range
from gitpoor.services.sync.streak import advance_streak, get_streak
from gitpoor.services.sync.tokens import current_token

logger = logging.getLogger(__name__)


class SyncStage(str, Enum):
    START = "start"
    TOKEN_RESOLVED = "token_resolved"
    EVENTS_FETCHED = "events_fetched"
    NO_ACTIVITY = "no_activity"
    RANGES_RESOLVED = "ranges_resolved"
    DETAILS_FETCHED = "details_fetched"
    PERSISTED = "persisted"
    STREAK_ADVANCED = "streak_advanced"
    SUMMARIZED = "summarized"
    FAILED = "failed"


class SyncRun:
    """State of a single sync run (never shared between requests)."""

    def __init__(self, user: UserContext, now: datetime):
        self.user = user
        self.now = now
        self.day = logical_day(now)
        self.stage = SyncStage.START
        self.dedup = CommitDeduplicator()
        self.semaphore = asyncio.Semaphore(settings.github_max_concurrency)

    def advance(self, stage: SyncStage, detail: str = ""):
        self.stage = stage
        logger.info(f"[SYNC {self.user.user_id[:8]}] {stage.value.upper()} {detail}".rstrip())


async def _process_event(
    http_client: httpx.AsyncClient,
    credential: AccessCredential,
    run: SyncRun,
    event: PushEvent
) -> List[CommitOutcome]:
    """Resolve one event's range, then fetch all its commits concurrently."""
    shas = await resolve_commit_range(http_client, credential, event, run.semaphore)

    return await asyncio.gather(*[
        fetch_commit_outcome(
            http_client,
            credential,
            run.user.user_id,
            event,
            sha,
            run.day,
            run.dedup,
            run.semaphore,
            run.now,
        )
        for sha in shas
    ])


async def run_commit_sync(
    supabase: Client,
    http_client: httpx.AsyncClient,
    user: UserContext,
    now: Optional[datetime] = None
) -> SyncSummary:
    """
    Sync today's commits for the caller.

    Args:
        supabase: Supabase client instance
        http_client: Async HTTP client instance (shared by the whole fan-out)
        user: Request-scoped caller
        now: Current instant (tests)

    Returns:
        SyncSummary for today's logical day

    Raises:
        Unauthenticated: No usable GitHub token
        UpstreamUnavailable: Activity listing failed
        StorageFailure: Ledger, streak or cursor write failed
    """
    run = SyncRun(user, now or utc_now())
    logger.info(f"🚀 Starting commit sync for user {user.user_id[:8]}... (day {run.day})")

    try:
        credential = await current_token(supabase, http_client, user, run.now)
        run.advance(SyncStage.TOKEN_RESOLVED, f"source={credential.source}")

        events = await recent_push_events(http_client, credential, user, run.day)
        run.advance(SyncStage.EVENTS_FETCHED, f"{len(events)} push events")

        if not events:
            streak = await get_streak(supabase, user.user_id)
            await touch_last_sync(supabase, user.user_id, run.now)
            run.advance(SyncStage.NO_ACTIVITY)
            return SyncSummary(date=run.day, streak=streak)

        per_event = await asyncio.gather(*[
            _process_event(http_client, credential, run, event) for event in events
        ])
        run.advance(SyncStage.RANGES_RESOLVED)

        outcomes = [outcome for event_outcomes in per_event for outcome in event_outcomes]
        records: List[CommitRecord] = [outcome.record for outcome in outcomes if outcome.accepted]
        skipped = Counter(outcome.skip_reason.value for outcome in outcomes if not outcome.accepted)
        run.advance(SyncStage.DETAILS_FETCHED, f"{len(records)} accepted, skipped={dict(skipped)}")

        if records:
            await upsert_commits(supabase, records)
            run.advance(SyncStage.PERSISTED, f"{len(records)} commits")

            streak = await advance_streak(supabase, user.user_id, run.now)
            run.advance(SyncStage.STREAK_ADVANCED, f"current={streak.current_streak} longest={streak.longest_streak}")
        else:
            streak = await get_streak(supabase, user.user_id)
            await touch_last_sync(supabase, user.user_id, run.now)

        summary = SyncSummary.from_records(run.day, records, streak)
        run.advance(
            SyncStage.SUMMARIZED,
            f"commits={summary.commit_count} changes={summary.total_changes} languages={summary.languages}"
        )
        return summary

    except AppError as e:
        run.advance(SyncStage.FAILED, f"{e.code.value}: {e.message}")
        raise
