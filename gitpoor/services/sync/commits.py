"""
Commit detail fetcher + run-local deduplication
Turns a candidate sha into a CommitRecord or a SkipReason
"""
import asyncio
import logging
from datetime import date, datetime
from typing import Set

import httpx

from gitpoor.models.schemas.github import AccessCredential, GitHubCommit, PushEvent
from gitpoor.models.schemas.sync import CommitOutcome, CommitRecord, SkipReason
from gitpoor.services.github.client import GitHubAPIError, get_commit
from gitpoor.services.sync.clock import logical_day
from gitpoor.services.sync.languages import classify_files

logger = logging.getLogger(__name__)


class CommitDeduplicator:
    """
    Set of shas already claimed in this run.

    claim() is an atomic check-and-mark: of several concurrent branches
    racing on the same sha exactly one gets True. A branch whose fetch fails
    releases its claim so another event pointing at the same sha may try.
    """

    def __init__(self):
        self._claimed: Set[str] = set()
        self._lock = asyncio.Lock()

    async def claim(self, sha: str) -> bool:
        async with self._lock:
            if sha in self._claimed:
                return False
            self._claimed.add(sha)
            return True

    async def release(self, sha: str):
        async with self._lock:
            self._claimed.discard(sha)

    def __contains__(self, sha: str) -> bool:
        return sha in self._claimed

    def __len__(self) -> int:
        return len(self._claimed)


def build_commit_record(
    user_id: str,
    event: PushEvent,
    commit: GitHubCommit,
    day: date,
    created_at: datetime
) -> CommitRecord:
    languages, extensions = classify_files(commit.filenames)
    return CommitRecord(
        user_id=user_id,
        commit_sha=commit.sha,
        repo_name=event.repo_name,
        committed_at=commit.author_date,
        commit_date=day,
        change_files=len(commit.filenames),
        additions=commit.additions,
        deletions=commit.deletions,
        languages=languages,
        file_extensions=extensions,
        is_private=not event.is_public,
        commit_url=commit.html_url,
        created_at=created_at,
    )


async def fetch_commit_outcome(
    http_client: httpx.AsyncClient,
    credential: AccessCredential,
    user_id: str,
    event: PushEvent,
    sha: str,
    day: date,
    dedup: CommitDeduplicator,
    semaphore: asyncio.Semaphore,
    now: datetime
) -> CommitOutcome:
    """
    Fetch one commit and decide whether it belongs to `day`.

    The author date is re-checked because a head-only fallback can point at an
    old commit (e.g. a branch pushed today with no new work on it).
    """
    if not await dedup.claim(sha):
        return CommitOutcome(sha=sha, skip_reason=SkipReason.DUPLICATE)

    try:
        async with semaphore:
            commit = await get_commit(http_client, credential.access_token, event.owner, event.repo, sha)
    except GitHubAPIError as e:
        await dedup.release(sha)
        logger.warning(f"   ❌ Commit lookup failed ({event.repo_name}@{sha[:7]}): {e}")
        return CommitOutcome(sha=sha, skip_reason=SkipReason.UPSTREAM_ERROR)

    if commit.author_date is None:
        logger.info(f"   ⚠️  {sha[:7]} has no author date, skipped")
        return CommitOutcome(sha=sha, skip_reason=SkipReason.MISSING_AUTHOR_DATE)

    if logical_day(commit.author_date) != day:
        logger.info(f"   ⚠️  {sha[:7]} authored on {logical_day(commit.author_date)}, not {day}; skipped")
        return CommitOutcome(sha=sha, skip_reason=SkipReason.NOT_TODAY)

    record = build_commit_record(user_id, event, commit, day, now)
    logger.info(f"   ✅ {sha[:7]} (+{record.additions}/-{record.deletions}) {record.languages}")
    return CommitOutcome(sha=sha, record=record)
