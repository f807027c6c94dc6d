"""
Commit range resolver
Decides which commit shas a push event introduced

Strategies, by what the payload carries:
- explicit:      payload lists its commits
- head_only:     commit list redacted (organization repos), track head only
- compare_range: a real before..head pair; the compare API replaces the
                 candidates with every commit in the range, and a failed
                 compare keeps what the payload offered
"""
import asyncio
import logging
from typing import List

import httpx

from gitpoor.models.schemas.github import (
    NULL_SHA,
    AccessCredential,
    CompareRange,
    ExplicitCommits,
    HeadOnly,
    NoCommits,
    PushEvent,
    PushPayload,
    RangeStrategy,
)
from gitpoor.services.github.client import GitHubAPIError, compare_commits

logger = logging.getLogger(__name__)


def classify_push_payload(payload: PushPayload) -> RangeStrategy:
    """Pick the strategy for a payload from the fields it has populated (pure)."""
    if payload.commits:
        candidates = list(payload.commits)
    elif payload.head:
        candidates = [payload.head]
    else:
        return NoCommits()

    if payload.before and payload.head and payload.before != NULL_SHA:
        return CompareRange(base=payload.before, head=payload.head, fallback_shas=candidates)

    if payload.commits:
        return ExplicitCommits(shas=candidates)
    return HeadOnly(head=payload.head)


async def resolve_commit_range(
    http_client: httpx.AsyncClient,
    credential: AccessCredential,
    event: PushEvent,
    semaphore: asyncio.Semaphore
) -> List[str]:
    """
    Candidate shas for one push event.

    Never raises for provider errors: a failed compare degrades to the
    payload's own candidates.
    """
    strategy = classify_push_payload(event.payload)

    if isinstance(strategy, NoCommits):
        logger.info(f"   {event.repo_name}: push without commits, nothing to resolve")
        return []

    if isinstance(strategy, ExplicitCommits):
        return strategy.shas

    if isinstance(strategy, HeadOnly):
        logger.info(f"   {event.repo_name}: commit list redacted, tracking head {strategy.head[:7]}")
        return [strategy.head]

    try:
        async with semaphore:
            shas = await compare_commits(
                http_client,
                credential.access_token,
                event.owner,
                event.repo,
                strategy.base,
                strategy.head,
            )
    except GitHubAPIError as e:
        logger.warning(
            f"   ⚠️  {event.repo_name}: compare {strategy.base[:7]}...{strategy.head[:7]} failed, "
            f"keeping {len(strategy.fallback_shas)} payload commits ({e})"
        )
        return strategy.fallback_shas

    logger.info(f"   {event.repo_name}: compare {strategy.base[:7]}...{strategy.head[:7]} → {len(shas)} commits")
    return shas
