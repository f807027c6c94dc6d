"""Tests for push payload classification and commit range resolution."""
import asyncio

from httpx import Response

from conftest import GITHUB_API, push_event, sha
from gitpoor.models.schemas.github import (
    NULL_SHA,
    AccessCredential,
    CompareRange,
    ExplicitCommits,
    HeadOnly,
    NoCommits,
    PushPayload,
)
from gitpoor.services.github.client import parse_push_event
from gitpoor.services.sync.ranges import classify_push_payload, resolve_commit_range

CREDENTIAL = AccessCredential(access_token="gho_token", source="session")


# ============================================================================
# CLASSIFICATION (pure)
# ============================================================================

def test_explicit_commits_without_before():
    strategy = classify_push_payload(PushPayload(commits=[sha("a"), sha("b")]))

    assert isinstance(strategy, ExplicitCommits)
    assert strategy.shas == [sha("a"), sha("b")]


def test_redacted_commit_list_tracks_head():
    strategy = classify_push_payload(PushPayload(head=sha("d")))

    assert isinstance(strategy, HeadOnly)
    assert strategy.head == sha("d")


def test_before_and_head_use_compare_with_payload_fallback():
    strategy = classify_push_payload(PushPayload(commits=[sha("d")], before=sha("a"), head=sha("d")))

    assert isinstance(strategy, CompareRange)
    assert strategy.base == sha("a")
    assert strategy.head == sha("d")
    assert strategy.fallback_shas == [sha("d")]


def test_redacted_range_falls_back_to_head():
    strategy = classify_push_payload(PushPayload(before=sha("a"), head=sha("d")))

    assert isinstance(strategy, CompareRange)
    assert strategy.fallback_shas == [sha("d")]


def test_new_branch_push_does_not_compare():
    strategy = classify_push_payload(PushPayload(commits=[sha("e")], before=NULL_SHA, head=sha("e")))

    assert isinstance(strategy, ExplicitCommits)


def test_empty_payload():
    assert isinstance(classify_push_payload(PushPayload()), NoCommits)


# ============================================================================
# RESOLUTION
# ============================================================================

async def test_compare_replaces_candidates(respx_mock, http_client):
    respx_mock.get(f"{GITHUB_API}/repos/octocat/app/compare/{sha('a')}...{sha('d')}").mock(
        return_value=Response(200, json={"commits": [{"sha": sha("b")}, {"sha": sha("c")}, {"sha": sha("d")}]})
    )
    event = parse_push_event(push_event(commits=[sha("d")], before=sha("a"), head=sha("d")))

    shas = await resolve_commit_range(http_client, CREDENTIAL, event, asyncio.Semaphore(2))

    assert shas == [sha("b"), sha("c"), sha("d")]


async def test_failed_compare_keeps_payload_candidates(respx_mock, http_client):
    respx_mock.get(f"{GITHUB_API}/repos/octocat/app/compare/{sha('a')}...{sha('d')}").mock(
        return_value=Response(404, json={"message": "Not Found"})
    )
    event = parse_push_event(push_event(commits=[sha("c"), sha("d")], before=sha("a"), head=sha("d")))

    shas = await resolve_commit_range(http_client, CREDENTIAL, event, asyncio.Semaphore(2))

    assert shas == [sha("c"), sha("d")]


async def test_explicit_and_head_only_make_no_calls(respx_mock, http_client):
    explicit = parse_push_event(push_event(commits=[sha("a")]))
    head_only = parse_push_event(push_event(head=sha("d")))

    assert await resolve_commit_range(http_client, CREDENTIAL, explicit, asyncio.Semaphore(2)) == [sha("a")]
    assert await resolve_commit_range(http_client, CREDENTIAL, head_only, asyncio.Semaphore(2)) == [sha("d")]
    assert len(respx_mock.calls) == 0
