"""Tests for commit detail outcomes and run-local deduplication."""
import asyncio
from datetime import date

from httpx import Response

from conftest import GITHUB_API, NOW, USER_ID, commit_detail, push_event, sha
from gitpoor.models.schemas.github import AccessCredential
from gitpoor.models.schemas.sync import SkipReason
from gitpoor.services.github.client import parse_push_event
from gitpoor.services.sync.commits import CommitDeduplicator, fetch_commit_outcome

CREDENTIAL = AccessCredential(access_token="gho_token", source="session")
DAY = date(2026, 3, 10)


async def test_exactly_one_concurrent_claim_wins():
    dedup = CommitDeduplicator()

    results = await asyncio.gather(*[dedup.claim(sha("a")) for _ in range(20)])

    assert results.count(True) == 1
    assert sha("a") in dedup
    assert len(dedup) == 1


async def test_release_allows_a_new_claim():
    dedup = CommitDeduplicator()
    assert await dedup.claim(sha("a"))

    await dedup.release(sha("a"))

    assert sha("a") not in dedup
    assert await dedup.claim(sha("a"))


async def _outcome(http_client, dedup, commit_sha, event=None):
    event = event or parse_push_event(push_event(repo="octocat/app", public=False, commits=[commit_sha]))
    return await fetch_commit_outcome(
        http_client, CREDENTIAL, USER_ID, event, commit_sha, DAY, dedup, asyncio.Semaphore(4), NOW
    )


async def test_accepted_commit_builds_record(respx_mock, http_client):
    respx_mock.get(f"{GITHUB_API}/repos/octocat/app/commits/{sha('a')}").mock(
        return_value=Response(200, json=commit_detail(
            sha("a"), additions=30, deletions=5, files=["api/main.py", "web/App.tsx", "README"]
        ))
    )

    outcome = await _outcome(http_client, CommitDeduplicator(), sha("a"))

    assert outcome.accepted
    record = outcome.record
    assert record.user_id == USER_ID
    assert record.repo_name == "octocat/app"
    assert record.commit_date == DAY
    assert record.total_changes == 35
    assert record.change_files == 3
    assert record.languages == ["Python", "TypeScript"]
    assert record.file_extensions == ["py", "tsx", "readme"]
    assert record.is_private is True
    assert record.commit_url == f"https://github.com/octocat/app/commit/{sha('a')}"


async def test_duplicate_sha_is_not_fetched_twice(respx_mock, http_client):
    route = respx_mock.get(f"{GITHUB_API}/repos/octocat/app/commits/{sha('a')}").mock(
        return_value=Response(200, json=commit_detail(sha("a")))
    )
    dedup = CommitDeduplicator()

    first, second = await asyncio.gather(
        _outcome(http_client, dedup, sha("a")),
        _outcome(http_client, dedup, sha("a")),
    )

    assert sorted([first.accepted, second.accepted]) == [False, True]
    skipped = second if first.accepted else first
    assert skipped.skip_reason == SkipReason.DUPLICATE
    assert route.call_count == 1


async def test_commit_authored_on_another_day_is_skipped(respx_mock, http_client):
    respx_mock.get(f"{GITHUB_API}/repos/octocat/app/commits/{sha('a')}").mock(
        return_value=Response(200, json=commit_detail(sha("a"), date="2026-03-05T09:00:00Z"))
    )

    outcome = await _outcome(http_client, CommitDeduplicator(), sha("a"))

    assert outcome.skip_reason == SkipReason.NOT_TODAY


async def test_commit_without_author_date_is_skipped(respx_mock, http_client):
    respx_mock.get(f"{GITHUB_API}/repos/octocat/app/commits/{sha('a')}").mock(
        return_value=Response(200, json=commit_detail(sha("a"), date=None))
    )

    outcome = await _outcome(http_client, CommitDeduplicator(), sha("a"))

    assert outcome.skip_reason == SkipReason.MISSING_AUTHOR_DATE


async def test_failed_lookup_releases_claim(respx_mock, http_client):
    respx_mock.get(f"{GITHUB_API}/repos/octocat/app/commits/{sha('a')}").mock(return_value=Response(502))
    dedup = CommitDeduplicator()

    outcome = await _outcome(http_client, dedup, sha("a"))

    assert outcome.skip_reason == SkipReason.UPSTREAM_ERROR
    assert sha("a") not in dedup
