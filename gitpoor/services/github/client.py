"""
GitHub REST client
Activity feed, commit detail and compare calls used by the sync engine

All calls take the request's shared httpx.AsyncClient and an access token.
Failures raise GitHubAPIError; callers decide whether a failure is fatal
(activity listing) or a per-item skip (commit detail, compare).
"""
import logging
from typing import Any, Dict, List, Optional

import httpx
from pydantic import ValidationError

from gitpoor.core.config import settings
from gitpoor.models.schemas.github import GitHubCommit, PushEvent, PushPayload

logger = logging.getLogger(__name__)

PUSH_EVENT = "PushEvent"


class GitHubAPIError(Exception):
    """A GitHub call failed (transport error, non-2xx status or unusable body)."""

    def __init__(self, message: str, status_code: Optional[int] = None):
        super().__init__(message)
        self.status_code = status_code

    @property
    def is_auth_error(self) -> bool:
        return self.status_code == 401


# ============================================================================
# LOW-LEVEL REQUEST
# ============================================================================

def _headers(access_token: str) -> Dict[str, str]:
    return {
        "Accept": "application/vnd.github+json",
        "Authorization": f"Bearer {access_token}",
        "X-GitHub-Api-Version": "2022-11-28",
        "User-Agent": "gitpoor-sync",
    }


async def _get_json(
    http_client: httpx.AsyncClient,
    access_token: str,
    path: str,
    params: Optional[Dict[str, Any]] = None
) -> Any:
    url = f"{settings.github_api_url.rstrip('/')}{path}"

    try:
        response = await http_client.get(url, headers=_headers(access_token), params=params)
    except httpx.HTTPError as e:
        raise GitHubAPIError(f"GET {path} failed: {type(e).__name__}: {e}") from e

    remaining = response.headers.get("X-RateLimit-Remaining")
    if remaining is not None and remaining.isdigit() and int(remaining) < 50:
        logger.warning(f"⚠️  GitHub rate limit low: {remaining} requests remaining")

    if response.status_code >= 400:
        raise GitHubAPIError(
            f"GET {path} returned {response.status_code}: {response.text[:200]}",
            status_code=response.status_code
        )

    try:
        return response.json()
    except ValueError as e:
        raise GitHubAPIError(f"GET {path} returned invalid JSON", status_code=response.status_code) from e


# ============================================================================
# USER / ACTIVITY
# ============================================================================

async def get_authenticated_login(http_client: httpx.AsyncClient, access_token: str) -> str:
    """Login of the token's owner (used when the session carries no user_name)."""
    data = await _get_json(http_client, access_token, "/user")
    login = data.get("login") if isinstance(data, dict) else None
    if not login:
        raise GitHubAPIError("GET /user returned no login")
    return login


async def list_user_events(
    http_client: httpx.AsyncClient,
    access_token: str,
    username: str,
    per_page: Optional[int] = None
) -> List[Dict[str, Any]]:
    """
    One page of the authenticated user's recent activity (public + private).

    Args:
        http_client: Async HTTP client instance
        access_token: GitHub token of `username`
        username: GitHub login
        per_page: Page size (defaults to settings.github_events_per_page)

    Returns:
        Raw event dictionaries, newest first
    """
    data = await _get_json(
        http_client,
        access_token,
        f"/users/{username}/events",
        params={"per_page": per_page or settings.github_events_per_page}
    )
    if not isinstance(data, list):
        raise GitHubAPIError(f"Unexpected events payload type: {type(data).__name__}")
    return data


def parse_push_event(raw: Dict[str, Any]) -> Optional[PushEvent]:
    """
    Convert a raw activity event into a PushEvent.

    Returns None for non-push events and for events too malformed to use.
    """
    if raw.get("type") != PUSH_EVENT:
        return None

    repo_name = (raw.get("repo") or {}).get("name")
    created_at = raw.get("created_at")
    if not repo_name or not created_at:
        logger.debug(f"Skipping malformed push event {raw.get('id')}")
        return None

    payload = raw.get("payload") or {}
    shas = [c.get("sha") for c in payload.get("commits") or [] if c.get("sha")]

    return PushEvent(
        id=str(raw.get("id", "")),
        type=PUSH_EVENT,
        repo_name=repo_name,
        is_public=bool(raw.get("public", True)),
        created_at=created_at,
        payload=PushPayload(
            commits=shas,
            before=payload.get("before"),
            head=payload.get("head"),
        ),
    )


# ============================================================================
# COMMITS
# ============================================================================

async def get_commit(
    http_client: httpx.AsyncClient,
    access_token: str,
    owner: str,
    repo: str,
    ref: str
) -> GitHubCommit:
    """GET /repos/{owner}/{repo}/commits/{ref} → stats, files and author date."""
    data = await _get_json(http_client, access_token, f"/repos/{owner}/{repo}/commits/{ref}")
    if not isinstance(data, dict):
        raise GitHubAPIError(f"Commit {ref[:7]} returned a {type(data).__name__}, expected an object")

    try:
        stats = data.get("stats") or {}
        author = (data.get("commit") or {}).get("author") or {}

        return GitHubCommit(
            sha=data.get("sha") or ref,
            html_url=data.get("html_url"),
            author_date=author.get("date"),
            additions=stats.get("additions") or 0,
            deletions=stats.get("deletions") or 0,
            filenames=[f["filename"] for f in data.get("files") or [] if f.get("filename")],
        )
    except (ValidationError, AttributeError, TypeError, KeyError) as e:
        raise GitHubAPIError(f"Commit {ref[:7]} returned an unusable body: {e}") from e


async def compare_commits(
    http_client: httpx.AsyncClient,
    access_token: str,
    owner: str,
    repo: str,
    base: str,
    head: str
) -> List[str]:
    """
    Ordered shas of the commits in base...head (oldest first).

    Raises:
        GitHubAPIError: If the compare call fails
    """
    data = await _get_json(http_client, access_token, f"/repos/{owner}/{repo}/compare/{base}...{head}")
    commits = data.get("commits") if isinstance(data, dict) else None
    if commits is None:
        raise GitHubAPIError(f"Compare {base[:7]}...{head[:7]} returned no commit list")
    return [c["sha"] for c in commits if c.get("sha")]
