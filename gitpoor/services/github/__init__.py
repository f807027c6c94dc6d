"""
GitHub Provider
REST calls and OAuth token refresh
"""
from gitpoor.services.github.client import (
    GitHubAPIError,
    compare_commits,
    get_authenticated_login,
    get_commit,
    list_user_events,
    parse_push_event,
)
from gitpoor.services.github.oauth import refresh_github_token

__all__ = [
    "GitHubAPIError",
    "compare_commits",
    "get_authenticated_login",
    "get_commit",
    "list_user_events",
    "parse_push_event",
    "refresh_github_token",
]
