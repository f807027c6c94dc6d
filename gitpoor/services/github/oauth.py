"""
GitHub OAuth token refresh
Exchanges a refresh token for a new access/refresh pair
"""
import logging

import httpx

from gitpoor.core.config import settings
from gitpoor.models.schemas.github import TokenGrant
from gitpoor.services.github.client import GitHubAPIError

logger = logging.getLogger(__name__)


async def refresh_github_token(http_client: httpx.AsyncClient, refresh_token: str) -> TokenGrant:
    """
    Exchange a refresh token at GitHub's OAuth endpoint.

    GitHub answers 200 even for a rejected grant, with an "error" field in the
    body, so both the status and the body are checked.

    Args:
        http_client: Async HTTP client instance
        refresh_token: Refresh token from the stored record or session

    Returns:
        TokenGrant (refresh_token may be None when GitHub keeps the old one)

    Raises:
        GitHubAPIError: If the OAuth app is not configured or the exchange fails
    """
    if not settings.can_refresh_github_tokens:
        raise GitHubAPIError("GitHub OAuth app credentials not configured")

    try:
        response = await http_client.post(
            settings.github_oauth_token_url,
            headers={"Accept": "application/json"},
            json={
                "client_id": settings.github_client_id,
                "client_secret": settings.github_client_secret,
                "grant_type": "refresh_token",
                "refresh_token": refresh_token,
            },
        )
    except httpx.HTTPError as e:
        raise GitHubAPIError(f"Token refresh request failed: {e}") from e

    if response.status_code >= 400:
        raise GitHubAPIError(f"Token refresh returned {response.status_code}", status_code=response.status_code)

    try:
        data = response.json()
    except ValueError as e:
        raise GitHubAPIError("Token refresh returned invalid JSON") from e

    if data.get("error") or not data.get("access_token"):
        raise GitHubAPIError(f"Token refresh rejected: {data.get('error', 'no access_token')}")

    logger.info("🔑 GitHub token refreshed")
    return TokenGrant(
        access_token=data["access_token"],
        refresh_token=data.get("refresh_token"),
        expires_in=data.get("expires_in"),
    )
