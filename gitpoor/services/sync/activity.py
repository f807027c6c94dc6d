"""
Activity fetcher
Pulls the caller's recent GitHub activity and keeps today's push events
"""
import logging
from datetime import date
from typing import List

import httpx

from gitpoor.core.errors import Unauthenticated, UpstreamUnavailable
from gitpoor.models.schemas.auth import UserContext
from gitpoor.models.schemas.github import AccessCredential, PushEvent
from gitpoor.services.github.client import (
    GitHubAPIError,
    get_authenticated_login,
    list_user_events,
    parse_push_event,
)
from gitpoor.services.sync.clock import logical_day

logger = logging.getLogger(__name__)


async def recent_push_events(
    http_client: httpx.AsyncClient,
    credential: AccessCredential,
    user: UserContext,
    day: date
) -> List[PushEvent]:
    """
    Today's push events for the caller.

    Fetches one page of recent activity (public + private) and keeps events
    whose type is PushEvent and whose created_at falls on `day`.

    Raises:
        Unauthenticated: If GitHub rejects the token (401)
        UpstreamUnavailable: If the activity listing fails otherwise; without it
            the run has nothing to process
    """
    try:
        username = user.github_login or await get_authenticated_login(http_client, credential.access_token)
        raw_events = await list_user_events(http_client, credential.access_token, username)
    except GitHubAPIError as e:
        if e.is_auth_error:
            logger.error(f"GitHub rejected the token ({credential.source}): {e}")
            raise Unauthenticated(details=str(e)) from e
        logger.error(f"❌ Failed to list GitHub activity: {e}")
        raise UpstreamUnavailable("Failed to fetch GitHub activity.", details=str(e)) from e

    events: List[PushEvent] = []
    for raw in raw_events:
        event = parse_push_event(raw)
        if event and logical_day(event.created_at) == day:
            events.append(event)

    logger.info(f"📬 {username}: {len(raw_events)} recent events, {len(events)} push events on {day}")
    return events
