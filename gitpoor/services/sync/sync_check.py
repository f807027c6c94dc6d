"""
Auto-sync throttle
Decides whether the dashboard should trigger a sync on page load
"""
from datetime import datetime, timedelta
from typing import Optional, Union

from gitpoor.services.sync.clock import parse_instant, utc_now


def should_run_auto_sync(
    last_sync: Optional[Union[datetime, str]],
    threshold_minutes: int,
    now: Optional[datetime] = None
) -> bool:
    """
    True when the user never synced or the cool-down has elapsed.

    Example:
        should_run_auto_sync(None, 60) -> True
        should_run_auto_sync(now - 30min, 60) -> False
    """
    if not last_sync:
        return True

    now = now or utc_now()
    return now - parse_instant(last_sync) >= timedelta(minutes=threshold_minutes)
