"""
Pydantic Schemas
All request/response and domain models
"""

# Auth schemas
from .auth import UserContext

# GitHub schemas
from .github import (
    NULL_SHA,
    AccessCredential,
    CompareRange,
    ExplicitCommits,
    GitHubCommit,
    HeadOnly,
    NoCommits,
    PushEvent,
    PushPayload,
    RangeStrategy,
    TokenGrant,
)

# Sync schemas
from .sync import (
    CommitOutcome,
    CommitRecord,
    SkipReason,
    StreakState,
    SyncResponse,
    SyncStatusResponse,
    SyncSummary,
)

# Commit read schemas
from .commits import CommitDetail, DailyStat

__all__ = [
    # Auth
    "UserContext",
    # GitHub
    "NULL_SHA",
    "AccessCredential",
    "CompareRange",
    "ExplicitCommits",
    "GitHubCommit",
    "HeadOnly",
    "NoCommits",
    "PushEvent",
    "PushPayload",
    "RangeStrategy",
    "TokenGrant",
    # Sync
    "CommitOutcome",
    "CommitRecord",
    "SkipReason",
    "StreakState",
    "SyncResponse",
    "SyncStatusResponse",
    "SyncSummary",
    # Commits
    "CommitDetail",
    "DailyStat",
]
