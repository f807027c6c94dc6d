"""
GitHub Schemas
Typed views over the provider payloads the sync engine consumes
"""
from datetime import datetime
from typing import List, Literal, Optional, Union
from pydantic import BaseModel, Field

# "before" sha GitHub sends when a push creates a branch
NULL_SHA = "0" * 40


class PushPayload(BaseModel):
    """
    Payload of a PushEvent.

    Organization-owned repositories may redact `commits`, leaving only `head`.
    """
    commits: List[str] = Field(default_factory=list)
    before: Optional[str] = None
    head: Optional[str] = None


class PushEvent(BaseModel):
    """One PushEvent from the authenticated user's activity feed."""
    id: str
    type: str
    repo_name: str
    is_public: bool = True
    created_at: datetime
    payload: PushPayload

    @property
    def owner(self) -> str:
        return self.repo_name.split("/", 1)[0]

    @property
    def repo(self) -> str:
        return self.repo_name.split("/", 1)[1] if "/" in self.repo_name else self.repo_name


# ============================================================================
# COMMIT RANGE STRATEGIES (tagged union)
# ============================================================================

class ExplicitCommits(BaseModel):
    """The payload listed its commits; use them as-is."""
    kind: Literal["explicit"] = "explicit"
    shas: List[str]


class HeadOnly(BaseModel):
    """Commit list redacted: track the head commit as a provisional single commit."""
    kind: Literal["head_only"] = "head_only"
    head: str


class CompareRange(BaseModel):
    """
    before..head is a real range: ask the compare API for every commit in it.

    fallback_shas is what the event itself offered (explicit list or [head]);
    it is kept when the compare call fails.
    """
    kind: Literal["compare_range"] = "compare_range"
    base: str
    head: str
    fallback_shas: List[str]


class NoCommits(BaseModel):
    """Nothing to resolve (e.g. a tag push with no head)."""
    kind: Literal["none"] = "none"


RangeStrategy = Union[ExplicitCommits, HeadOnly, CompareRange, NoCommits]


# ============================================================================
# COMMIT DETAIL
# ============================================================================

class GitHubCommit(BaseModel):
    """The parts of GET /repos/{owner}/{repo}/commits/{ref} the ledger needs."""
    sha: str
    html_url: Optional[str] = None
    author_date: Optional[datetime] = None
    additions: int = 0
    deletions: int = 0
    filenames: List[str] = Field(default_factory=list)


class TokenGrant(BaseModel):
    """Result of a refresh_token exchange."""
    access_token: str
    refresh_token: Optional[str] = None
    expires_in: Optional[int] = None


class AccessCredential(BaseModel):
    """
    A GitHub access token resolved for one sync run.

    Never persisted by the engine itself; the TokenSupplier hands refreshed
    pairs back to the github_infos record.
    """
    access_token: str
    refresh_token: Optional[str] = None
    expires_at: Optional[datetime] = None
    source: Literal["session", "stored", "refreshed"] = "stored"
