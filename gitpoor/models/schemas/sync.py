"""
Sync Schemas
Ledger rows, streak state and the sync response envelope
"""
from datetime import date, datetime
from enum import Enum
from typing import Any, Dict, List, Optional
from pydantic import BaseModel, Field, model_validator


class CommitRecord(BaseModel):
    """
    One row of the `commits` ledger, unique on (user_id, commit_sha).

    commit_date is always the logical day of committed_at (author time),
    never the time the sync happened to see it.
    """
    user_id: str
    commit_sha: str
    repo_name: str
    committed_at: datetime
    commit_date: date
    change_files: int = 0
    additions: int = 0
    deletions: int = 0
    total_changes: int = 0
    languages: List[str] = Field(default_factory=list)
    file_extensions: List[str] = Field(default_factory=list)
    is_private: bool = False
    commit_url: Optional[str] = None
    created_at: datetime

    @model_validator(mode="after")
    def sum_changes(self):
        self.total_changes = self.additions + self.deletions
        return self

    def to_row(self) -> Dict[str, Any]:
        """
        Serialize for a Supabase upsert (JSON-safe).

        created_at is left to the column default so a re-sync of a stored sha
        keeps the original insertion time.
        """
        return self.model_dump(mode="json", exclude={"created_at"})


class SkipReason(str, Enum):
    DUPLICATE = "duplicate"
    NOT_TODAY = "not_today"
    MISSING_AUTHOR_DATE = "missing_author_date"
    UPSTREAM_ERROR = "upstream_error"


class CommitOutcome(BaseModel):
    """Result of processing one candidate sha: a record or the reason it was skipped."""
    sha: str
    record: Optional[CommitRecord] = None
    skip_reason: Optional[SkipReason] = None

    @property
    def accepted(self) -> bool:
        return self.record is not None


class StreakState(BaseModel):
    current_streak: int = 0
    longest_streak: int = 0


class SyncSummary(BaseModel):
    """What a sync run (or the today endpoint) reports for one logical day."""
    date: date
    commit_count: int = 0
    total_changes: int = 0
    languages: List[str] = Field(default_factory=list)
    is_success: bool = False
    streak: StreakState = Field(default_factory=StreakState)

    @classmethod
    def from_records(cls, day: date, records: List[CommitRecord], streak: StreakState) -> "SyncSummary":
        languages: List[str] = []
        for record in records:
            for language in record.languages:
                if language not in languages:
                    languages.append(language)
        return cls(
            date=day,
            commit_count=len(records),
            total_changes=sum(record.total_changes for record in records),
            languages=languages,
            is_success=len(records) > 0,
            streak=streak,
        )


class SyncResponse(BaseModel):
    """
    Response for the sync trigger.
    Envelope shared with the frontend: {success, message, data}.
    """
    success: bool = True
    message: Optional[str] = None
    data: SyncSummary


class SyncStatusResponse(BaseModel):
    """Auto-sync throttle decision for the caller."""
    last_sync_date: Optional[datetime] = None
    should_sync: bool
    threshold_minutes: int
