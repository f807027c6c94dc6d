"""
Commit Read Schemas
Models for the history calendar and the per-day commit list
"""
from datetime import date, datetime
from typing import List, Optional
from pydantic import BaseModel, Field


class CommitDetail(BaseModel):
    """One commit as shown when a calendar day is opened."""
    repo_name: str
    commit_sha: str
    commit_url: Optional[str] = None
    total_changes: int = 0
    additions: int = 0
    deletions: int = 0
    languages: List[str] = Field(default_factory=list)
    committed_at: datetime
    commit_date: date


class DailyStat(BaseModel):
    """Per-day aggregate for the history calendar."""
    commit_date: date
    commit_count: int = 0
    total_changes: int = 0
