"""
Pytest configuration and fixtures.

Settings are read from the environment at import time, so the required
variables are set before anything from gitpoor is imported. Supabase is
replaced by an in-memory fake that supports the query-builder calls the
services make; GitHub is mocked with respx.
"""
import os

os.environ.setdefault("SUPABASE_URL", "https://test-project.supabase.co")
os.environ.setdefault("SUPABASE_SERVICE_KEY", "test-service-key")
os.environ.setdefault("GITHUB_CLIENT_ID", "test-client-id")
os.environ.setdefault("GITHUB_CLIENT_SECRET", "test-client-secret")
os.environ.setdefault("ENVIRONMENT", "test")

from copy import deepcopy
from datetime import datetime, timezone
from types import SimpleNamespace
from typing import Any, Callable, Dict, List, Optional, Set

import httpx
import pytest

from gitpoor.models.schemas.auth import UserContext

GITHUB_API = "https://api.github.com"
USER_ID = "11111111-2222-3333-4444-555555555555"
GITHUB_LOGIN = "octocat"

# 12:00 KST on 2026-03-10
NOW = datetime(2026, 3, 10, 3, 0, tzinfo=timezone.utc)


# ============================================================================
# IN-MEMORY SUPABASE
# ============================================================================

class FakeResult:
    def __init__(self, data):
        self.data = data


class FakeQuery:
    """Chainable stand-in for a postgrest request builder."""

    def __init__(self, db: "FakeSupabase", table: str):
        self.db = db
        self.table = table
        self.op = "select"
        self.columns: Optional[List[str]] = None
        self.filters: List[Callable[[Dict[str, Any]], bool]] = []
        self.values: Any = None
        self.on_conflict: Optional[str] = None
        self.single = False
        self.order_by: Optional[str] = None
        self.descending = False

    def select(self, columns: str = "*"):
        self.op = "select"
        if columns.strip() != "*":
            self.columns = [c.strip() for c in columns.split(",") if c.strip()]
        return self

    def update(self, values: Dict[str, Any]):
        self.op = "update"
        self.values = values
        return self

    def upsert(self, rows, on_conflict: Optional[str] = None):
        self.op = "upsert"
        self.values = rows if isinstance(rows, list) else [rows]
        self.on_conflict = on_conflict
        return self

    def eq(self, column: str, value):
        self.filters.append(lambda row: row.get(column) == value)
        return self

    def gte(self, column: str, value):
        self.filters.append(lambda row: row.get(column) is not None and str(row[column]) >= str(value))
        return self

    def lte(self, column: str, value):
        self.filters.append(lambda row: row.get(column) is not None and str(row[column]) <= str(value))
        return self

    def order(self, column: str, desc: bool = False):
        self.order_by = column
        self.descending = desc
        return self

    def maybe_single(self):
        self.single = True
        return self

    def _matches(self, row: Dict[str, Any]) -> bool:
        return all(f(row) for f in self.filters)

    def execute(self):
        if self.table in self.db.failing_tables:
            raise RuntimeError(f"connection to {self.table} lost")

        rows = self.db.tables.setdefault(self.table, [])
        self.db.calls.append((self.table, self.op))

        if self.op == "upsert":
            keys = [k.strip() for k in (self.on_conflict or "").split(",") if k.strip()]
            for new_row in self.values:
                existing = next(
                    (row for row in rows if keys and all(row.get(k) == new_row.get(k) for k in keys)),
                    None
                )
                if existing is not None:
                    existing.update(deepcopy(new_row))
                else:
                    inserted = deepcopy(new_row)
                    for column, default in self.db.column_defaults.get(self.table, {}).items():
                        inserted.setdefault(column, default())
                    rows.append(inserted)
            return FakeResult(deepcopy(self.values))

        if self.op == "update":
            matched = [row for row in rows if self._matches(row)]
            for row in matched:
                row.update(deepcopy(self.values))
            return FakeResult(deepcopy(matched))

        matched = [deepcopy(row) for row in rows if self._matches(row)]
        if self.order_by:
            matched.sort(key=lambda row: str(row.get(self.order_by)), reverse=self.descending)
        if self.columns:
            matched = [{c: row.get(c) for c in self.columns} for row in matched]

        if self.single:
            # postgrest-py returns None rather than an empty response
            return FakeResult(matched[0]) if matched else None
        return FakeResult(matched)


class FakeAuth:
    def __init__(self):
        self.users: Dict[str, SimpleNamespace] = {}

    def get_user(self, token: str):
        if token not in self.users:
            raise RuntimeError("invalid JWT")
        return SimpleNamespace(user=self.users[token])


class FakeSupabase:
    def __init__(self):
        self.tables: Dict[str, List[Dict[str, Any]]] = {}
        # server-side defaults applied on insert only
        self.column_defaults: Dict[str, Dict[str, Callable[[], Any]]] = {
            "commits": {"created_at": lambda: datetime.now(timezone.utc).isoformat()},
        }
        self.failing_tables: Set[str] = set()
        self.calls: List[tuple] = []
        self.auth = FakeAuth()

    def table(self, name: str) -> FakeQuery:
        return FakeQuery(self, name)

    def rows(self, name: str) -> List[Dict[str, Any]]:
        return self.tables.get(name, [])

    def row(self, name: str, **match) -> Optional[Dict[str, Any]]:
        for row in self.rows(name):
            if all(row.get(k) == v for k, v in match.items()):
                return row
        return None


# ============================================================================
# FIXTURES
# ============================================================================

@pytest.fixture
def supabase() -> FakeSupabase:
    """Connected user with a stored token, no streak yet."""
    db = FakeSupabase()
    db.tables["users"] = [{
        "id": USER_ID,
        "current_streak": 0,
        "longest_streak": 0,
        "last_streak_date": None,
    }]
    db.tables["github_infos"] = [{
        "user_id": USER_ID,
        "access_token": "gho_stored_token",
        "refresh_token": "ghr_stored_refresh",
        "token_expires_at": None,
        "last_sync_date": None,
    }]
    db.tables["commits"] = []
    return db


@pytest.fixture
def user() -> UserContext:
    return UserContext(
        user_id=USER_ID,
        email="octocat@example.com",
        github_login=GITHUB_LOGIN,
        session_provider_token="gho_session_token",
    )


@pytest.fixture
async def http_client():
    client = httpx.AsyncClient(timeout=5.0)
    yield client
    await client.aclose()


# ============================================================================
# GITHUB PAYLOAD BUILDERS
# ============================================================================

def push_event(
    repo: str = "octocat/app",
    created_at: str = "2026-03-10T02:00:00Z",
    commits: Optional[List[str]] = None,
    before: Optional[str] = None,
    head: Optional[str] = None,
    public: bool = True,
    event_id: str = "1",
) -> Dict[str, Any]:
    return {
        "id": event_id,
        "type": "PushEvent",
        "public": public,
        "created_at": created_at,
        "repo": {"name": repo},
        "payload": {
            "before": before,
            "head": head,
            "commits": [{"sha": sha} for sha in (commits or [])],
        },
    }


def commit_detail(
    sha: str,
    date: Optional[str] = "2026-03-10T01:30:00Z",
    additions: int = 10,
    deletions: int = 2,
    files: Optional[List[str]] = None,
    repo: str = "octocat/app",
) -> Dict[str, Any]:
    return {
        "sha": sha,
        "html_url": f"https://github.com/{repo}/commit/{sha}",
        "commit": {"author": {"name": "Octo Cat", "date": date}},
        "stats": {"additions": additions, "deletions": deletions, "total": additions + deletions},
        "files": [{"filename": name} for name in (files if files is not None else ["src/main.py"])],
    }


def sha(char: str) -> str:
    return char * 40
