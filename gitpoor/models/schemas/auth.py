"""
Auth Schemas
Request-scoped identity passed explicitly into every sync component
"""
from typing import Optional
from pydantic import BaseModel


class UserContext(BaseModel):
    """
    Authenticated caller, built once per request by the security dependency.

    session_provider_token / session_refresh_token carry the live session's
    GitHub tokens when the frontend forwards them; the TokenSupplier prefers
    them over the persisted record.
    """
    user_id: str
    email: Optional[str] = None
    github_login: Optional[str] = None
    session_provider_token: Optional[str] = None
    session_refresh_token: Optional[str] = None
