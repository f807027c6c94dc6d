"""
Shared clients for route dependencies

- Supabase (service role): ledger, streak rows, token records and JWT checks
- httpx.AsyncClient: one per request, shared by a sync run's GitHub fan-out
"""
import logging
from typing import AsyncGenerator, Optional
import httpx
from supabase import create_client, Client

from gitpoor.core.config import settings

logger = logging.getLogger(__name__)

# Process-wide Supabase client, created in the app lifespan
_supabase_client: Optional[Client] = None


# ============================================================================
# LIFESPAN HOOKS
# ============================================================================

async def initialize_clients():
    """Create the Supabase client (main.py lifespan startup)."""
    global _supabase_client

    logger.info("Connecting to Supabase...")

    try:
        _supabase_client = create_client(settings.supabase_url, settings.supabase_service_key)
    except Exception as e:
        logger.error(f"❌ Supabase client creation failed: {e}")
        raise

    logger.info("✅ Supabase ready")


async def shutdown_clients():
    """Drop the Supabase client (main.py lifespan shutdown)."""
    global _supabase_client

    # postgrest sessions are closed with the process
    _supabase_client = None
    logger.info("✅ Supabase client released")


# ============================================================================
# ROUTE DEPENDENCIES
# ============================================================================

def get_supabase() -> Client:
    """
    Supabase client for `Depends(get_supabase)`.

    Raises:
        RuntimeError: If the lifespan hook has not run
    """
    if _supabase_client is None:
        logger.error("get_supabase() called before initialize_clients()")
        raise RuntimeError("Supabase client not initialized. Call initialize_clients() first.")

    return _supabase_client


async def get_http_client() -> AsyncGenerator[httpx.AsyncClient, None]:
    """
    Per-request HTTP client for GitHub calls.

    All concurrent calls of one sync run share its connection pool; the client
    is closed once the response has been sent.
    """
    client = httpx.AsyncClient(timeout=settings.github_timeout_seconds)
    try:
        yield client
    finally:
        await client.aclose()
