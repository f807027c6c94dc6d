"""
Health Check Routes
System status and endpoint discovery
"""
import logging
from fastapi import APIRouter

logger = logging.getLogger(__name__)

router = APIRouter(tags=["health"])


@router.get("/health")
async def health_check():
    """Health check endpoint."""
    return {"status": "healthy"}


@router.get("/")
async def root():
    """Root endpoint with API info."""
    return {
        "name": "GitPoor Commit Sync API",
        "version": "1.0.0",
        "description": "Daily GitHub commit sync, commit history and streak tracking",
        "endpoints": {
            "health": "/health",
            "sync": "/api/commits/sync",
            "sync_status": "/api/commits/sync/status",
            "today": "/api/commits/today",
            "history": "/api/commits/history",
            "commits": "/api/commits"
        }
    }
