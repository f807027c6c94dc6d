"""
CORS Configuration
Lets the dashboard frontend call the API from the browser
"""
import logging
from fastapi.middleware.cors import CORSMiddleware

from gitpoor.core.config import settings

logger = logging.getLogger(__name__)


def get_cors_middleware():
    """
    Returns (middleware class, options).

    Development allows any origin without credentials; other environments
    allow only settings.cors_allowed_origins.
    """
    if settings.environment == "development":
        logger.warning("⚠️  DEV MODE: CORS allowing ALL origins (*)")
        return CORSMiddleware, {
            "allow_origins": ["*"],
            "allow_credentials": False,  # Must be False when using "*"
            "allow_methods": ["GET", "POST", "OPTIONS"],
            "allow_headers": ["*"],
            "max_age": 600,
        }

    logger.info(f"🌐 CORS allowed origins: {settings.cors_origins}")

    return CORSMiddleware, {
        "allow_origins": settings.cors_origins,
        "allow_credentials": True,
        "allow_methods": ["GET", "POST", "OPTIONS"],
        "allow_headers": [
            "Content-Type",
            "Authorization",
            "X-Provider-Token",
            "X-Provider-Refresh-Token",
        ],
        "max_age": 600,
    }
