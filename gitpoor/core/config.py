"""
Unified Configuration
All environment variables and settings in one place

ARCHITECTURE:
- ONE Supabase project for auth + commits + streaks + GitHub token records
- GitHub is the only external activity provider
- The "logical day" offset and the OAuth refresh window live here so every
  component reads the same values

SECURITY:
- All secrets loaded from environment variables
- No hardcoded credentials
"""
from typing import List, Optional
import logging
from pydantic_settings import BaseSettings
from pydantic import Field, model_validator

logger = logging.getLogger(__name__)


class Settings(BaseSettings):
    """
    Unified application settings.
    Validates all environment variables at startup.
    """

    # ============================================================================
    # SERVER
    # ============================================================================

    environment: str = Field(default="production", description="Environment: development/staging/production")
    port: int = Field(default=8080, description="Server port")
    debug: bool = Field(default=False, description="Debug mode")

    # ============================================================================
    # DATABASE (Supabase)
    # ============================================================================

    supabase_url: str = Field(description="Supabase project URL")
    supabase_service_key: str = Field(description="Supabase service key (backend uses this)")
    supabase_anon_key: Optional[str] = Field(default=None, description="Supabase anonymous key")

    # ============================================================================
    # GITHUB (provider API + OAuth app)
    # ============================================================================

    github_client_id: Optional[str] = Field(default=None, description="GitHub OAuth app client ID (token refresh)")
    github_client_secret: Optional[str] = Field(default=None, description="GitHub OAuth app client secret (token refresh)")
    github_api_url: str = Field(default="https://api.github.com", description="GitHub REST API base URL")
    github_oauth_token_url: str = Field(
        default="https://github.com/login/oauth/access_token",
        description="GitHub OAuth token endpoint (refresh_token grant)"
    )
    github_timeout_seconds: float = Field(default=30.0, description="Per-request timeout for GitHub calls")
    github_events_per_page: int = Field(default=100, description="Number of recent activity events fetched per sync")
    github_max_concurrency: int = Field(default=10, description="Max concurrent GitHub calls during a sync fan-out")

    # ============================================================================
    # SYNC ENGINE
    # ============================================================================

    day_boundary_offset_hours: int = Field(default=4, description="Hours added to UTC before taking the calendar date (05:00 KST day start)")
    token_refresh_window_seconds: int = Field(default=300, description="Refresh the GitHub token when it expires within this window")
    auto_sync_threshold_minutes: int = Field(default=60, description="Personal auto-sync cool-down")
    group_sync_threshold_minutes: int = Field(default=180, description="Group auto-sync cool-down")
    sync_rate_limit: str = Field(default="30/hour", description="Rate limit for the sync trigger endpoint")

    # ============================================================================
    # PRODUCTION INFRASTRUCTURE
    # ============================================================================

    sentry_dsn: Optional[str] = Field(default=None, description="Sentry DSN for error tracking")

    # ============================================================================
    # CORS
    # ============================================================================

    cors_allowed_origins: str = Field(default="http://localhost:3000", description="Comma-separated list of allowed CORS origins")

    @property
    def cors_origins(self) -> List[str]:
        return [origin.strip() for origin in self.cors_allowed_origins.split(",") if origin.strip()]

    @property
    def can_refresh_github_tokens(self) -> bool:
        return bool(self.github_client_id and self.github_client_secret)

    @model_validator(mode='after')
    def validate_settings(self):
        """
        Validate critical settings at startup.

        - Warn if debug mode enabled in production
        - Warn if GitHub OAuth app credentials are missing (refresh disabled)
        """
        if self.environment == "production":
            if self.debug:
                logger.warning("⚠️  DEBUG MODE ENABLED IN PRODUCTION! This is insecure.")

            if not self.sentry_dsn:
                logger.warning("⚠️  Sentry not configured in production. Error tracking disabled.")

        if not self.can_refresh_github_tokens:
            logger.warning("⚠️  GITHUB_CLIENT_ID / GITHUB_CLIENT_SECRET not set. Token refresh disabled.")

        logger.info("=" * 80)
        logger.info("GitPoor Configuration Loaded")
        logger.info("=" * 80)
        logger.info(f"Environment: {self.environment}")
        logger.info(f"Debug: {self.debug}")
        logger.info(f"Supabase URL: {self.supabase_url}")
        logger.info(f"GitHub API: {self.github_api_url}")
        logger.info(f"Day boundary: UTC+{self.day_boundary_offset_hours}h")
        logger.info(f"Token refresh: {'✅ Enabled' if self.can_refresh_github_tokens else '❌ Disabled'}")
        logger.info(f"Sentry: {'✅ Configured' if self.sentry_dsn else '❌ Not configured'}")
        logger.info("=" * 80)

        return self

    class Config:
        env_file = ".env"
        env_file_encoding = "utf-8"
        case_sensitive = False
        extra = "ignore"


# Global settings instance
settings = Settings()
