"""
Unified Configuration
All environment variables and settings in one place

ARCHITECTURE:
- ONE Supabase project per deployment (auth + candidates + activities)
- Organization scoping enforced by RLS and by every sync query
- HubSpot private app token used for contact sync

SECURITY:
- All secrets loaded from environment variables
- No hardcoded credentials
"""
from typing import List, Optional
import logging
from pydantic_settings import BaseSettings, SettingsConfigDict
from pydantic import Field, model_validator

logger = logging.getLogger(__name__)


class Settings(BaseSettings):
    """
    Clear Match sync service settings.
    Validates all environment variables at startup.
    """

    model_config = SettingsConfigDict(
        env_file=".env",
        env_file_encoding="utf-8",
        case_sensitive=False,
        extra="ignore",
    )

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
    supabase_anon_key: str = Field(default="", description="Supabase anonymous key")
    supabase_service_key: str = Field(description="Supabase service role key (backend uses this)")

    # ============================================================================
    # HUBSPOT
    # ============================================================================

    hubspot_api_key: Optional[str] = Field(default=None, description="HubSpot private app access token")
    hubspot_base_url: str = Field(default="https://api.hubapi.com", description="HubSpot API base URL")
    hubspot_page_size: int = Field(default=100, ge=1, le=100, description="Contacts requested per page")
    hubspot_page_delay_seconds: float = Field(default=0.1, ge=0, description="Pause between page fetches")
    hubspot_max_retries: int = Field(default=3, ge=1, description="Attempts per page on 429/5xx/transport errors")
    hubspot_request_timeout: float = Field(default=30.0, description="HubSpot HTTP timeout in seconds")
    hubspot_properties: Optional[str] = Field(
        default=None,
        description="Comma-separated HubSpot property projection (default: all mapped properties)"
    )

    # Organization used when a caller has none in its JWT or profile (single-tenant installs)
    default_organization_id: Optional[str] = Field(default=None, description="Fallback organization ID")

    # ============================================================================
    # BACKGROUND JOBS
    # ============================================================================

    redis_url: Optional[str] = Field(default=None, description="Redis connection URL for dramatiq")

    # ============================================================================
    # API KEYS
    # ============================================================================

    sync_api_key: Optional[str] = Field(default=None, description="API key for service-to-service sync calls")

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
    def hubspot_property_list(self) -> Optional[List[str]]:
        if not self.hubspot_properties:
            return None
        return [prop.strip() for prop in self.hubspot_properties.split(",") if prop.strip()]

    @model_validator(mode='after')
    def validate_settings(self):
        """
        Validate critical settings at startup.

        - Warn if running in production with debug on
        - Warn if HubSpot or the sync API key are missing (endpoints will refuse)
        """
        if self.environment == "production":
            if self.debug:
                logger.warning("⚠️  DEBUG MODE ENABLED IN PRODUCTION! This is insecure.")

            if not self.sentry_dsn:
                logger.warning("⚠️  Sentry not configured in production. Error tracking disabled.")

        if not self.hubspot_api_key:
            logger.warning("⚠️  HUBSPOT_API_KEY not set. HubSpot sync will be unavailable.")

        logger.info("=" * 80)
        logger.info("Clear Match Configuration Loaded")
        logger.info("=" * 80)
        logger.info(f"Environment: {self.environment}")
        logger.info(f"Debug: {self.debug}")
        logger.info(f"Supabase URL: {self.supabase_url}")
        logger.info(f"HubSpot: {'✅ Configured' if self.hubspot_api_key else '❌ Not configured'}")
        logger.info(f"HubSpot page size: {self.hubspot_page_size}")
        logger.info(f"Redis: {'✅ Configured' if self.redis_url else '❌ Not configured'}")
        logger.info(f"Sync API key: {'✅ Configured' if self.sync_api_key else '❌ Not configured'}")
        logger.info(f"Sentry: {'✅ Configured' if self.sentry_dsn else '❌ Not configured'}")
        logger.info("=" * 80)

        return self


# Global settings instance
settings = Settings()
