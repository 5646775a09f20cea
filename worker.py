"""
Dramatiq Background Worker
Processes HubSpot sync jobs queued by POST /api/hubspot/sync/background

Usage:
    dramatiq worker -p 2 -t 2

Deployment:
    - Type: Background Worker
    - Start Command: dramatiq worker -p 2 -t 2
    - Environment: Same as the API (REDIS_URL, SUPABASE_URL, SUPABASE_SERVICE_KEY, HUBSPOT_API_KEY, ...)
"""
from app.core.config import settings
from app.core.observability import configure_logging, init_sentry

logger = configure_logging(settings, component="worker")
init_sentry(settings, component="worker")

# Importing the actor registers it with the broker the CLI discovers
try:
    from app.services.jobs.broker import broker  # noqa: F401
    from app.services.jobs.tasks import sync_hubspot_task  # noqa: F401
except Exception as e:
    logger.error(f"❌ Failed to initialize Clear Match worker: {e}", exc_info=True)
    raise

if not settings.redis_url:
    logger.warning("⚠️  Worker running without REDIS_URL: it will never receive jobs from the API process")

logger.info(f"✅ Clear Match worker ready (actors: {sync_hubspot_task.actor_name})")
