"""
Clear Match - Sync API
======================
Version: 1.0.0

Serves the HubSpot → candidates sync over HTTP:
- /api/hubspot/*: triggered by signed-in recruiters (Supabase JWT)
- /functions/v1/*: triggered by other services (X-API-Key)

Layout:
- app/core/: Settings, client lifecycle, auth, retry policy, logging/Sentry
- app/middleware/: Error handling, request logging, CORS, rate limiting
- app/models/schemas/: HubSpot wire models, candidates, activities, sync results
- app/services/sync/: The sync pipeline (source → transform → reconcile → persist → activities)
- app/services/jobs/: Dramatiq actor for background syncs
- app/api/v1/routes/: HTTP routes

Run locally:
    uvicorn main:app --reload
"""
import sys
import traceback
from contextlib import asynccontextmanager
from fastapi import FastAPI

# Fail loudly on bad configuration (missing SUPABASE_URL etc.)
try:
    from app.core.config import settings
    from app.core.observability import configure_logging, init_sentry
    from app.core.dependencies import initialize_clients, shutdown_clients

    from app.middleware.error_handler import ErrorHandlerMiddleware
    from app.middleware.logging import RequestLoggingMiddleware
    from app.middleware.cors import get_cors_middleware
    from app.middleware.rate_limit import install_rate_limiting

    from app.api.v1.routes.health import router as health_router
    from app.api.v1.routes.hubspot import router as hubspot_router
    from app.api.v1.routes.functions import router as functions_router

except Exception as e:
    print(f"🚨 Clear Match Sync API failed to start: {e}", file=sys.stderr)
    print(traceback.format_exc(), file=sys.stderr)
    sys.exit(1)

logger = configure_logging(settings, component="api")
init_sentry(settings, component="api")


@asynccontextmanager
async def lifespan(app: FastAPI):
    """Own the Supabase and HubSpot HTTP clients for the lifetime of the app."""
    logger.info("=" * 80)
    logger.info(f"Starting Clear Match Sync API ({settings.environment}, port {settings.port}, debug={settings.debug})")
    logger.info(f"HubSpot: {'configured' if settings.hubspot_api_key else 'NOT configured'}")
    logger.info("=" * 80)

    await initialize_clients(app)

    yield

    await shutdown_clients(app)
    logger.info("✅ Clear Match Sync API stopped")


app = FastAPI(
    title="Clear Match Sync API",
    description="HubSpot contact sync for the Clear Match recruitment CRM",
    version="1.0.0",
    docs_url="/docs" if settings.debug else None,
    redoc_url="/redoc" if settings.debug else None,
    lifespan=lifespan
)

install_rate_limiting(app)

# Starlette runs middleware in reverse order of registration:
# error handler → request logging → CORS → routes
cors_middleware, cors_config = get_cors_middleware()
app.add_middleware(cors_middleware, **cors_config)
app.add_middleware(RequestLoggingMiddleware)
app.add_middleware(ErrorHandlerMiddleware)

app.include_router(health_router)
app.include_router(hubspot_router)
app.include_router(functions_router)


if __name__ == "__main__":
    import uvicorn
    uvicorn.run("main:app", host="0.0.0.0", port=settings.port, reload=settings.debug)
