"""
Logging and error tracking setup
Shared by the API process (main.py) and the Dramatiq worker (worker.py)
"""
import logging

from app.core.config import Settings

LOG_FORMAT = "%(asctime)s - %(name)s - %(levelname)s - %(message)s"


def configure_logging(config: Settings, component: str = "api") -> logging.Logger:
    """
    Root logging config. Production logs at INFO; other environments at DEBUG
    unless this is the worker, which stays at INFO.
    """
    verbose = config.environment != "production" and component == "api"
    logging.basicConfig(level=logging.DEBUG if verbose else logging.INFO, format=LOG_FORMAT)

    # httpx logs every HubSpot page request at INFO
    logging.getLogger("httpx").setLevel(logging.WARNING)

    return logging.getLogger(component)


def init_sentry(config: Settings, component: str = "api") -> bool:
    """
    Start Sentry when SENTRY_DSN is set.

    Returns:
        True if Sentry is active
    """
    logger = logging.getLogger(__name__)

    if not config.sentry_dsn:
        logger.info(f"ℹ️  Sentry not configured for {component} (SENTRY_DSN not set)")
        return False

    try:
        import sentry_sdk
        from sentry_sdk.integrations.logging import LoggingIntegration

        integrations = [LoggingIntegration(level=logging.INFO, event_level=logging.ERROR)]
        if component == "api":
            from sentry_sdk.integrations.fastapi import FastApiIntegration
            integrations.append(FastApiIntegration())

        sentry_sdk.init(
            dsn=config.sentry_dsn,
            environment=config.environment,
            traces_sample_rate=0.1,
            integrations=integrations,
        )
    except Exception as e:
        logger.warning(f"⚠️  Failed to initialize Sentry for {component}: {e}")
        return False

    sentry_sdk.set_tag("component", component)
    logger.info(f"✅ Sentry error tracking initialized for {component}")
    return True
