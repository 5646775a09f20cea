"""
Dramatiq Redis Broker Configuration
Handles the background job queue for HubSpot sync runs
"""
import logging
import dramatiq
from dramatiq.brokers.redis import RedisBroker
from dramatiq.brokers.stub import StubBroker
from dramatiq.middleware import (
    AgeLimit, Callbacks, Pipelines,
    Retries, ShutdownNotifications
)

from app.core.config import settings

logger = logging.getLogger(__name__)

if not settings.redis_url:
    logger.warning("⚠️  REDIS_URL not set - background jobs will be queued in memory only")
    broker = StubBroker()
else:
    # Explicit middleware (excludes TimeLimit for Python 3.13 compatibility)
    broker = RedisBroker(
        url=settings.redis_url,
        middleware=[
            AgeLimit(),
            Retries(max_retries=3),
            Callbacks(),
            Pipelines(),
            ShutdownNotifications(),
        ]
    )
    logger.info(f"✅ Redis broker initialized: {settings.redis_url[:20]}...")

dramatiq.set_broker(broker)
