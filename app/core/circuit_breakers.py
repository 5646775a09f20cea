"""
Circuit Breakers and Retry Logic
Retries transient failures of external services (HubSpot) before giving up
"""
import logging
from tenacity import (
    AsyncRetrying,
    stop_after_attempt,
    wait_exponential,
    retry_if_exception,
    before_sleep_log,
)

logger = logging.getLogger(__name__)


# ============================================================================
# HUBSPOT CIRCUIT BREAKER
# ============================================================================

def _is_transient_hubspot_error(exc: BaseException) -> bool:
    from app.services.sync.errors import RemoteFetchError

    return isinstance(exc, RemoteFetchError) and exc.is_transient


def hubspot_retrying(max_attempts: int = 3, min_wait: float = 1.0, max_wait: float = 10.0) -> AsyncRetrying:
    """
    Retry controller for HubSpot page fetches.

    Retries on:
    - Rate limit responses (429)
    - Server errors (5xx)
    - Transport errors (timeouts, connection resets)

    Other 4xx responses fail immediately. The last error is re-raised.

    Usage:
        async for attempt in hubspot_retrying(3):
            with attempt:
                page = await fetch()
    """
    return AsyncRetrying(
        retry=retry_if_exception(_is_transient_hubspot_error),
        stop=stop_after_attempt(max_attempts),
        wait=wait_exponential(multiplier=min_wait, min=min_wait, max=max_wait),
        before_sleep=before_sleep_log(logger, logging.WARNING),
        reraise=True
    )
