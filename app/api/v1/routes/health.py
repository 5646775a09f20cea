"""
Health Check Routes
System status
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
        "name": "Clear Match Sync API",
        "version": "1.0.0",
        "description": "HubSpot contact sync for the Clear Match recruitment CRM",
        "endpoints": {
            "health": "/health",
            "sync": {
                "hubspot": "/api/hubspot/sync",
                "hubspot_background": "/api/hubspot/sync/background",
                "job_status": "/api/hubspot/sync/jobs/{job_id}",
                "function": "/functions/v1/sync-hubspot"
            }
        }
    }
