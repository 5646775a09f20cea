"""
Background Job Queue
Dramatiq-based async task processing
"""
from app.services.jobs.broker import broker
from app.services.jobs.tasks import sync_hubspot_task

__all__ = ["broker", "sync_hubspot_task"]
