"""
Data Source Providers
Remote contact sources for the sync pipeline
"""
from app.services.sync.providers.hubspot import HubSpotContactSource

__all__ = [
    "HubSpotContactSource",
]
