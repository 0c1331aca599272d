"""
Integration Service

Receives campaign and payout lifecycle events from campaign_service.
Minimal implementation: events are validated, counted and logged.

Port: 4000
"""

__version__ = "1.0.0"
__service__ = "integration_service"
