#!/usr/bin/env python3
"""
Core Module for the campaign microservices

Shared infrastructure used by every service in this repository.

COMPONENTS:
    - config/: Environment-driven dataclass configuration and logging setup
    - postgres_client.py: asyncpg pool with background reconnect
    - service_client_base.py: httpx base client for service-to-service calls

USAGE:
    from core.config import get_settings
    from core.postgres_client import PostgresClient

    settings = get_settings()
    db = PostgresClient(settings.infrastructure, service_name="campaign_service")
"""

__version__ = "1.0.0"
