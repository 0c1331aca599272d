"""
Component Test Mocks

Shared mock implementations for component testing.
These mocks replace real I/O dependencies (database, HTTP).
"""

from .db_mock import MockPostgresClient
from .http_mock import RecordingTransport
from .integration_mock import MockIntegrationClient
from .campaign_store_mock import (
    InMemoryCampaignStore,
    IntegrityError,
    MockCampaignRepository,
    MockPayoutRepository,
    MockCountryRepository,
)

__all__ = [
    'MockPostgresClient',
    'RecordingTransport',
    'MockIntegrationClient',
    'InMemoryCampaignStore',
    'IntegrityError',
    'MockCampaignRepository',
    'MockPayoutRepository',
    'MockCountryRepository',
]
