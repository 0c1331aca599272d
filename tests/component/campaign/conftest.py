"""
Component Test Fixtures for Campaign Service

Services wired to in-memory repositories and a recording notifier, plus a
FastAPI TestClient over the same wiring.
"""

import os
import sys
from unittest.mock import AsyncMock, MagicMock

import pytest
from fastapi.testclient import TestClient

# Add project root to path
sys.path.insert(0, os.path.join(os.path.dirname(__file__), "../../.."))

from microservices.campaign_service.campaign_service import CampaignService
from microservices.campaign_service.country_service import CountryService
from microservices.campaign_service.payout_service import PayoutService
from tests.component.mocks import (
    InMemoryCampaignStore,
    MockCampaignRepository,
    MockCountryRepository,
    MockPayoutRepository,
)
from tests.fixtures import sample_countries


# ====================
# Store and repositories
# ====================


@pytest.fixture
def store() -> InMemoryCampaignStore:
    """In-memory store pre-loaded with US, EE and LV"""
    store = InMemoryCampaignStore()
    for country in sample_countries():
        store.add_country(country)
    return store


@pytest.fixture
def campaign_repository(store):
    return MockCampaignRepository(store)


@pytest.fixture
def payout_repository(store):
    return MockPayoutRepository(store)


@pytest.fixture
def country_repository(store):
    return MockCountryRepository(store)


# ====================
# Services
# ====================


@pytest.fixture
def campaign_service(campaign_repository, country_repository, mock_integration_client):
    return CampaignService(
        repository=campaign_repository,
        country_repository=country_repository,
        integration_client=mock_integration_client,
    )


@pytest.fixture
def payout_service(payout_repository, campaign_repository, country_repository, mock_integration_client):
    return PayoutService(
        repository=payout_repository,
        campaign_repository=campaign_repository,
        country_repository=country_repository,
        integration_client=mock_integration_client,
    )


@pytest.fixture
def country_service(country_repository):
    return CountryService(repository=country_repository)


# ====================
# API
# ====================


class StubFactory:
    """Stands in for CampaignServiceFactory inside main.py"""

    def __init__(self, campaign_service, payout_service, country_service):
        self.campaign_service = campaign_service
        self.payout_service = payout_service
        self.country_service = country_service
        self.is_store_available = True
        self.db = MagicMock(is_connecting=False, health_check=AsyncMock(return_value=True))
        self.integration_client = MagicMock(
            base_url="http://integration-api:4000",
            health_check=AsyncMock(return_value=True),
        )


@pytest.fixture
def stub_factory(campaign_service, payout_service, country_service):
    return StubFactory(campaign_service, payout_service, country_service)


@pytest.fixture
def client(stub_factory, monkeypatch):
    """TestClient without lifespan, so no database connection is attempted"""
    from microservices.campaign_service import main

    monkeypatch.setattr(main, "factory", stub_factory)
    return TestClient(main.app)
