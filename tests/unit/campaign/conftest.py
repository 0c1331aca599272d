"""
Unit Test Fixtures for Campaign Service
"""

import os
import sys

import pytest

# Add project root to path
sys.path.insert(0, os.path.join(os.path.dirname(__file__), "../../.."))

from tests.fixtures import make_campaign_create_request, make_payout_request


@pytest.fixture
def valid_campaign_body():
    return make_campaign_create_request(
        title="Acme",
        landing_page_url="https://acme.com/landing?utm=1",
        payouts=[make_payout_request(country_id=1, amount=1.5)],
    )


@pytest.fixture
def clean_env(monkeypatch):
    """Remove configuration variables so defaults apply"""
    for key in [
        "POSTGRES_HOST", "POSTGRES_PORT", "POSTGRES_DB", "POSTGRES_USER", "POSTGRES_PASSWORD",
        "DB_HOST", "DB_PORT", "DB_NAME", "DB_USER", "DB_PASSWORD",
        "DB_POOL_MIN", "DB_POOL_MAX", "DB_COMMAND_TIMEOUT", "DB_RETRY_INITIAL", "DB_RETRY_MAX",
        "DB_AUTO_MIGRATE", "SERVICE_PORT", "PORT", "INTEGRATION_API_URL", "INTEGRATION_TIMEOUT",
        "INTEGRATION_SERVICE_PORT", "CORS_ORIGINS", "LOG_LEVEL", "LOG_FILE", "SERVICE_NAME",
        "ENV", "ENVIRONMENT", "HOST", "SERVICE_VERSION", "SLOW_REQUEST_SECONDS", "DEBUG",
        "LOG_FORMAT", "LOG_CONSOLE",
    ]:
        monkeypatch.delenv(key, raising=False)
    return monkeypatch
