"""
Root conftest.py - Global fixtures and configuration for all test layers.

Test Layers:
    - component/  : Component tests (mocked repositories and transports)
    - unit/       : Unit tests (pure functions, no I/O)
"""
import os
import sys

import pytest

# Set testing environment BEFORE any service imports
os.environ.setdefault("ENV", "testing")
os.environ.setdefault("LOG_LEVEL", "WARNING")
os.environ.setdefault("ENV_FILE", os.devnull)

# Add project root to path
PROJECT_ROOT = os.path.dirname(os.path.dirname(os.path.abspath(__file__)))
sys.path.insert(0, PROJECT_ROOT)

from tests.fixtures import (  # noqa: E402
    make_campaign,
    make_country,
    make_payout,
    sample_countries,
)


# =============================================================================
# Test Configuration
# =============================================================================

class TestConfig:
    """Centralized test configuration"""

    CAMPAIGN_SERVICE_PORT = 3000
    INTEGRATION_SERVICE_PORT = 4000
    INTEGRATION_API_URL = "http://integration-api:4000"

    # Timeouts
    HTTP_TIMEOUT = 5


@pytest.fixture(scope="session")
def test_config() -> TestConfig:
    """Provide test configuration"""
    return TestConfig()


# =============================================================================
# Shared data
# =============================================================================

@pytest.fixture
def countries():
    """A small country directory (EE, LV, US)"""
    return sample_countries()


@pytest.fixture
def campaign_factory():
    return make_campaign


@pytest.fixture
def payout_factory():
    return make_payout


@pytest.fixture
def country_factory():
    return make_country


def pytest_configure(config):
    """Register markers shared by all layers"""
    config.addinivalue_line("markers", "unit: marks tests as unit tests")
    config.addinivalue_line("markers", "component: marks tests as component tests")
