"""
Component Test Layer Configuration

Structure:
    tests/component/
    ├── campaign/    Campaign service components with mocked dependencies
    └── mocks/       Mock implementations

Usage:
    pytest tests/component -v
    pytest tests/component/campaign -v
"""
import os
import sys

import pytest

# Set testing environment BEFORE any imports
os.environ["ENV"] = "testing"
os.environ["ENVIRONMENT"] = "testing"

# Add project root
sys.path.insert(0, os.path.dirname(os.path.dirname(os.path.dirname(os.path.abspath(__file__)))))

from tests.component.mocks import (  # noqa: E402
    MockIntegrationClient,
    MockPostgresClient,
    RecordingTransport,
)


# =============================================================================
# Pytest Configuration
# =============================================================================

def pytest_configure(config):
    """Configure custom markers"""
    config.addinivalue_line(
        "markers", "component: marks tests as component tests"
    )


# =============================================================================
# Database Mocks
# =============================================================================

@pytest.fixture
def mock_db() -> MockPostgresClient:
    """Mock PostgreSQL client"""
    return MockPostgresClient()


# =============================================================================
# HTTP / Client Mocks
# =============================================================================

@pytest.fixture
def recording_transport() -> RecordingTransport:
    """httpx transport answering 202 and recording requests"""
    return RecordingTransport()


@pytest.fixture
def mock_integration_client() -> MockIntegrationClient:
    """Records lifecycle notifications"""
    return MockIntegrationClient()
