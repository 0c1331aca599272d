"""
Shared Test Fixtures

Centralized factories used across all test layers.

Structure:
    - common.py: Timestamps, emails, random strings
    - campaign_fixtures.py: Campaign, payout and country factories
"""

# Common utilities
from .common import (
    make_email,
    make_timestamp,
    random_string,
)

# Campaign fixtures
from .campaign_fixtures import (
    make_country,
    sample_countries,
    make_campaign,
    make_payout,
    make_payout_request,
    make_campaign_create_request,
    make_campaign_update_request,
)

__all__ = [
    "make_email",
    "make_timestamp",
    "random_string",
    "make_country",
    "sample_countries",
    "make_campaign",
    "make_payout",
    "make_payout_request",
    "make_campaign_create_request",
    "make_campaign_update_request",
]
