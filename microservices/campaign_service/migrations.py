"""
Campaign Service Schema

Idempotent table and index creation, run in one transaction after the store
connects and before it accepts queries.
"""

import logging
from typing import List

from core.postgres_client import DBConnection

logger = logging.getLogger(__name__)

SCHEMA_STATEMENTS: List[str] = [
    '''
    CREATE TABLE IF NOT EXISTS campaigns (
        id SERIAL PRIMARY KEY,
        title VARCHAR(255) NOT NULL,
        "landingPageUrl" TEXT NOT NULL,
        "isRunning" BOOLEAN NOT NULL DEFAULT FALSE,
        "createdAt" TIMESTAMP NOT NULL DEFAULT now(),
        "updatedAt" TIMESTAMP NOT NULL DEFAULT now()
    )
    ''',
    '''
    CREATE TABLE IF NOT EXISTS countries (
        id SERIAL PRIMARY KEY,
        code VARCHAR(2) NOT NULL UNIQUE,
        name VARCHAR(100) NOT NULL
    )
    ''',
    '''
    CREATE TABLE IF NOT EXISTS payouts (
        id SERIAL PRIMARY KEY,
        amount NUMERIC(10, 2) NOT NULL,
        budget NUMERIC(10, 2),
        "autoStop" BOOLEAN NOT NULL DEFAULT FALSE,
        "budgetAlert" BOOLEAN NOT NULL DEFAULT FALSE,
        "budgetAlertEmail" VARCHAR,
        "createdAt" TIMESTAMP NOT NULL DEFAULT now(),
        "updatedAt" TIMESTAMP NOT NULL DEFAULT now(),
        campaign_id INTEGER NOT NULL REFERENCES campaigns(id) ON DELETE CASCADE,
        country_id INTEGER NOT NULL REFERENCES countries(id)
    )
    ''',
    # One payout per campaign and country
    '''
    CREATE UNIQUE INDEX IF NOT EXISTS idx_payouts_campaign_country
        ON payouts (campaign_id, country_id)
    ''',
    'CREATE INDEX IF NOT EXISTS idx_payouts_country ON payouts (country_id)',
]


async def apply_schema(conn: DBConnection) -> None:
    """Create tables and indexes if missing"""
    for statement in SCHEMA_STATEMENTS:
        await conn.execute(statement)
    logger.info(f"Schema ensured ({len(SCHEMA_STATEMENTS)} statements)")


__all__ = ["SCHEMA_STATEMENTS", "apply_schema"]
