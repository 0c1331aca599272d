"""
Country Seed

Default country directory and a command line entry point that connects to
the database, ensures the schema and seeds countries once.

Usage:
    python -m microservices.campaign_service.seeds
    python -m microservices.campaign_service.seeds --no-migrate
"""

import argparse
import asyncio
import logging
import sys
from typing import List

from core.config import get_settings, setup_logging
from core.postgres_client import PostgresClient

from .country_repository import CountryRepository
from .country_service import CountryService
from .migrations import apply_schema
from .models import CountrySeed

logger = logging.getLogger(__name__)

DEFAULT_COUNTRIES: List[CountrySeed] = [
    CountrySeed(code=code, name=name)
    for code, name in [
        # Baltics and Nordics
        ("EE", "Estonia"),
        ("LV", "Latvia"),
        ("LT", "Lithuania"),
        ("DK", "Denmark"),
        ("FI", "Finland"),
        ("IS", "Iceland"),
        ("NO", "Norway"),
        ("SE", "Sweden"),
        # Rest of Europe
        ("AT", "Austria"),
        ("BE", "Belgium"),
        ("BG", "Bulgaria"),
        ("HR", "Croatia"),
        ("CY", "Cyprus"),
        ("CZ", "Czech Republic"),
        ("FR", "France"),
        ("DE", "Germany"),
        ("GR", "Greece"),
        ("HU", "Hungary"),
        ("IE", "Ireland"),
        ("IT", "Italy"),
        ("LU", "Luxembourg"),
        ("MT", "Malta"),
        ("NL", "Netherlands"),
        ("PL", "Poland"),
        ("PT", "Portugal"),
        ("RO", "Romania"),
        ("SK", "Slovakia"),
        ("SI", "Slovenia"),
        ("ES", "Spain"),
        ("CH", "Switzerland"),
        ("TR", "Turkey"),
        ("UA", "Ukraine"),
        ("GB", "United Kingdom"),
        # Other markets
        ("US", "United States"),
        ("CA", "Canada"),
        ("AU", "Australia"),
        ("JP", "Japan"),
        ("BR", "Brazil"),
        ("MX", "Mexico"),
        ("SG", "Singapore"),
        ("AE", "United Arab Emirates"),
        ("SA", "Saudi Arabia"),
        ("ZA", "South Africa"),
        ("NG", "Nigeria"),
        ("EG", "Egypt"),
        ("AR", "Argentina"),
        ("CL", "Chile"),
        ("CO", "Colombia"),
        ("PE", "Peru"),
    ]
]


async def seed(migrate: bool = True) -> int:
    """Connect, optionally ensure the schema, seed countries; returns rows inserted"""
    settings = get_settings()
    db = PostgresClient(
        settings.infrastructure,
        service_name=f"{settings.logging.service_name}_seed",
        on_connect=apply_schema if migrate else None,
    )
    await db.connect()
    try:
        service = CountryService(CountryRepository(db))
        return await service.seed_countries(DEFAULT_COUNTRIES)
    finally:
        await db.disconnect()


def main(argv=None) -> int:
    parser = argparse.ArgumentParser(description="Seed the country directory")
    parser.add_argument(
        "--no-migrate",
        action="store_true",
        help="Do not create missing tables before seeding",
    )
    args = parser.parse_args(argv)

    setup_logging(get_settings().logging)
    try:
        inserted = asyncio.run(seed(migrate=not args.no_migrate))
    except Exception as e:
        logger.error(f"Seeding failed: {e}")
        return 1

    logger.info(f"Seed complete, {inserted} countries inserted")
    return 0


if __name__ == "__main__":
    sys.exit(main())
