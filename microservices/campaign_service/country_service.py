"""
Country Service Business Logic

Read-mostly country directory plus the one-time seed.
"""

import logging
from typing import Any, Dict, List, Optional, Sequence, Union

from .models import Country, CountrySeed
from .protocols import CountryRepositoryProtocol

logger = logging.getLogger(__name__)


class CountryService:
    """Country directory business logic layer"""

    def __init__(self, repository: CountryRepositoryProtocol):
        self.repository = repository

    async def list_countries(self) -> List[Country]:
        return await self.repository.list_countries()

    async def get_country(self, country_id: int) -> Optional[Country]:
        return await self.repository.get_country(country_id)

    async def get_country_by_code(self, code: str) -> Optional[Country]:
        return await self.repository.get_country_by_code(code)

    async def seed_countries(
        self, countries: Sequence[Union[CountrySeed, Dict[str, str]]]
    ) -> int:
        """
        Insert the given countries unless the directory already has rows.

        Returns the number of inserted rows (0 when skipped).
        """
        existing = await self.repository.count_countries()
        if existing > 0:
            logger.info(f"Countries already seeded ({existing} rows), skipping")
            return 0

        seeds = [CountrySeed.model_validate(c).model_dump() for c in countries]
        inserted = await self.repository.create_countries(seeds)
        logger.info(f"Seeded {inserted} countries")
        return inserted

    async def create_country(self, code: str, name: str) -> Country:
        seed = CountrySeed(code=code, name=name)
        return await self.repository.create_country(seed.code, seed.name)

    async def update_country(self, country_id: int, updates: Dict[str, Any]) -> Optional[Country]:
        return await self.repository.update_country(country_id, updates)

    async def delete_country(self, country_id: int) -> bool:
        return await self.repository.delete_country(country_id)
