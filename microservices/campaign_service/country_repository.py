"""
Country Repository

Data access layer for the country directory - PostgreSQL (asyncpg)
"""

import logging
from typing import Any, Dict, List, Optional

import asyncpg

from core.postgres_client import PostgresClient
from .models import Country
from .protocols import CampaignValidationError

logger = logging.getLogger(__name__)


class CountryRepository:
    """Country data repository - PostgreSQL (Async)"""

    def __init__(self, db: PostgresClient):
        self.db = db

    async def list_countries(self) -> List[Country]:
        """All countries ordered by name"""
        rows = await self.db.query("SELECT id, code, name FROM countries ORDER BY name ASC")
        return [Country.model_validate(row) for row in rows]

    async def get_country(self, country_id: int) -> Optional[Country]:
        row = await self.db.query_row("SELECT id, code, name FROM countries WHERE id = $1", [country_id])
        return Country.model_validate(row) if row else None

    async def get_country_by_code(self, code: str) -> Optional[Country]:
        row = await self.db.query_row(
            "SELECT id, code, name FROM countries WHERE code = $1", [code.upper()]
        )
        return Country.model_validate(row) if row else None

    async def get_countries_by_ids(self, country_ids: List[int]) -> List[Country]:
        if not country_ids:
            return []
        rows = await self.db.query(
            "SELECT id, code, name FROM countries WHERE id = ANY($1::int[]) ORDER BY id",
            [list(country_ids)],
        )
        return [Country.model_validate(row) for row in rows]

    async def count_countries(self) -> int:
        return await self.db.query_value("SELECT COUNT(*) FROM countries") or 0

    async def create_country(self, code: str, name: str) -> Country:
        try:
            row = await self.db.query_row(
                "INSERT INTO countries (code, name) VALUES ($1, $2) RETURNING id, code, name",
                [code.upper(), name],
            )
        except asyncpg.exceptions.UniqueViolationError:
            raise CampaignValidationError(f"Country code {code.upper()} already exists", field="code")
        return Country.model_validate(row)

    async def create_countries(self, countries: List[Dict[str, str]]) -> int:
        """Bulk insert (code, name) pairs, skipping codes that already exist"""
        if not countries:
            return 0
        try:
            rows = await self.db.query(
                '''
                INSERT INTO countries (code, name)
                SELECT * FROM unnest($1::varchar[], $2::varchar[])
                ON CONFLICT (code) DO NOTHING
                RETURNING id
                ''',
                [[c["code"].upper() for c in countries], [c["name"] for c in countries]],
            )
            return len(rows)
        except Exception as e:
            logger.error(f"Error inserting {len(countries)} countries: {e}")
            raise

    async def update_country(self, country_id: int, updates: Dict[str, Any]) -> Optional[Country]:
        set_clauses = []
        params: List[Any] = []
        param_count = 0

        for key in ("code", "name"):
            if updates.get(key) is None:
                continue
            param_count += 1
            set_clauses.append(f"{key} = ${param_count}")
            params.append(updates[key].upper() if key == "code" else updates[key])

        if not set_clauses:
            return await self.get_country(country_id)

        param_count += 1
        params.append(country_id)
        try:
            row = await self.db.query_row(
                f'''
                UPDATE countries SET {", ".join(set_clauses)}
                WHERE id = ${param_count}
                RETURNING id, code, name
                ''',
                params,
            )
        except asyncpg.exceptions.UniqueViolationError:
            raise CampaignValidationError("Country code already exists", field="code")
        return Country.model_validate(row) if row else None

    async def delete_country(self, country_id: int) -> bool:
        try:
            deleted = await self.db.query_value(
                "DELETE FROM countries WHERE id = $1 RETURNING id", [country_id]
            )
        except asyncpg.exceptions.ForeignKeyViolationError:
            raise CampaignValidationError("Country is referenced by existing payouts", field="id")
        return deleted is not None


__all__ = ["CountryRepository"]
