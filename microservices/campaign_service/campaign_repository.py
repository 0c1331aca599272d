"""
Campaign Service Data Repository

Data access layer - PostgreSQL (asyncpg)
"""

import logging
from typing import Any, Dict, List, Optional

from core.postgres_client import PostgresClient
from .models import Campaign
from .payout_repository import load_payouts, payout_insert_values

logger = logging.getLogger(__name__)

# Domain field -> column
CAMPAIGN_COLUMNS = {
    "title": "title",
    "landing_page_url": '"landingPageUrl"',
    "is_running": '"isRunning"',
}

CAMPAIGN_SELECT = '''
    SELECT id, title, "landingPageUrl", "isRunning", "createdAt", "updatedAt"
    FROM campaigns
'''

INSERT_PAYOUT = '''
    INSERT INTO payouts (
        amount, budget, "autoStop", "budgetAlert", "budgetAlertEmail",
        campaign_id, country_id
    ) VALUES ($1, $2, $3, $4, $5, $6, $7)
'''

UPSERT_PAYOUT = INSERT_PAYOUT + '''
    ON CONFLICT (campaign_id, country_id) DO UPDATE SET
        amount = EXCLUDED.amount,
        budget = EXCLUDED.budget,
        "autoStop" = EXCLUDED."autoStop",
        "budgetAlert" = EXCLUDED."budgetAlert",
        "budgetAlertEmail" = EXCLUDED."budgetAlertEmail",
        "updatedAt" = now()
'''


def _escape_like(value: str) -> str:
    return value.replace("\\", "\\\\").replace("%", "\\%").replace("_", "\\_")


class CampaignRepository:
    """Campaign data repository - PostgreSQL (Async)"""

    def __init__(self, db: PostgresClient):
        self.db = db

    # ====================
    # Campaign CRUD
    # ====================

    async def list_campaigns(
        self,
        search: Optional[str] = None,
        is_running: Optional[bool] = None,
    ) -> List[Campaign]:
        """List campaigns with payouts, filtered by text and running flag"""
        try:
            conditions = []
            params: List[Any] = []
            param_count = 0

            if search:
                param_count += 1
                conditions.append(
                    f'(title ILIKE ${param_count} OR "landingPageUrl" ILIKE ${param_count})'
                )
                params.append(f"%{_escape_like(search)}%")

            if is_running is not None:
                param_count += 1
                conditions.append(f'"isRunning" = ${param_count}')
                params.append(is_running)

            where_clause = f"WHERE {' AND '.join(conditions)}" if conditions else ""
            rows = await self.db.query(f"{CAMPAIGN_SELECT} {where_clause} ORDER BY id", params)
            return await self._with_payouts(self.db, rows)

        except Exception as e:
            logger.error(f"Error listing campaigns: {e}")
            raise

    async def get_campaign(self, campaign_id: int) -> Optional[Campaign]:
        """Get campaign by ID with payouts and countries"""
        try:
            return await self._fetch_campaign(self.db, campaign_id)
        except Exception as e:
            logger.error(f"Error getting campaign {campaign_id}: {e}")
            raise

    async def create_campaign(
        self, data: Dict[str, Any], payouts: List[Dict[str, Any]]
    ) -> Campaign:
        """Insert a campaign and its nested payouts in one transaction"""
        try:
            async with self.db.transaction() as conn:
                campaign_id = await conn.query_value(
                    '''
                    INSERT INTO campaigns (title, "landingPageUrl", "isRunning")
                    VALUES ($1, $2, $3)
                    RETURNING id
                    ''',
                    [data["title"], data["landing_page_url"], bool(data.get("is_running", False))],
                )

                if payouts:
                    await conn.execute_many(
                        INSERT_PAYOUT,
                        [payout_insert_values(p) + [campaign_id, p["country_id"]] for p in payouts],
                    )

                campaign = await self._fetch_campaign(conn, campaign_id)

            logger.info(f"Created campaign {campaign_id} with {len(payouts)} payouts")
            return campaign

        except Exception as e:
            logger.error(f"Error creating campaign: {e}")
            raise

    async def update_campaign(
        self,
        campaign_id: int,
        updates: Dict[str, Any],
        payouts: Optional[List[Dict[str, Any]]] = None,
    ) -> Optional[Campaign]:
        """Update supplied campaign fields and upsert nested payouts by country"""
        try:
            set_clauses = []
            params: List[Any] = []
            param_count = 0

            for key, value in updates.items():
                column = CAMPAIGN_COLUMNS.get(key)
                if column is None:
                    continue
                param_count += 1
                set_clauses.append(f"{column} = ${param_count}")
                params.append(value)

            set_clauses.append('"updatedAt" = now()')
            param_count += 1
            params.append(campaign_id)

            async with self.db.transaction() as conn:
                updated_id = await conn.query_value(
                    f'''
                    UPDATE campaigns
                    SET {", ".join(set_clauses)}
                    WHERE id = ${param_count}
                    RETURNING id
                    ''',
                    params,
                )
                if updated_id is None:
                    return None

                if payouts:
                    await conn.execute_many(
                        UPSERT_PAYOUT,
                        [payout_insert_values(p) + [campaign_id, p["country_id"]] for p in payouts],
                    )

                return await self._fetch_campaign(conn, campaign_id)

        except Exception as e:
            logger.error(f"Error updating campaign {campaign_id}: {e}")
            raise

    async def delete_campaign(self, campaign_id: int) -> bool:
        """Delete campaign; payouts are removed by ON DELETE CASCADE"""
        try:
            deleted = await self.db.query_value(
                "DELETE FROM campaigns WHERE id = $1 RETURNING id", [campaign_id]
            )
            return deleted is not None
        except Exception as e:
            logger.error(f"Error deleting campaign {campaign_id}: {e}")
            raise

    # ====================
    # Helpers
    # ====================

    async def _fetch_campaign(self, db, campaign_id: int) -> Optional[Campaign]:
        row = await db.query_row(f"{CAMPAIGN_SELECT} WHERE id = $1", [campaign_id])
        if not row:
            return None
        campaigns = await self._with_payouts(db, [row])
        return campaigns[0]

    async def _with_payouts(self, db, rows: List[Dict[str, Any]]) -> List[Campaign]:
        payouts = await load_payouts(db, [row["id"] for row in rows])
        return [
            Campaign.model_validate({**row, "payouts": payouts.get(row["id"], [])})
            for row in rows
        ]


__all__ = ["CampaignRepository", "CAMPAIGN_COLUMNS"]
