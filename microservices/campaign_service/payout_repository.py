"""
Payout Repository

Data access layer for payouts - PostgreSQL (asyncpg)
"""

import logging
from typing import Any, Dict, List, Optional

from core.postgres_client import PostgresClient
from .models import CampaignSummary, Country, Payout

logger = logging.getLogger(__name__)

# Domain field -> column
PAYOUT_COLUMNS = {
    "amount": "amount",
    "budget": "budget",
    "auto_stop": '"autoStop"',
    "budget_alert": '"budgetAlert"',
    "budget_alert_email": '"budgetAlertEmail"',
}

PAYOUT_SELECT = '''
    SELECT p.id, p.amount, p.budget, p."autoStop", p."budgetAlert",
           p."budgetAlertEmail", p."createdAt", p."updatedAt",
           p.campaign_id, p.country_id,
           c.code AS country_code, c.name AS country_name
    FROM payouts p
    JOIN countries c ON c.id = p.country_id
'''


def row_to_payout(row: Dict[str, Any]) -> Payout:
    """Convert a PAYOUT_SELECT row to a Payout with its Country"""
    return Payout(
        id=row["id"],
        amount=row["amount"],
        budget=row.get("budget"),
        auto_stop=row["autoStop"],
        budget_alert=row["budgetAlert"],
        budget_alert_email=row.get("budgetAlertEmail"),
        campaign_id=row["campaign_id"],
        country_id=row["country_id"],
        country=Country(id=row["country_id"], code=row["country_code"], name=row["country_name"]),
        created_at=row.get("createdAt"),
        updated_at=row.get("updatedAt"),
    )


async def load_payouts(db, campaign_ids: List[int]) -> Dict[int, List[Payout]]:
    """
    Load payouts for several campaigns in one query.

    ``db`` is either the PostgresClient or a DBConnection inside a transaction.
    """
    grouped: Dict[int, List[Payout]] = {cid: [] for cid in campaign_ids}
    if not campaign_ids:
        return grouped

    rows = await db.query(
        f"{PAYOUT_SELECT} WHERE p.campaign_id = ANY($1::int[]) ORDER BY p.id",
        [campaign_ids],
    )
    for row in rows:
        grouped.setdefault(row["campaign_id"], []).append(row_to_payout(row))
    return grouped


def payout_insert_values(data: Dict[str, Any]) -> List[Any]:
    """Positional values for amount, budget, autoStop, budgetAlert, budgetAlertEmail"""
    return [
        data["amount"],
        data.get("budget"),
        bool(data.get("auto_stop", False)),
        bool(data.get("budget_alert", False)),
        data.get("budget_alert_email"),
    ]


class PayoutRepository:
    """Payout data repository - PostgreSQL (Async)"""

    def __init__(self, db: PostgresClient):
        self.db = db

    async def list_payouts_by_campaign(self, campaign_id: int) -> List[Payout]:
        """All payouts of a campaign with their country"""
        try:
            rows = await self.db.query(
                f"{PAYOUT_SELECT} WHERE p.campaign_id = $1 ORDER BY p.id",
                [campaign_id],
            )
            return [row_to_payout(row) for row in rows]
        except Exception as e:
            logger.error(f"Error listing payouts for campaign {campaign_id}: {e}")
            raise

    async def get_payout(self, payout_id: int, with_campaign: bool = False) -> Optional[Payout]:
        """Get payout by ID, optionally with its parent campaign"""
        try:
            row = await self.db.query_row(f"{PAYOUT_SELECT} WHERE p.id = $1", [payout_id])
            if not row:
                return None

            payout = row_to_payout(row)
            if with_campaign:
                campaign_row = await self.db.query_row(
                    '''
                    SELECT id, title, "landingPageUrl", "isRunning", "createdAt", "updatedAt"
                    FROM campaigns WHERE id = $1
                    ''',
                    [payout.campaign_id],
                )
                if campaign_row:
                    payout.campaign = CampaignSummary.model_validate(campaign_row)
            return payout

        except Exception as e:
            logger.error(f"Error getting payout {payout_id}: {e}")
            raise

    async def get_payout_by_campaign_and_country(
        self, campaign_id: int, country_id: int
    ) -> Optional[Payout]:
        try:
            row = await self.db.query_row(
                f"{PAYOUT_SELECT} WHERE p.campaign_id = $1 AND p.country_id = $2",
                [campaign_id, country_id],
            )
            return row_to_payout(row) if row else None
        except Exception as e:
            logger.error(f"Error getting payout for campaign {campaign_id}, country {country_id}: {e}")
            raise

    async def create_payout(
        self, campaign_id: int, country_id: int, data: Dict[str, Any]
    ) -> Optional[Payout]:
        """Insert payout; returns None when the (campaign, country) pair already exists"""
        try:
            payout_id = await self.db.query_value(
                '''
                INSERT INTO payouts (
                    amount, budget, "autoStop", "budgetAlert", "budgetAlertEmail",
                    campaign_id, country_id
                ) VALUES ($1, $2, $3, $4, $5, $6, $7)
                ON CONFLICT (campaign_id, country_id) DO NOTHING
                RETURNING id
                ''',
                payout_insert_values(data) + [campaign_id, country_id],
            )
            if payout_id is None:
                logger.info(f"Payout for campaign {campaign_id}, country {country_id} already exists")
                return None

            return await self.get_payout(payout_id)

        except Exception as e:
            logger.error(f"Error creating payout for campaign {campaign_id}, country {country_id}: {e}")
            raise

    async def update_payout(self, payout_id: int, updates: Dict[str, Any]) -> Optional[Payout]:
        """Update supplied payout fields"""
        try:
            set_clauses = []
            params: List[Any] = []
            param_count = 0

            for key, value in updates.items():
                column = PAYOUT_COLUMNS.get(key)
                if column is None:
                    continue
                param_count += 1
                set_clauses.append(f"{column} = ${param_count}")
                params.append(value)

            set_clauses.append('"updatedAt" = now()')
            param_count += 1
            params.append(payout_id)

            updated_id = await self.db.query_value(
                f'''
                UPDATE payouts
                SET {", ".join(set_clauses)}
                WHERE id = ${param_count}
                RETURNING id
                ''',
                params,
            )
            if updated_id is None:
                return None

            return await self.get_payout(updated_id)

        except Exception as e:
            logger.error(f"Error updating payout {payout_id}: {e}")
            raise

    async def delete_payout(self, payout_id: int) -> bool:
        try:
            deleted = await self.db.query_value(
                "DELETE FROM payouts WHERE id = $1 RETURNING id", [payout_id]
            )
            return deleted is not None
        except Exception as e:
            logger.error(f"Error deleting payout {payout_id}: {e}")
            raise


__all__ = [
    "PayoutRepository",
    "PAYOUT_COLUMNS",
    "PAYOUT_SELECT",
    "row_to_payout",
    "load_payouts",
    "payout_insert_values",
]
