"""
Component Tests for the asyncpg repositories

Checks SQL shape, parameters and row mapping against a scripted mock
PostgresClient.
"""

from datetime import datetime
from decimal import Decimal

import pytest

from microservices.campaign_service.campaign_repository import CampaignRepository
from microservices.campaign_service.country_repository import CountryRepository
from microservices.campaign_service.payout_repository import PayoutRepository

pytestmark = pytest.mark.component

NOW = datetime(2024, 5, 1, 12, 0, 0)


def campaign_row(campaign_id=1, title="Acme", is_running=False):
    return {
        "id": campaign_id,
        "title": title,
        "landingPageUrl": "https://acme.com",
        "isRunning": is_running,
        "createdAt": NOW,
        "updatedAt": NOW,
    }


def payout_row(payout_id=10, campaign_id=1, country_id=2, amount=Decimal("1.50")):
    return {
        "id": payout_id,
        "amount": amount,
        "budget": None,
        "autoStop": False,
        "budgetAlert": False,
        "budgetAlertEmail": None,
        "createdAt": NOW,
        "updatedAt": NOW,
        "campaign_id": campaign_id,
        "country_id": country_id,
        "country_code": "EE",
        "country_name": "Estonia",
    }


class TestCampaignRepository:

    async def test_list_without_filters(self, mock_db):
        mock_db.queue("query", [campaign_row(1), campaign_row(2, title="Beta")], [payout_row(campaign_id=2)])
        repo = CampaignRepository(mock_db)

        campaigns = await repo.list_campaigns()

        assert "WHERE" not in mock_db.sql(0)
        assert mock_db.sql(0).endswith("ORDER BY id")
        assert mock_db.params(1) == [[1, 2]]
        assert [len(c.payouts) for c in campaigns] == [0, 1]
        assert campaigns[1].payouts[0].country.code == "EE"

    async def test_list_with_search_and_running_filter(self, mock_db):
        repo = CampaignRepository(mock_db)

        await repo.list_campaigns(search="50%_off", is_running=True)

        sql = mock_db.sql(0)
        assert 'title ILIKE $1 OR "landingPageUrl" ILIKE $1' in sql
        assert '"isRunning" = $2' in sql
        assert mock_db.params(0) == ["%50\\%\\_off%", True]

    async def test_list_with_running_false_filter(self, mock_db):
        repo = CampaignRepository(mock_db)

        await repo.list_campaigns(is_running=False)

        assert '"isRunning" = $1' in mock_db.sql(0)
        assert mock_db.params(0) == [False]

    async def test_get_maps_camel_case_columns(self, mock_db):
        mock_db.queue("query_row", campaign_row(is_running=True))
        mock_db.queue("query", [payout_row()])
        repo = CampaignRepository(mock_db)

        campaign = await repo.get_campaign(1)

        assert campaign.landing_page_url == "https://acme.com"
        assert campaign.is_running is True
        assert campaign.payouts[0].amount == Decimal("1.50")

    async def test_get_missing_returns_none(self, mock_db):
        assert await CampaignRepository(mock_db).get_campaign(9) is None

    async def test_create_inserts_campaign_and_payouts_in_one_transaction(self, mock_db):
        mock_db.queue("query_value", 5)
        mock_db.queue("query_row", campaign_row(5))
        repo = CampaignRepository(mock_db)
        payouts = [
            {"country_id": 2, "amount": Decimal("1"), "budget": None, "auto_stop": True,
             "budget_alert": False, "budget_alert_email": None},
        ]

        campaign = await repo.create_campaign(
            {"title": "Acme", "landing_page_url": "https://acme.com", "is_running": False}, payouts
        )

        assert mock_db.transactions == 1
        assert mock_db.queries[0][0] == "query_value"
        assert "INSERT INTO campaigns" in mock_db.sql(0)
        method, sql, params = mock_db.queries[1]
        assert method == "execute_many"
        assert params == [[Decimal("1"), None, True, False, None, 5, 2]]
        assert campaign.id == 5

    async def test_update_builds_set_clause_from_known_fields(self, mock_db):
        mock_db.queue("query_value", 3)
        mock_db.queue("query_row", campaign_row(3, title="New"))
        repo = CampaignRepository(mock_db)

        campaign = await repo.update_campaign(3, {"title": "New", "is_running": True, "bogus": 1})

        sql = mock_db.sql(0)
        assert 'title = $1' in sql
        assert '"isRunning" = $2' in sql
        assert '"updatedAt" = now()' in sql
        assert "bogus" not in sql
        assert mock_db.params(0) == ["New", True, 3]
        assert campaign.title == "New"

    async def test_update_upserts_payouts_on_conflict(self, mock_db):
        mock_db.queue("query_value", 3)
        mock_db.queue("query_row", campaign_row(3))
        repo = CampaignRepository(mock_db)

        await repo.update_campaign(3, {}, payouts=[{"country_id": 1, "amount": Decimal("2")}])

        method, sql, params = mock_db.queries[1]
        assert method == "execute_many"
        assert "ON CONFLICT (campaign_id, country_id) DO UPDATE" in sql
        assert params == [[Decimal("2"), None, False, False, None, 3, 1]]

    async def test_update_missing_returns_none(self, mock_db):
        repo = CampaignRepository(mock_db)

        assert await repo.update_campaign(3, {"title": "x"}, payouts=[{"country_id": 1, "amount": 1}]) is None
        assert len(mock_db.queries) == 1

    async def test_delete(self, mock_db):
        mock_db.queue("query_value", 4, None)
        repo = CampaignRepository(mock_db)

        assert await repo.delete_campaign(4) is True
        assert await repo.delete_campaign(4) is False
        assert "DELETE FROM campaigns" in mock_db.sql(0)


class TestPayoutRepository:

    async def test_create_returns_none_on_conflict(self, mock_db):
        mock_db.queue("query_value", None)
        repo = PayoutRepository(mock_db)

        result = await repo.create_payout(1, 2, {"amount": Decimal("1")})

        assert result is None
        assert "ON CONFLICT (campaign_id, country_id) DO NOTHING" in mock_db.sql(0)

    async def test_create_reloads_with_country(self, mock_db):
        mock_db.queue("query_value", 10)
        mock_db.queue("query_row", payout_row())
        repo = PayoutRepository(mock_db)

        payout = await repo.create_payout(1, 2, {"amount": Decimal("1.50"), "budget_alert": False})

        assert payout.id == 10
        assert payout.country.name == "Estonia"

    async def test_get_with_campaign_loads_summary(self, mock_db):
        mock_db.queue("query_row", payout_row(), campaign_row(is_running=True))
        repo = PayoutRepository(mock_db)

        payout = await repo.get_payout(10, with_campaign=True)

        assert payout.campaign.is_running is True
        assert payout.campaign.id == 1

    async def test_update_maps_columns(self, mock_db):
        mock_db.queue("query_value", 10)
        mock_db.queue("query_row", payout_row())
        repo = PayoutRepository(mock_db)

        await repo.update_payout(10, {"budget_alert": True, "budget_alert_email": "a@acme.com"})

        sql = mock_db.sql(0)
        assert '"budgetAlert" = $1' in sql
        assert '"budgetAlertEmail" = $2' in sql
        assert mock_db.params(0) == [True, "a@acme.com", 10]


class TestCountryRepository:

    async def test_list_orders_by_name(self, mock_db):
        mock_db.queue("query", [{"id": 1, "code": "EE", "name": "Estonia"}])

        countries = await CountryRepository(mock_db).list_countries()

        assert "ORDER BY name ASC" in mock_db.sql(0)
        assert countries[0].code == "EE"

    async def test_bulk_insert_counts_inserted_rows(self, mock_db):
        mock_db.queue("query", [{"id": 1}, {"id": 2}])

        inserted = await CountryRepository(mock_db).create_countries(
            [{"code": "ee", "name": "Estonia"}, {"code": "LV", "name": "Latvia"}]
        )

        assert inserted == 2
        assert mock_db.params(0) == [["EE", "LV"], ["Estonia", "Latvia"]]
        assert "ON CONFLICT (code) DO NOTHING" in mock_db.sql(0)

    async def test_count_defaults_to_zero(self, mock_db):
        assert await CountryRepository(mock_db).count_countries() == 0
