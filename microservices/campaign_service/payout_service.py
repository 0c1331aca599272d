"""
Payout Service Business Logic

Payouts live under a campaign and a country. Notifications are sent only
while the parent campaign is running.
"""

import logging
from typing import List, Optional

from .models import BUDGET_ALERT_EMAIL_REQUIRED, Payout, PayoutCreateRequest, PayoutUpdateRequest
from .protocols import (
    CampaignRepositoryProtocol,
    CampaignValidationError,
    CountryRepositoryProtocol,
    IntegrationClientProtocol,
    PayoutRepositoryProtocol,
)

logger = logging.getLogger(__name__)


class PayoutService:
    """Payout service business logic layer"""

    def __init__(
        self,
        repository: PayoutRepositoryProtocol,
        campaign_repository: CampaignRepositoryProtocol,
        country_repository: CountryRepositoryProtocol,
        integration_client: Optional[IntegrationClientProtocol] = None,
    ):
        self.repository = repository
        self.campaign_repository = campaign_repository
        self.country_repository = country_repository
        self.integration_client = integration_client

    async def list_payouts_for_campaign(self, campaign_id: int) -> List[Payout]:
        """Payouts of a campaign; an unknown campaign yields an empty list"""
        return await self.repository.list_payouts_by_campaign(campaign_id)

    async def create_payout(
        self, campaign_id: int, request: PayoutCreateRequest
    ) -> Optional[Payout]:
        """
        Create a payout for (campaign, country).

        Returns None when the campaign or country is missing or a payout for
        the pair already exists; nothing is written in either case.
        """
        campaign = await self.campaign_repository.get_campaign(campaign_id)
        country = await self.country_repository.get_country(request.country_id)
        if not campaign or not country:
            return None

        existing = await self.repository.get_payout_by_campaign_and_country(campaign_id, country.id)
        if existing:
            logger.info(f"Payout for campaign {campaign_id}, country {country.code} already exists")
            return None

        payout = await self.repository.create_payout(
            campaign_id, country.id, request.model_dump(exclude={"country_id"})
        )
        if not payout:
            # Lost a race against a concurrent create for the same pair
            return None

        payout.campaign = campaign.summary()
        if campaign.is_running and self.integration_client:
            self.integration_client.notify_payout_created(payout)
        return payout

    async def update_payout(
        self, payout_id: int, request: PayoutUpdateRequest
    ) -> Optional[Payout]:
        """
        Apply supplied fields; notifies "update" if the parent campaign is running.

        Raises CampaignValidationError when the result would have a budget
        alert without an email.
        """
        existing = await self.repository.get_payout(payout_id, with_campaign=True)
        if not existing:
            return None

        updates = request.to_updates()
        budget_alert = updates.get("budget_alert", existing.budget_alert)
        alert_email = updates.get("budget_alert_email", existing.budget_alert_email)
        if budget_alert and not alert_email:
            raise CampaignValidationError(BUDGET_ALERT_EMAIL_REQUIRED, field="budgetAlertEmail")

        payout = await self.repository.update_payout(payout_id, updates)
        if not payout:
            return None

        payout.campaign = existing.campaign
        if existing.campaign and existing.campaign.is_running and self.integration_client:
            self.integration_client.notify_payout_updated(payout)
        return payout

    async def delete_payout(self, payout_id: int) -> bool:
        """Delete a payout; notifies "delete" if the parent was running beforehand"""
        payout = await self.repository.get_payout(payout_id, with_campaign=True)
        if not payout:
            return False

        was_running = bool(payout.campaign and payout.campaign.is_running)
        deleted = await self.repository.delete_payout(payout_id)
        if not deleted:
            return False

        if was_running and self.integration_client:
            self.integration_client.notify_payout_deleted(payout)
        return True
