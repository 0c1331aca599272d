"""
Campaign Service Business Logic

Campaign lifecycle (create, update, toggle, delete) and the rules for
which lifecycle event is reported to the integration service.
"""

import logging
from typing import List, Optional

from .models import (
    Campaign,
    CampaignCreateRequest,
    CampaignUpdateRequest,
    PayoutFields,
)
from .protocols import (
    CampaignRepositoryProtocol,
    CountryRepositoryProtocol,
    IntegrationClientProtocol,
    CampaignValidationError,
)

logger = logging.getLogger(__name__)


class CampaignService:
    """Campaign service business logic layer"""

    def __init__(
        self,
        repository: CampaignRepositoryProtocol,
        country_repository: CountryRepositoryProtocol,
        integration_client: Optional[IntegrationClientProtocol] = None,
    ):
        self.repository = repository
        self.country_repository = country_repository
        self.integration_client = integration_client

    # ====================
    # Queries
    # ====================

    async def list_campaigns(
        self,
        search: Optional[str] = None,
        is_running: Optional[bool] = None,
    ) -> List[Campaign]:
        """
        List campaigns with payouts and countries.

        ``search`` matches title or landing page URL (case-insensitive
        substring); ``is_running`` narrows by flag. Both combine with AND.
        """
        return await self.repository.list_campaigns(search=search or None, is_running=is_running)

    async def get_campaign(self, campaign_id: int) -> Optional[Campaign]:
        return await self.repository.get_campaign(campaign_id)

    # ====================
    # Mutations
    # ====================

    async def create_campaign(self, request: CampaignCreateRequest) -> Campaign:
        """
        Create a campaign and its nested payouts.

        Notifies "create" only when the campaign starts out running.
        """
        await self._validate_payout_countries(request.payouts)

        data = request.model_dump(exclude={"payouts"})
        payouts = [p.model_dump() for p in request.payouts]
        campaign = await self.repository.create_campaign(data, payouts)

        logger.info(f"Campaign {campaign.id} created (running={campaign.is_running})")
        if campaign.is_running and self.integration_client:
            self.integration_client.notify_campaign_created(campaign)
        return campaign

    async def update_campaign(
        self, campaign_id: int, request: CampaignUpdateRequest
    ) -> Optional[Campaign]:
        """
        Apply supplied fields and nested payouts (upserted by country).

        Exactly one notification is chosen from the running flag before and
        after the change: start, stop, update (still running) or none.
        """
        existing = await self.repository.get_campaign(campaign_id)
        if not existing:
            return None

        if request.payouts:
            await self._validate_payout_countries(request.payouts)

        was_running = existing.is_running
        payouts = [p.model_dump() for p in request.payouts] if request.payouts else None
        campaign = await self.repository.update_campaign(campaign_id, request.to_updates(), payouts)
        if not campaign:
            # Deleted concurrently
            return None

        self._notify_transition(campaign, was_running)
        return campaign

    async def toggle_campaign_status(self, campaign_id: int) -> Optional[Campaign]:
        """Flip the running flag; notifies start or stop"""
        existing = await self.repository.get_campaign(campaign_id)
        if not existing:
            return None

        campaign = await self.repository.update_campaign(
            campaign_id, {"is_running": not existing.is_running}
        )
        if not campaign:
            return None

        logger.info(f"Campaign {campaign_id} toggled to running={campaign.is_running}")
        if self.integration_client:
            if campaign.is_running:
                self.integration_client.notify_campaign_started(campaign)
            else:
                self.integration_client.notify_campaign_stopped(campaign)
        return campaign

    async def delete_campaign(self, campaign_id: int) -> bool:
        """Delete a campaign and its payouts; notifies "delete" if it was running"""
        campaign = await self.repository.get_campaign(campaign_id)
        if not campaign:
            return False

        deleted = await self.repository.delete_campaign(campaign_id)
        if not deleted:
            return False

        logger.info(f"Campaign {campaign_id} deleted")
        if campaign.is_running and self.integration_client:
            self.integration_client.notify_campaign_deleted(campaign)
        return True

    # ====================
    # Helpers
    # ====================

    def _notify_transition(self, campaign: Campaign, was_running: bool) -> None:
        if not self.integration_client:
            return

        if not was_running and campaign.is_running:
            self.integration_client.notify_campaign_started(campaign)
        elif was_running and not campaign.is_running:
            self.integration_client.notify_campaign_stopped(campaign)
        elif campaign.is_running:
            self.integration_client.notify_campaign_updated(campaign)

    async def _validate_payout_countries(self, payouts: List[PayoutFields]) -> None:
        if not payouts:
            return

        requested = {p.country_id for p in payouts}
        found = {c.id for c in await self.country_repository.get_countries_by_ids(sorted(requested))}
        missing = sorted(requested - found)
        if missing:
            raise CampaignValidationError(
                f"Unknown country id(s): {', '.join(str(m) for m in missing)}",
                field="payouts",
            )
