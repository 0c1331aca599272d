"""
Campaign Service Factory

Factory for creating campaign service instances with proper dependency injection.
"""

import asyncio
import logging
from typing import Optional

from core.config import AppConfig, get_settings
from core.postgres_client import PostgresClient

from .campaign_repository import CampaignRepository
from .campaign_service import CampaignService
from .clients.integration_client import IntegrationClient
from .country_repository import CountryRepository
from .country_service import CountryService
from .migrations import apply_schema
from .payout_repository import PayoutRepository
from .payout_service import PayoutService

logger = logging.getLogger(__name__)


class CampaignServiceFactory:
    """Factory for creating campaign service components"""

    def __init__(self, config: Optional[AppConfig] = None):
        self.config = config or get_settings()
        self._db: Optional[PostgresClient] = None
        self._integration_client: Optional[IntegrationClient] = None
        self._campaign_service: Optional[CampaignService] = None
        self._payout_service: Optional[PayoutService] = None
        self._country_service: Optional[CountryService] = None

    def initialize(self) -> None:
        """Wire all components; the store connects later via start()"""
        logger.info("Initializing Campaign Service components...")

        infra = self.config.infrastructure
        self._db = PostgresClient(
            infra,
            service_name=self.config.logging.service_name,
            on_connect=apply_schema if infra.db_auto_migrate else None,
        )

        self._integration_client = IntegrationClient(
            base_url=self.config.services.integration_api_url,
            timeout=self.config.services.integration_timeout,
        )

        campaign_repository = CampaignRepository(self._db)
        payout_repository = PayoutRepository(self._db)
        country_repository = CountryRepository(self._db)

        self._campaign_service = CampaignService(
            repository=campaign_repository,
            country_repository=country_repository,
            integration_client=self._integration_client,
        )
        self._payout_service = PayoutService(
            repository=payout_repository,
            campaign_repository=campaign_repository,
            country_repository=country_repository,
            integration_client=self._integration_client,
        )
        self._country_service = CountryService(repository=country_repository)

        logger.info("Campaign Service components initialized")

    def start(self) -> asyncio.Task:
        """Begin connecting to the store in the background"""
        return self.db.start_background_connect()

    async def close(self) -> None:
        """Close all components"""
        logger.info("Closing Campaign Service components...")

        if self._integration_client:
            await self._integration_client.close()

        if self._db:
            await self._db.disconnect()

        logger.info("Campaign Service components closed")

    @property
    def is_store_available(self) -> bool:
        return self._db is not None and self._db.is_connected

    @property
    def db(self) -> PostgresClient:
        """Get store connection"""
        if not self._db:
            raise RuntimeError("Factory not initialized. Call initialize() first.")
        return self._db

    @property
    def integration_client(self) -> IntegrationClient:
        """Get integration client"""
        if not self._integration_client:
            raise RuntimeError("Factory not initialized. Call initialize() first.")
        return self._integration_client

    @property
    def campaign_service(self) -> CampaignService:
        """Get campaign service"""
        if not self._campaign_service:
            raise RuntimeError("Factory not initialized. Call initialize() first.")
        return self._campaign_service

    @property
    def payout_service(self) -> PayoutService:
        """Get payout service"""
        if not self._payout_service:
            raise RuntimeError("Factory not initialized. Call initialize() first.")
        return self._payout_service

    @property
    def country_service(self) -> CountryService:
        """Get country service"""
        if not self._country_service:
            raise RuntimeError("Factory not initialized. Call initialize() first.")
        return self._country_service


__all__ = ["CampaignServiceFactory"]
