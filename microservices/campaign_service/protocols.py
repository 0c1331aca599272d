"""
Campaign Service Protocols

Defines interfaces for dependency injection and testing.
Following the protocol-based architecture pattern.
"""

from typing import Any, Dict, List, Optional, Protocol

from .models import Campaign, Country, Payout


# ====================
# Repository Protocols
# ====================


class CampaignRepositoryProtocol(Protocol):
    """Protocol for campaign data repository"""

    async def list_campaigns(
        self,
        search: Optional[str] = None,
        is_running: Optional[bool] = None,
    ) -> List[Campaign]:
        """List campaigns with payouts and countries"""
        ...

    async def get_campaign(self, campaign_id: int) -> Optional[Campaign]:
        """Get campaign with payouts and countries"""
        ...

    async def create_campaign(
        self, data: Dict[str, Any], payouts: List[Dict[str, Any]]
    ) -> Campaign:
        """Insert campaign and its nested payouts atomically"""
        ...

    async def update_campaign(
        self,
        campaign_id: int,
        updates: Dict[str, Any],
        payouts: Optional[List[Dict[str, Any]]] = None,
    ) -> Optional[Campaign]:
        """Update campaign columns and upsert nested payouts by country"""
        ...

    async def delete_campaign(self, campaign_id: int) -> bool:
        """Delete campaign; payouts cascade"""
        ...


class PayoutRepositoryProtocol(Protocol):
    """Protocol for payout data repository"""

    async def list_payouts_by_campaign(self, campaign_id: int) -> List[Payout]:
        ...

    async def get_payout(self, payout_id: int, with_campaign: bool = False) -> Optional[Payout]:
        ...

    async def get_payout_by_campaign_and_country(
        self, campaign_id: int, country_id: int
    ) -> Optional[Payout]:
        ...

    async def create_payout(
        self, campaign_id: int, country_id: int, data: Dict[str, Any]
    ) -> Optional[Payout]:
        """Insert payout; None if the (campaign, country) pair already exists"""
        ...

    async def update_payout(self, payout_id: int, updates: Dict[str, Any]) -> Optional[Payout]:
        ...

    async def delete_payout(self, payout_id: int) -> bool:
        ...


class CountryRepositoryProtocol(Protocol):
    """Protocol for country data repository"""

    async def list_countries(self) -> List[Country]:
        ...

    async def get_country(self, country_id: int) -> Optional[Country]:
        ...

    async def get_country_by_code(self, code: str) -> Optional[Country]:
        ...

    async def get_countries_by_ids(self, country_ids: List[int]) -> List[Country]:
        ...

    async def count_countries(self) -> int:
        ...

    async def create_country(self, code: str, name: str) -> Country:
        ...

    async def create_countries(self, countries: List[Dict[str, str]]) -> int:
        ...

    async def update_country(self, country_id: int, updates: Dict[str, Any]) -> Optional[Country]:
        ...

    async def delete_country(self, country_id: int) -> bool:
        ...


# ====================
# Client Protocols
# ====================


class IntegrationClientProtocol(Protocol):
    """
    Protocol for the integration service notifier.

    Every method returns immediately; delivery happens in the background and
    failures are logged and dropped.
    """

    def notify_campaign_created(self, campaign: Campaign) -> None:
        ...

    def notify_campaign_updated(self, campaign: Campaign) -> None:
        ...

    def notify_campaign_started(self, campaign: Campaign) -> None:
        ...

    def notify_campaign_stopped(self, campaign: Campaign) -> None:
        ...

    def notify_campaign_deleted(self, campaign: Campaign) -> None:
        ...

    def notify_payout_created(self, payout: Payout) -> None:
        ...

    def notify_payout_updated(self, payout: Payout) -> None:
        ...

    def notify_payout_deleted(self, payout: Payout) -> None:
        ...


# ====================
# Custom Exceptions
# ====================


class CampaignServiceError(Exception):
    """Base exception for campaign service errors"""
    pass


class NotFoundError(CampaignServiceError):
    """Raised by the HTTP layer when a referenced entity does not exist"""
    pass


class CampaignValidationError(CampaignServiceError):
    """Raised when input passes schema validation but violates a domain rule"""

    def __init__(self, message: str, field: Optional[str] = None):
        super().__init__(message)
        self.field = field


__all__ = [
    "CampaignRepositoryProtocol",
    "PayoutRepositoryProtocol",
    "CountryRepositoryProtocol",
    "IntegrationClientProtocol",
    "CampaignServiceError",
    "NotFoundError",
    "CampaignValidationError",
]
