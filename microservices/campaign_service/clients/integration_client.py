"""
Integration Service Client

Fire-and-forget notifier that reports campaign and payout lifecycle events
to integration_service.

Delivery is at-most-once: each event is a single POST scheduled as a
background task. Network errors, timeouts and non-2xx responses are logged
and dropped; there is no retry and no queue.
"""

import asyncio
import logging
from typing import Any, Dict, Optional, Set

import httpx

from core.service_client_base import BaseServiceClient
from ..models import Campaign, Payout, SyncAction

logger = logging.getLogger(__name__)


class IntegrationClient(BaseServiceClient):
    """Client for integration_service"""

    service_name = "integration_service"
    default_port = 4000

    CAMPAIGN_SYNC_PATH = "/sync/campaign"
    PAYOUT_SYNC_PATH = "/sync/payout"

    def __init__(
        self,
        base_url: Optional[str] = None,
        timeout: float = 10.0,
        transport: Optional[httpx.AsyncBaseTransport] = None,
    ):
        super().__init__(base_url=base_url, timeout=timeout, transport=transport)
        self._pending: Set[asyncio.Task] = set()
        self.sent_count = 0
        self.failed_count = 0

    @property
    def pending_count(self) -> int:
        return len(self._pending)

    # ========================================
    # Campaign events
    # ========================================

    def notify_campaign_created(self, campaign: Campaign) -> None:
        self._send_campaign(SyncAction.CREATE, campaign)

    def notify_campaign_updated(self, campaign: Campaign) -> None:
        self._send_campaign(SyncAction.UPDATE, campaign)

    def notify_campaign_started(self, campaign: Campaign) -> None:
        self._send_campaign(SyncAction.START, campaign)

    def notify_campaign_stopped(self, campaign: Campaign) -> None:
        self._send_campaign(SyncAction.STOP, campaign)

    def notify_campaign_deleted(self, campaign: Campaign) -> None:
        self._send_campaign(SyncAction.DELETE, campaign)

    # ========================================
    # Payout events
    # ========================================

    def notify_payout_created(self, payout: Payout) -> None:
        self._send_payout(SyncAction.CREATE, payout)

    def notify_payout_updated(self, payout: Payout) -> None:
        self._send_payout(SyncAction.UPDATE, payout)

    def notify_payout_deleted(self, payout: Payout) -> None:
        self._send_payout(SyncAction.DELETE, payout)

    # ========================================
    # Delivery
    # ========================================

    def _send_campaign(self, action: SyncAction, campaign: Campaign) -> None:
        payload = {
            "action": action.value,
            "campaign": campaign.model_dump(mode="json", by_alias=True),
        }
        self._dispatch(self.CAMPAIGN_SYNC_PATH, payload)

    def _send_payout(self, action: SyncAction, payout: Payout) -> None:
        payload = {
            "action": action.value,
            "payout": payout.model_dump(mode="json", by_alias=True),
        }
        self._dispatch(self.PAYOUT_SYNC_PATH, payload)

    def _dispatch(self, path: str, payload: Dict[str, Any]) -> None:
        """Schedule delivery without awaiting it"""
        try:
            task = asyncio.get_running_loop().create_task(self._post(path, payload))
        except RuntimeError:
            logger.error(f"No running event loop, dropping {payload['action']} event for {path}")
            self.failed_count += 1
            return

        self._pending.add(task)
        task.add_done_callback(self._pending.discard)

    async def _post(self, path: str, payload: Dict[str, Any]) -> None:
        action = payload.get("action")
        try:
            response = await self.post(path, json=payload)
            response.raise_for_status()
            self.sent_count += 1
            logger.debug(f"Delivered {action} event to {self.service_name}{path}")

        except httpx.HTTPStatusError as e:
            self.failed_count += 1
            logger.error(
                f"Integration service rejected {action} event for {path}: "
                f"{e.response.status_code} {e.response.text}"
            )

        except Exception as e:
            self.failed_count += 1
            logger.error(f"Failed to deliver {action} event to {path}: {e}")

    async def drain(self, timeout: Optional[float] = None) -> None:
        """Wait for in-flight deliveries, cancelling whatever is left after ``timeout``"""
        if not self._pending:
            return

        pending = list(self._pending)
        logger.info(f"Draining {len(pending)} pending integration events")
        _, not_done = await asyncio.wait(pending, timeout=timeout)
        for task in not_done:
            task.cancel()
        if not_done:
            logger.warning(f"Dropped {len(not_done)} integration events on shutdown")

    async def close(self):
        await self.drain(timeout=5.0)
        await super().close()


__all__ = ["IntegrationClient"]
