"""
Component Tests for IntegrationClient

Deliveries go through httpx.MockTransport; every failure mode must be
swallowed so the calling operation is never affected.
"""

from decimal import Decimal

import httpx
import pytest

from microservices.campaign_service.clients.integration_client import IntegrationClient
from tests.component.mocks import RecordingTransport
from tests.fixtures import make_campaign, make_country, make_payout

pytestmark = pytest.mark.component

BASE_URL = "http://integration-api:4000"


def _client(transport: RecordingTransport) -> IntegrationClient:
    return IntegrationClient(base_url=BASE_URL, timeout=1.0, transport=transport)


class TestIntegrationClientDelivery:

    async def test_campaign_event_posts_action_and_camel_case_entity(self, recording_transport):
        client = _client(recording_transport)
        payout = make_payout(campaign_id=7, country=make_country(2, "EE", "Estonia"), amount=Decimal("2.50"))
        campaign = make_campaign(campaign_id=7, title="Acme", is_running=True, payouts=[payout])

        client.notify_campaign_started(campaign)
        await client.drain()

        assert recording_transport.paths == ["/sync/campaign"]
        body = recording_transport.body()
        assert body["action"] == "start"
        assert body["campaign"]["id"] == 7
        assert body["campaign"]["landingPageUrl"] == campaign.landing_page_url
        assert body["campaign"]["isRunning"] is True
        assert body["campaign"]["payouts"][0]["amount"] == 2.5
        assert body["campaign"]["payouts"][0]["country"]["code"] == "EE"
        assert client.sent_count == 1
        await client.close()

    @pytest.mark.parametrize(
        "method,action",
        [
            ("notify_campaign_created", "create"),
            ("notify_campaign_updated", "update"),
            ("notify_campaign_started", "start"),
            ("notify_campaign_stopped", "stop"),
            ("notify_campaign_deleted", "delete"),
        ],
    )
    async def test_campaign_actions(self, recording_transport, method, action):
        client = _client(recording_transport)

        getattr(client, method)(make_campaign())
        await client.drain()

        assert recording_transport.body()["action"] == action
        await client.close()

    @pytest.mark.parametrize(
        "method,action",
        [
            ("notify_payout_created", "create"),
            ("notify_payout_updated", "update"),
            ("notify_payout_deleted", "delete"),
        ],
    )
    async def test_payout_actions(self, recording_transport, method, action):
        client = _client(recording_transport)

        getattr(client, method)(make_payout(budget=Decimal("100"), budget_alert=True, budget_alert_email="a@acme.com"))
        await client.drain()

        assert recording_transport.paths == ["/sync/payout"]
        body = recording_transport.body()
        assert body["action"] == action
        assert body["payout"]["budget"] == 100.0
        assert body["payout"]["budgetAlertEmail"] == "a@acme.com"
        await client.close()

    async def test_notify_returns_before_delivery(self, recording_transport):
        client = _client(recording_transport)

        client.notify_campaign_created(make_campaign())

        assert client.pending_count == 1
        assert recording_transport.requests == []
        await client.drain()
        assert client.pending_count == 0
        assert len(recording_transport.requests) == 1
        await client.close()


class TestIntegrationClientFailures:

    async def test_non_2xx_is_logged_and_dropped(self):
        transport = RecordingTransport(status_code=500)
        client = _client(transport)

        client.notify_campaign_deleted(make_campaign())
        await client.drain()

        assert client.failed_count == 1
        assert client.sent_count == 0
        await client.close()

    async def test_network_error_is_logged_and_dropped(self):
        transport = RecordingTransport(error=httpx.ConnectError("connection refused"))
        client = _client(transport)

        client.notify_payout_created(make_payout())
        await client.drain()

        assert client.failed_count == 1
        await client.close()

    async def test_timeout_is_logged_and_dropped(self):
        transport = RecordingTransport(error=httpx.ReadTimeout("timed out"))
        client = _client(transport)

        client.notify_campaign_updated(make_campaign())
        await client.drain()

        assert client.failed_count == 1
        await client.close()

    async def test_no_retry_after_failure(self):
        transport = RecordingTransport(status_code=503)
        client = _client(transport)

        client.notify_campaign_started(make_campaign())
        await client.drain()

        assert len(transport.requests) == 1
        await client.close()

    def test_without_event_loop_event_is_dropped(self, recording_transport):
        client = _client(recording_transport)

        client.notify_campaign_created(make_campaign())

        assert client.failed_count == 1
        assert client.pending_count == 0


class TestIntegrationClientConfig:

    def test_default_base_url_uses_default_port(self):
        client = IntegrationClient()

        assert client.base_url == "http://localhost:4000"

    def test_trailing_slash_is_stripped(self):
        client = IntegrationClient(base_url="http://integration-api:4000/")

        assert client.base_url == BASE_URL


class TestIntegrationClientHealth:

    async def test_health_check_hits_health_endpoint(self):
        transport = RecordingTransport(status_code=200)
        client = _client(transport)

        assert await client.health_check() is True
        assert transport.paths == ["/health"]
        assert transport.requests[0].method == "GET"
        await client.close()

    async def test_health_check_false_when_unreachable(self):
        client = _client(RecordingTransport(error=httpx.ConnectError("connection refused")))

        assert await client.health_check() is False
        await client.close()
