"""
Integration Service Main Application

Receiver for campaign_service lifecycle events.
Port: 4000
"""

import logging
from collections import Counter
from contextlib import asynccontextmanager

from fastapi import FastAPI, Request, status
from fastapi.exceptions import RequestValidationError
from fastapi.responses import JSONResponse

from core.config import get_settings, setup_logging

from . import __version__
from .models import (
    CampaignSyncRequest,
    HealthStatus,
    PayoutSyncRequest,
    ServiceInfo,
    SyncAccepted,
)

logger = logging.getLogger(__name__)

settings = get_settings()

SERVICE_NAME = "integration-api"
SERVICE_PORT = settings.services.integration_port
SERVICE_VERSION = __version__

# "<entity>.<action>" -> count since start
received: Counter = Counter()


@asynccontextmanager
async def lifespan(app: FastAPI):
    setup_logging(settings.logging)
    logger.info(f"Integration API listening on port {SERVICE_PORT}")
    yield
    logger.info(f"Integration API shutting down, received {sum(received.values())} events")


app = FastAPI(
    title="Integration Service",
    description="Receives campaign and payout lifecycle events",
    version=SERVICE_VERSION,
    lifespan=lifespan,
)


@app.exception_handler(RequestValidationError)
async def request_validation_handler(request: Request, exc: RequestValidationError):
    logger.warning(f"Rejected malformed event on {request.url.path}: {exc.errors()}")
    return JSONResponse(
        status_code=status.HTTP_400_BAD_REQUEST,
        content={"message": "Invalid sync event", "status": 400, "path": request.url.path},
    )


# ====================
# Health / Info
# ====================


@app.get("/health", response_model=HealthStatus, tags=["Health"])
@app.get("/integration/health", response_model=HealthStatus, tags=["Health"])
async def health_check():
    return HealthStatus(status="ok", service=SERVICE_NAME)


@app.get("/", response_model=ServiceInfo, tags=["Info"])
@app.get("/integration", response_model=ServiceInfo, tags=["Info"])
async def service_info():
    return ServiceInfo(
        message="Integration API - Minimal implementation",
        version=SERVICE_VERSION,
        received=dict(received),
    )


# ====================
# Sync Endpoints
# ====================


@app.post(
    "/sync/campaign",
    response_model=SyncAccepted,
    status_code=status.HTTP_202_ACCEPTED,
    tags=["Sync"],
)
async def sync_campaign(event: CampaignSyncRequest):
    """Accept a campaign lifecycle event"""
    campaign_id = event.campaign.get("id")
    received[f"campaign.{event.action.value}"] += 1
    logger.info(f"Campaign {campaign_id} {event.action.value}: {event.campaign.get('title')}")
    return SyncAccepted(entity="campaign", action=event.action, entity_id=campaign_id)


@app.post(
    "/sync/payout",
    response_model=SyncAccepted,
    status_code=status.HTTP_202_ACCEPTED,
    tags=["Sync"],
)
async def sync_payout(event: PayoutSyncRequest):
    """Accept a payout lifecycle event"""
    payout_id = event.payout.get("id")
    received[f"payout.{event.action.value}"] += 1
    logger.info(
        f"Payout {payout_id} {event.action.value} "
        f"(campaign {event.payout.get('campaignId')}, country {event.payout.get('countryId')})"
    )
    return SyncAccepted(entity="payout", action=event.action, entity_id=payout_id)


def main():
    """Run the service"""
    import uvicorn

    uvicorn.run(
        "microservices.integration_service.main:app",
        host=settings.services.host,
        port=SERVICE_PORT,
        log_level=settings.logging.log_level.lower(),
    )


if __name__ == "__main__":
    main()
