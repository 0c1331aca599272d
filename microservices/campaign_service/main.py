"""
Campaign Service Main Application

FastAPI application for advertising campaign management.
Port: 3000
"""

import logging
from contextlib import asynccontextmanager
from datetime import datetime, timezone
from typing import Dict, List, Optional

from fastapi import Depends, FastAPI, HTTPException, Query, Request, Response, status
from fastapi.exceptions import RequestValidationError
from fastapi.middleware.cors import CORSMiddleware
from pydantic.alias_generators import to_camel
from starlette.exceptions import HTTPException as StarletteHTTPException

from core.config import get_settings, setup_logging
from core.postgres_client import CONNECTION_ERRORS, StoreUnavailableError

from . import __version__
from .factory import CampaignServiceFactory
from .middleware import (
    STORE_UNAVAILABLE_MESSAGE,
    RequestTimingMiddleware,
    StoreAvailabilityMiddleware,
    error_response,
)
from .models import (
    Campaign,
    CampaignCreateRequest,
    CampaignUpdateRequest,
    Country,
    HealthResponse,
    Payout,
    PayoutCreateRequest,
    PayoutUpdateRequest,
    StatusResponse,
)
from .protocols import CampaignValidationError, NotFoundError

logger = logging.getLogger(__name__)

settings = get_settings()

# Service configuration
SERVICE_NAME = settings.logging.service_name
SERVICE_PORT = settings.services.port
SERVICE_VERSION = __version__

PAYOUT_CREATE_NOT_FOUND = "Campaign or country not found, or payout already exists for this country"

# Global factory instance
factory: Optional[CampaignServiceFactory] = None


@asynccontextmanager
async def lifespan(app: FastAPI):
    """Application lifespan manager"""
    global factory

    setup_logging(settings.logging)
    logger.info(f"Starting {SERVICE_NAME} on port {SERVICE_PORT} ({settings.environment})")

    factory = CampaignServiceFactory(settings)
    factory.initialize()
    # Serve immediately; the store connects in the background
    factory.start()

    yield

    logger.info(f"Shutting down {SERVICE_NAME}")
    await factory.close()


# Create FastAPI application
app = FastAPI(
    title="Campaign Service",
    description="Advertising campaign, payout and country management",
    version=SERVICE_VERSION,
    lifespan=lifespan,
)


def _store_available() -> bool:
    return factory is not None and factory.is_store_available


# Added innermost first
app.add_middleware(StoreAvailabilityMiddleware, is_available=_store_available)
app.add_middleware(
    CORSMiddleware,
    allow_origins=settings.services.cors_origins,
    allow_credentials=True,
    allow_methods=["*"],
    allow_headers=["*"],
)
app.add_middleware(RequestTimingMiddleware, slow_request_seconds=settings.logging.slow_request_seconds)


# ====================
# Exception Handlers
# ====================


def _field_errors(exc: RequestValidationError) -> Dict[str, List[str]]:
    errors: Dict[str, List[str]] = {}
    for error in exc.errors():
        # Errors raised on a default value carry the python name, not the alias
        loc = [
            to_camel(part) if isinstance(part, str) and "_" in part else str(part)
            for part in error.get("loc", ())
            if part not in ("body", "query", "path")
        ]
        field = ".".join(loc) or "body"
        message = str(error.get("msg", "Invalid value"))
        if message.startswith("Value error, "):
            message = message[len("Value error, "):]
        errors.setdefault(field, []).append(message)
    return errors


@app.exception_handler(RequestValidationError)
async def request_validation_handler(request: Request, exc: RequestValidationError):
    return error_response(
        request, status.HTTP_400_BAD_REQUEST, "Validation failed", errors=_field_errors(exc)
    )


@app.exception_handler(CampaignValidationError)
async def validation_error_handler(request: Request, exc: CampaignValidationError):
    errors = {exc.field: [str(exc)]} if exc.field else None
    return error_response(request, status.HTTP_400_BAD_REQUEST, str(exc), errors=errors)


@app.exception_handler(NotFoundError)
async def not_found_handler(request: Request, exc: NotFoundError):
    return error_response(request, status.HTTP_404_NOT_FOUND, str(exc))


@app.exception_handler(StarletteHTTPException)
async def http_exception_handler(request: Request, exc: StarletteHTTPException):
    return error_response(request, exc.status_code, str(exc.detail))


async def store_unavailable_handler(request: Request, exc: Exception):
    logger.error(f"Database unavailable during {request.method} {request.url.path}: {exc}")
    return error_response(request, status.HTTP_503_SERVICE_UNAVAILABLE, STORE_UNAVAILABLE_MESSAGE)


for _exc_class in (StoreUnavailableError,) + CONNECTION_ERRORS:
    app.add_exception_handler(_exc_class, store_unavailable_handler)


@app.exception_handler(Exception)
async def global_exception_handler(request: Request, exc: Exception):
    """Catch-all; details stay in the server log"""
    logger.exception(f"Unhandled exception on {request.method} {request.url.path}: {exc}")
    return error_response(request, status.HTTP_500_INTERNAL_SERVER_ERROR, "Internal server error")


# ====================
# Dependencies
# ====================


def _get_factory() -> CampaignServiceFactory:
    if not factory:
        raise HTTPException(
            status_code=status.HTTP_503_SERVICE_UNAVAILABLE,
            detail="Service not initialized",
        )
    return factory


def get_campaign_service():
    """Get campaign service from factory"""
    return _get_factory().campaign_service


def get_payout_service():
    """Get payout service from factory"""
    return _get_factory().payout_service


def get_country_service():
    """Get country service from factory"""
    return _get_factory().country_service


def parse_id(value: str, name: str = "id") -> int:
    """Path ids must be positive integers"""
    try:
        parsed = int(value)
    except (TypeError, ValueError):
        parsed = 0
    if parsed <= 0:
        raise HTTPException(status_code=status.HTTP_400_BAD_REQUEST, detail=f"Invalid {name} parameter")
    return parsed


def _parse_flag(value: Optional[str]) -> Optional[bool]:
    if value is None:
        return None
    lowered = value.lower()
    if lowered == "true":
        return True
    if lowered == "false":
        return False
    return None


# ====================
# Health Endpoints
# ====================


@app.get("/health", response_model=HealthResponse, tags=["Health"])
async def health_check():
    """Liveness check, independent of the database"""
    return HealthResponse(
        status="ok",
        service=SERVICE_NAME,
        timestamp=datetime.now(timezone.utc),
    )


@app.get("/status", response_model=StatusResponse, tags=["Health"])
async def service_status():
    """Version, environment and dependency state"""
    dependencies = {"postgres": "not_initialized"}
    if factory:
        if factory.is_store_available:
            healthy = await factory.db.health_check()
            dependencies["postgres"] = "connected" if healthy else "unhealthy"
        elif factory.db.is_connecting:
            dependencies["postgres"] = "connecting"
        else:
            dependencies["postgres"] = "disconnected"
        # Notifications are best-effort, so this never degrades the status
        reachable = await factory.integration_client.health_check()
        dependencies["integration_service"] = "reachable" if reachable else "unreachable"

    return StatusResponse(
        status="ok" if dependencies["postgres"] == "connected" else "degraded",
        service=SERVICE_NAME,
        version=SERVICE_VERSION,
        environment=settings.environment,
        timestamp=datetime.now(timezone.utc),
        dependencies=dependencies,
    )


# ====================
# Campaign Endpoints
# ====================


@app.get("/campaigns", response_model=List[Campaign], tags=["Campaigns"])
async def list_campaigns(
    search: Optional[str] = Query(None),
    is_running: Optional[str] = Query(None, alias="isRunning"),
    service=Depends(get_campaign_service),
):
    """List campaigns, optionally filtered by text and running flag"""
    return await service.list_campaigns(search=search, is_running=_parse_flag(is_running))


@app.get("/campaigns/{id}", response_model=Campaign, tags=["Campaigns"])
async def get_campaign(id: str, service=Depends(get_campaign_service)):
    campaign = await service.get_campaign(parse_id(id))
    if not campaign:
        raise NotFoundError("Campaign not found")
    return campaign


@app.post(
    "/campaigns",
    response_model=Campaign,
    status_code=status.HTTP_201_CREATED,
    tags=["Campaigns"],
)
async def create_campaign(
    request: CampaignCreateRequest,
    service=Depends(get_campaign_service),
):
    """Create a campaign, optionally with nested payouts"""
    return await service.create_campaign(request)


@app.put("/campaigns/{id}", response_model=Campaign, tags=["Campaigns"])
async def update_campaign(
    id: str,
    request: CampaignUpdateRequest,
    service=Depends(get_campaign_service),
):
    """Partial update; nested payouts are upserted by country"""
    campaign = await service.update_campaign(parse_id(id), request)
    if not campaign:
        raise NotFoundError("Campaign not found")
    return campaign


@app.patch("/campaigns/{id}/toggle", response_model=Campaign, tags=["Campaigns"])
async def toggle_campaign_status(id: str, service=Depends(get_campaign_service)):
    campaign = await service.toggle_campaign_status(parse_id(id))
    if not campaign:
        raise NotFoundError("Campaign not found")
    return campaign


@app.delete("/campaigns/{id}", status_code=status.HTTP_204_NO_CONTENT, tags=["Campaigns"])
async def delete_campaign(id: str, service=Depends(get_campaign_service)):
    if not await service.delete_campaign(parse_id(id)):
        raise NotFoundError("Campaign not found")
    return Response(status_code=status.HTTP_204_NO_CONTENT)


# ====================
# Payout Endpoints
# ====================


@app.get("/payouts/campaign/{campaign_id}", response_model=List[Payout], tags=["Payouts"])
async def list_payouts_for_campaign(campaign_id: str, service=Depends(get_payout_service)):
    return await service.list_payouts_for_campaign(parse_id(campaign_id, "campaignId"))


@app.post(
    "/payouts/campaign/{campaign_id}",
    response_model=Payout,
    status_code=status.HTTP_201_CREATED,
    tags=["Payouts"],
)
async def create_payout(
    campaign_id: str,
    request: PayoutCreateRequest,
    service=Depends(get_payout_service),
):
    """Create the payout of a campaign for one country"""
    payout = await service.create_payout(parse_id(campaign_id, "campaignId"), request)
    if not payout:
        raise NotFoundError(PAYOUT_CREATE_NOT_FOUND)
    return payout


@app.put("/payouts/{id}", response_model=Payout, tags=["Payouts"])
async def update_payout(
    id: str,
    request: PayoutUpdateRequest,
    service=Depends(get_payout_service),
):
    payout = await service.update_payout(parse_id(id), request)
    if not payout:
        raise NotFoundError("Payout not found")
    return payout


@app.delete("/payouts/{id}", status_code=status.HTTP_204_NO_CONTENT, tags=["Payouts"])
async def delete_payout(id: str, service=Depends(get_payout_service)):
    if not await service.delete_payout(parse_id(id)):
        raise NotFoundError("Payout not found")
    return Response(status_code=status.HTTP_204_NO_CONTENT)


# ====================
# Country Endpoints
# ====================


@app.get("/countries", response_model=List[Country], tags=["Countries"])
async def list_countries(service=Depends(get_country_service)):
    return await service.list_countries()


@app.get("/countries/{id}", response_model=Country, tags=["Countries"])
async def get_country(id: str, service=Depends(get_country_service)):
    country = await service.get_country(parse_id(id))
    if not country:
        raise NotFoundError("Country not found")
    return country


def main():
    """Run the service"""
    import uvicorn

    uvicorn.run(
        "microservices.campaign_service.main:app",
        host=settings.services.host,
        port=SERVICE_PORT,
        log_level=settings.logging.log_level.lower(),
    )


if __name__ == "__main__":
    main()
