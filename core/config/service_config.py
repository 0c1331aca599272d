#!/usr/bin/env python3
"""Service configuration

HTTP ports for the campaign and integration services, and the address the
campaign service uses to reach the integration service.
"""
import os
from dataclasses import dataclass, field
from typing import List

def _int(val: str, default: int) -> int:
    try:
        return int(val) if val else default
    except ValueError:
        return default

def _float(val: str, default: float) -> float:
    try:
        return float(val) if val else default
    except ValueError:
        return default

DEFAULT_CORS_ORIGINS = ["http://localhost:3500"]


@dataclass
class ServiceConfig:
    """Service endpoints"""

    # ===========================================
    # Campaign (core) API
    # ===========================================
    host: str = "0.0.0.0"
    port: int = 3000
    version: str = "1.0.0"
    cors_origins: List[str] = field(default_factory=lambda: list(DEFAULT_CORS_ORIGINS))

    # ===========================================
    # Integration API
    # ===========================================
    integration_api_url: str = "http://integration-api:4000"
    integration_timeout: float = 10.0
    integration_port: int = 4000

    @classmethod
    def from_env(cls) -> 'ServiceConfig':
        """Load service configuration from environment variables"""
        origins = os.getenv("CORS_ORIGINS", "")
        return cls(
            host=os.getenv("HOST", "0.0.0.0"),
            port=_int(os.getenv("SERVICE_PORT") or os.getenv("PORT", "3000"), 3000),
            version=os.getenv("SERVICE_VERSION", "1.0.0"),
            cors_origins=[o.strip() for o in origins.split(",") if o.strip()] or list(DEFAULT_CORS_ORIGINS),
            integration_api_url=os.getenv("INTEGRATION_API_URL", "http://integration-api:4000").rstrip("/"),
            integration_timeout=_float(os.getenv("INTEGRATION_TIMEOUT", "10"), 10.0),
            integration_port=_int(os.getenv("INTEGRATION_SERVICE_PORT", "4000"), 4000),
        )
