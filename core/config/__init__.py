#!/usr/bin/env python3
"""Modular configuration system

Configuration hierarchy:
- infra_config: PostgreSQL connection, pool and reconnect backoff
- service_config: HTTP ports and the integration service address
- logging_config: Logging configuration
"""
import os
from dataclasses import dataclass, field

from dotenv import load_dotenv

from .infra_config import InfraConfig
from .logging_config import LoggingConfig, setup_logging
from .service_config import ServiceConfig

# Load .env (or ENV_FILE) without overriding the real environment
load_dotenv(os.getenv("ENV_FILE", ".env"), override=False)


def _bool(val: str) -> bool:
    return val.lower() == "true"


@dataclass
class AppConfig:
    """Application configuration with all sub-configs"""

    environment: str = "development"
    debug: bool = False

    logging: LoggingConfig = field(default_factory=LoggingConfig)
    infrastructure: InfraConfig = field(default_factory=InfraConfig)
    services: ServiceConfig = field(default_factory=ServiceConfig)

    @classmethod
    def from_env(cls) -> 'AppConfig':
        """Load complete configuration from environment"""
        env = os.getenv("ENV") or os.getenv("ENVIRONMENT", "development")
        return cls(
            environment=env,
            debug=_bool(os.getenv("DEBUG", "true" if env == "development" else "false")),
            logging=LoggingConfig.from_env(),
            infrastructure=InfraConfig.from_env(),
            services=ServiceConfig.from_env(),
        )


# Create global settings instance
settings = AppConfig.from_env()

def get_settings() -> AppConfig:
    """Get global settings instance"""
    return settings

def reload_settings() -> AppConfig:
    """Reload settings from environment"""
    global settings
    settings = AppConfig.from_env()
    return settings

__all__ = [
    'AppConfig',
    'get_settings',
    'reload_settings',
    'settings',
    'setup_logging',
    'LoggingConfig',
    'InfraConfig',
    'ServiceConfig',
]
