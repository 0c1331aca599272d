#!/usr/bin/env python3
"""Infrastructure configuration

PostgreSQL connection, pool sizing and reconnect backoff.
"""
import os
from dataclasses import dataclass

def _bool(val: str) -> bool:
    return val.lower() == "true"

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


@dataclass
class InfraConfig:
    """Infrastructure service endpoints"""

    # ===========================================
    # PostgreSQL (native asyncpg - port 5432)
    # ===========================================
    postgres_host: str = "localhost"
    postgres_port: int = 5432
    postgres_db: str = "ad-cm"
    postgres_user: str = "postgres"
    postgres_password: str = "postgres"

    # ===========================================
    # Pool
    # ===========================================
    db_pool_min: int = 1
    db_pool_max: int = 10
    db_command_timeout: float = 60.0

    # ===========================================
    # Reconnect backoff (seconds)
    # ===========================================
    db_retry_initial: float = 1.0
    db_retry_max: float = 30.0

    # Create tables on connect
    db_auto_migrate: bool = True

    @classmethod
    def from_env(cls) -> 'InfraConfig':
        """Load infrastructure config from environment"""
        return cls(
            postgres_host=os.getenv("POSTGRES_HOST") or os.getenv("DB_HOST", "localhost"),
            postgres_port=_int(os.getenv("POSTGRES_PORT") or os.getenv("DB_PORT", "5432"), 5432),
            postgres_db=os.getenv("POSTGRES_DB") or os.getenv("DB_NAME", "ad-cm"),
            postgres_user=os.getenv("POSTGRES_USER") or os.getenv("DB_USER", "postgres"),
            postgres_password=os.getenv("POSTGRES_PASSWORD") or os.getenv("DB_PASSWORD", "postgres"),

            db_pool_min=_int(os.getenv("DB_POOL_MIN", "1"), 1),
            db_pool_max=_int(os.getenv("DB_POOL_MAX", "10"), 10),
            db_command_timeout=_float(os.getenv("DB_COMMAND_TIMEOUT", "60"), 60.0),

            db_retry_initial=_float(os.getenv("DB_RETRY_INITIAL", "1"), 1.0),
            db_retry_max=_float(os.getenv("DB_RETRY_MAX", "30"), 30.0),

            db_auto_migrate=_bool(os.getenv("DB_AUTO_MIGRATE", "true")),
        )
