"""
Integration Service Data Models
"""

from enum import Enum
from typing import Any, Dict, Optional

from pydantic import BaseModel, Field


class SyncAction(str, Enum):
    """Lifecycle action reported by campaign_service"""
    CREATE = "create"
    UPDATE = "update"
    START = "start"
    STOP = "stop"
    DELETE = "delete"


class CampaignSyncRequest(BaseModel):
    """POST /sync/campaign"""
    action: SyncAction
    campaign: Dict[str, Any]


class PayoutSyncRequest(BaseModel):
    """POST /sync/payout"""
    action: SyncAction
    payout: Dict[str, Any]


class SyncAccepted(BaseModel):
    accepted: bool = True
    entity: str
    action: SyncAction
    entity_id: Optional[int] = Field(None, serialization_alias="entityId")


class ServiceInfo(BaseModel):
    message: str
    version: str
    received: Dict[str, int] = Field(default_factory=dict)


class HealthStatus(BaseModel):
    status: str
    service: str


__all__ = [
    "SyncAction",
    "CampaignSyncRequest",
    "PayoutSyncRequest",
    "SyncAccepted",
    "ServiceInfo",
    "HealthStatus",
]
