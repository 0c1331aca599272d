"""
Campaign Service Data Models

Domain entities (Campaign, Payout, Country), request bodies with their
boundary validation rules, and service response models.

JSON uses camelCase keys; Python attributes are snake_case.
"""

from datetime import datetime
from decimal import Decimal
from enum import Enum
from typing import Any, Dict, List, Optional

from pydantic import (
    AnyUrl,
    BaseModel,
    ConfigDict,
    EmailStr,
    Field,
    TypeAdapter,
    ValidationError,
    ValidationInfo,
    field_serializer,
    field_validator,
)
from pydantic.alias_generators import to_camel

_url_adapter = TypeAdapter(AnyUrl)

# numeric(10,2)
MAX_MONEY = Decimal("99999999.99")

BUDGET_ALERT_EMAIL_REQUIRED = "Budget alert email is required when budget alert is enabled"


# =============================================================================
# ENUMS
# =============================================================================

class SyncAction(str, Enum):
    """Lifecycle action reported to the integration service"""
    CREATE = "create"
    UPDATE = "update"
    START = "start"
    STOP = "stop"
    DELETE = "delete"


# =============================================================================
# BASE
# =============================================================================

class BaseContract(BaseModel):
    """Base model for all contracts"""

    model_config = ConfigDict(
        from_attributes=True,
        alias_generator=to_camel,
        populate_by_name=True,
    )


def _validate_url(value: str) -> str:
    """Accept only absolute URLs with a scheme and host, keep the original text"""
    try:
        url = _url_adapter.validate_python(value)
    except ValidationError:
        raise ValueError("Valid landing page URL is required")
    if not url.host:
        raise ValueError("Valid landing page URL is required")
    return value


# =============================================================================
# ENTITIES
# =============================================================================

class Country(BaseContract):
    """Country reference record"""
    id: int
    code: str = Field(..., min_length=2, max_length=2)
    name: str = Field(..., min_length=1, max_length=100)


class CampaignSummary(BaseContract):
    """Campaign without its payouts, embedded in a Payout"""
    id: int
    title: str
    landing_page_url: str
    is_running: bool = False
    created_at: Optional[datetime] = None
    updated_at: Optional[datetime] = None


class Payout(BaseContract):
    """Per-country payout configuration of a campaign"""
    id: int
    amount: Decimal
    budget: Optional[Decimal] = None
    auto_stop: bool = False
    budget_alert: bool = False
    budget_alert_email: Optional[str] = None
    campaign_id: int
    country_id: int
    country: Optional[Country] = None
    campaign: Optional[CampaignSummary] = None
    created_at: Optional[datetime] = None
    updated_at: Optional[datetime] = None

    @field_serializer("amount", "budget")
    def serialize_money(self, value: Optional[Decimal]) -> Optional[float]:
        return float(value) if value is not None else None


class Campaign(BaseContract):
    """Advertising campaign with its payouts"""
    id: int
    title: str
    landing_page_url: str
    is_running: bool = False
    payouts: List[Payout] = Field(default_factory=list)
    created_at: Optional[datetime] = None
    updated_at: Optional[datetime] = None

    def summary(self) -> CampaignSummary:
        return CampaignSummary(
            id=self.id,
            title=self.title,
            landing_page_url=self.landing_page_url,
            is_running=self.is_running,
            created_at=self.created_at,
            updated_at=self.updated_at,
        )


# =============================================================================
# REQUESTS
# =============================================================================

class PayoutFields(BaseContract):
    """Payout attributes shared by create requests and nested campaign payouts"""
    country_id: int = Field(..., gt=0)
    amount: Decimal = Field(..., ge=0, le=MAX_MONEY)
    budget: Optional[Decimal] = Field(None, ge=0, le=MAX_MONEY)
    auto_stop: bool = False
    budget_alert: bool = False
    budget_alert_email: Optional[EmailStr] = Field(None, validate_default=True)

    @field_validator("budget_alert_email")
    @classmethod
    def require_email_when_alerting(cls, v: Optional[str], info: ValidationInfo) -> Optional[str]:
        if info.data.get("budget_alert") and not v:
            raise ValueError(BUDGET_ALERT_EMAIL_REQUIRED)
        return v


class PayoutCreateRequest(PayoutFields):
    """POST /payouts/campaign/{campaignId}"""


class PayoutUpdateRequest(BaseContract):
    """PUT /payouts/{id} - only supplied fields are applied"""
    country_id: Optional[int] = Field(None, gt=0)
    amount: Optional[Decimal] = Field(None, ge=0, le=MAX_MONEY)
    budget: Optional[Decimal] = Field(None, ge=0, le=MAX_MONEY)
    auto_stop: Optional[bool] = None
    budget_alert: Optional[bool] = None
    budget_alert_email: Optional[EmailStr] = Field(None, validate_default=True)

    @field_validator("budget_alert_email")
    @classmethod
    def require_email_when_alerting(cls, v: Optional[str], info: ValidationInfo) -> Optional[str]:
        if info.data.get("budget_alert") and not v:
            raise ValueError(BUDGET_ALERT_EMAIL_REQUIRED)
        return v

    def to_updates(self) -> Dict[str, Any]:
        """Supplied fields as a dict; country reassignment is not an update"""
        updates = self.model_dump(exclude_unset=True, exclude={"country_id"})
        # NOT NULL columns ignore an explicit null
        for key in ("amount", "auto_stop", "budget_alert"):
            if key in updates and updates[key] is None:
                updates.pop(key)
        return updates


class CampaignCreateRequest(BaseContract):
    """POST /campaigns"""
    title: str = Field(..., min_length=1, max_length=255)
    landing_page_url: str = Field(..., min_length=1)
    is_running: bool = False
    payouts: List[PayoutFields] = Field(default_factory=list)

    @field_validator("title")
    @classmethod
    def title_not_blank(cls, v: str) -> str:
        if not v.strip():
            raise ValueError("Title is required")
        return v

    @field_validator("landing_page_url")
    @classmethod
    def landing_page_url_valid(cls, v: str) -> str:
        return _validate_url(v)

    @field_validator("payouts")
    @classmethod
    def one_payout_per_country(cls, v: List[PayoutFields]) -> List[PayoutFields]:
        country_ids = [p.country_id for p in v]
        if len(country_ids) != len(set(country_ids)):
            raise ValueError("Only one payout per country is allowed")
        return v


class CampaignUpdateRequest(BaseContract):
    """PUT /campaigns/{id} - only supplied fields are applied"""
    title: Optional[str] = Field(None, min_length=1, max_length=255)
    landing_page_url: Optional[str] = Field(None, min_length=1)
    is_running: Optional[bool] = None
    payouts: Optional[List[PayoutFields]] = None

    @field_validator("title")
    @classmethod
    def title_not_blank(cls, v: Optional[str]) -> Optional[str]:
        if v is not None and not v.strip():
            raise ValueError("Title is required")
        return v

    @field_validator("landing_page_url")
    @classmethod
    def landing_page_url_valid(cls, v: Optional[str]) -> Optional[str]:
        return _validate_url(v) if v is not None else v

    @field_validator("payouts")
    @classmethod
    def one_payout_per_country(cls, v: Optional[List[PayoutFields]]) -> Optional[List[PayoutFields]]:
        if v is not None:
            country_ids = [p.country_id for p in v]
            if len(country_ids) != len(set(country_ids)):
                raise ValueError("Only one payout per country is allowed")
        return v

    def to_updates(self) -> Dict[str, Any]:
        """Supplied, non-null campaign columns as a dict"""
        updates = self.model_dump(exclude_unset=True, exclude={"payouts"})
        return {k: v for k, v in updates.items() if v is not None}


class CountrySeed(BaseModel):
    """Country row to seed"""
    code: str = Field(..., min_length=2, max_length=2)
    name: str = Field(..., min_length=1, max_length=100)


# =============================================================================
# RESPONSES
# =============================================================================

class HealthResponse(BaseModel):
    """Liveness response"""
    status: str
    service: str
    timestamp: datetime


class StatusResponse(BaseModel):
    """Service status response"""
    status: str
    service: str
    version: str
    environment: str
    timestamp: datetime
    dependencies: Dict[str, str] = Field(default_factory=dict)


class ErrorResponse(BaseModel):
    """Standard error response"""
    message: str
    status: int
    timestamp: datetime
    path: str
    errors: Optional[Dict[str, List[str]]] = None


__all__ = [
    "BUDGET_ALERT_EMAIL_REQUIRED",
    "SyncAction",
    "BaseContract",
    "Country",
    "CampaignSummary",
    "Payout",
    "Campaign",
    "PayoutFields",
    "PayoutCreateRequest",
    "PayoutUpdateRequest",
    "CampaignCreateRequest",
    "CampaignUpdateRequest",
    "CountrySeed",
    "HealthResponse",
    "StatusResponse",
    "ErrorResponse",
]
