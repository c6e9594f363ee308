from dataclasses import dataclass, field
from typing import Any, Dict, Optional

from pydantic import BaseModel, ConfigDict, Field, field_validator


class PortalRequest(BaseModel):
    model_config = ConfigDict(populate_by_name=True)

    user_id: Optional[str] = Field(default=None, alias='userId')
    return_url: Optional[str] = Field(default=None, alias='returnUrl')

    @field_validator('user_id', mode='before')
    @classmethod
    def coerce_user_id(cls, value: Any) -> Optional[str]:
        # Any truthy id is looked up as text; falsy values read as missing
        if not value:
            return None
        return value if isinstance(value, str) else str(value)

    @field_validator('return_url', mode='before')
    @classmethod
    def ignore_non_string_return_url(cls, value: Any) -> Optional[str]:
        return value if isinstance(value, str) and value else None


class SubscriptionRecord(BaseModel):
    """Row of ``user_subscriptions``; read-only from the portal flow."""
    user_id: str
    stripe_customer_id: Optional[str] = None
    stripe_subscription_id: Optional[str] = None
    tier: Optional[str] = None
    status: Optional[str] = None

    @classmethod
    def from_row(cls, row: Dict[str, Any]) -> 'SubscriptionRecord':
        return cls(
            user_id=row.get('user_id'),
            stripe_customer_id=row.get('stripe_customer_id'),
            stripe_subscription_id=row.get('stripe_subscription_id'),
            tier=row.get('tier'),
            status=row.get('status'),
        )


class PortalSession(BaseModel):
    url: str


@dataclass
class HandlerResult:
    status_code: int
    body: Dict[str, Any] = field(default_factory=dict)


@dataclass
class ErrorResult:
    status_code: int
    message: str

    def to_result(self) -> HandlerResult:
        return HandlerResult(status_code=self.status_code, body={'error': self.message})


METHOD_NOT_ALLOWED = ErrorResult(405, 'Method not allowed')
MISSING_USER_ID = ErrorResult(400, 'Missing user ID')
NO_SUBSCRIPTION_FOUND = ErrorResult(404, 'No subscription found')
