from datetime import datetime
from decimal import Decimal

from pydantic import BaseModel, ConfigDict, Field, field_validator

from charterdesk.domain.pricing.models import BoatKind, BookingSettings, Coupon, PricingRequest
from charterdesk.domain.pricing.rules import PricingRule, RuleType


class QuoteRequest(BaseModel):
    model_config = ConfigDict(extra="forbid")

    booking: PricingRequest
    rules: list[PricingRule] = Field(default_factory=list)
    settings: BookingSettings | None = None


class RuleMatchRequest(BaseModel):
    model_config = ConfigDict(extra="forbid")

    at: datetime
    rules: list[PricingRule]
    weekend_days: list[int] | None = None

    @field_validator("weekend_days")
    @classmethod
    def validate_weekend_days(cls, value: list[int] | None) -> list[int] | None:
        if value and any(day < 0 or day > 6 for day in value):
            raise ValueError("weekend_days must be between 0 (Sunday) and 6 (Saturday)")
        return value


class MatchedRule(BaseModel):
    rule_id: str
    name: str
    type: RuleType
    priority: int
    adjustment_percent: Decimal


class RuleMatchResponse(BaseModel):
    at: datetime
    matched: list[MatchedRule]


class RuleValidationRequest(BaseModel):
    rules: list[PricingRule]


class RuleIssue(BaseModel):
    rule_id: str | None
    field: str | None
    message: str


class RuleValidationResponse(BaseModel):
    valid: bool
    issues: list[RuleIssue]


class CouponEvaluationRequest(BaseModel):
    model_config = ConfigDict(extra="forbid")

    coupon: Coupon
    order_amount: int = Field(ge=0)
    boat_kind: BoatKind
    at: datetime


class CouponEvaluationResponse(BaseModel):
    code: str
    order_amount: int
    discount_amount: int
    final_amount: int
