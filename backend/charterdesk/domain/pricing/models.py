from datetime import date, datetime
from decimal import Decimal
from enum import Enum
from typing import List, Literal, Optional

from pydantic import BaseModel, ConfigDict, Field, field_validator, model_validator

from charterdesk.domain.pricing.rules import DEFAULT_WEEKEND_DAYS, RuleType


class BoatKind(str, Enum):
    speed_boat = "SPEED_BOAT"
    party_boat = "PARTY_BOAT"


class PriceType(str, Enum):
    fixed = "FIXED"
    per_person = "PER_PERSON"


class AddOn(BaseModel):
    model_config = ConfigDict(extra="forbid", frozen=True)

    type: str = Field(min_length=1, max_length=60)
    label: str = Field(min_length=1, max_length=120)
    price: Decimal = Field(ge=0)
    price_type: PriceType = PriceType.fixed


class AddOnSelection(BaseModel):
    model_config = ConfigDict(extra="forbid")

    type: str = Field(min_length=1, max_length=60)
    quantity: int = Field(default=1, gt=0)


class BoatPricing(BaseModel):
    """Catalog snapshot of the boat being priced."""

    model_config = ConfigDict(extra="forbid", frozen=True)

    kind: BoatKind = BoatKind.party_boat
    pricing_model: Literal["flat", "hourly"] = "flat"
    base_price: Decimal = Field(default=Decimal("0"), ge=0)
    hourly_rate: Decimal = Field(default=Decimal("0"), ge=0)
    capacity_min: int = Field(default=1, ge=1)
    capacity_max: int | None = Field(default=None, ge=1)
    add_ons: List[AddOn] = Field(default_factory=list)


class DiscountType(str, Enum):
    percentage = "PERCENTAGE"
    fixed = "FIXED"


class Coupon(BaseModel):
    model_config = ConfigDict(extra="forbid", frozen=True)

    code: str = Field(min_length=1, max_length=40)
    description: str | None = None
    discount_type: DiscountType
    discount_value: Decimal = Field(ge=0)
    min_order_amount: Decimal = Field(default=Decimal("0"), ge=0)
    max_discount_amount: Decimal = Field(default=Decimal("0"), ge=0)
    valid_from: datetime
    valid_to: datetime
    usage_limit: int = Field(default=0, ge=0)
    usage_count: int = Field(default=0, ge=0)
    applicable_to: Literal["ALL", "SPEED_BOAT", "PARTY_BOAT"] = "ALL"
    is_active: bool = True

    @field_validator("code")
    @classmethod
    def normalize_code(cls, value: str) -> str:
        return value.strip().upper()


class BookingSettings(BaseModel):
    """Operator settings snapshot handed to every pricing and refund call."""

    model_config = ConfigDict(extra="forbid", frozen=True)

    currency: str = Field(default="inr", min_length=3, max_length=3)
    gst_percent: Decimal = Field(default=Decimal("18"), ge=0, le=100)
    gst_inclusive: bool = False
    cancellation_24h_refund: Decimal = Field(default=Decimal("100"), ge=0, le=100)
    cancellation_12h_refund: Decimal = Field(default=Decimal("50"), ge=0, le=100)
    cancellation_late_refund: Decimal = Field(default=Decimal("0"), ge=0, le=100)
    full_refund_hours: float = Field(default=24, gt=0)
    partial_refund_hours: float = Field(default=12, ge=0)
    party_full_refund_days: float = Field(default=7, gt=0)
    party_partial_refund_days: float = Field(default=3, ge=0)
    party_partial_refund_percent: Decimal = Field(default=Decimal("50"), ge=0, le=100)
    advance_percent: Decimal = Field(default=Decimal("50"), ge=0, le=100)
    remainder_due_before_days: int = Field(default=1, ge=0)
    weekend_days: tuple[int, ...] = DEFAULT_WEEKEND_DAYS
    max_advance_days: int = Field(default=45, ge=0)
    min_notice_hours: float = Field(default=2, ge=0)
    buffer_minutes: int = Field(default=30, ge=0)

    @model_validator(mode="after")
    def validate_tiers(self) -> "BookingSettings":
        if self.partial_refund_hours > self.full_refund_hours:
            raise ValueError("partial_refund_hours must not exceed full_refund_hours")
        if self.party_partial_refund_days > self.party_full_refund_days:
            raise ValueError("party_partial_refund_days must not exceed party_full_refund_days")
        if any(day < 0 or day > 6 for day in self.weekend_days):
            raise ValueError("weekend_days must be between 0 (Sunday) and 6 (Saturday)")
        return self


class PricingRequest(BaseModel):
    model_config = ConfigDict(extra="forbid")

    starts_at: datetime
    quoted_at: datetime | None = None
    boat: BoatPricing
    duration_hours: Decimal | None = Field(default=None, gt=0)
    number_of_boats: int = Field(default=1, ge=1)
    guest_count: int | None = Field(default=None, ge=1)
    selected_add_ons: List[AddOnSelection] = Field(default_factory=list)
    slot_price: Decimal | None = Field(default=None, ge=0)
    coupon: Coupon | None = None
    admin_override_amount: Decimal | None = None

    @model_validator(mode="after")
    def validate_hourly(self) -> "PricingRequest":
        if self.boat.pricing_model == "hourly" and self.duration_hours is None:
            raise ValueError("duration_hours is required for hourly pricing")
        return self


class AppliedRule(BaseModel):
    rule_id: str
    name: str
    type: RuleType
    priority: int
    adjustment_percent: Decimal
    price_before: Decimal
    price_after: Decimal


class AddOnLine(BaseModel):
    type: str
    label: str
    price_type: PriceType
    unit_price: Decimal
    quantity: int
    line_total: Decimal
    provisional: bool = False


class PricingWarning(BaseModel):
    code: Literal["negative_price_clamped", "invalid_override", "provisional_guest_count"]
    detail: str


class CouponApplication(BaseModel):
    code: str
    discount_type: DiscountType
    discount_value: Decimal
    discount_amount: int


class PaymentSplit(BaseModel):
    amount: int
    advance_percent: Decimal
    advance: int
    remainder: int
    remainder_due_on: date | None = None


class PricingBreakdown(BaseModel):
    currency: str
    boat_kind: BoatKind
    pricing_model: Literal["flat", "hourly"]
    base_price: Decimal
    adjusted_unit_price: Decimal
    billable_units: Decimal
    applied_rules: List[AppliedRule] = Field(default_factory=list)
    price_clamped: bool = False
    adjusted_base_amount: Decimal
    add_ons: List[AddOnLine] = Field(default_factory=list)
    add_ons_total: Decimal
    add_ons_provisional: bool = False
    subtotal: Decimal
    gst_percent: Decimal
    gst_inclusive: bool
    gst_amount: int
    cgst: Decimal
    sgst: Decimal
    total_amount: int
    coupon: Optional[CouponApplication] = None
    discount_amount: int = 0
    admin_override_amount: int | None = None
    final_amount: int
    payment: PaymentSplit
    billed_payment: PaymentSplit
    warnings: List[PricingWarning] = Field(default_factory=list)
