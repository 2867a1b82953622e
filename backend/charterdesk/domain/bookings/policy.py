from datetime import datetime
from decimal import Decimal
from enum import Enum
from typing import Literal

from pydantic import BaseModel, ConfigDict, Field

from charterdesk.domain.pricing.models import BoatKind


class BookingStatus(str, Enum):
    pending = "PENDING"
    confirmed = "CONFIRMED"
    completed = "COMPLETED"
    no_show = "NO_SHOW"
    cancelled = "CANCELLED"


CANCELLABLE_STATUSES = frozenset({BookingStatus.pending, BookingStatus.confirmed})


class CancelledBy(str, Enum):
    customer = "CUSTOMER"
    admin = "ADMIN"


class CancellationWindow(BaseModel):
    model_config = ConfigDict(extra="forbid", frozen=True)

    label: Literal["free", "partial", "late"]
    start_hours_before: float | None
    end_hours_before: float | None
    refund_percent: Decimal = Field(ge=0, le=100)


class BookingSnapshot(BaseModel):
    """What the cancel action knows about a booking when it asks for a refund."""

    model_config = ConfigDict(extra="forbid", frozen=True)

    booking_id: str | None = None
    status: BookingStatus
    boat_kind: BoatKind = BoatKind.speed_boat
    starts_at: datetime
    final_amount: int = Field(ge=0)


class CancellationRecord(BaseModel):
    model_config = ConfigDict(frozen=True)

    booking_id: str | None = None
    reason: str | None = None
    refund_percent: Decimal
    refund_amount: int
    cancelled_at: datetime
    cancelled_by: CancelledBy
    tier: Literal["free", "partial", "late", "admin"]
    hours_until_event: float
    refund_status: Literal["PENDING", "NOT_APPLICABLE"]
    payment_status: Literal["REFUNDED", "PARTIALLY_REFUNDED"] | None = None
