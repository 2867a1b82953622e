from datetime import datetime
from decimal import Decimal

from pydantic import BaseModel, ConfigDict, Field

from charterdesk.domain.bookings.policy import BookingSnapshot, CancelledBy
from charterdesk.domain.pricing.models import BookingSettings


class RefundQuoteRequest(BaseModel):
    model_config = ConfigDict(extra="forbid")

    booking: BookingSnapshot
    cancelled_at: datetime
    reason: str | None = Field(default=None, max_length=500)
    cancelled_by: CancelledBy = CancelledBy.customer
    refund_percent_override: Decimal | None = Field(default=None, ge=0, le=100)
    settings: BookingSettings | None = None
