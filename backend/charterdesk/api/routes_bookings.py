from fastapi import APIRouter, Depends

from charterdesk.dependencies import get_booking_settings
from charterdesk.domain.bookings.policy import CancellationRecord
from charterdesk.domain.bookings.refunds import compute_refund
from charterdesk.domain.bookings.schemas import RefundQuoteRequest
from charterdesk.domain.pricing.models import BookingSettings

router = APIRouter(prefix="/v1/bookings", tags=["bookings"])


@router.post("/refund-quote", response_model=CancellationRecord)
async def quote_refund(
    payload: RefundQuoteRequest,
    defaults: BookingSettings = Depends(get_booking_settings),
) -> CancellationRecord:
    return compute_refund(
        payload.booking,
        payload.settings or defaults,
        payload.cancelled_at,
        reason=payload.reason,
        cancelled_by=payload.cancelled_by,
        refund_percent_override=payload.refund_percent_override,
    )
