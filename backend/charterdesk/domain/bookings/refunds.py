from __future__ import annotations

import logging
from datetime import datetime, timezone
from decimal import Decimal

from charterdesk.domain.bookings.policy import (
    CANCELLABLE_STATUSES,
    BookingSnapshot,
    CancellationRecord,
    CancellationWindow,
    CancelledBy,
)
from charterdesk.domain.errors import CancellationAfterEvent, InvalidRefundOverride, NonCancellableState
from charterdesk.domain.pricing.models import BoatKind, BookingSettings
from charterdesk.domain.pricing.money import percent_of, round_currency

logger = logging.getLogger(__name__)

FULL_REFUND = Decimal("100")


def _normalize_datetime(dt: datetime) -> datetime:
    if dt.tzinfo is None:
        dt = dt.replace(tzinfo=timezone.utc)
    return dt.astimezone(timezone.utc)


def build_cancellation_windows(settings: BookingSettings, boat_kind: BoatKind) -> list[CancellationWindow]:
    """Refund schedule ordered from the most generous window down."""
    if boat_kind == BoatKind.party_boat:
        full_cutoff = settings.party_full_refund_days * 24
        partial_cutoff = settings.party_partial_refund_days * 24
        full_refund = FULL_REFUND
        partial_refund = settings.party_partial_refund_percent
        late_refund = Decimal("0")
    else:
        full_cutoff = settings.full_refund_hours
        partial_cutoff = settings.partial_refund_hours
        full_refund = settings.cancellation_24h_refund
        partial_refund = settings.cancellation_12h_refund
        late_refund = settings.cancellation_late_refund

    return [
        CancellationWindow(
            label="free",
            start_hours_before=float(full_cutoff),
            end_hours_before=None,
            refund_percent=full_refund,
        ),
        CancellationWindow(
            label="partial",
            start_hours_before=float(partial_cutoff),
            end_hours_before=float(full_cutoff),
            refund_percent=partial_refund,
        ),
        CancellationWindow(
            label="late",
            start_hours_before=None,
            end_hours_before=float(partial_cutoff),
            refund_percent=late_refund,
        ),
    ]


def _event_day_start(starts_at: datetime) -> datetime:
    """Midnight of the event date, in the event's own offset."""
    local = starts_at if starts_at.tzinfo is not None else starts_at.replace(tzinfo=timezone.utc)
    return _normalize_datetime(local.replace(hour=0, minute=0, second=0, microsecond=0))


def resolve_window(windows: list[CancellationWindow], hours_until_event: float) -> CancellationWindow:
    for window in windows:
        if window.start_hours_before is None or hours_until_event >= window.start_hours_before:
            return window
    return windows[-1]


def compute_refund(
    booking: BookingSnapshot,
    settings: BookingSettings,
    cancelled_at: datetime,
    *,
    reason: str | None = None,
    cancelled_by: CancelledBy = CancelledBy.customer,
    refund_percent_override: Decimal | None = None,
) -> CancellationRecord:
    """Resolve the refund owed when ``booking`` is cancelled at ``cancelled_at``.

    The refund is a share of ``final_amount``, i.e. what the customer was
    billed after any admin override or coupon. Party-boat windows count from
    midnight of the event date, speed-boat windows from the start time. An
    admin may replace the schedule with ``refund_percent_override``.

    Callers must serialize cancellations of the same booking; this function
    keeps no state.
    """
    if booking.status not in CANCELLABLE_STATUSES:
        raise NonCancellableState(booking.status.value)

    event_start = _normalize_datetime(booking.starts_at)
    cancelled = _normalize_datetime(cancelled_at)
    hours_until_event = (event_start - cancelled).total_seconds() / 3600
    if hours_until_event < 0:
        raise CancellationAfterEvent(-hours_until_event)

    if refund_percent_override is not None:
        if cancelled_by != CancelledBy.admin:
            raise InvalidRefundOverride("Only admin cancellations may override the refund percentage")
        if refund_percent_override < 0 or refund_percent_override > FULL_REFUND:
            raise InvalidRefundOverride("Refund percentage override must be between 0 and 100")
        tier = "admin"
        refund_percent = refund_percent_override
    elif cancelled_by == CancelledBy.admin:
        tier = "admin"
        refund_percent = FULL_REFUND
    else:
        schedule_hours = hours_until_event
        if booking.boat_kind == BoatKind.party_boat:
            schedule_hours = (_event_day_start(booking.starts_at) - cancelled).total_seconds() / 3600
        window = resolve_window(build_cancellation_windows(settings, booking.boat_kind), schedule_hours)
        tier = window.label
        refund_percent = window.refund_percent

    refund_amount = round_currency(percent_of(booking.final_amount, refund_percent))
    payment_status = None
    if refund_amount > 0:
        payment_status = "REFUNDED" if refund_amount == booking.final_amount else "PARTIALLY_REFUNDED"

    record = CancellationRecord(
        booking_id=booking.booking_id,
        reason=reason,
        refund_percent=refund_percent,
        refund_amount=refund_amount,
        cancelled_at=cancelled_at,
        cancelled_by=cancelled_by,
        tier=tier,
        hours_until_event=round(hours_until_event, 2),
        refund_status="PENDING" if refund_amount > 0 else "NOT_APPLICABLE",
        payment_status=payment_status,
    )
    logger.info(
        "refund_computed",
        extra={
            "extra": {
                "booking_id": booking.booking_id,
                "tier": tier,
                "refund_percent": str(refund_percent),
                "refund_amount": refund_amount,
            }
        },
    )
    return record
