from fastapi import Request

from charterdesk.domain.pricing.models import BookingSettings
from charterdesk.settings import Settings, settings


def booking_settings_from(app_settings: Settings) -> BookingSettings:
    return BookingSettings(
        currency=app_settings.currency,
        gst_percent=app_settings.gst_percent,
        gst_inclusive=app_settings.gst_inclusive,
        cancellation_24h_refund=app_settings.cancellation_24h_refund,
        cancellation_12h_refund=app_settings.cancellation_12h_refund,
        cancellation_late_refund=app_settings.cancellation_late_refund,
        full_refund_hours=app_settings.full_refund_hours,
        partial_refund_hours=app_settings.partial_refund_hours,
        party_full_refund_days=app_settings.party_full_refund_days,
        party_partial_refund_days=app_settings.party_partial_refund_days,
        party_partial_refund_percent=app_settings.party_partial_refund_percent,
        advance_percent=app_settings.advance_percent,
        remainder_due_before_days=app_settings.remainder_due_before_days,
        weekend_days=app_settings.weekend_days,
        max_advance_days=app_settings.max_advance_days,
        min_notice_hours=app_settings.min_notice_hours,
        buffer_minutes=app_settings.buffer_minutes,
    )


def get_booking_settings(request: Request) -> BookingSettings:
    cached = getattr(request.app.state, "booking_settings", None)
    if cached is None:
        app_settings = getattr(request.app.state, "app_settings", settings)
        cached = booking_settings_from(app_settings)
        request.app.state.booking_settings = cached
    return cached
