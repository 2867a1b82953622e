import logging
from dataclasses import dataclass
from decimal import Decimal
from typing import Sequence

from charterdesk.domain.errors import InvalidOverride, UnknownAddOn
from charterdesk.domain.pricing.adjustments import adjust_rate
from charterdesk.domain.pricing.coupons import evaluate_coupon
from charterdesk.domain.pricing.models import (
    AddOn,
    AddOnLine,
    AddOnSelection,
    BookingSettings,
    PriceType,
    PricingBreakdown,
    PricingRequest,
    PricingWarning,
)
from charterdesk.domain.pricing.money import ZERO, display_amount, percent_of, round_currency, to_decimal
from charterdesk.domain.pricing.payments import split_payment
from charterdesk.domain.pricing.rules import PricingRule, match_rules

logger = logging.getLogger(__name__)


@dataclass(frozen=True)
class AddOnTotals:
    lines: list[AddOnLine]
    total: Decimal
    provisional: bool


@dataclass(frozen=True)
class TaxResult:
    gst_amount: int
    total_amount: int
    cgst: Decimal
    sgst: Decimal


def calculate_add_ons(
    catalog: Sequence[AddOn],
    selections: Sequence[AddOnSelection],
    guest_count: int | None,
    *,
    fallback_guests: int = 1,
) -> AddOnTotals:
    """Expand selected add-ons into line items.

    FIXED items are charged once and keep the requested quantity for display.
    PER_PERSON items are charged per guest; before the guest count is known the
    boat's minimum capacity stands in and the lines are flagged provisional.
    """
    offered = {addon.type: addon for addon in catalog}
    lines: list[AddOnLine] = []
    total = ZERO
    provisional = False
    for selection in selections:
        addon = offered.get(selection.type)
        if addon is None:
            raise UnknownAddOn(selection.type)
        if addon.price_type == PriceType.per_person:
            is_estimate = guest_count is None
            quantity = fallback_guests if is_estimate else guest_count
            line_total = addon.price * quantity
            provisional = provisional or is_estimate
        else:
            is_estimate = False
            quantity = selection.quantity
            line_total = addon.price
        total += line_total
        lines.append(
            AddOnLine(
                type=addon.type,
                label=addon.label,
                price_type=addon.price_type,
                unit_price=addon.price,
                quantity=quantity,
                line_total=display_amount(line_total),
                provisional=is_estimate,
            )
        )
    return AddOnTotals(lines=lines, total=total, provisional=provisional)


def calculate_tax(subtotal: Decimal, gst_percent: Decimal, gst_inclusive: bool) -> TaxResult:
    subtotal = to_decimal(subtotal)
    rate = to_decimal(gst_percent)
    if gst_inclusive:
        total_amount = round_currency(subtotal)
        gst_amount = round_currency(subtotal - subtotal / (1 + rate / 100))
    else:
        gst_amount = round_currency(percent_of(subtotal, rate))
        total_amount = round_currency(subtotal + gst_amount)
    half = display_amount(Decimal(gst_amount) / 2)
    return TaxResult(gst_amount=gst_amount, total_amount=total_amount, cgst=half, sgst=half)


def apply_admin_override(amount_due: int, override: Decimal | int | None) -> tuple[int | None, int]:
    """Return ``(override_amount, final_amount)``; the computed figures are never touched."""
    if override is None:
        return None, amount_due
    value = to_decimal(override)
    if value < 0:
        raise InvalidOverride(override)
    rounded = round_currency(value)
    return rounded, rounded


def _base_unit_price(request: PricingRequest) -> Decimal:
    if request.slot_price is not None:
        return request.slot_price
    if request.boat.pricing_model == "hourly":
        return request.boat.hourly_rate
    return request.boat.base_price


def _billable_units(request: PricingRequest) -> Decimal:
    if request.boat.pricing_model == "hourly":
        return request.duration_hours * request.number_of_boats
    return Decimal(request.number_of_boats)


def compute_pricing(
    request: PricingRequest,
    rules: Sequence[PricingRule],
    settings: BookingSettings,
) -> PricingBreakdown:
    warnings: list[PricingWarning] = []

    matched = match_rules(rules, request.starts_at, weekend_days=settings.weekend_days)
    rate = adjust_rate(_base_unit_price(request), matched)
    if rate.clamped:
        warnings.append(
            PricingWarning(
                code="negative_price_clamped",
                detail="Discount rules drove the price below zero; the adjusted price was clamped to 0",
            )
        )
        logger.warning(
            "pricing_price_clamped",
            extra={"extra": {"rule_ids": [applied.rule_id for applied in rate.applied]}},
        )

    units = _billable_units(request)
    adjusted_base = rate.adjusted_price * units

    add_ons = calculate_add_ons(
        request.boat.add_ons,
        request.selected_add_ons,
        request.guest_count,
        fallback_guests=request.boat.capacity_min,
    )
    if add_ons.provisional:
        warnings.append(
            PricingWarning(
                code="provisional_guest_count",
                detail=(
                    f"Guest count not set; per-person add-ons assume {request.boat.capacity_min} guests"
                ),
            )
        )

    subtotal = adjusted_base + add_ons.total
    tax = calculate_tax(subtotal, settings.gst_percent, settings.gst_inclusive)

    coupon = None
    discount_amount = 0
    if request.coupon is not None:
        coupon = evaluate_coupon(
            request.coupon,
            tax.total_amount,
            request.boat.kind,
            request.quoted_at or request.starts_at,
        )
        discount_amount = coupon.discount_amount
    amount_due = tax.total_amount - discount_amount

    try:
        override_amount, final_amount = apply_admin_override(amount_due, request.admin_override_amount)
    except InvalidOverride as exc:
        override_amount, final_amount = None, amount_due
        warnings.append(PricingWarning(code="invalid_override", detail=exc.detail))
        logger.warning(
            "pricing_override_rejected",
            extra={"extra": {"override": str(request.admin_override_amount), "final_amount": final_amount}},
        )

    payment = split_payment(
        tax.total_amount,
        settings.advance_percent,
        event_date=request.starts_at.date(),
        remainder_due_before_days=settings.remainder_due_before_days,
    )
    # the customer is billed final_amount, which an override or coupon moves away from total_amount
    billed_payment = payment
    if final_amount != tax.total_amount:
        billed_payment = split_payment(
            final_amount,
            settings.advance_percent,
            event_date=request.starts_at.date(),
            remainder_due_before_days=settings.remainder_due_before_days,
        )

    applied_rules = [
        applied.model_copy(
            update={
                "price_before": display_amount(applied.price_before),
                "price_after": display_amount(applied.price_after),
            }
        )
        for applied in rate.applied
    ]

    breakdown = PricingBreakdown(
        currency=settings.currency,
        boat_kind=request.boat.kind,
        pricing_model=request.boat.pricing_model,
        base_price=display_amount(rate.base_price),
        adjusted_unit_price=display_amount(rate.adjusted_price),
        billable_units=units,
        applied_rules=applied_rules,
        price_clamped=rate.clamped,
        adjusted_base_amount=display_amount(adjusted_base),
        add_ons=add_ons.lines,
        add_ons_total=display_amount(add_ons.total),
        add_ons_provisional=add_ons.provisional,
        subtotal=display_amount(subtotal),
        gst_percent=settings.gst_percent,
        gst_inclusive=settings.gst_inclusive,
        gst_amount=tax.gst_amount,
        cgst=tax.cgst,
        sgst=tax.sgst,
        total_amount=tax.total_amount,
        coupon=coupon,
        discount_amount=discount_amount,
        admin_override_amount=override_amount,
        final_amount=final_amount,
        payment=payment,
        billed_payment=billed_payment,
        warnings=warnings,
    )
    logger.info(
        "pricing_computed",
        extra={
            "extra": {
                "boat_kind": request.boat.kind.value,
                "rule_ids": [applied.rule_id for applied in rate.applied],
                "total_amount": breakdown.total_amount,
                "final_amount": breakdown.final_amount,
            }
        },
    )
    return breakdown
