import logging
from datetime import datetime, timezone

from charterdesk.domain.errors import InvalidCoupon
from charterdesk.domain.pricing.models import BoatKind, Coupon, CouponApplication, DiscountType
from charterdesk.domain.pricing.money import percent_of, round_currency, to_decimal

logger = logging.getLogger(__name__)


def _aware(value: datetime) -> datetime:
    if value.tzinfo is None:
        return value.replace(tzinfo=timezone.utc)
    return value


def evaluate_coupon(coupon: Coupon, order_amount: int, boat_kind: BoatKind, at: datetime) -> CouponApplication:
    """Resolve the discount a coupon grants on ``order_amount``.

    Usage counting stays with the caller; the snapshot's ``usage_count`` is
    only checked against ``usage_limit``.
    """
    if not coupon.is_active:
        raise InvalidCoupon("Invalid coupon code", code=coupon.code)
    moment = _aware(at)
    if moment < _aware(coupon.valid_from) or moment > _aware(coupon.valid_to):
        raise InvalidCoupon("This coupon has expired", code=coupon.code)
    if coupon.usage_limit > 0 and coupon.usage_count >= coupon.usage_limit:
        raise InvalidCoupon("This coupon has reached its usage limit", code=coupon.code)
    if coupon.applicable_to != "ALL" and coupon.applicable_to != boat_kind.value:
        raise InvalidCoupon("This coupon is not applicable for this booking type", code=coupon.code)
    if to_decimal(order_amount) < coupon.min_order_amount:
        raise InvalidCoupon(
            f"Minimum order amount of {coupon.min_order_amount} required for this coupon",
            code=coupon.code,
        )

    if coupon.discount_type == DiscountType.percentage:
        discount = round_currency(percent_of(order_amount, coupon.discount_value))
        if coupon.max_discount_amount > 0:
            discount = min(discount, round_currency(coupon.max_discount_amount))
    else:
        discount = round_currency(coupon.discount_value)
    discount = min(discount, order_amount)

    logger.info(
        "coupon_evaluated",
        extra={"extra": {"code": coupon.code, "order_amount": order_amount, "discount_amount": discount}},
    )
    return CouponApplication(
        code=coupon.code,
        discount_type=coupon.discount_type,
        discount_value=coupon.discount_value,
        discount_amount=discount,
    )
