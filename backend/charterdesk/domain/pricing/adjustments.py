from dataclasses import dataclass, field
from decimal import Decimal
from typing import Sequence

from charterdesk.domain.pricing.models import AppliedRule
from charterdesk.domain.pricing.money import HUNDRED, ZERO, to_decimal
from charterdesk.domain.pricing.rules import PricingRule, RuleType


@dataclass(frozen=True)
class AdjustedRate:
    base_price: Decimal
    adjusted_price: Decimal
    applied: list[AppliedRule] = field(default_factory=list)
    clamped: bool = False


def adjust_rate(base_price: Decimal | int, matched_rules: Sequence[PricingRule]) -> AdjustedRate:
    """Compound each matched rule onto the running price, in the given order.

    The order is significant: ``match_rules`` puts higher priority first, so the
    highest priority rule sees the unadjusted base price.
    """
    base = to_decimal(base_price)
    price = base
    clamped = False
    applied: list[AppliedRule] = []
    for rule in matched_rules:
        before = price
        price = price * (1 + to_decimal(rule.adjustment_percent) / HUNDRED)
        if price < ZERO:
            price = ZERO
            clamped = True
        applied.append(
            AppliedRule(
                rule_id=rule.id,
                name=rule.name,
                type=RuleType(rule.type),
                priority=rule.priority,
                adjustment_percent=to_decimal(rule.adjustment_percent),
                price_before=before,
                price_after=price,
            )
        )
    return AdjustedRate(base_price=base, adjusted_price=price, applied=applied, clamped=clamped)
