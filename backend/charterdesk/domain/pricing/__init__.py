from charterdesk.domain.pricing.estimator import compute_pricing
from charterdesk.domain.pricing.models import BookingSettings, PricingBreakdown, PricingRequest
from charterdesk.domain.pricing.rules import PricingRule, match_rules, validate_rule

__all__ = [
    "BookingSettings",
    "PricingBreakdown",
    "PricingRequest",
    "PricingRule",
    "compute_pricing",
    "match_rules",
    "validate_rule",
]
