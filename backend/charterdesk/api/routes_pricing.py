from fastapi import APIRouter, Depends

from charterdesk.dependencies import get_booking_settings
from charterdesk.domain.pricing.coupons import evaluate_coupon
from charterdesk.domain.pricing.estimator import compute_pricing
from charterdesk.domain.pricing.models import BookingSettings, PricingBreakdown
from charterdesk.domain.pricing.rules import collect_rule_issues, match_rules
from charterdesk.domain.pricing.schemas import (
    CouponEvaluationRequest,
    CouponEvaluationResponse,
    MatchedRule,
    QuoteRequest,
    RuleIssue,
    RuleMatchRequest,
    RuleMatchResponse,
    RuleValidationRequest,
    RuleValidationResponse,
)

router = APIRouter(prefix="/v1/pricing", tags=["pricing"])


@router.post("/quote", response_model=PricingBreakdown)
async def create_quote(
    payload: QuoteRequest,
    defaults: BookingSettings = Depends(get_booking_settings),
) -> PricingBreakdown:
    return compute_pricing(payload.booking, payload.rules, payload.settings or defaults)


@router.post("/rules/match", response_model=RuleMatchResponse)
async def preview_matching_rules(
    payload: RuleMatchRequest,
    defaults: BookingSettings = Depends(get_booking_settings),
) -> RuleMatchResponse:
    weekend_days = payload.weekend_days or defaults.weekend_days
    matched = match_rules(payload.rules, payload.at, weekend_days=weekend_days)
    return RuleMatchResponse(
        at=payload.at,
        matched=[
            MatchedRule(
                rule_id=rule.id,
                name=rule.name,
                type=rule.type,
                priority=rule.priority,
                adjustment_percent=rule.adjustment_percent,
            )
            for rule in matched
        ],
    )


@router.post("/rules/validate", response_model=RuleValidationResponse)
async def validate_rules(payload: RuleValidationRequest) -> RuleValidationResponse:
    issues = [RuleIssue(**issue) for issue in collect_rule_issues(payload.rules)]
    return RuleValidationResponse(valid=not issues, issues=issues)


@router.post("/coupons/evaluate", response_model=CouponEvaluationResponse)
async def preview_coupon(payload: CouponEvaluationRequest) -> CouponEvaluationResponse:
    application = evaluate_coupon(payload.coupon, payload.order_amount, payload.boat_kind, payload.at)
    return CouponEvaluationResponse(
        code=application.code,
        order_amount=payload.order_amount,
        discount_amount=application.discount_amount,
        final_amount=payload.order_amount - application.discount_amount,
    )


@router.get("/settings", response_model=BookingSettings)
async def get_pricing_settings(
    defaults: BookingSettings = Depends(get_booking_settings),
) -> BookingSettings:
    return defaults
