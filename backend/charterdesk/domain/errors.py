from dataclasses import dataclass
from typing import List

PROBLEM_BASE = "https://charterdesk.example/problems"


@dataclass
class DomainError(Exception):
    detail: str
    title: str = "Domain Error"
    type: str = f"{PROBLEM_BASE}/domain-error"
    errors: List[dict] | None = None
    status: int = 400

    def __str__(self) -> str:
        return self.detail


class InvalidRuleCondition(DomainError):
    def __init__(self, detail: str, *, rule_id: str | None = None, field: str | None = None) -> None:
        errors = [{"rule_id": rule_id, "field": field, "message": detail}]
        super().__init__(
            detail=detail,
            title="Invalid Pricing Rule",
            type=f"{PROBLEM_BASE}/invalid-rule-condition",
            errors=errors,
            status=422,
        )
        self.rule_id = rule_id
        self.field = field


class UnknownAddOn(DomainError):
    def __init__(self, addon_type: str) -> None:
        super().__init__(
            detail=f"Add-on '{addon_type}' is not offered for this boat",
            title="Unknown Add-on",
            type=f"{PROBLEM_BASE}/unknown-addon",
            errors=[{"field": "selected_add_ons", "message": addon_type}],
        )
        self.addon_type = addon_type


class InvalidCoupon(DomainError):
    def __init__(self, detail: str, *, code: str | None = None) -> None:
        super().__init__(
            detail=detail,
            title="Invalid Coupon",
            type=f"{PROBLEM_BASE}/invalid-coupon",
            errors=[{"field": "coupon", "code": code, "message": detail}],
        )
        self.code = code


class InvalidOverride(DomainError):
    def __init__(self, amount) -> None:
        super().__init__(
            detail=f"Admin override amount must not be negative (got {amount})",
            title="Invalid Override",
            type=f"{PROBLEM_BASE}/invalid-override",
        )
        self.amount = amount


class NonCancellableState(DomainError):
    def __init__(self, status: str) -> None:
        super().__init__(
            detail=f"Booking in status {status} cannot be cancelled",
            title="Booking Not Cancellable",
            type=f"{PROBLEM_BASE}/non-cancellable-state",
            status=409,
        )
        self.booking_status = status


class CancellationAfterEvent(DomainError):
    def __init__(self, hours_late: float) -> None:
        super().__init__(
            detail="Booking cannot be cancelled after the event has started; record a no-show instead",
            title="Cancellation After Event",
            type=f"{PROBLEM_BASE}/cancellation-after-event",
            errors=[{"field": "cancelled_at", "hours_after_start": round(hours_late, 2)}],
            status=409,
        )
        self.hours_late = hours_late


class InvalidRefundOverride(DomainError):
    def __init__(self, detail: str) -> None:
        super().__init__(
            detail=detail,
            title="Invalid Refund Override",
            type=f"{PROBLEM_BASE}/invalid-refund-override",
            errors=[{"field": "refund_percent_override", "message": detail}],
        )
