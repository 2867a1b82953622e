from __future__ import annotations

import logging
from datetime import date, datetime, time, timezone
from decimal import Decimal
from enum import Enum
from typing import Annotated, Iterable, Literal, Sequence, Union

from pydantic import BaseModel, ConfigDict, Field

from charterdesk.domain.errors import InvalidRuleCondition

logger = logging.getLogger(__name__)

SUNDAY = 0
SATURDAY = 6
DEFAULT_WEEKEND_DAYS: tuple[int, ...] = (SUNDAY, SATURDAY)


class RuleType(str, Enum):
    PEAK_HOURS = "PEAK_HOURS"
    OFF_PEAK_HOURS = "OFF_PEAK_HOURS"
    WEEKEND = "WEEKEND"
    SEASONAL = "SEASONAL"
    HOLIDAY = "HOLIDAY"
    SPECIAL = "SPECIAL"


class TimeWindowConditions(BaseModel):
    model_config = ConfigDict(extra="forbid", frozen=True)

    start_time: time | None = None
    end_time: time | None = None


class DateRangeConditions(BaseModel):
    model_config = ConfigDict(extra="forbid", frozen=True)

    start_date: date | None = None
    end_date: date | None = None


class HolidayConditions(DateRangeConditions):
    specific_dates: list[date] = Field(default_factory=list)


class DayOfWeekConditions(BaseModel):
    model_config = ConfigDict(extra="forbid", frozen=True)

    days_of_week: list[int] = Field(default_factory=list)


class SpecialConditions(HolidayConditions):
    days_of_week: list[int] = Field(default_factory=list)


class _RuleBase(BaseModel):
    model_config = ConfigDict(extra="forbid", frozen=True)

    id: str = Field(min_length=1)
    name: str = Field(min_length=1, max_length=120)
    adjustment_percent: Decimal
    priority: int = 0
    is_active: bool = True
    created_at: datetime | None = None


class TimeWindowRule(_RuleBase):
    type: Literal["PEAK_HOURS", "OFF_PEAK_HOURS"]
    conditions: TimeWindowConditions = Field(default_factory=TimeWindowConditions)


class WeekendRule(_RuleBase):
    type: Literal["WEEKEND"]
    conditions: DayOfWeekConditions = Field(default_factory=DayOfWeekConditions)


class SeasonalRule(_RuleBase):
    type: Literal["SEASONAL"]
    conditions: DateRangeConditions = Field(default_factory=DateRangeConditions)


class HolidayRule(_RuleBase):
    type: Literal["HOLIDAY"]
    conditions: HolidayConditions = Field(default_factory=HolidayConditions)


class SpecialRule(_RuleBase):
    type: Literal["SPECIAL"]
    conditions: SpecialConditions = Field(default_factory=SpecialConditions)


PricingRule = Annotated[
    Union[TimeWindowRule, WeekendRule, SeasonalRule, HolidayRule, SpecialRule],
    Field(discriminator="type"),
]


def day_of_week(value: date) -> int:
    """Day index with Sunday as 0, as rule authors configure it."""
    return value.isoweekday() % 7


def _check_days(rule: _RuleBase, days: Sequence[int]) -> None:
    invalid = sorted({day for day in days if day < SUNDAY or day > SATURDAY})
    if invalid:
        raise InvalidRuleCondition(
            f"Rule '{rule.name}' has days of week outside 0-6: {invalid}",
            rule_id=rule.id,
            field="conditions.days_of_week",
        )


def _check_range(rule: _RuleBase, conditions: DateRangeConditions, *, required: bool) -> None:
    start, end = conditions.start_date, conditions.end_date
    if start is None and end is None:
        if required:
            raise InvalidRuleCondition(
                f"Rule '{rule.name}' requires start_date and end_date",
                rule_id=rule.id,
                field="conditions.start_date",
            )
        return
    if start is None or end is None:
        raise InvalidRuleCondition(
            f"Rule '{rule.name}' has an open-ended date range",
            rule_id=rule.id,
            field="conditions.end_date" if end is None else "conditions.start_date",
        )
    if end < start:
        raise InvalidRuleCondition(
            f"Rule '{rule.name}' ends before it starts ({end} < {start})",
            rule_id=rule.id,
            field="conditions.end_date",
        )


def _has_range(conditions: DateRangeConditions) -> bool:
    return conditions.start_date is not None or conditions.end_date is not None


def validate_rule(rule: PricingRule) -> None:
    """Raise InvalidRuleCondition when a rule cannot be evaluated unambiguously."""
    match rule:
        case TimeWindowRule(conditions=conditions):
            if conditions.start_time is None or conditions.end_time is None:
                raise InvalidRuleCondition(
                    f"Rule '{rule.name}' requires start_time and end_time",
                    rule_id=rule.id,
                    field="conditions.start_time",
                )
            if conditions.start_time.tzinfo is not None or conditions.end_time.tzinfo is not None:
                raise InvalidRuleCondition(
                    f"Rule '{rule.name}' time window must be a plain wall-clock time without a UTC offset",
                    rule_id=rule.id,
                    field="conditions.start_time",
                )
            if conditions.start_time == conditions.end_time:
                raise InvalidRuleCondition(
                    f"Rule '{rule.name}' has an empty time window",
                    rule_id=rule.id,
                    field="conditions.end_time",
                )
        case WeekendRule(conditions=conditions):
            _check_days(rule, conditions.days_of_week)
        case SeasonalRule(conditions=conditions):
            _check_range(rule, conditions, required=True)
        case HolidayRule(conditions=conditions):
            if not _has_range(conditions) and not conditions.specific_dates:
                raise InvalidRuleCondition(
                    f"Rule '{rule.name}' needs a date range or specific dates",
                    rule_id=rule.id,
                    field="conditions",
                )
            _check_range(rule, conditions, required=False)
        case SpecialRule(conditions=conditions):
            if not _has_range(conditions) and not conditions.days_of_week and not conditions.specific_dates:
                raise InvalidRuleCondition(
                    f"Rule '{rule.name}' has no conditions and would never apply",
                    rule_id=rule.id,
                    field="conditions",
                )
            _check_range(rule, conditions, required=False)
            _check_days(rule, conditions.days_of_week)
        case _:
            raise InvalidRuleCondition(f"Unsupported rule type for '{rule.name}'", rule_id=rule.id, field="type")


def collect_rule_issues(rules: Iterable[PricingRule]) -> list[dict]:
    issues: list[dict] = []
    for rule in rules:
        try:
            validate_rule(rule)
        except InvalidRuleCondition as exc:
            issues.append({"rule_id": exc.rule_id, "field": exc.field, "message": exc.detail})
    return issues


def _in_time_window(conditions: TimeWindowConditions, clock: time) -> bool:
    start, end = conditions.start_time, conditions.end_time
    if end < start:
        return clock >= start or clock < end
    return start <= clock < end


def _in_date_range(conditions: DateRangeConditions, day: date) -> bool:
    return conditions.start_date <= day <= conditions.end_date


def _holiday_matches(conditions: HolidayConditions, day: date) -> bool:
    if _has_range(conditions) and not _in_date_range(conditions, day):
        return False
    if conditions.specific_dates and day not in conditions.specific_dates:
        return False
    return True


def rule_applies(rule: PricingRule, at: datetime, *, weekend_days: Sequence[int] = DEFAULT_WEEKEND_DAYS) -> bool:
    if not rule.is_active:
        return False
    validate_rule(rule)
    day = at.date()
    match rule:
        case TimeWindowRule(conditions=conditions):
            return _in_time_window(conditions, at.time())
        case WeekendRule(conditions=conditions):
            days = conditions.days_of_week or weekend_days or DEFAULT_WEEKEND_DAYS
            return day_of_week(day) in days
        case SeasonalRule(conditions=conditions):
            return _in_date_range(conditions, day)
        case HolidayRule(conditions=conditions):
            return _holiday_matches(conditions, day)
        case SpecialRule(conditions=conditions):
            if not _holiday_matches(conditions, day):
                return False
            if conditions.days_of_week and day_of_week(day) not in conditions.days_of_week:
                return False
            return True
    return False


def _creation_key(rule: PricingRule) -> float:
    if rule.created_at is None:
        return float("inf")
    created = rule.created_at
    if created.tzinfo is None:
        created = created.replace(tzinfo=timezone.utc)
    return created.timestamp()


def match_rules(
    rules: Sequence[PricingRule],
    at: datetime,
    *,
    weekend_days: Sequence[int] = DEFAULT_WEEKEND_DAYS,
) -> list[PricingRule]:
    """Return the rules in effect at ``at``, highest priority first.

    Ties keep creation order: ``created_at`` when the rule store supplies it,
    otherwise the order of ``rules``.
    """
    matched = [
        (index, rule)
        for index, rule in enumerate(rules)
        if rule_applies(rule, at, weekend_days=weekend_days)
    ]
    matched.sort(key=lambda item: (-item[1].priority, _creation_key(item[1]), item[0]))
    if matched:
        logger.debug(
            "pricing_rules_matched",
            extra={"extra": {"at": at.isoformat(), "rule_ids": [rule.id for _, rule in matched]}},
        )
    return [rule for _, rule in matched]
