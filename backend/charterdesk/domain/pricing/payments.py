from datetime import date, timedelta
from decimal import Decimal

from charterdesk.domain.pricing.models import PaymentSplit
from charterdesk.domain.pricing.money import percent_of, round_currency, to_decimal


def split_payment(
    amount: int,
    advance_percent: Decimal | int,
    *,
    event_date: date | None = None,
    remainder_due_before_days: int = 0,
) -> PaymentSplit:
    # remainder is derived, never rounded on its own, so the two parts always sum to amount
    advance = round_currency(percent_of(amount, advance_percent))
    advance = max(0, min(advance, amount))
    remainder = amount - advance
    due_on = None
    if event_date is not None and remainder > 0:
        due_on = event_date - timedelta(days=remainder_due_before_days)
    return PaymentSplit(
        amount=amount,
        advance_percent=to_decimal(advance_percent),
        advance=advance,
        remainder=remainder,
        remainder_due_on=due_on,
    )
