# backend/parish_ledger/domain/contributions.py
from __future__ import annotations

import calendar
from dataclasses import dataclass
from decimal import Decimal, ROUND_HALF_UP
from typing import Any

from .postings import CENT, to_money

ZERO = Decimal("0.00")

MONTH_NAMES = [calendar.month_name[m].lower() for m in range(1, 13)]


@dataclass(frozen=True)
class MonthStatus:
    month: str
    paid: Decimal
    due: Decimal
    status: str  # paid|due


@dataclass(frozen=True)
class OtherContributions:
    donation: Decimal
    pledge_payment: Decimal
    tithe: Decimal
    offering: Decimal
    other: Decimal

    @property
    def total(self) -> Decimal:
        return self.donation + self.pledge_payment + self.tithe + self.offering + self.other


def monthly_payment(annual_pledge: Decimal) -> Decimal:
    return (annual_pledge / 12).quantize(CENT, rounding=ROUND_HALF_UP)


def dues_progress(collected: Decimal, due: Decimal) -> Decimal:
    if due <= ZERO:
        return ZERO
    return (collected / due * 100).quantize(CENT, rounding=ROUND_HALF_UP)


def month_statuses(dues_txns: list[Any], *, monthly_due: Decimal) -> list[MonthStatus]:
    """Cash-flow grid: dues postings bucketed by the month they were received."""
    paid = [ZERO] * 12
    for t in dues_txns:
        d = getattr(t, "payment_date")
        paid[d.month - 1] += to_money(getattr(t, "amount", 0) or 0)

    out = []
    for i, name in enumerate(MONTH_NAMES):
        out.append(
            MonthStatus(
                month=name,
                paid=paid[i],
                due=monthly_due,
                status="paid" if paid[i] >= monthly_due else "due",
            )
        )
    return out


def other_contributions(txns: list[Any]) -> OtherContributions:
    buckets = {"donation": ZERO, "pledge_payment": ZERO, "tithe": ZERO, "offering": ZERO, "other": ZERO}
    for t in txns:
        typ = (getattr(t, "payment_type", "") or "").lower()
        amt = to_money(getattr(t, "amount", 0) or 0)

        if "donation" in typ:
            buckets["donation"] += amt
        elif "pledge" in typ:
            buckets["pledge_payment"] += amt
        elif "tithe" in typ:
            buckets["tithe"] += amt
        elif "offering" in typ:
            buckets["offering"] += amt
        elif "due" not in typ and "membership" not in typ:
            buckets["other"] += amt
    return OtherContributions(**buckets)
