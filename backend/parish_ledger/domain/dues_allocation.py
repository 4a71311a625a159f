# backend/parish_ledger/domain/dues_allocation.py
from __future__ import annotations

from collections import defaultdict
from dataclasses import dataclass
from decimal import Decimal
from enum import Enum
from typing import Iterable

from .postings import ReducedPosting

ZERO = Decimal("0.00")


class CarryPolicy(str, Enum):
    # surplus and deficit both roll into the next year, unclamped
    NET = "net"
    # carry is floored at zero after each year: surplus rolls, deficit is dropped
    FLOOR_AT_ZERO = "floor_at_zero"


@dataclass(frozen=True)
class DuesAllocation:
    year: int
    total_amount_due: Decimal
    direct_allocation: Decimal
    carried_balance: Decimal
    dues_collected: Decimal
    outstanding_dues: Decimal


def paid_by_year(postings: Iterable[ReducedPosting]) -> dict[int, Decimal]:
    totals: dict[int, Decimal] = defaultdict(lambda: ZERO)
    for p in postings:
        totals[p.effective_year] += p.amount
    return dict(totals)


def rollover_carry(
    paid: dict[int, Decimal],
    *,
    annual_due: Decimal,
    target_year: int,
    policy: CarryPolicy = CarryPolicy.NET,
) -> Decimal:
    """
    Net surplus (+) or shortfall (-) entering target_year.

    Walks every year from the earliest paid year through target_year - 1,
    including years with nothing paid, charging annual_due against each.
    """
    min_year = min(paid) if paid else target_year

    carry = ZERO
    for y in range(min_year, target_year):
        carry = carry + paid.get(y, ZERO) - annual_due
        if policy is CarryPolicy.FLOOR_AT_ZERO and carry < ZERO:
            carry = ZERO
    return carry


def allocate_dues(
    *,
    annual_due: Decimal,
    postings: Iterable[ReducedPosting],
    target_year: int,
    policy: CarryPolicy = CarryPolicy.NET,
) -> DuesAllocation:
    paid = paid_by_year(postings)
    carry = rollover_carry(paid, annual_due=annual_due, target_year=target_year, policy=policy)

    direct = paid.get(target_year, ZERO)
    collected = direct + carry
    return DuesAllocation(
        year=int(target_year),
        total_amount_due=annual_due,
        direct_allocation=direct,
        carried_balance=carry,
        dues_collected=collected,
        outstanding_dues=annual_due - collected,
    )
