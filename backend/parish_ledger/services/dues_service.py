# backend/parish_ledger/services/dues_service.py
from __future__ import annotations

import logging
import re
from datetime import date
from decimal import Decimal
from typing import Iterable

from sqlalchemy.orm import Session

from ..config import settings
from ..domain.contributions import (
    dues_progress,
    month_statuses,
    monthly_payment,
    other_contributions,
)
from ..domain.dues_allocation import CarryPolicy, DuesAllocation, allocate_dues
from ..domain.household import Household
from ..errors import InvalidYear
from ..models import Transaction
from ..schemas import (
    DuesDetailsOut,
    DuesEnvelopeOut,
    DuesPaymentOut,
    HouseholdOut,
    MemberRefOut,
    MonthStatusOut,
    OtherContributionsOut,
    TransactionOut,
)
from .dues_queries import fetch_historical_dues, fetch_ledger_for_year
from .household_resolver import resolve_household

log = logging.getLogger(__name__)

_YEAR_RE = re.compile(r"^[0-9]{4}$")


def parse_year(raw: str | int | None, *, today: date | None = None) -> int:
    """Missing -> current calendar year. Anything but four digits -> InvalidYear."""
    if raw is None or (isinstance(raw, str) and raw.strip() == ""):
        return (today or date.today()).year
    s = str(raw).strip()
    if not _YEAR_RE.match(s) or int(s) < 1000:
        raise InvalidYear(f"year must be a 4-digit integer, got {raw!r}")
    return int(s)


def default_carry_policy() -> CarryPolicy:
    return CarryPolicy.FLOOR_AT_ZERO if settings.dues_carry_floor else CarryPolicy.NET


def _f(v: Decimal) -> float:
    return float(v)


def transaction_out(t: Transaction) -> TransactionOut:
    return TransactionOut(
        id=int(t.id),
        member_id=t.member_id,
        amount=_f(t.amount),
        posting_date=t.payment_date,
        category=t.payment_type,
        attribution_year=t.for_year,
        status=t.status,
        payment_method=t.payment_method,
        receipt_number=t.receipt_number,
    )


def _member_ref(m) -> MemberRefOut:
    return MemberRefOut(id=m.id, first_name=m.first_name, last_name=m.last_name)


def assemble_dues_payload(
    *,
    household: Household,
    allocation: DuesAllocation,
    ledger: list[Transaction],
    payment_type: str,
    counted_statuses: Iterable[str],
    member_id: int | None = None,
) -> DuesEnvelopeOut:
    """
    Pure composition. The allocation numbers are used as computed; the dues
    ledger rows are passed through unmodified as the year's transaction list.

    The month grid and contribution buckets only see rows whose status counts
    as received money, the same rule the allocation history is fetched with.
    """
    counted = set(counted_statuses)
    dues_txns = [t for t in ledger if t.payment_type == payment_type]
    received = [t for t in ledger if t.status in counted]

    monthly = monthly_payment(household.annual_pledge)
    grid = month_statuses([t for t in received if t.payment_type == payment_type], monthly_due=monthly)
    others = other_contributions([t for t in received if t.payment_type != payment_type])

    payment = DuesPaymentOut(
        total_amount_due=_f(allocation.total_amount_due),
        dues_collected=_f(allocation.dues_collected),
        outstanding_dues=_f(allocation.outstanding_dues),
        year=allocation.year,
        annual_pledge=_f(household.annual_pledge),
        monthly_payment=_f(monthly),
        direct_allocation=_f(allocation.direct_allocation),
        carried_balance=_f(allocation.carried_balance),
        dues_progress=_f(dues_progress(allocation.dues_collected, allocation.total_amount_due)),
        total_other_contributions=_f(others.total),
        grand_total=_f(allocation.dues_collected + others.total),
        month_statuses=[
            MonthStatusOut(month=m.month, paid=_f(m.paid), due=_f(m.due), status=m.status)
            for m in grid
        ],
        other_contributions=OtherContributionsOut(
            donation=_f(others.donation),
            pledge_payment=_f(others.pledge_payment),
            tithe=_f(others.tithe),
            offering=_f(others.offering),
            other=_f(others.other),
        ),
    )

    member = next((m for m in household.members if m.id == member_id), household.head)
    details = DuesDetailsOut(
        member=_member_ref(member),
        household=HouseholdOut(
            is_household_view=household.is_household_view,
            head_of_household=_member_ref(household.head),
            member_names=household.member_names,
            total_members=len(household.members),
        ),
        payment=payment,
        transactions=[transaction_out(t) for t in dues_txns],
    )
    return DuesEnvelopeOut(success=True, data=details)


def compute_household_dues(
    db: Session,
    *,
    member_id: int,
    year: int,
    policy: CarryPolicy | None = None,
) -> DuesEnvelopeOut:
    """
    member -> household -> {history, year ledger} -> allocation -> payload.
    Read-only; any failure aborts the whole request.
    """
    household = resolve_household(db, member_id=member_id)
    ids = household.member_ids
    payment_type = settings.dues_payment_type

    history = fetch_historical_dues(
        db,
        member_ids=ids,
        payment_type=payment_type,
        statuses=settings.counted_statuses,
    )
    ledger = fetch_ledger_for_year(db, member_ids=ids, year=year)

    allocation = allocate_dues(
        annual_due=household.annual_pledge,
        postings=history,
        target_year=year,
        policy=policy or default_carry_policy(),
    )

    log.info(
        "dues.computed",
        extra={
            "member_id": member_id,
            "head_id": household.head_id,
            "year": year,
            "household_size": len(ids),
            "total_amount_due": str(allocation.total_amount_due),
            "dues_collected": str(allocation.dues_collected),
            "outstanding_dues": str(allocation.outstanding_dues),
        },
    )

    return assemble_dues_payload(
        household=household,
        allocation=allocation,
        ledger=ledger,
        payment_type=payment_type,
        counted_statuses=settings.counted_statuses,
        member_id=member_id,
    )
