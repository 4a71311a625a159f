# backend/parish_ledger/domain/postings.py
from __future__ import annotations

from dataclasses import dataclass
from datetime import date, datetime
from decimal import Decimal, InvalidOperation, ROUND_HALF_UP
from typing import Any, Union

from ..errors import DataIntegrityError

CENT = Decimal("0.01")


def to_money(value: Any) -> Decimal:
    """
    Coerce a stored amount to a 2dp Decimal.
    Raises ValueError/InvalidOperation for anything non-numeric (callers translate).
    """
    if isinstance(value, bool) or value is None:
        raise ValueError(f"not a money amount: {value!r}")
    if isinstance(value, float):
        value = repr(value)
    d = Decimal(str(value).strip()) if isinstance(value, str) else Decimal(value)
    if not d.is_finite():
        raise ValueError(f"not a finite amount: {value!r}")
    return d.quantize(CENT, rounding=ROUND_HALF_UP)


# -----------------------------
# Attribution: which year's obligation a posting satisfies
# -----------------------------
@dataclass(frozen=True)
class ExplicitAttribution:
    year: int


@dataclass(frozen=True)
class InferredAttribution:
    posted_on: date


Attribution = Union[ExplicitAttribution, InferredAttribution]


def attribution_for(*, for_year: int | None, payment_date: date) -> Attribution:
    if for_year is None:
        return InferredAttribution(posted_on=payment_date)
    return ExplicitAttribution(year=int(for_year))


def effective_year(attribution: Attribution) -> int:
    if isinstance(attribution, ExplicitAttribution):
        return attribution.year
    return attribution.posted_on.year


@dataclass(frozen=True)
class ReducedPosting:
    amount: Decimal
    effective_year: int


def _as_date(value: Any) -> date:
    if isinstance(value, datetime):
        return value.date()
    if isinstance(value, date):
        return value
    if isinstance(value, str):
        return date.fromisoformat(value.strip()[:10])
    raise ValueError(f"not a date: {value!r}")


def reduce_posting(
    *,
    amount: Any,
    payment_date: Any,
    for_year: Any = None,
    posting_id: int | None = None,
) -> ReducedPosting:
    """
    Reduce a stored posting to {amount, effective_year}.

    A posting that cannot be reduced fails the whole request: dropping it would
    silently shift every later year's rollover.
    """
    try:
        money = to_money(amount)
        posted_on = _as_date(payment_date)
        year = None if for_year is None else int(for_year)
    except (ValueError, TypeError, InvalidOperation) as e:
        raise DataIntegrityError(f"posting {posting_id} cannot be reduced: {e}", posting_id=posting_id) from e

    return ReducedPosting(
        amount=money,
        effective_year=effective_year(attribution_for(for_year=year, payment_date=posted_on)),
    )
