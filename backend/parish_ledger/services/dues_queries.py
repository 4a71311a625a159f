# backend/parish_ledger/services/dues_queries.py
from __future__ import annotations

from datetime import date
from decimal import InvalidOperation
from typing import Iterable

from sqlalchemy import select
from sqlalchemy.orm import Session

from ..domain.postings import ReducedPosting, reduce_posting
from ..errors import DataIntegrityError
from ..models import Transaction


def fetch_historical_dues(
    db: Session,
    *,
    member_ids: Iterable[int],
    payment_type: str,
    statuses: Iterable[str] | None = None,
) -> list[ReducedPosting]:
    """
    Every dues posting the household ever made, no year filter and no limit.
    The rollover walk needs the full sequence from the earliest year.
    """
    ids = sorted(set(member_ids))
    if not ids:
        return []

    q = select(Transaction.id, Transaction.amount, Transaction.payment_date, Transaction.for_year).where(
        Transaction.member_id.in_(ids),
        Transaction.payment_type == payment_type,
    )
    if statuses is not None:
        q = q.where(Transaction.status.in_(list(statuses)))
    q = q.order_by(Transaction.payment_date, Transaction.id)

    out: list[ReducedPosting] = []
    try:
        for row in db.execute(q):
            out.append(
                reduce_posting(
                    amount=row.amount,
                    payment_date=row.payment_date,
                    for_year=row.for_year,
                    posting_id=row.id,
                )
            )
    except (ValueError, TypeError, InvalidOperation) as e:
        # column type processors reject the stored value before reduce_posting sees it
        raise DataIntegrityError(f"dues history contains an unreadable posting: {e}") from e
    return out


def fetch_ledger_for_year(
    db: Session,
    *,
    member_ids: Iterable[int],
    year: int,
    payment_type: str | None = None,
) -> list[Transaction]:
    """
    Postings physically received in `year` (by payment_date, never for_year).
    payment_type=None returns every category.
    """
    ids = sorted(set(member_ids))
    if not ids:
        return []

    q = select(Transaction).where(
        Transaction.member_id.in_(ids),
        Transaction.payment_date >= date(year, 1, 1),
        Transaction.payment_date <= date(year, 12, 31),
    )
    if payment_type is not None:
        q = q.where(Transaction.payment_type == payment_type)
    q = q.order_by(Transaction.payment_date, Transaction.id)

    try:
        return list(db.scalars(q).all())
    except (ValueError, TypeError, InvalidOperation) as e:
        raise DataIntegrityError(f"ledger for {year} contains an unreadable posting: {e}") from e
