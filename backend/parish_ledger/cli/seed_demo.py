# backend/parish_ledger/cli/seed_demo.py
from __future__ import annotations

from dataclasses import dataclass
from datetime import date
from decimal import Decimal

from sqlalchemy.orm import Session

from parish_ledger.db import Base, SessionLocal, engine
from parish_ledger.models import Member, Transaction


@dataclass(frozen=True)
class SeedResult:
    head_id: int
    spouse_id: int
    head_email: str
    transaction_ids: list[int]


def _get_or_create_member(db: Session, *, email: str, first_name: str, last_name: str, **kw) -> Member:
    row = db.query(Member).filter(Member.email == email).one_or_none()
    if row:
        return row
    row = Member(email=email, first_name=first_name, last_name=last_name, **kw)
    db.add(row)
    db.commit()
    db.refresh(row)
    return row


def _ensure_txn(db: Session, *, member_id: int, receipt_number: str, **kw) -> Transaction:
    row = db.query(Transaction).filter(Transaction.receipt_number == receipt_number).one_or_none()
    if row:
        return row
    row = Transaction(member_id=member_id, receipt_number=receipt_number, **kw)
    db.add(row)
    db.commit()
    db.refresh(row)
    return row


def seed_demo(
    *,
    head_email: str = "head@parish.local",
    spouse_email: str = "spouse@parish.local",
    yearly_pledge: Decimal = Decimal("120.00"),
    year: int | None = None,
) -> SeedResult:
    """
    Idempotent demo household: a head with a pledge, a spouse pointing at the head,
    a surplus dues payment last year and a late payment made this year for last year.
    """
    y = year or date.today().year
    Base.metadata.create_all(bind=engine)

    db = SessionLocal()
    try:
        head = _get_or_create_member(
            db, email=head_email, first_name="Dawit", last_name="Tesfaye", yearly_pledge=yearly_pledge
        )
        spouse = _get_or_create_member(
            db, email=spouse_email, first_name="Meaza", last_name="Tesfaye", family_id=int(head.id)
        )

        txns = [
            _ensure_txn(
                db,
                member_id=int(head.id),
                receipt_number="DEMO-1",
                amount=Decimal("200.00"),
                payment_date=date(y - 2, 5, 1),
                payment_type="membership_due",
                for_year=y - 2,
            ),
            _ensure_txn(
                db,
                member_id=int(spouse.id),
                receipt_number="DEMO-2",
                amount=Decimal("40.00"),
                payment_date=date(y, 1, 15),
                payment_type="membership_due",
                for_year=y - 1,
            ),
            _ensure_txn(
                db,
                member_id=int(head.id),
                receipt_number="DEMO-3",
                amount=Decimal("25.00"),
                payment_date=date(y, 2, 2),
                payment_type="tithe",
            ),
        ]
        return SeedResult(
            head_id=int(head.id),
            spouse_id=int(spouse.id),
            head_email=str(head.email),
            transaction_ids=[int(t.id) for t in txns],
        )
    finally:
        db.close()
