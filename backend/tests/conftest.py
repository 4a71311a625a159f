# backend/tests/conftest.py
from __future__ import annotations

from datetime import date
from decimal import Decimal

import pytest
from fastapi.testclient import TestClient
from sqlalchemy import create_engine
from sqlalchemy.orm import sessionmaker
from sqlalchemy.pool import StaticPool

from parish_ledger.db import Base, get_db
from parish_ledger.main import create_app
from parish_ledger.models import Member, Transaction


@pytest.fixture()
def session_factory():
    engine = create_engine(
        "sqlite://",
        connect_args={"check_same_thread": False},
        poolclass=StaticPool,
        future=True,
    )
    Base.metadata.create_all(bind=engine)
    try:
        yield sessionmaker(bind=engine, autoflush=False, autocommit=False, future=True)
    finally:
        engine.dispose()


@pytest.fixture()
def db(session_factory):
    s = session_factory()
    try:
        yield s
    finally:
        s.close()


@pytest.fixture()
def client(session_factory):
    app = create_app()

    def _get_db():
        s = session_factory()
        try:
            yield s
        finally:
            s.close()

    app.dependency_overrides[get_db] = _get_db
    return TestClient(app)


@pytest.fixture()
def make_member(db):
    def _mk(first_name: str = "Test", *, email: str | None = None, pledge=None, family_id=None, role: str = "member") -> Member:
        m = Member(
            first_name=first_name,
            last_name="Member",
            email=email,
            yearly_pledge=None if pledge is None else Decimal(str(pledge)),
            family_id=family_id,
            role=role,
        )
        db.add(m)
        db.commit()
        db.refresh(m)
        return m

    return _mk


@pytest.fixture()
def make_txn(db):
    def _mk(
        member_id: int,
        amount,
        paid_on: date,
        *,
        for_year: int | None = None,
        payment_type: str = "membership_due",
        status: str = "succeeded",
    ) -> Transaction:
        t = Transaction(
            member_id=member_id,
            amount=Decimal(str(amount)),
            payment_date=paid_on,
            payment_type=payment_type,
            payment_method="cash",
            status=status,
            for_year=for_year,
        )
        db.add(t)
        db.commit()
        db.refresh(t)
        return t

    return _mk
