# backend/parish_ledger/models.py
from __future__ import annotations

from datetime import date, datetime
from decimal import Decimal
from typing import Optional

from sqlalchemy import (
    Boolean,
    Date,
    DateTime,
    ForeignKey,
    Integer,
    Numeric,
    String,
    Text,
    Index,
)
from sqlalchemy.orm import Mapped, mapped_column

from .db import Base


# -----------------------------
# Members / households
# -----------------------------
class Member(Base):
    __tablename__ = "members"

    id: Mapped[int] = mapped_column(Integer, primary_key=True)
    first_name: Mapped[str] = mapped_column(String(100), nullable=False)
    last_name: Mapped[str] = mapped_column(String(100), nullable=False)
    email: Mapped[Optional[str]] = mapped_column(String(200), nullable=True, unique=True, index=True)
    phone_number: Mapped[Optional[str]] = mapped_column(String(30), nullable=True)

    # member|admin|treasurer|secretary|church_leadership|bookkeeper|auditor|ar_team|...
    role: Mapped[str] = mapped_column(String(40), nullable=False, default="member")

    # NULL => this member heads its own household; otherwise the head's id
    family_id: Mapped[Optional[int]] = mapped_column(Integer, ForeignKey("members.id", ondelete="SET NULL"), nullable=True, index=True)

    # only read from the head-of-household record
    yearly_pledge: Mapped[Optional[Decimal]] = mapped_column(Numeric(10, 2), nullable=True)

    is_active: Mapped[bool] = mapped_column(Boolean, nullable=False, default=True)
    created_at: Mapped[datetime] = mapped_column(DateTime, nullable=False, default=datetime.utcnow)


# -----------------------------
# Payment postings (written by the finance-entry workflow, read-only here)
# -----------------------------
class Transaction(Base):
    __tablename__ = "transactions"
    __table_args__ = (
        Index("ix_transactions_member_type", "member_id", "payment_type"),
        Index("ix_transactions_member_date", "member_id", "payment_date"),
    )

    id: Mapped[int] = mapped_column(Integer, primary_key=True)
    member_id: Mapped[Optional[int]] = mapped_column(Integer, ForeignKey("members.id", ondelete="SET NULL"), nullable=True)

    amount: Mapped[Decimal] = mapped_column(Numeric(10, 2), nullable=False)
    payment_date: Mapped[date] = mapped_column(Date, nullable=False)

    # membership_due|tithe|offering|donation|vow|building_fund|event|religious_item_sales|pledge_payment|other
    payment_type: Mapped[str] = mapped_column(String(40), nullable=False)
    payment_method: Mapped[str] = mapped_column(String(20), nullable=False, default="cash")
    status: Mapped[str] = mapped_column(String(20), nullable=False, default="succeeded")  # pending|succeeded|failed|canceled

    # obligation year override; NULL => year of payment_date
    for_year: Mapped[Optional[int]] = mapped_column(Integer, nullable=True)

    receipt_number: Mapped[Optional[str]] = mapped_column(String(100), nullable=True)
    note: Mapped[Optional[str]] = mapped_column(Text, nullable=True)
    created_at: Mapped[datetime] = mapped_column(DateTime, nullable=False, default=datetime.utcnow)
