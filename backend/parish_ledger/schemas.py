# backend/parish_ledger/schemas.py
from __future__ import annotations

from datetime import date
from typing import Optional

from pydantic import BaseModel, ConfigDict, Field
from pydantic.alias_generators import to_camel


class CamelModel(BaseModel):
    # wire format is camelCase; construct by field name in Python
    model_config = ConfigDict(alias_generator=to_camel, populate_by_name=True)


# -------------------- Dues --------------------

class MonthStatusOut(CamelModel):
    month: str
    paid: float
    due: float
    status: str


class OtherContributionsOut(BaseModel):
    donation: float = 0.0
    pledge_payment: float = 0.0
    tithe: float = 0.0
    offering: float = 0.0
    other: float = 0.0


class DuesPaymentOut(CamelModel):
    total_amount_due: float
    dues_collected: float
    outstanding_dues: float

    year: int
    annual_pledge: float
    monthly_payment: float
    direct_allocation: float
    carried_balance: float
    dues_progress: float
    future_dues: float = 0.0

    total_other_contributions: float = 0.0
    grand_total: float = 0.0

    month_statuses: list[MonthStatusOut] = Field(default_factory=list)
    other_contributions: OtherContributionsOut = Field(default_factory=OtherContributionsOut)


class TransactionOut(CamelModel):
    id: int
    member_id: Optional[int] = None
    amount: float
    posting_date: date
    category: str
    attribution_year: Optional[int] = None
    status: str = "succeeded"
    payment_method: Optional[str] = None
    receipt_number: Optional[str] = None


class MemberRefOut(CamelModel):
    id: int
    first_name: str
    last_name: str


class HouseholdOut(CamelModel):
    is_household_view: bool
    head_of_household: MemberRefOut
    member_names: str
    total_members: int


class DuesDetailsOut(CamelModel):
    member: MemberRefOut
    household: HouseholdOut
    payment: DuesPaymentOut
    transactions: list[TransactionOut] = Field(default_factory=list)


class DuesEnvelopeOut(BaseModel):
    success: bool = True
    data: DuesDetailsOut
