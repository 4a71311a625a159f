# backend/parish_ledger/services/household_resolver.py
from __future__ import annotations

import logging

from sqlalchemy import select, or_
from sqlalchemy.orm import Session

from ..domain.household import Household, HouseholdMember
from ..domain.postings import to_money
from ..errors import NotFound, DataIntegrityError
from ..models import Member

log = logging.getLogger(__name__)


def must_get_member(db: Session, *, member_id: int) -> Member:
    row = db.scalar(select(Member).where(Member.id == member_id))
    if not row:
        raise NotFound("member not found")
    return row


def head_id_for(member: Member) -> int:
    # legacy rows point a head at itself; treat that the same as NULL
    if member.family_id is None or int(member.family_id) == int(member.id):
        return int(member.id)
    return int(member.family_id)


def resolve_household(db: Session, *, member_id: int) -> Household:
    member = must_get_member(db, member_id=member_id)

    head_id = head_id_for(member)
    if head_id == member.id:
        head = member
    else:
        head = db.scalar(select(Member).where(Member.id == head_id))
        if not head:
            raise NotFound("household head not found")

    rows = db.scalars(
        select(Member)
        .where(or_(Member.family_id == head.id, Member.id == head.id))
        .order_by(Member.id)
    ).all()

    try:
        pledge = to_money(head.yearly_pledge if head.yearly_pledge is not None else 0)
    except (ValueError, TypeError, ArithmeticError) as e:
        raise DataIntegrityError(f"member {head.id} has an unreadable yearly pledge") from e

    # head first, then dependents in id order
    members = [HouseholdMember(id=int(head.id), first_name=head.first_name, last_name=head.last_name)]
    members += [
        HouseholdMember(id=int(m.id), first_name=m.first_name, last_name=m.last_name)
        for m in rows
        if m.id != head.id
    ]

    hh = Household(head=members[0], members=tuple(members), annual_pledge=pledge)
    log.debug("household resolved", extra={"member_id": member_id, "head_id": hh.head_id})
    return hh
