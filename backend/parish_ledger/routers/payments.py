# backend/parish_ledger/routers/payments.py
from __future__ import annotations

from fastapi import APIRouter, Depends, Query
from sqlalchemy.orm import Session

from ..auth import Principal, get_principal
from ..db import get_db
from ..errors import Forbidden, NotFound
from ..schemas import DuesEnvelopeOut
from ..services.dues_service import compute_household_dues, parse_year
from ..services.household_resolver import resolve_household

router = APIRouter(prefix="/payments", tags=["payments"])


@router.get("/me/dues", response_model=DuesEnvelopeOut)
def my_dues(
    year: str | None = Query(default=None),
    db: Session = Depends(get_db),
    p: Principal = Depends(get_principal),
):
    """Dues position of the caller's own household for `year` (default: this year)."""
    y = parse_year(year)
    return compute_household_dues(db, member_id=p.member_id, year=y)


@router.get("/{member_id}/dues", response_model=DuesEnvelopeOut)
def member_dues(
    member_id: int,
    year: str | None = Query(default=None),
    db: Session = Depends(get_db),
    p: Principal = Depends(get_principal),
):
    """
    Dues position of any member's household.
    Finance staff may query anyone; other members only records inside their own household.
    """
    y = parse_year(year)

    if not p.is_staff and member_id != p.member_id:
        try:
            own = resolve_household(db, member_id=p.member_id)
        except NotFound:
            # caller has a dangling family_id
            raise Forbidden("not allowed to view this household")
        if member_id not in own.member_ids:
            raise Forbidden("not allowed to view this household")

    return compute_household_dues(db, member_id=member_id, year=y)
