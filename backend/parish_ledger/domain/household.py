# backend/parish_ledger/domain/household.py
from __future__ import annotations

from dataclasses import dataclass
from decimal import Decimal


@dataclass(frozen=True)
class HouseholdMember:
    id: int
    first_name: str
    last_name: str


@dataclass(frozen=True)
class Household:
    """
    One shared dues obligation: the head plus every member pointing at the head.
    Resolved once per request; every query site takes member_ids from here.
    """

    head: HouseholdMember
    members: tuple[HouseholdMember, ...]
    annual_pledge: Decimal

    @property
    def head_id(self) -> int:
        return self.head.id

    @property
    def member_ids(self) -> frozenset[int]:
        return frozenset(m.id for m in self.members)

    @property
    def is_household_view(self) -> bool:
        return len(self.members) > 1

    @property
    def member_names(self) -> str:
        return ", ".join(m.first_name for m in self.members)
