# backend/tests/test_dues_service.py
from __future__ import annotations

from datetime import date

import pytest
from sqlalchemy import text

from parish_ledger.domain.dues_allocation import CarryPolicy
from parish_ledger.errors import DataIntegrityError
from parish_ledger.services.dues_queries import fetch_historical_dues, fetch_ledger_for_year
from parish_ledger.services.dues_service import compute_household_dues


def test_no_history_household(db, make_member):
    head = make_member("Head", pledge=120)
    out = compute_household_dues(db, member_id=head.id, year=2025)

    assert out.success is True
    assert out.data.payment.total_amount_due == 120
    assert out.data.payment.dues_collected == 0
    assert out.data.payment.outstanding_dues == 120
    assert out.data.transactions == []


def test_prior_year_surplus_rolls_forward(db, make_member, make_txn):
    head = make_member("Head", pledge=120)
    make_txn(head.id, 200, date(2024, 5, 1), for_year=2024)

    p = compute_household_dues(db, member_id=head.id, year=2025).data.payment
    assert (p.total_amount_due, p.dues_collected, p.outstanding_dues) == (120, 80, 40)
    assert p.carried_balance == 80
    assert p.direct_allocation == 0


def test_ledger_and_allocation_are_separate_views(db, make_member, make_txn):
    head = make_member("Head", pledge=120)
    late = make_txn(head.id, 120, date(2026, 2, 1), for_year=2025)

    y2025 = compute_household_dues(db, member_id=head.id, year=2025).data
    assert y2025.payment.dues_collected == 120
    assert y2025.payment.outstanding_dues == 0
    assert y2025.transactions == []

    y2026 = compute_household_dues(db, member_id=head.id, year=2026).data
    assert y2026.payment.dues_collected == 0
    assert y2026.payment.outstanding_dues == 120
    assert [t.id for t in y2026.transactions] == [late.id]
    assert y2026.transactions[0].attribution_year == 2025
    assert y2026.transactions[0].posting_date == date(2026, 2, 1)


def test_household_payments_sum_into_one_obligation(db, make_member, make_txn):
    head = make_member("Dawit", pledge=1200)
    spouse = make_member("Meaza", family_id=head.id)
    t1 = make_txn(head.id, 50, date(2025, 1, 15))
    t2 = make_txn(spouse.id, 50, date(2025, 2, 15))

    for who in (head.id, spouse.id):
        data = compute_household_dues(db, member_id=who, year=2025).data
        assert data.payment.total_amount_due == 1200
        assert data.payment.dues_collected == 100
        assert sorted(t.id for t in data.transactions) == sorted([t1.id, t2.id])
        assert data.household.head_of_household.id == head.id
        assert data.household.total_members == 2


def test_other_households_are_not_counted(db, make_member, make_txn):
    a = make_member("A", pledge=120)
    b = make_member("B", pledge=120)
    make_txn(b.id, 120, date(2025, 3, 1))

    assert compute_household_dues(db, member_id=a.id, year=2025).data.payment.dues_collected == 0


def test_failed_postings_show_in_ledger_but_do_not_count(db, make_member, make_txn):
    head = make_member("Head", pledge=120)
    make_txn(head.id, 120, date(2025, 3, 1), status="failed")
    ok = make_txn(head.id, 20, date(2025, 4, 1))

    data = compute_household_dues(db, member_id=head.id, year=2025).data
    assert data.payment.dues_collected == 20
    assert len(data.transactions) == 2
    assert ok.id in {t.id for t in data.transactions}


def test_non_dues_categories_feed_other_contributions_only(db, make_member, make_txn):
    head = make_member("Head", pledge=120)
    make_txn(head.id, 30, date(2025, 1, 10))
    make_txn(head.id, 25, date(2025, 2, 2), payment_type="tithe")
    make_txn(head.id, 10, date(2025, 2, 9), payment_type="donation")
    make_txn(head.id, 5, date(2025, 3, 9), payment_type="building_fund")

    data = compute_household_dues(db, member_id=head.id, year=2025).data
    assert data.payment.dues_collected == 30
    assert [t.category for t in data.transactions] == ["membership_due"]
    assert data.payment.other_contributions.tithe == 25
    assert data.payment.other_contributions.donation == 10
    assert data.payment.other_contributions.other == 5
    assert data.payment.total_other_contributions == 40
    assert data.payment.grand_total == 70


def test_month_grid_uses_posting_month(db, make_member, make_txn):
    head = make_member("Head", pledge=120)
    make_txn(head.id, 10, date(2025, 1, 3))
    make_txn(head.id, 5, date(2025, 2, 3))

    data = compute_household_dues(db, member_id=head.id, year=2025).data
    grid = {m.month: m for m in data.payment.month_statuses}
    assert len(grid) == 12
    assert data.payment.monthly_payment == 10
    assert grid["january"].status == "paid"
    assert grid["february"].paid == 5
    assert grid["february"].status == "due"
    assert grid["december"].paid == 0


def test_progress_percentage(db, make_member, make_txn):
    head = make_member("Head", pledge=120)
    make_txn(head.id, 30, date(2025, 6, 1))
    assert compute_household_dues(db, member_id=head.id, year=2025).data.payment.dues_progress == 25


def test_policy_is_selectable_per_call(db, make_member, make_txn):
    head = make_member("Head", pledge=120)
    make_txn(head.id, 50, date(2024, 6, 1))

    net = compute_household_dues(db, member_id=head.id, year=2025, policy=CarryPolicy.NET).data.payment
    floored = compute_household_dues(db, member_id=head.id, year=2025, policy=CarryPolicy.FLOOR_AT_ZERO).data.payment
    assert net.dues_collected == -70
    assert net.outstanding_dues == 190
    assert floored.dues_collected == 0
    assert floored.outstanding_dues == 120


def test_historical_fetch_has_no_year_filter(db, make_member, make_txn):
    head = make_member("Head", pledge=120)
    make_txn(head.id, 10, date(2001, 1, 1))
    make_txn(head.id, 20, date(2030, 1, 1))
    make_txn(head.id, 99, date(2015, 1, 1), payment_type="tithe")

    rows = fetch_historical_dues(db, member_ids=[head.id], payment_type="membership_due")
    assert sorted(r.effective_year for r in rows) == [2001, 2030]


def test_ledger_fetch_filters_by_posting_date_only(db, make_member, make_txn):
    head = make_member("Head", pledge=120)
    make_txn(head.id, 10, date(2024, 12, 31), for_year=2025)
    inside = make_txn(head.id, 10, date(2025, 1, 1), for_year=2024)
    make_txn(head.id, 10, date(2026, 1, 1))

    rows = fetch_ledger_for_year(db, member_ids=[head.id], year=2025, payment_type="membership_due")
    assert [r.id for r in rows] == [inside.id]


@pytest.mark.parametrize(
    "amount,payment_date",
    [("'abc'", "'2024-01-01'"), ("200", "'not-a-date'")],
)
def test_unreadable_posting_fails_the_request(db, make_member, amount, payment_date):
    head = make_member("Head", pledge=120)
    db.execute(
        text(
            "INSERT INTO transactions (member_id, amount, payment_date, payment_type, payment_method, status, created_at) "
            f"VALUES (:mid, {amount}, {payment_date}, 'membership_due', 'cash', 'succeeded', '2024-01-01 00:00:00')"
        ),
        {"mid": head.id},
    )
    db.commit()

    with pytest.raises(DataIntegrityError):
        compute_household_dues(db, member_id=head.id, year=2025)


def test_unsettled_postings_stay_out_of_grid_and_buckets(db, make_member, make_txn):
    head = make_member("Head", pledge=120)
    failed = make_txn(head.id, 10, date(2025, 1, 3), status="failed")
    make_txn(head.id, 500, date(2025, 2, 1), payment_type="donation", status="canceled")

    data = compute_household_dues(db, member_id=head.id, year=2025).data
    grid = {m.month: m for m in data.payment.month_statuses}
    assert grid["january"].paid == 0
    assert grid["january"].status == "due"
    assert data.payment.other_contributions.donation == 0
    assert data.payment.total_other_contributions == 0
    assert data.payment.grand_total == 0
    assert [t.id for t in data.transactions] == [failed.id]
    assert data.transactions[0].status == "failed"


def test_carry_floor_setting_drives_default_policy(db, make_member, make_txn, monkeypatch):
    from parish_ledger.config import settings

    head = make_member("Head", pledge=120)
    make_txn(head.id, 50, date(2024, 6, 1))

    assert compute_household_dues(db, member_id=head.id, year=2025).data.payment.dues_collected == -70

    monkeypatch.setattr(settings, "dues_carry_floor", True)
    p = compute_household_dues(db, member_id=head.id, year=2025).data.payment
    assert p.dues_collected == 0
    assert p.outstanding_dues == 120


def test_member_block_names_the_requested_member(db, make_member):
    head = make_member("Dawit", pledge=120)
    spouse = make_member("Meaza", family_id=head.id)

    data = compute_household_dues(db, member_id=spouse.id, year=2025).data
    assert data.member.id == spouse.id
    assert data.member.first_name == "Meaza"
    assert data.household.head_of_household.id == head.id
    assert data.payment.future_dues == 0
