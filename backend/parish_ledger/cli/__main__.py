# backend/parish_ledger/cli/__main__.py
from __future__ import annotations

import argparse
import json

from parish_ledger.cli.seed_demo import seed_demo
from parish_ledger.db import SessionLocal
from parish_ledger.services.dues_service import compute_household_dues, parse_year


def _cmd_seed(args: argparse.Namespace) -> None:
    out = seed_demo(head_email=args.head_email, spouse_email=args.spouse_email)
    print(
        {
            "ok": True,
            "head_id": out.head_id,
            "spouse_id": out.spouse_id,
            "head_email": out.head_email,
            "transaction_ids": out.transaction_ids,
        }
    )


def _cmd_dues(args: argparse.Namespace) -> None:
    db = SessionLocal()
    try:
        payload = compute_household_dues(db, member_id=args.member_id, year=parse_year(args.year))
    finally:
        db.close()
    print(json.dumps(payload.model_dump(mode="json", by_alias=True), indent=2))


def main(argv: list[str] | None = None) -> None:
    p = argparse.ArgumentParser(prog="parish_ledger.cli")
    sub = p.add_subparsers(dest="command", required=True)

    s = sub.add_parser("seed", help="create tables and a demo household")
    s.add_argument("--head-email", default="head@parish.local")
    s.add_argument("--spouse-email", default="spouse@parish.local")
    s.set_defaults(func=_cmd_seed)

    d = sub.add_parser("dues", help="print a household's dues payload")
    d.add_argument("--member-id", type=int, required=True)
    d.add_argument("--year", default=None)
    d.set_defaults(func=_cmd_dues)

    args = p.parse_args(argv)
    args.func(args)


if __name__ == "__main__":
    main()
