#!/usr/bin/env python3
"""
Create the ledger: fixed owner identity and initial subscription fee.
Run from the project root: python -m scripts.init_ledger --owner <identity> --fee <amount>
Defaults come from LEDGER_OWNER / LEDGER_INITIAL_FEE.
"""
import argparse
import os
import sys

# project root on PYTHONPATH
sys.path.insert(0, os.path.dirname(os.path.dirname(os.path.abspath(__file__))))

from subledger.core.config import settings
from subledger.db.session import SessionLocal, init_db
from subledger.ledger.errors import LedgerError
from subledger.services.ledger_state.service import LedgerStateService


def main(argv: list[str] | None = None) -> int:
    parser = argparse.ArgumentParser(description="Initialize the subscription ledger")
    parser.add_argument("--owner", default=settings.ledger_owner, help="owner identity")
    parser.add_argument("--fee", type=int, default=settings.ledger_initial_fee, help="initial subscription fee")
    args = parser.parse_args(argv)

    if not args.owner:
        print("Owner identity is not set (--owner or LEDGER_OWNER).")
        return 2

    init_db()
    db = SessionLocal()
    try:
        state = LedgerStateService(db).initialize(args.owner, args.fee)
        print(f"Ledger created: owner={state.owner} fee={state.subscription_fee}")
    except LedgerError as exc:
        print(f"{exc.code}: {exc.message}")
        return 1
    finally:
        db.close()
    return 0


if __name__ == "__main__":
    sys.exit(main())
