"""CLI script to preview or commit a league's season turnover.

Preview prints the per-contract changes without touching the database.
Commit requires ``--from-season`` to match the league's stored season so
that re-running the same command cannot age contracts twice.
"""

from __future__ import annotations

import argparse
import os
import sys
from pathlib import Path


def parse_args() -> argparse.Namespace:
    parser = argparse.ArgumentParser(description="Run season turnover for a dynasty league.")
    parser.add_argument("league_id", type=int, help="League to turn over")
    parser.add_argument(
        "--commit",
        action="store_true",
        help="Apply the turnover instead of printing a preview.",
    )
    parser.add_argument(
        "--from-season",
        type=int,
        default=None,
        help="Season being closed; required with --commit.",
    )
    parser.add_argument(
        "--database-url",
        type=str,
        default=None,
        help="Override DATABASE_URL env var for this run.",
    )
    args = parser.parse_args()
    if args.commit and args.from_season is None:
        parser.error("--from-season is required with --commit")
    return args


def ensure_backend_on_path() -> None:
    backend_dir = Path(__file__).resolve().parents[1]
    if str(backend_dir) not in sys.path:
        sys.path.insert(0, str(backend_dir))


def main() -> int:
    args = parse_args()
    ensure_backend_on_path()

    if args.database_url:
        os.environ["DATABASE_URL"] = args.database_url

    from dynasty_cap.core.config import settings
    from dynasty_cap.core.logging import configure_logging
    from dynasty_cap.db.session import SessionLocal, init_db
    from dynasty_cap.engine import CapEngineError
    from dynasty_cap.services import turnover as turnover_service
    from dynasty_cap.services.transactions import TransactionError

    configure_logging(settings.log_level)
    init_db()

    with SessionLocal() as session:
        try:
            if args.commit:
                result = turnover_service.commit_turnover(session, args.league_id, args.from_season)
            else:
                result = turnover_service.preview_turnover(session, args.league_id)
        except (CapEngineError, TransactionError) as exc:
            print(f"Turnover failed: {exc}", file=sys.stderr)
            return 1

    for change in result["changes"]:
        flags = []
        if change["eligible_for_extension"]:
            flags.append("extend")
        if change["eligible_for_tag"]:
            flags.append("tag")
        if change["stale"]:
            flags.append("stale")
        print(
            f"contract {change['contract_id']:>6}  team {change['team_id']:>4}  "
            f"years {change['before_years_remaining']} -> {change['after_years_remaining']}  "
            f"salary {change['before_salary']:,} -> {change['after_salary']:,}  {' '.join(flags)}"
        )

    summary = result["summary"]
    verb = "Turned over" if args.commit else "Would turn over"
    print(
        f"{verb} league {result['league_id']} from {result['from_season']} to {result['to_season']}: "
        f"{summary['contracts_affected']} contracts affected, "
        f"{summary['eligible_for_extension']} extension-eligible, "
        f"{summary['eligible_for_franchise_tag']} tag-eligible, "
        f"{summary['stale_contracts']} stale"
    )
    return 0


if __name__ == "__main__":
    sys.exit(main())
