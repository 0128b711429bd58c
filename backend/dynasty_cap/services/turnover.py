"""League-wide season turnover: preview and commit."""

from __future__ import annotations

import logging
from dataclasses import asdict
from typing import Any, Dict, List, Optional

from sqlalchemy import select
from sqlalchemy.orm import Session

from dynasty_cap.engine import (
    EligibilityError,
    preview_season_turnover,
    run_season_turnover,
    summarize_turnover,
)
from dynasty_cap.engine.turnover import TurnoverChange
from dynasty_cap.models import Contract, DeadMoney, Team
from dynasty_cap.services import records
from dynasty_cap.services.cap import LIVE_STATUS_VALUES
from dynasty_cap.services.locks import team_locks
from dynasty_cap.services.transactions import get_league, record_transaction

logger = logging.getLogger(__name__)


def _live_contract_rows(session: Session, league_id: int) -> List[Contract]:
    return list(
        session.scalars(
            select(Contract)
            .where(Contract.league_id == league_id, Contract.status.in_(LIVE_STATUS_VALUES))
            .order_by(Contract.id)
            .execution_options(populate_existing=True)
        ).all()
    )


def _change_dict(change: TurnoverChange) -> Dict[str, Any]:
    data = asdict(change)
    data["salary_delta"] = change.salary_delta
    return data


def preview_turnover(session: Session, league_id: int) -> Dict[str, Any]:
    league_row = get_league(session, league_id)
    league = records.league_config(league_row)
    changes = preview_season_turnover(
        [records.contract_record(row) for row in _live_contract_rows(session, league.id)], league
    )
    return {
        "league_id": league.id,
        "from_season": league.season,
        "to_season": league.season + 1,
        "summary": summarize_turnover(changes),
        "changes": [_change_dict(c) for c in changes],
    }


def commit_turnover(
    session: Session,
    league_id: int,
    from_season: int,
    *,
    max_workers: Optional[int] = None,
) -> Dict[str, Any]:
    """Advance every live contract and reset team aggregates, in one commit.

    ``from_season`` must match the stored league season, so a repeated or
    concurrent request for the same season is rejected instead of aging
    contracts twice.
    """
    get_league(session, league_id)
    team_ids = session.scalars(select(Team.id).where(Team.league_id == league_id)).all()
    with team_locks(team_ids):
        try:
            league_row = get_league(session, league_id)
            if league_row.season != from_season:
                raise EligibilityError(
                    f"League {league_id} is in season {league_row.season}; "
                    f"turnover from {from_season} was already run or is not due",
                    rule="season_already_turned_over",
                )
            league = records.league_config(league_row)
            contract_rows = _live_contract_rows(session, league.id)
            team_rows = list(
                session.scalars(
                    select(Team)
                    .where(Team.league_id == league.id)
                    .execution_options(populate_existing=True)
                ).all()
            )
            dead_money = [
                records.dead_money_record(row)
                for row in session.scalars(
                    select(DeadMoney).where(DeadMoney.team_id.in_([t.id for t in team_rows]))
                ).all()
            ]

            outcome = run_season_turnover(
                [records.contract_record(row) for row in contract_rows],
                [records.team_record(row) for row in team_rows],
                dead_money,
                league,
                max_workers=max_workers,
            )

            for row, record in zip(contract_rows, outcome.contracts):
                records.apply_contract(row, record)
            teams_by_id = {row.id: row for row in team_rows}
            for record in outcome.teams:
                records.apply_team(teams_by_id[record.id], record)
            league_row.season = outcome.league.season

            summary = summarize_turnover(outcome.changes)
            record_transaction(
                session,
                league_id=league.id,
                type="season_turnover",
                payload={"from_season": from_season},
                result={"to_season": outcome.league.season, "summary": summary},
                notes=[f"Contract {c.contract_id} had no years remaining" for c in outcome.stale_contracts],
            )
            session.commit()
        except Exception:
            session.rollback()
            raise

    logger.info(
        "League %s turned over to season %s (%d contracts, %d stale)",
        league_id,
        outcome.league.season,
        summary["total_contracts"],
        summary["stale_contracts"],
    )
    return {
        "league_id": league_id,
        "from_season": from_season,
        "to_season": outcome.league.season,
        "summary": summary,
        "changes": [_change_dict(c) for c in outcome.changes],
    }
