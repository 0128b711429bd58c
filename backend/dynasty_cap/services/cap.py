"""Team cap figures read from the database."""

from __future__ import annotations

from dataclasses import asdict
from typing import Any, Dict, List, Optional, Tuple

from sqlalchemy import select
from sqlalchemy.orm import Session

from dynasty_cap.engine import (
    ContractRecord,
    DeadMoneyRecord,
    LeagueConfig,
    compute_team_cap,
    project_team_cap,
    refresh_team,
)
from dynasty_cap.engine.records import LIVE_STATUSES
from dynasty_cap.models import Contract, DeadMoney, Player, Team
from dynasty_cap.services import records
from dynasty_cap.services.transactions import get_league, get_team

LIVE_STATUS_VALUES = tuple(status.value for status in LIVE_STATUSES)


def team_contracts(session: Session, team_id: int) -> List[ContractRecord]:
    rows = session.scalars(
        select(Contract)
        .where(Contract.team_id == team_id, Contract.status.in_(LIVE_STATUS_VALUES))
        .execution_options(populate_existing=True)
    ).all()
    return [records.contract_record(row) for row in rows]


def team_dead_money(session: Session, team_id: int) -> List[DeadMoneyRecord]:
    rows = session.scalars(select(DeadMoney).where(DeadMoney.team_id == team_id)).all()
    return [records.dead_money_record(row) for row in rows]


def refresh_team_row(session: Session, team: Team, league: LeagueConfig) -> Team:
    """Recompute the team's derived cap columns from its contracts and ledger."""
    session.flush()
    refreshed = refresh_team(
        records.team_record(team),
        team_contracts(session, team.id),
        team_dead_money(session, team.id),
        league,
    )
    return records.apply_team(team, refreshed)


def _team_inputs(session: Session, team_id: int) -> Tuple[Team, LeagueConfig]:
    team = get_team(session, team_id)
    league = records.league_config(get_league(session, team.league_id))
    return team, league


def team_cap_summary(session: Session, team_id: int) -> Dict[str, Any]:
    team, league = _team_inputs(session, team_id)
    contracts = team_contracts(session, team.id)
    summary = compute_team_cap(
        records.team_record(team), contracts, team_dead_money(session, team.id), league
    )
    entries = sorted(
        (
            {
                "contract_id": c.id,
                "player_id": c.player_id,
                "current_salary": c.current_salary,
                "years_remaining": c.years_remaining,
                "status": c.status.value,
            }
            for c in contracts
        ),
        key=lambda entry: entry["current_salary"],
        reverse=True,
    )
    return {
        "team_id": team.id,
        "season": league.season,
        "franchise_tags_used": team.franchise_tags_used,
        "max_franchise_tags": league.max_franchise_tags,
        **asdict(summary),
        "entries": entries,
    }


def team_cap_projection(session: Session, team_id: int, years: int = 3) -> List[Dict[str, Any]]:
    team, league = _team_inputs(session, team_id)
    projections = project_team_cap(
        team.id, team_contracts(session, team.id), team_dead_money(session, team.id), league, years
    )
    return [asdict(p) for p in projections]


def dead_money_for_team(session: Session, team_id: int, year: Optional[int] = None) -> Dict[str, Any]:
    """Ledger entries charged to the team, oldest season first, largest first within a season."""
    team, league = _team_inputs(session, team_id)
    stmt = (
        select(DeadMoney, Player.name, Player.position)
        .join(Player, DeadMoney.player_id == Player.id)
        .where(DeadMoney.team_id == team.id)
        .order_by(DeadMoney.year, DeadMoney.amount.desc(), DeadMoney.id)
    )
    if year is not None:
        stmt = stmt.where(DeadMoney.year == year)

    entries = []
    for row, player_name, position in session.execute(stmt).all():
        entry = records.dead_money_record(row).to_dict()
        entry.update(id=row.id, player_name=player_name, position=position, created_at=row.created_at)
        entries.append(entry)
    return {
        "team_id": team.id,
        "season": league.season,
        "current_season_total": sum(e["amount"] for e in entries if e["year"] == league.season),
        "next_season_total": sum(e["amount"] for e in entries if e["year"] == league.season + 1),
        "entries": entries,
    }
