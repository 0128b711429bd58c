"""Contract operations against the database.

Each mutating call takes the owning team's lock (both teams for a trade),
re-reads the rows it touches, runs the pure engine operation, refreshes the
team's cap columns, stages an audit row and commits once.
Any error rolls the whole unit back.
"""

from __future__ import annotations

import logging
from contextlib import contextmanager
from dataclasses import asdict
from typing import Any, Dict, Iterator, List, Optional

from sqlalchemy import select
from sqlalchemy.orm import Session

from dynasty_cap.engine import (
    ContractRecord,
    MarketSnapshot,
    activate_fourth_year_option,
    apply_franchise_tag,
    check_cap_space,
    compute_dead_money,
    compute_franchise_tag_value,
    compute_team_cap,
    create_contract,
    expire_contract,
    extend_contract,
    release_contract,
    trade_contract,
)
from dynasty_cap.engine.dead_money import DeadMoneyCharge
from dynasty_cap.models import Contract, Player, Team
from dynasty_cap.services import records
from dynasty_cap.services.cap import (
    LIVE_STATUS_VALUES,
    refresh_team_row,
    team_contracts,
    team_dead_money,
)
from dynasty_cap.services.locks import player_lock, team_locks
from dynasty_cap.services.transactions import (
    TransactionError,
    get_contract,
    get_league,
    get_team,
    record_transaction,
)

logger = logging.getLogger(__name__)


@contextmanager
def _atomic(session: Session, *team_ids: int) -> Iterator[None]:
    with team_locks(team_ids):
        try:
            yield
            session.commit()
        except Exception:
            session.rollback()
            raise


def _owning_team_id(session: Session, contract_id: int) -> int:
    team_id = session.scalar(select(Contract.team_id).where(Contract.id == contract_id))
    if team_id is None:
        raise TransactionError(f"Contract '{contract_id}' not found")
    return team_id


@contextmanager
def _contract_atomic(session: Session, contract_id: int, *other_team_ids: int) -> Iterator[None]:
    """Lock the team that owns ``contract_id`` (plus ``other_team_ids``) and commit once.

    A trade can move the contract while we wait, so the owner is checked
    again once the locks are held.
    """
    while True:
        team_id = _owning_team_id(session, contract_id)
        with team_locks((team_id, *other_team_ids)):
            if _owning_team_id(session, contract_id) != team_id:
                continue
            try:
                yield
                session.commit()
            except Exception:
                session.rollback()
                raise
            return


def _charge_dict(charge: DeadMoneyCharge) -> Dict[str, Any]:
    return {
        "current_season_charge": charge.current_season_charge,
        "next_season_charge": charge.next_season_charge,
        "projected_next_salary": charge.projected_next_salary,
        "future_percentage": float(charge.future_percentage),
        "total": charge.total,
    }


def serialize_contract(row: Contract) -> Dict[str, Any]:
    data = records.contract_record(row).to_dict()
    if row.player is not None:
        data["player_name"] = row.player.name
        data["position"] = row.player.position
    return data


def _team_snapshot(team: Team) -> Dict[str, Any]:
    return {
        "team_id": team.id,
        "available_cap": int(team.available_cap),
        "current_dead_money": int(team.current_dead_money),
        "next_season_dead_money": int(team.next_season_dead_money),
        "franchise_tags_used": team.franchise_tags_used,
    }


def _position_pool(session: Session, league_id: int, position: str) -> List[ContractRecord]:
    rows = session.scalars(
        select(Contract)
        .join(Player, Contract.player_id == Player.id)
        .where(
            Contract.league_id == league_id,
            Player.position == position,
            Contract.status.in_(LIVE_STATUS_VALUES),
        )
    ).all()
    return [records.contract_record(row) for row in rows]


def _player_contracts(session: Session, league_id: int, player_id: int) -> List[ContractRecord]:
    rows = session.scalars(
        select(Contract)
        .where(
            Contract.league_id == league_id,
            Contract.player_id == player_id,
            Contract.status.in_(LIVE_STATUS_VALUES),
        )
        .execution_options(populate_existing=True)
    ).all()
    return [records.contract_record(row) for row in rows]


def sign_contract(
    session: Session,
    *,
    team_id: int,
    player_id: int,
    years: int,
    annual_salary: int,
    acquisition_type: str,
    guaranteed_money: int = 0,
    has_fourth_year_option: bool = False,
) -> Dict[str, Any]:
    with player_lock(player_id), _atomic(session, team_id):
        team = get_team(session, team_id)
        league = records.league_config(get_league(session, team.league_id))
        player = session.get(Player, player_id)
        if player is None:
            raise TransactionError(f"Player '{player_id}' not found")

        summary = compute_team_cap(
            records.team_record(team), team_contracts(session, team.id), team_dead_money(session, team.id), league
        )
        record = create_contract(
            player_id=player.id,
            team=records.team_record(team),
            league=league,
            years=years,
            annual_salary=annual_salary,
            acquisition_type=acquisition_type,
            guaranteed_money=guaranteed_money,
            has_fourth_year_option=has_fourth_year_option,
            existing_contracts=_player_contracts(session, league.id, player.id),
        )
        notes: List[str] = []
        space = check_cap_space(summary, record.current_salary)
        if not space.has_space:
            notes.append(f"Signing puts the team {space.shortfall:,} over the cap")
            logger.warning("Team %s signs player %s while over the cap", team.id, player.id)

        before_cap = int(team.available_cap)
        row = records.new_contract_row(record)
        session.add(row)
        refresh_team_row(session, team, league)
        record_transaction(
            session,
            league_id=league.id,
            team_id=team.id,
            contract_id=row.id,
            type="sign",
            payload={
                "player_id": player.id,
                "years": years,
                "annual_salary": annual_salary,
                "acquisition_type": record.acquisition_type.value,
            },
            result=_team_snapshot(team),
            cap_delta=int(team.available_cap) - before_cap,
            notes=notes,
        )
        result = {"contract": serialize_contract(row), "team": _team_snapshot(team), "notes": notes}
    logger.info("Team %s signed player %s (contract %s)", team_id, player_id, result["contract"]["id"])
    return result


def extend(session: Session, contract_id: int, *, additional_years: int, new_salary: int) -> Dict[str, Any]:
    with _contract_atomic(session, contract_id):
        row = get_contract(session, contract_id)
        league = records.league_config(get_league(session, row.league_id))
        team = get_team(session, row.team_id)
        before = records.contract_record(row)
        after = extend_contract(
            before, additional_years=additional_years, new_salary=new_salary, league=league
        )
        before_cap = int(team.available_cap)
        records.apply_contract(row, after)
        refresh_team_row(session, team, league)
        record_transaction(
            session,
            league_id=league.id,
            team_id=team.id,
            contract_id=row.id,
            type="extend",
            payload={"additional_years": additional_years, "new_salary": new_salary},
            result={"before": before.to_dict(), "after": after.to_dict()},
            cap_delta=int(team.available_cap) - before_cap,
        )
        result = {"contract": serialize_contract(row), "team": _team_snapshot(team)}
    return result


def tag_value_for_contract(
    session: Session, contract_id: int, *, market: Optional[MarketSnapshot] = None
) -> Dict[str, Any]:
    """Read-only tag valuation; does not check eligibility or the tag quota."""
    row = get_contract(session, contract_id)
    position = row.player.position
    valuation = compute_franchise_tag_value(
        records.contract_record(row),
        _position_pool(session, row.league_id, position),
        position=position,
        market=market,
    )
    return {"position": position, **asdict(valuation)}


def franchise_tag(
    session: Session, contract_id: int, *, market: Optional[MarketSnapshot] = None
) -> Dict[str, Any]:
    with _contract_atomic(session, contract_id):
        row = get_contract(session, contract_id)
        league = records.league_config(get_league(session, row.league_id))
        team = get_team(session, row.team_id)
        position = row.player.position
        before_cap = int(team.available_cap)
        outcome = apply_franchise_tag(
            records.contract_record(row),
            records.team_record(team),
            league,
            _position_pool(session, row.league_id, position),
            position=position,
            market=market,
        )
        records.apply_contract(row, outcome.contract)
        records.apply_team(team, outcome.team)
        refresh_team_row(session, team, league)
        valuation = {"position": position, **asdict(outcome.valuation)}
        record_transaction(
            session,
            league_id=league.id,
            team_id=team.id,
            contract_id=row.id,
            type="franchise_tag",
            payload={"contract_id": row.id},
            result=valuation,
            cap_delta=int(team.available_cap) - before_cap,
        )
        result = {
            "contract": serialize_contract(row),
            "team": _team_snapshot(team),
            "valuation": valuation,
        }
    return result


def preview_release(session: Session, contract_id: int, *, practice_squad: bool = False) -> Dict[str, Any]:
    row = get_contract(session, contract_id)
    league = records.league_config(get_league(session, row.league_id))
    charge = compute_dead_money(records.contract_record(row), league, practice_squad=practice_squad)
    return {
        "contract_id": row.id,
        "season": league.season,
        "current_salary": int(row.current_salary),
        "years_remaining": row.years_remaining,
        "practice_squad": practice_squad,
        "cap_savings": int(row.current_salary) - charge.current_season_charge,
        **_charge_dict(charge),
    }


def release(
    session: Session,
    contract_id: int,
    *,
    practice_squad: bool = False,
    reason: Optional[str] = None,
) -> Dict[str, Any]:
    with _contract_atomic(session, contract_id):
        row = get_contract(session, contract_id)
        league = records.league_config(get_league(session, row.league_id))
        team = get_team(session, row.team_id)
        before_cap = int(team.available_cap)
        outcome = release_contract(
            records.contract_record(row),
            records.team_record(team),
            league,
            practice_squad=practice_squad,
            reason=reason or ("Practice squad release" if practice_squad else "Released"),
        )
        records.apply_contract(row, outcome.contract)
        for entry in outcome.dead_money:
            session.add(records.new_dead_money_row(entry))
        records.apply_team(team, outcome.team)
        refresh_team_row(session, team, league)
        charge = _charge_dict(outcome.charge)
        record_transaction(
            session,
            league_id=league.id,
            team_id=team.id,
            contract_id=row.id,
            type="release",
            payload={"practice_squad": practice_squad},
            result={"charge": charge, "dead_money": [r.to_dict() for r in outcome.dead_money]},
            cap_delta=int(team.available_cap) - before_cap,
        )
        result = {
            "contract": serialize_contract(row),
            "team": _team_snapshot(team),
            "charge": charge,
            "dead_money": [r.to_dict() for r in outcome.dead_money],
        }
    return result


def activate_option(session: Session, contract_id: int) -> Dict[str, Any]:
    with _contract_atomic(session, contract_id):
        row = get_contract(session, contract_id)
        league = records.league_config(get_league(session, row.league_id))
        team = get_team(session, row.team_id)
        before_cap = int(team.available_cap)
        after = activate_fourth_year_option(records.contract_record(row), league)
        records.apply_contract(row, after)
        refresh_team_row(session, team, league)
        record_transaction(
            session,
            league_id=league.id,
            team_id=team.id,
            contract_id=row.id,
            type="fourth_year_option",
            payload={"contract_id": row.id},
            result={"current_salary": after.current_salary, "years_remaining": after.years_remaining},
            cap_delta=int(team.available_cap) - before_cap,
        )
        result = {"contract": serialize_contract(row), "team": _team_snapshot(team)}
    return result


def expire(session: Session, contract_id: int) -> Dict[str, Any]:
    with _contract_atomic(session, contract_id):
        row = get_contract(session, contract_id)
        league = records.league_config(get_league(session, row.league_id))
        team = get_team(session, row.team_id)
        before_cap = int(team.available_cap)
        records.apply_contract(row, expire_contract(records.contract_record(row)))
        refresh_team_row(session, team, league)
        record_transaction(
            session,
            league_id=league.id,
            team_id=team.id,
            contract_id=row.id,
            type="expire",
            payload={"contract_id": row.id},
            result={"status": row.status},
            cap_delta=int(team.available_cap) - before_cap,
        )
        result = {"contract": serialize_contract(row), "team": _team_snapshot(team)}
    return result


def trade(session: Session, contract_id: int, *, to_team_id: int) -> Dict[str, Any]:
    with _contract_atomic(session, contract_id, to_team_id):
        row = get_contract(session, contract_id)
        league = records.league_config(get_league(session, row.league_id))
        from_team = get_team(session, row.team_id)
        to_team = get_team(session, to_team_id)
        outcome = trade_contract(
            records.contract_record(row), records.team_record(from_team), records.team_record(to_team)
        )
        before_cap = {from_team.id: int(from_team.available_cap), to_team.id: int(to_team.available_cap)}
        records.apply_contract(row, outcome.contract)
        payload = {"from_team_id": from_team.id, "to_team_id": to_team.id}
        for team in (from_team, to_team):
            refresh_team_row(session, team, league)
        for team in (from_team, to_team):
            record_transaction(
                session,
                league_id=league.id,
                team_id=team.id,
                contract_id=row.id,
                type="trade",
                payload=payload,
                result={"current_salary": int(row.current_salary), "years_remaining": row.years_remaining},
                cap_delta=int(team.available_cap) - before_cap[team.id],
            )
        result = {
            "contract": serialize_contract(row),
            "from_team": _team_snapshot(from_team),
            "to_team": _team_snapshot(to_team),
        }
    return result
