"""Lookups shared by the services and the transaction audit log."""

from __future__ import annotations

from typing import Any, Dict, List, Optional

from sqlalchemy import select
from sqlalchemy.orm import Session, selectinload

from dynasty_cap.models import Contract, League, Team, Transaction


class TransactionError(Exception):
    """A referenced league, team, player or contract does not exist."""


def get_league(session: Session, league_id: int) -> League:
    league = session.get(League, league_id, populate_existing=True)
    if not league:
        raise TransactionError(f"League '{league_id}' not found")
    return league


def get_team(session: Session, team_id: int) -> Team:
    team = session.get(Team, team_id, populate_existing=True)
    if not team:
        raise TransactionError(f"Team '{team_id}' not found")
    return team


def get_contract(session: Session, contract_id: int) -> Contract:
    contract = session.scalar(
        select(Contract)
        .where(Contract.id == contract_id)
        .options(selectinload(Contract.player))
        .execution_options(populate_existing=True)
        .with_for_update()
    )
    if not contract:
        raise TransactionError(f"Contract '{contract_id}' not found")
    return contract


def record_transaction(
    session: Session,
    *,
    league_id: int,
    type: str,
    payload: Dict[str, Any],
    result: Dict[str, Any],
    team_id: Optional[int] = None,
    contract_id: Optional[int] = None,
    cap_delta: int = 0,
    notes: Optional[List[str]] = None,
) -> Transaction:
    """Stage an audit row; the caller's commit makes it permanent."""
    record = Transaction(
        league_id=league_id,
        team_id=team_id,
        contract_id=contract_id,
        type=type,
        payload=payload,
        result=result,
        cap_delta=cap_delta,
        notes="; ".join(notes or []),
    )
    session.add(record)
    return record


def list_transactions(
    session: Session,
    *,
    league_id: Optional[int] = None,
    team_id: Optional[int] = None,
    limit: int = 20,
) -> List[Transaction]:
    stmt = select(Transaction).order_by(Transaction.created_at.desc(), Transaction.id.desc()).limit(limit)
    if league_id is not None:
        stmt = stmt.where(Transaction.league_id == league_id)
    if team_id is not None:
        stmt = stmt.where(Transaction.team_id == team_id)
    return list(session.scalars(stmt).all())
