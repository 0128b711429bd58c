"""Season turnover: age every live contract by one season.

Turnover is two-phase. Phase one updates each contract independently;
phase two, which only starts once every contract is done, recomputes the
team aggregates (tag count reset, dead money and cap for the new season).
"""

from __future__ import annotations

import logging
from concurrent.futures import ThreadPoolExecutor
from dataclasses import dataclass
from typing import Dict, Iterable, List, Optional, Sequence

from dynasty_cap.engine.cap import refresh_team
from dynasty_cap.engine.eligibility import can_extend, can_tag
from dynasty_cap.engine.league import LeagueConfig
from dynasty_cap.engine.money import escalate
from dynasty_cap.engine.records import ContractRecord, DeadMoneyRecord, TeamRecord

logger = logging.getLogger(__name__)


@dataclass(frozen=True)
class TurnoverChange:
    contract_id: Optional[int]
    team_id: int
    player_id: int
    before_years_remaining: int
    after_years_remaining: int
    before_salary: int
    after_salary: int
    eligible_for_extension: bool
    eligible_for_tag: bool
    stale: bool = False

    @property
    def salary_delta(self) -> int:
        return self.after_salary - self.before_salary


@dataclass(frozen=True)
class TurnoverOutcome:
    league: LeagueConfig
    contracts: List[ContractRecord]
    teams: List[TeamRecord]
    changes: List[TurnoverChange]

    @property
    def stale_contracts(self) -> List[TurnoverChange]:
        return [c for c in self.changes if c.stale]


def turn_over_contract(contract: ContractRecord, league: LeagueConfig) -> ContractRecord:
    """Advance a single contract by one season."""
    if not contract.is_live or contract.years_remaining <= 0:
        return contract
    if contract.years_remaining == 1:
        return contract.evolve(years_remaining=0)
    return contract.evolve(
        years_remaining=contract.years_remaining - 1,
        current_salary=escalate(contract.current_salary, league.annual_increase_percentage),
    )


def _change(before: ContractRecord, after: ContractRecord) -> TurnoverChange:
    return TurnoverChange(
        contract_id=before.id,
        team_id=before.team_id,
        player_id=before.player_id,
        before_years_remaining=before.years_remaining,
        after_years_remaining=after.years_remaining,
        before_salary=before.current_salary,
        after_salary=after.current_salary,
        eligible_for_extension=can_extend(after),
        eligible_for_tag=can_tag(after),
        stale=before.years_remaining <= 0,
    )


def preview_season_turnover(
    contracts: Iterable[ContractRecord], league: LeagueConfig
) -> List[TurnoverChange]:
    return [
        _change(contract, turn_over_contract(contract, league))
        for contract in contracts
        if contract.is_live
    ]


def run_season_turnover(
    contracts: Sequence[ContractRecord],
    teams: Iterable[TeamRecord],
    dead_money_records: Iterable[DeadMoneyRecord],
    league: LeagueConfig,
    *,
    max_workers: Optional[int] = None,
) -> TurnoverOutcome:
    # Phase 1: per-contract update. Contracts are independent of each other.
    with ThreadPoolExecutor(max_workers=max_workers) as pool:
        updated = list(pool.map(lambda c: turn_over_contract(c, league), contracts))

    changes = [
        _change(before, after)
        for before, after in zip(contracts, updated)
        if before.is_live
    ]
    for change in changes:
        if change.stale:
            logger.warning(
                "Contract %s reached turnover with no years remaining; left untouched",
                change.contract_id,
            )

    # Phase 2: team aggregates, against the new season.
    new_league = league.next_season()
    records = list(dead_money_records)
    new_teams = [
        refresh_team(team.evolve(franchise_tags_used=0), updated, records, new_league)
        for team in teams
    ]

    logger.info(
        "Season turnover for league %s: %s -> %s, %d contracts advanced",
        league.id,
        league.season,
        new_league.season,
        len(changes),
    )
    return TurnoverOutcome(
        league=new_league, contracts=updated, teams=new_teams, changes=changes
    )


def summarize_turnover(changes: Iterable[TurnoverChange]) -> Dict[str, int]:
    items = list(changes)
    return {
        "total_contracts": len(items),
        "contracts_affected": sum(1 for c in items if c.before_years_remaining > 0),
        "eligible_for_extension": sum(1 for c in items if c.eligible_for_extension),
        "eligible_for_franchise_tag": sum(1 for c in items if c.eligible_for_tag),
        "stale_contracts": sum(1 for c in items if c.stale),
    }
