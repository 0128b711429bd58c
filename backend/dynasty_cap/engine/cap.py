"""Salary cap figures for a team: used, available, projected."""

from __future__ import annotations

from dataclasses import dataclass
from typing import Iterable, List, Optional

from dynasty_cap.engine.league import LeagueConfig
from dynasty_cap.engine.money import escalate
from dynasty_cap.engine.records import ContractRecord, DeadMoneyRecord, TeamRecord


@dataclass(frozen=True)
class CapSummary:
    salary_cap: int
    used_cap: int
    current_dead_money: int
    next_season_dead_money: int
    available_cap: int
    projected_next_season_cap: int
    contract_count: int


@dataclass(frozen=True)
class CapProjection:
    year: int
    committed_salaries: int
    dead_money: int
    available_cap: int
    expiring_contracts: int


@dataclass(frozen=True)
class CapSpaceCheck:
    has_space: bool
    available_cap: int
    shortfall: Optional[int] = None


def _team_contracts(team_id: int, contracts: Iterable[ContractRecord]) -> List[ContractRecord]:
    return [c for c in contracts if c.team_id == team_id and c.is_live]


def dead_money_for_year(team_id: int, records: Iterable[DeadMoneyRecord], year: int) -> int:
    return sum(r.amount for r in records if r.team_id == team_id and r.year == year)


def compute_team_cap(
    team: TeamRecord,
    contracts: Iterable[ContractRecord],
    dead_money_records: Iterable[DeadMoneyRecord],
    league: LeagueConfig,
) -> CapSummary:
    counted = _team_contracts(team.id, contracts)
    records = list(dead_money_records)
    used_cap = sum(c.current_salary for c in counted)
    current_dead = dead_money_for_year(team.id, records, league.season)
    next_dead = dead_money_for_year(team.id, records, league.season + 1)
    # Assumes every contract gets the raise, including ones about to expire.
    projected_used = escalate(used_cap, league.annual_increase_percentage)
    return CapSummary(
        salary_cap=league.salary_cap,
        used_cap=used_cap,
        current_dead_money=current_dead,
        next_season_dead_money=next_dead,
        available_cap=league.salary_cap - used_cap - current_dead,
        projected_next_season_cap=league.salary_cap - projected_used - next_dead,
        contract_count=len(counted),
    )


def refresh_team(
    team: TeamRecord,
    contracts: Iterable[ContractRecord],
    dead_money_records: Iterable[DeadMoneyRecord],
    league: LeagueConfig,
) -> TeamRecord:
    summary = compute_team_cap(team, contracts, dead_money_records, league)
    return team.evolve(
        available_cap=summary.available_cap,
        current_dead_money=summary.current_dead_money,
        next_season_dead_money=summary.next_season_dead_money,
    )


def project_team_cap(
    team_id: int,
    contracts: Iterable[ContractRecord],
    dead_money_records: Iterable[DeadMoneyRecord],
    league: LeagueConfig,
    years: int = 3,
) -> List[CapProjection]:
    """Year-by-year outlook, escalating each contract only while it still runs."""
    counted = _team_contracts(team_id, contracts)
    records = list(dead_money_records)
    projections: List[CapProjection] = []
    for offset in range(max(years, 0)):
        year = league.season + offset
        committed = 0
        expiring = 0
        for contract in counted:
            if offset > 0 and contract.years_remaining < offset:
                continue
            # Turnover skips the raise on the step into the final year.
            raises = min(offset, max(contract.years_remaining - 1, 0))
            committed += escalate(contract.current_salary, league.annual_increase_percentage, raises)
            if contract.years_remaining == offset:
                expiring += 1
        dead = dead_money_for_year(team_id, records, year)
        projections.append(
            CapProjection(
                year=year,
                committed_salaries=committed,
                dead_money=dead,
                available_cap=league.salary_cap - committed - dead,
                expiring_contracts=expiring,
            )
        )
    return projections


def check_cap_space(summary: CapSummary, cost: int) -> CapSpaceCheck:
    if summary.available_cap >= cost:
        return CapSpaceCheck(has_space=True, available_cap=summary.available_cap)
    return CapSpaceCheck(
        has_space=False,
        available_cap=summary.available_cap,
        shortfall=cost - summary.available_cap,
    )
