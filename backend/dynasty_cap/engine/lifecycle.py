"""Contract lifecycle operations: create, extend, tag, release, trade, option, expire.

Every operation validates first and then builds new records with
``evolve``; inputs are never mutated, so a rejected call leaves nothing
half-applied.
"""

from __future__ import annotations

import logging
from dataclasses import dataclass, field
from datetime import datetime
from typing import Iterable, List, Optional, Union

from dynasty_cap.engine import eligibility
from dynasty_cap.engine.dead_money import (
    DeadMoneyCharge,
    build_dead_money_records,
    compute_dead_money,
)
from dynasty_cap.engine.errors import EligibilityError, ValidationError
from dynasty_cap.engine.franchise_tag import (
    MarketSnapshot,
    TagValuation,
    compute_franchise_tag_value,
    ensure_tag_available,
)
from dynasty_cap.engine.league import LeagueConfig
from dynasty_cap.engine.money import escalate
from dynasty_cap.engine.records import (
    AcquisitionType,
    ContractRecord,
    ContractStatus,
    DeadMoneyRecord,
    TeamRecord,
)

logger = logging.getLogger(__name__)

MIN_CONTRACT_YEARS = 1
MAX_CONTRACT_YEARS = 4


@dataclass(frozen=True)
class TagOutcome:
    contract: ContractRecord
    team: TeamRecord
    valuation: TagValuation


@dataclass(frozen=True)
class ReleaseOutcome:
    contract: ContractRecord
    team: TeamRecord
    charge: DeadMoneyCharge
    dead_money: List[DeadMoneyRecord] = field(default_factory=list)


@dataclass(frozen=True)
class TradeOutcome:
    contract: ContractRecord
    from_team: TeamRecord
    to_team: TeamRecord


def _validate_salary(salary: int, league: LeagueConfig, contract_id: Optional[int] = None) -> int:
    if isinstance(salary, bool) or not isinstance(salary, int):
        raise ValidationError(
            f"Salary must be a whole number (got {salary!r})", contract_id=contract_id, rule="salary"
        )
    if salary <= 0:
        raise ValidationError("Salary must be positive", contract_id=contract_id, rule="salary")
    if salary < league.minimum_salary:
        raise ValidationError(
            f"Salary {salary:,} is below the league minimum of {league.minimum_salary:,}",
            contract_id=contract_id,
            rule="minimum_salary",
        )
    return salary


def _validate_years(years: int, name: str, contract_id: Optional[int] = None) -> int:
    if isinstance(years, bool) or not isinstance(years, int):
        raise ValidationError(f"{name} must be a whole number", contract_id=contract_id, rule=name)
    if not MIN_CONTRACT_YEARS <= years <= MAX_CONTRACT_YEARS:
        raise ValidationError(
            f"{name} must be between {MIN_CONTRACT_YEARS} and {MAX_CONTRACT_YEARS} (got {years})",
            contract_id=contract_id,
            rule=name,
        )
    return years


def _escalated_total(salary: int, rate, years: int) -> int:
    return sum(escalate(salary, rate, i) for i in range(years))


def _check_team(contract: ContractRecord, team: TeamRecord) -> None:
    if contract.team_id != team.id:
        raise ValidationError(
            f"Contract belongs to team {contract.team_id}, not team {team.id}",
            contract_id=contract.id,
            rule="team",
        )


def create_contract(
    *,
    player_id: int,
    team: TeamRecord,
    league: LeagueConfig,
    years: int,
    annual_salary: int,
    acquisition_type: Union[str, AcquisitionType],
    guaranteed_money: int = 0,
    has_fourth_year_option: bool = False,
    contract_id: Optional[int] = None,
    existing_contracts: Iterable[ContractRecord] = (),
) -> ContractRecord:
    """Build a new ACTIVE contract.

    ``existing_contracts`` are the player's other contracts in the league; a
    live one blocks the signing.
    """
    _validate_salary(annual_salary, league)
    _validate_years(years, "contract_years")
    acquisition = AcquisitionType.parse(acquisition_type)
    if has_fourth_year_option and acquisition is not AcquisitionType.ROOKIE_DRAFT:
        raise ValidationError(
            "Only rookie draft contracts carry a fourth-year option",
            rule="fourth_year_option",
        )
    if guaranteed_money < 0:
        raise ValidationError("Guaranteed money cannot be negative", rule="guaranteed_money")
    if team.league_id != league.id:
        raise ValidationError(
            f"Team {team.id} is not part of league {league.id}", rule="league"
        )
    for other in existing_contracts:
        if other.player_id == player_id and other.league_id == league.id and other.is_live:
            raise EligibilityError(
                f"Player {player_id} is already under contract with team {other.team_id}",
                contract_id=other.id,
                rule="player_under_contract",
            )

    return ContractRecord(
        id=contract_id,
        player_id=player_id,
        team_id=team.id,
        league_id=league.id,
        original_salary=annual_salary,
        current_salary=annual_salary,
        original_years=years,
        years_remaining=years,
        acquisition_type=acquisition,
        signed_season=league.season,
        status=ContractStatus.ACTIVE,
        total_value=_escalated_total(annual_salary, league.annual_increase_percentage, years),
        guaranteed_money=guaranteed_money,
        has_fourth_year_option=has_fourth_year_option,
    )


def extend_contract(
    contract: ContractRecord,
    *,
    additional_years: int,
    new_salary: int,
    league: LeagueConfig,
) -> ContractRecord:
    """Extend a final-year contract once.

    ``additional_years`` is added to ``years_remaining``; since only
    final-year contracts qualify this equals replacing it. ``new_salary``
    becomes the current salary; the original salary is kept for history.
    """
    _validate_years(additional_years, "additional_years", contract.id)
    _validate_salary(new_salary, league, contract.id)
    eligibility.raise_if_blocked(contract, eligibility.extension_block_reason(contract))

    extension_value = _escalated_total(new_salary, league.annual_increase_percentage, additional_years)
    return contract.evolve(
        current_salary=new_salary,
        years_remaining=contract.years_remaining + additional_years,
        has_been_extended=True,
        status=ContractStatus.EXTENDED,
        total_value=contract.total_value + extension_value,
    )


def apply_franchise_tag(
    contract: ContractRecord,
    team: TeamRecord,
    league: LeagueConfig,
    position_contracts: Iterable[ContractRecord],
    *,
    position: Optional[str] = None,
    market: Optional[MarketSnapshot] = None,
    now: Optional[datetime] = None,
) -> TagOutcome:
    _check_team(contract, team)
    if contract.has_been_tagged:
        eligibility.raise_if_blocked(contract, "already_tagged")
    ensure_tag_available(team, league, contract.id)
    eligibility.raise_if_blocked(contract, eligibility.tag_block_reason(contract))

    valuation = compute_franchise_tag_value(
        contract, position_contracts, position=position, market=market, now=now
    )
    tagged = contract.evolve(
        current_salary=valuation.tag_value,
        years_remaining=1,
        has_been_tagged=True,
        status=ContractStatus.TAGGED,
        total_value=contract.total_value + valuation.tag_value,
    )
    salary_delta = valuation.tag_value - contract.current_salary
    new_team = team.evolve(
        franchise_tags_used=team.franchise_tags_used + 1,
        available_cap=team.available_cap - salary_delta,
    )
    logger.info(
        "Franchise tag applied to contract %s at %s (%s)",
        contract.id,
        valuation.tag_value,
        valuation.basis,
    )
    return TagOutcome(contract=tagged, team=new_team, valuation=valuation)


def release_contract(
    contract: ContractRecord,
    team: TeamRecord,
    league: LeagueConfig,
    *,
    practice_squad: bool = False,
    reason: str = "Released",
) -> ReleaseOutcome:
    _check_team(contract, team)
    if contract.status is ContractStatus.CUT:
        raise EligibilityError("Contract has already been released", contract_id=contract.id, rule="already_cut")
    if contract.status is ContractStatus.EXPIRED:
        raise EligibilityError("Expired contracts cannot be released", contract_id=contract.id, rule="expired")

    charge = compute_dead_money(contract, league, practice_squad=practice_squad)
    records = build_dead_money_records(contract, charge, league, reason)
    released = contract.evolve(status=ContractStatus.CUT)
    new_team = team.evolve(
        current_dead_money=team.current_dead_money + charge.current_season_charge,
        next_season_dead_money=team.next_season_dead_money + charge.next_season_charge,
        available_cap=team.available_cap + contract.current_salary - charge.current_season_charge,
    )
    logger.info(
        "Contract %s released: dead money %s now, %s next season",
        contract.id,
        charge.current_season_charge,
        charge.next_season_charge,
    )
    return ReleaseOutcome(contract=released, team=new_team, charge=charge, dead_money=records)


def activate_fourth_year_option(contract: ContractRecord, league: LeagueConfig) -> ContractRecord:
    if not contract.has_fourth_year_option:
        raise EligibilityError(
            "Contract has no fourth-year option", contract_id=contract.id, rule="no_option"
        )
    if contract.fourth_year_option_activated:
        raise EligibilityError(
            "Fourth-year option already exercised", contract_id=contract.id, rule="option_used"
        )
    if contract.status is not ContractStatus.ACTIVE:
        eligibility.raise_if_blocked(contract, "status")
    if not eligibility.is_final_year(contract):
        eligibility.raise_if_blocked(contract, "not_final_year")

    salary = escalate(contract.current_salary, league.annual_increase_percentage)
    return contract.evolve(
        current_salary=salary,
        years_remaining=contract.years_remaining + 1,
        fourth_year_option_activated=True,
        total_value=contract.total_value + salary,
    )


def expire_contract(contract: ContractRecord) -> ContractRecord:
    """Let a final-year contract lapse without dead money."""
    if not contract.is_live:
        eligibility.raise_if_blocked(contract, "status")
    if not eligibility.is_final_year(contract):
        eligibility.raise_if_blocked(contract, "not_final_year")
    return contract.evolve(status=ContractStatus.EXPIRED)


def trade_contract(contract: ContractRecord, from_team: TeamRecord, to_team: TeamRecord) -> TradeOutcome:
    """Move a live contract to another team of the same league.

    Salary, years and the tag/extension/option flags travel unchanged; only
    the owner and the acquisition type change. Dead money already booked
    stays with ``from_team``.
    """
    _check_team(contract, from_team)
    if to_team.id == from_team.id:
        raise ValidationError(
            "A contract cannot be traded to the team that holds it", contract_id=contract.id, rule="team"
        )
    if to_team.league_id != contract.league_id:
        raise ValidationError(
            f"Team {to_team.id} is not part of league {contract.league_id}",
            contract_id=contract.id,
            rule="league",
        )
    if not contract.is_live:
        eligibility.raise_if_blocked(contract, "status")

    traded = contract.evolve(team_id=to_team.id, acquisition_type=AcquisitionType.TRADE)
    salary = contract.current_salary
    logger.info("Contract %s traded from team %s to team %s", contract.id, from_team.id, to_team.id)
    return TradeOutcome(
        contract=traded,
        from_team=from_team.evolve(available_cap=from_team.available_cap + salary),
        to_team=to_team.evolve(available_cap=to_team.available_cap - salary),
    )
