"""Dead money charged to a team when a contract is released."""

from __future__ import annotations

from dataclasses import dataclass
from decimal import Decimal
from typing import List

from dynasty_cap.engine.league import LeagueConfig
from dynasty_cap.engine.money import ONE, escalate, scale, to_decimal, to_units
from dynasty_cap.engine.records import ContractRecord, DeadMoneyRecord

PRACTICE_SQUAD_PCT = Decimal("0.25")


@dataclass(frozen=True)
class DeadMoneyCharge:
    current_season_charge: int
    next_season_charge: int
    projected_next_salary: int = 0
    future_percentage: Decimal = Decimal("0")

    @property
    def total(self) -> int:
        return self.current_season_charge + self.next_season_charge


def compute_dead_money(
    contract: ContractRecord, league: LeagueConfig, *, practice_squad: bool = False
) -> DeadMoneyCharge:
    """Charge for releasing ``contract`` today: this season and next season."""
    if practice_squad:
        return DeadMoneyCharge(
            current_season_charge=scale(contract.current_salary, PRACTICE_SQUAD_PCT),
            next_season_charge=0,
        )

    config = league.dead_money
    current = scale(contract.current_salary, config.current_season)
    if contract.years_remaining < 1:
        return DeadMoneyCharge(current_season_charge=current, next_season_charge=0)

    pct = config.future_percentage(contract.years_remaining)
    raise_factor = ONE + to_decimal(league.annual_increase_percentage)
    # Rounded once; ``projected`` is only reported.
    next_charge = to_units(to_decimal(contract.current_salary) * raise_factor * pct)
    projected = escalate(contract.current_salary, league.annual_increase_percentage)
    return DeadMoneyCharge(
        current_season_charge=current,
        next_season_charge=next_charge,
        projected_next_salary=projected,
        future_percentage=pct,
    )


def build_dead_money_records(
    contract: ContractRecord,
    charge: DeadMoneyCharge,
    league: LeagueConfig,
    reason: str = "Released",
) -> List[DeadMoneyRecord]:
    records: List[DeadMoneyRecord] = []
    if charge.current_season_charge > 0:
        records.append(
            DeadMoneyRecord(
                team_id=contract.team_id,
                player_id=contract.player_id,
                contract_id=contract.id,
                amount=charge.current_season_charge,
                year=league.season,
                reason=reason,
            )
        )
    if charge.next_season_charge > 0:
        records.append(
            DeadMoneyRecord(
                team_id=contract.team_id,
                player_id=contract.player_id,
                contract_id=contract.id,
                amount=charge.next_season_charge,
                year=league.season + 1,
                reason=f"{reason} (next season)",
            )
        )
    return records
