"""Conversion between ORM rows and engine records."""

from __future__ import annotations

from decimal import Decimal

from dynasty_cap.engine import (
    AcquisitionType,
    ContractRecord,
    ContractStatus,
    DeadMoneyConfig,
    DeadMoneyRecord,
    LeagueConfig,
    TeamRecord,
)
from dynasty_cap.models import Contract, DeadMoney, League, Team


def league_config(league: League) -> LeagueConfig:
    return LeagueConfig(
        id=league.id,
        season=league.season,
        salary_cap=int(league.salary_cap),
        annual_increase_percentage=Decimal(str(league.annual_increase_percentage)),
        minimum_salary=int(league.minimum_salary),
        max_franchise_tags=int(league.max_franchise_tags),
        dead_money=DeadMoneyConfig.from_dict(league.dead_money_config),
    )


def contract_record(row: Contract) -> ContractRecord:
    return ContractRecord(
        id=row.id,
        player_id=row.player_id,
        team_id=row.team_id,
        league_id=row.league_id,
        original_salary=int(row.original_salary),
        current_salary=int(row.current_salary),
        original_years=row.original_years,
        years_remaining=row.years_remaining,
        acquisition_type=AcquisitionType.parse(row.acquisition_type),
        signed_season=row.signed_season,
        status=ContractStatus(row.status),
        total_value=int(row.total_value or 0),
        guaranteed_money=int(row.guaranteed_money or 0),
        has_fourth_year_option=bool(row.has_fourth_year_option),
        fourth_year_option_activated=bool(row.fourth_year_option_activated),
        has_been_tagged=bool(row.has_been_tagged),
        has_been_extended=bool(row.has_been_extended),
    )


def apply_contract(row: Contract, record: ContractRecord) -> Contract:
    """Copy every mutable field of ``record`` onto ``row``."""
    row.team_id = record.team_id
    row.original_salary = record.original_salary
    row.current_salary = record.current_salary
    row.original_years = record.original_years
    row.years_remaining = record.years_remaining
    row.total_value = record.total_value
    row.guaranteed_money = record.guaranteed_money
    row.acquisition_type = record.acquisition_type.value
    row.status = record.status.value
    row.has_fourth_year_option = record.has_fourth_year_option
    row.fourth_year_option_activated = record.fourth_year_option_activated
    row.has_been_tagged = record.has_been_tagged
    row.has_been_extended = record.has_been_extended
    row.signed_season = record.signed_season
    return row


def new_contract_row(record: ContractRecord) -> Contract:
    row = Contract(
        player_id=record.player_id,
        team_id=record.team_id,
        league_id=record.league_id,
    )
    return apply_contract(row, record)


def team_record(row: Team) -> TeamRecord:
    return TeamRecord(
        id=row.id,
        league_id=row.league_id,
        name=row.name,
        franchise_tags_used=row.franchise_tags_used or 0,
        available_cap=int(row.available_cap or 0),
        current_dead_money=int(row.current_dead_money or 0),
        next_season_dead_money=int(row.next_season_dead_money or 0),
    )


def apply_team(row: Team, record: TeamRecord) -> Team:
    row.franchise_tags_used = record.franchise_tags_used
    row.available_cap = record.available_cap
    row.current_dead_money = record.current_dead_money
    row.next_season_dead_money = record.next_season_dead_money
    return row


def dead_money_record(row: DeadMoney) -> DeadMoneyRecord:
    return DeadMoneyRecord(
        team_id=row.team_id,
        player_id=row.player_id,
        contract_id=row.contract_id,
        amount=int(row.amount),
        year=row.year,
        reason=row.reason,
    )


def new_dead_money_row(record: DeadMoneyRecord) -> DeadMoney:
    return DeadMoney(
        team_id=record.team_id,
        player_id=record.player_id,
        contract_id=record.contract_id,
        amount=record.amount,
        year=record.year,
        reason=record.reason,
    )
