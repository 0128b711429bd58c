from datetime import datetime, timedelta, timezone

import pytest

from dynasty_cap.engine import (
    AcquisitionType,
    ContractRecord,
    ContractStatus,
    EligibilityError,
    LeagueConfig,
    LimitError,
    MarketSnapshot,
    TeamRecord,
    apply_franchise_tag,
    compute_franchise_tag_value,
)

LEAGUE = LeagueConfig(id=1, season=2025, salary_cap=200_000_000, max_franchise_tags=1)


def build_contract(contract_id=1, salary=10_000_000, years=0, team_id=1, **overrides):
    fields = dict(
        id=contract_id,
        player_id=contract_id * 100,
        team_id=team_id,
        league_id=1,
        original_salary=salary,
        current_salary=salary,
        original_years=1,
        years_remaining=years,
        acquisition_type=AcquisitionType.AUCTION,
        signed_season=2024,
    )
    fields.update(overrides)
    return ContractRecord(**fields)


def build_pool(*salaries):
    return [build_contract(1000 + i, salary, years=2, team_id=9) for i, salary in enumerate(salaries)]


def build_team(**overrides):
    fields = dict(id=1, league_id=1, available_cap=50_000_000)
    fields.update(overrides)
    return TeamRecord(**fields)


def test_salary_raise_wins_over_a_lower_position_average():
    pool = build_pool(*([8_000_000] * 10), 1_000_000)

    valuation = compute_franchise_tag_value(build_contract(), pool)

    assert valuation.position_average == 8_000_000
    assert valuation.pool_size == 10
    assert valuation.salary_raise == 11_500_000
    assert valuation.tag_value == 11_500_000
    assert valuation.basis == "salary_raise"


def test_position_average_wins_when_higher():
    valuation = compute_franchise_tag_value(build_contract(), build_pool(16_000_000, 10_000_000))

    assert valuation.tag_value == 13_000_000
    assert valuation.basis == "position_average"
    assert valuation.pool_size == 2


def test_pool_ignores_released_contracts():
    pool = build_pool(40_000_000, 12_000_000) + [
        build_contract(50, 90_000_000, status=ContractStatus.CUT, team_id=9)
    ]

    valuation = compute_franchise_tag_value(build_contract(), pool)

    assert valuation.position_average == 26_000_000


def test_empty_pool_falls_back_to_the_raise():
    valuation = compute_franchise_tag_value(build_contract(salary=3_000_001), [])

    assert valuation.pool_size == 0
    assert valuation.tag_value == 3_450_001


def test_fresh_market_snapshot_replaces_the_pool_average():
    now = datetime(2025, 3, 1, 12, tzinfo=timezone.utc)
    market = MarketSnapshot(position_averages={"QB": 30_000_000}, fetched_at=now - timedelta(hours=2))

    valuation = compute_franchise_tag_value(
        build_contract(), build_pool(8_000_000), position="qb", market=market, now=now
    )

    assert valuation.source == "market"
    assert valuation.tag_value == 30_000_000


def test_stale_market_snapshot_is_ignored():
    now = datetime(2025, 3, 1, 12, tzinfo=timezone.utc)
    market = MarketSnapshot(position_averages={"QB": 30_000_000}, fetched_at=now - timedelta(days=3))

    valuation = compute_franchise_tag_value(
        build_contract(), build_pool(8_000_000), position="QB", market=market, now=now
    )

    assert valuation.source == "pool"
    assert valuation.tag_value == 11_500_000


def test_naive_snapshot_timestamps_are_read_as_utc():
    fetched_at = datetime.now(tz=timezone.utc).replace(tzinfo=None) - timedelta(hours=1)
    market = MarketSnapshot(position_averages={"QB": 30_000_000}, fetched_at=fetched_at)

    valuation = compute_franchise_tag_value(build_contract(), build_pool(8_000_000), position="QB", market=market)

    assert market.fetched_at.tzinfo is timezone.utc
    assert valuation.source == "market"
    assert valuation.tag_value == 30_000_000


def test_naive_now_is_compared_against_an_aware_snapshot():
    market = MarketSnapshot(
        position_averages={"QB": 30_000_000}, fetched_at=datetime(2025, 3, 1, 10, tzinfo=timezone.utc)
    )

    assert market.is_fresh(datetime(2025, 3, 1, 12))
    assert not market.is_fresh(datetime(2025, 3, 3, 12))


def test_tag_sets_salary_years_status_and_team_count():
    outcome = apply_franchise_tag(build_contract(), build_team(), LEAGUE, build_pool(16_000_000, 10_000_000))

    assert outcome.contract.current_salary == 13_000_000
    assert outcome.contract.years_remaining == 1
    assert outcome.contract.status is ContractStatus.TAGGED
    assert outcome.contract.has_been_tagged
    assert outcome.contract.original_salary == 10_000_000
    assert outcome.team.franchise_tags_used == 1
    assert outcome.team.available_cap == 47_000_000


def test_second_tag_on_the_same_contract_is_rejected():
    league = LeagueConfig(id=1, season=2025, salary_cap=200_000_000, max_franchise_tags=3)
    first = apply_franchise_tag(build_contract(), build_team(), league, [])
    # Even after another turnover back to its final year, the flag blocks it.
    aged = first.contract.evolve(years_remaining=0)

    with pytest.raises(EligibilityError) as excinfo:
        apply_franchise_tag(aged, first.team, league, [])

    assert excinfo.value.rule == "already_tagged"
    assert excinfo.value.contract_id == 1


def test_tags_beyond_the_league_limit_are_rejected():
    team = build_team(franchise_tags_used=1)

    with pytest.raises(LimitError) as excinfo:
        apply_franchise_tag(build_contract(contract_id=2), team, LEAGUE, [])

    assert excinfo.value.rule == "max_franchise_tags"


def test_limit_is_reported_even_for_an_ineligible_contract():
    team = build_team(franchise_tags_used=1)

    with pytest.raises(LimitError):
        apply_franchise_tag(build_contract(contract_id=3, years=2), team, LEAGUE, [])


def test_contract_not_in_final_year_cannot_be_tagged():
    with pytest.raises(EligibilityError) as excinfo:
        apply_franchise_tag(build_contract(years=1), build_team(), LEAGUE, [])

    assert excinfo.value.rule == "not_final_year"


def test_extended_contract_can_be_tagged_once_it_reaches_its_final_year():
    contract = build_contract(status=ContractStatus.EXTENDED, has_been_extended=True)

    outcome = apply_franchise_tag(contract, build_team(), LEAGUE, [])

    assert outcome.contract.status is ContractStatus.TAGGED
    assert outcome.contract.has_been_extended


def test_rejected_tag_leaves_inputs_untouched():
    contract = build_contract(years=2)
    team = build_team()

    with pytest.raises(EligibilityError):
        apply_franchise_tag(contract, team, LEAGUE, [])

    assert contract.current_salary == 10_000_000
    assert team.franchise_tags_used == 0
