from dynasty_cap.engine import (
    AcquisitionType,
    ContractRecord,
    ContractStatus,
    DeadMoneyRecord,
    LeagueConfig,
    TeamRecord,
    preview_season_turnover,
    run_season_turnover,
    summarize_turnover,
)
from dynasty_cap.engine.turnover import turn_over_contract

LEAGUE = LeagueConfig(id=1, season=2024, salary_cap=100_000_000)


def build_contract(contract_id, years, salary=10_000_000, team_id=1, status=ContractStatus.ACTIVE):
    return ContractRecord(
        id=contract_id,
        player_id=contract_id,
        team_id=team_id,
        league_id=1,
        original_salary=salary,
        current_salary=salary,
        original_years=max(years, 1),
        years_remaining=years,
        acquisition_type=AcquisitionType.AUCTION,
        signed_season=2023,
        status=status,
    )


def test_multi_year_contract_loses_a_year_and_gets_the_raise():
    after = turn_over_contract(build_contract(1, 3), LEAGUE)

    assert after.years_remaining == 2
    assert after.current_salary == 11_500_000
    assert after.original_salary == 10_000_000


def test_last_contracted_year_drops_to_zero_without_a_raise():
    after = turn_over_contract(build_contract(1, 1), LEAGUE)

    assert after.years_remaining == 0
    assert after.current_salary == 10_000_000


def test_zero_years_remaining_is_terminal():
    contract = build_contract(1, 0)

    assert turn_over_contract(contract, LEAGUE) == contract


def test_released_contracts_are_not_aged():
    contract = build_contract(1, 3, status=ContractStatus.CUT)

    assert turn_over_contract(contract, LEAGUE) == contract
    assert preview_season_turnover([contract], LEAGUE) == []


def test_years_remaining_never_increases_or_goes_negative():
    contract = build_contract(1, 4)
    seen = [contract.years_remaining]
    for _ in range(6):
        contract = turn_over_contract(contract, LEAGUE)
        seen.append(contract.years_remaining)

    assert seen == [4, 3, 2, 1, 0, 0, 0]
    assert all(later <= earlier for earlier, later in zip(seen, seen[1:]))


def test_preview_reports_before_after_and_new_eligibility():
    changes = preview_season_turnover([build_contract(1, 3), build_contract(2, 1), build_contract(3, 0)], LEAGUE)

    first, second, third = changes
    assert (first.before_years_remaining, first.after_years_remaining) == (3, 2)
    assert (first.before_salary, first.after_salary) == (10_000_000, 11_500_000)
    assert first.salary_delta == 1_500_000
    assert not first.eligible_for_extension
    assert second.after_years_remaining == 0
    assert second.eligible_for_extension and second.eligible_for_tag
    assert not second.stale
    assert third.stale


def test_summary_counts_each_category():
    changes = preview_season_turnover(
        [build_contract(1, 3), build_contract(2, 1), build_contract(3, 0), build_contract(4, 1)], LEAGUE
    )

    assert summarize_turnover(changes) == {
        "total_contracts": 4,
        "contracts_affected": 3,
        "eligible_for_extension": 3,
        "eligible_for_franchise_tag": 3,
        "stale_contracts": 1,
    }


def test_run_resets_tags_and_recomputes_team_cap_for_the_new_season():
    contracts = [
        build_contract(1, 3),
        build_contract(2, 1, salary=5_000_000),
        build_contract(3, 2, salary=8_000_000, team_id=2),
        build_contract(4, 2, salary=9_000_000, status=ContractStatus.CUT),
    ]
    teams = [
        TeamRecord(id=1, league_id=1, franchise_tags_used=1),
        TeamRecord(id=2, league_id=1, franchise_tags_used=1),
    ]
    dead_money = [
        DeadMoneyRecord(team_id=1, player_id=4, amount=9_000_000, year=2024, reason="Released"),
        DeadMoneyRecord(team_id=1, player_id=4, amount=2_587_500, year=2025, reason="Released (next season)"),
    ]

    outcome = run_season_turnover(contracts, teams, dead_money, LEAGUE, max_workers=2)

    assert outcome.league.season == 2025
    assert [c.years_remaining for c in outcome.contracts] == [2, 0, 1, 2]
    assert [c.current_salary for c in outcome.contracts] == [11_500_000, 5_000_000, 9_200_000, 9_000_000]
    team_one, team_two = outcome.teams
    assert team_one.franchise_tags_used == 0
    assert team_two.franchise_tags_used == 0
    assert team_one.current_dead_money == 2_587_500
    assert team_one.next_season_dead_money == 0
    assert team_one.available_cap == 100_000_000 - 16_500_000 - 2_587_500
    assert team_two.available_cap == 100_000_000 - 9_200_000
    assert len(outcome.changes) == 3
    assert outcome.stale_contracts == []
    assert LEAGUE.season == 2024


def test_run_matches_preview():
    contracts = [build_contract(1, 4), build_contract(2, 2), build_contract(3, 1)]

    preview = preview_season_turnover(contracts, LEAGUE)
    outcome = run_season_turnover(contracts, [TeamRecord(id=1, league_id=1)], [], LEAGUE)

    assert outcome.changes == preview
