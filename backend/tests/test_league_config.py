from decimal import Decimal

import pytest

from dynasty_cap.engine import DeadMoneyConfig, LeagueConfig, ValidationError


def test_defaults_charge_full_salary_now_and_a_quarter_next_season():
    config = DeadMoneyConfig()

    assert config.current_season == Decimal("1.0")
    assert config.future_percentage(1) == Decimal("0.25")
    assert config.future_percentage(4) == Decimal("0.25")
    assert config.future_percentage(0) == Decimal("0")


def test_future_percentage_caps_the_key_at_four_years():
    config = DeadMoneyConfig(future_seasons={1: 0.1, 2: 0.2, 3: 0.3, 4: 0.4})

    assert config.future_percentage(4) == Decimal("0.4")
    assert config.future_percentage(7) == Decimal("0.4")


def test_from_dict_accepts_camel_case_and_string_keys():
    config = DeadMoneyConfig.from_dict(
        {"currentSeason": 0.5, "futureSeasons": {"1": 0.1, "2": 0.5, "3": 0.25, "4": 0}}
    )

    assert config.current_season == Decimal("0.5")
    assert config.future_percentage(2) == Decimal("0.5")
    assert config.to_dict() == {
        "current_season": 0.5,
        "future_seasons": {"1": 0.1, "2": 0.5, "3": 0.25, "4": 0.0},
    }


@pytest.mark.parametrize("value", [-0.1, 1.5, "lots"])
def test_out_of_range_current_season_is_rejected(value):
    with pytest.raises(ValidationError) as excinfo:
        DeadMoneyConfig(current_season=value)
    assert excinfo.value.rule == "dead_money.current_season"


def test_missing_future_year_is_rejected():
    with pytest.raises(ValidationError) as excinfo:
        DeadMoneyConfig(future_seasons={1: 0.25, 2: 0.25, 3: 0.25})
    assert "4" in excinfo.value.message


def test_unknown_future_year_is_rejected():
    with pytest.raises(ValidationError):
        DeadMoneyConfig(future_seasons={1: 0.25, 2: 0.25, 3: 0.25, 4: 0.25, 5: 0.25})


def test_league_rejects_bad_policy_at_construction():
    with pytest.raises(ValidationError):
        LeagueConfig(id=1, season=2024, salary_cap=200_000_000, annual_increase_percentage=1.2)
    with pytest.raises(ValidationError) as excinfo:
        LeagueConfig(id=1, season=2024, salary_cap=200_000_000, max_franchise_tags=-1)
    assert excinfo.value.rule == "max_franchise_tags"


def test_league_accepts_mapping_dead_money_config():
    league = LeagueConfig(
        id=1,
        season=2024,
        salary_cap=200_000_000,
        dead_money={"current_season": 0.75, "future_seasons": {1: 0, 2: 0, 3: 0, 4: 0}},
    )

    assert isinstance(league.dead_money, DeadMoneyConfig)
    assert league.dead_money.current_season == Decimal("0.75")


def test_next_season_only_moves_the_season():
    league = LeagueConfig(id=3, season=2024, salary_cap=150_000_000, max_franchise_tags=2)

    following = league.next_season()

    assert following.season == 2025
    assert following.salary_cap == league.salary_cap
    assert following.max_franchise_tags == 2
    assert league.season == 2024
