import pytest

from dynasty_cap.engine import (
    AcquisitionType,
    ContractStatus,
    EligibilityError,
    LeagueConfig,
    TeamRecord,
    ValidationError,
    activate_fourth_year_option,
    apply_franchise_tag,
    create_contract,
    expire_contract,
    extend_contract,
    release_contract,
    trade_contract,
)
from dynasty_cap.engine.eligibility import FINAL_YEAR_REMAINING, can_extend, can_tag, is_final_year
from dynasty_cap.engine.turnover import turn_over_contract

LEAGUE = LeagueConfig(id=1, season=2024, salary_cap=200_000_000, minimum_salary=1_000_000)
TEAM = TeamRecord(id=5, league_id=1, available_cap=200_000_000)


def sign(years=2, salary=10_000_000, acquisition_type="AUCTION", **extra):
    return create_contract(
        player_id=42,
        team=TEAM,
        league=LEAGUE,
        years=years,
        annual_salary=salary,
        acquisition_type=acquisition_type,
        contract_id=11,
        **extra,
    )


def age_to_final_year(contract):
    while contract.years_remaining > 0:
        contract = turn_over_contract(contract, LEAGUE)
    return contract


def test_create_sets_both_salaries_and_year_counts():
    contract = sign()

    assert contract.original_salary == contract.current_salary == 10_000_000
    assert contract.original_years == contract.years_remaining == 2
    assert contract.status is ContractStatus.ACTIVE
    assert contract.acquisition_type is AcquisitionType.AUCTION
    assert contract.signed_season == 2024
    assert contract.team_id == 5
    assert contract.total_value == 21_500_000


@pytest.mark.parametrize(
    "kwargs, rule",
    [
        ({"salary": 0}, "salary"),
        ({"salary": -5}, "salary"),
        ({"salary": 999_999}, "minimum_salary"),
        ({"salary": 2_500_000.5}, "salary"),
        ({"years": 0}, "contract_years"),
        ({"years": 5}, "contract_years"),
        ({"acquisition_type": "WAIVER_CLAIM"}, "acquisition_type"),
        ({"has_fourth_year_option": True}, "fourth_year_option"),
    ],
)
def test_create_rejects_bad_input(kwargs, rule):
    with pytest.raises(ValidationError) as excinfo:
        sign(**kwargs)
    assert excinfo.value.rule == rule


def test_acquisition_type_is_case_insensitive():
    assert sign(acquisition_type="rookie_draft").acquisition_type is AcquisitionType.ROOKIE_DRAFT


def test_player_with_a_live_contract_cannot_be_signed_again():
    held_elsewhere = sign().evolve(team_id=6)

    with pytest.raises(EligibilityError) as excinfo:
        sign(existing_contracts=[held_elsewhere])

    assert excinfo.value.rule == "player_under_contract"
    assert excinfo.value.contract_id == 11


def test_released_or_expired_contracts_do_not_block_a_new_signing():
    history = [sign().evolve(status=ContractStatus.CUT), sign().evolve(status=ContractStatus.EXPIRED)]

    assert sign(existing_contracts=history).status is ContractStatus.ACTIVE


def test_final_year_means_no_years_remaining():
    contract = sign(years=1)

    assert FINAL_YEAR_REMAINING == 0
    assert not is_final_year(contract)
    assert not can_extend(contract)
    assert not can_tag(contract)

    aged = turn_over_contract(contract, LEAGUE)
    assert is_final_year(aged)
    assert can_extend(aged)
    assert can_tag(aged)


def test_extension_before_the_final_year_is_rejected():
    with pytest.raises(EligibilityError) as excinfo:
        extend_contract(sign(years=1), additional_years=2, new_salary=12_000_000, league=LEAGUE)

    assert excinfo.value.rule == "not_final_year"
    assert excinfo.value.contract_id == 11


def test_extension_adds_years_and_replaces_current_salary_only():
    contract = age_to_final_year(sign(years=2))

    extended = extend_contract(contract, additional_years=3, new_salary=14_000_000, league=LEAGUE)

    assert extended.years_remaining == 3
    assert extended.current_salary == 14_000_000
    assert extended.original_salary == 10_000_000
    assert extended.status is ContractStatus.EXTENDED
    assert extended.has_been_extended
    assert extended.total_value == contract.total_value + 14_000_000 + 16_100_000 + 18_515_000


def test_contract_can_only_be_extended_once():
    extended = extend_contract(
        age_to_final_year(sign(years=1)), additional_years=1, new_salary=11_000_000, league=LEAGUE
    )

    with pytest.raises(EligibilityError) as excinfo:
        extend_contract(age_to_final_year(extended), additional_years=1, new_salary=12_000_000, league=LEAGUE)

    assert excinfo.value.rule == "already_extended"


def test_tagged_contract_cannot_be_extended():
    tagged = apply_franchise_tag(age_to_final_year(sign(years=1)), TEAM, LEAGUE, []).contract

    with pytest.raises(EligibilityError) as excinfo:
        extend_contract(age_to_final_year(tagged), additional_years=2, new_salary=15_000_000, league=LEAGUE)

    assert excinfo.value.rule == "tagged_contract"


def test_extension_input_is_validated():
    with pytest.raises(ValidationError):
        extend_contract(age_to_final_year(sign()), additional_years=5, new_salary=12_000_000, league=LEAGUE)
    with pytest.raises(ValidationError):
        extend_contract(age_to_final_year(sign()), additional_years=2, new_salary=0, league=LEAGUE)


def test_release_marks_the_contract_cut_and_books_dead_money():
    contract = sign(years=3)

    outcome = release_contract(contract, TEAM, LEAGUE)

    assert outcome.contract.status is ContractStatus.CUT
    assert outcome.contract.years_remaining == 3
    assert outcome.charge.current_season_charge == 10_000_000
    assert outcome.charge.next_season_charge == 2_875_000
    assert [(r.year, r.amount) for r in outcome.dead_money] == [(2024, 10_000_000), (2025, 2_875_000)]
    assert outcome.team.current_dead_money == 10_000_000
    assert outcome.team.next_season_dead_money == 2_875_000
    assert outcome.team.available_cap == TEAM.available_cap


def test_release_twice_is_rejected():
    released = release_contract(sign(), TEAM, LEAGUE).contract

    with pytest.raises(EligibilityError) as excinfo:
        release_contract(released, TEAM, LEAGUE)

    assert excinfo.value.rule == "already_cut"


def test_release_rejects_a_contract_from_another_team():
    with pytest.raises(ValidationError):
        release_contract(sign(), TeamRecord(id=6, league_id=1), LEAGUE)


def test_fourth_year_option_adds_a_raised_season():
    rookie = age_to_final_year(
        sign(years=3, salary=2_000_000, acquisition_type="ROOKIE_DRAFT", has_fourth_year_option=True)
    )

    optioned = activate_fourth_year_option(rookie, LEAGUE)

    assert optioned.years_remaining == 1
    assert optioned.current_salary == 3_041_750
    assert optioned.fourth_year_option_activated
    with pytest.raises(EligibilityError) as excinfo:
        activate_fourth_year_option(age_to_final_year(optioned), LEAGUE)
    assert excinfo.value.rule == "option_used"


def test_option_requires_a_rookie_option_contract():
    with pytest.raises(EligibilityError) as excinfo:
        activate_fourth_year_option(age_to_final_year(sign()), LEAGUE)

    assert excinfo.value.rule == "no_option"


def test_expire_only_applies_in_the_final_year():
    with pytest.raises(EligibilityError):
        expire_contract(sign())

    expired = expire_contract(age_to_final_year(sign()))
    assert expired.status is ContractStatus.EXPIRED
    assert not expired.is_live


def test_trade_moves_the_contract_with_its_terms():
    rival = TeamRecord(id=6, league_id=1, available_cap=50_000_000)
    contract = extend_contract(
        age_to_final_year(sign(years=1)), additional_years=2, new_salary=12_000_000, league=LEAGUE
    )

    outcome = trade_contract(contract, TEAM, rival)

    assert outcome.contract.team_id == 6
    assert outcome.contract.acquisition_type is AcquisitionType.TRADE
    assert outcome.contract.current_salary == 12_000_000
    assert outcome.contract.years_remaining == 2
    assert outcome.contract.status is ContractStatus.EXTENDED
    assert outcome.contract.has_been_extended
    assert outcome.from_team.available_cap == TEAM.available_cap + 12_000_000
    assert outcome.to_team.available_cap == 38_000_000


def test_released_contracts_cannot_be_traded():
    released = release_contract(sign(), TEAM, LEAGUE).contract

    with pytest.raises(EligibilityError) as excinfo:
        trade_contract(released, TEAM, TeamRecord(id=6, league_id=1))

    assert excinfo.value.rule == "status"


@pytest.mark.parametrize(
    "to_team, rule",
    [
        (TeamRecord(id=6, league_id=2), "league"),
        (TEAM, "team"),
    ],
)
def test_trade_destination_must_be_another_team_in_the_league(to_team, rule):
    with pytest.raises(ValidationError) as excinfo:
        trade_contract(sign(), TEAM, to_team)

    assert excinfo.value.rule == rule
