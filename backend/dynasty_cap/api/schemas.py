from datetime import date, datetime
from typing import Any, Dict, List, Optional

from pydantic import BaseModel, ConfigDict, Field


class DeadMoneyConfigPayload(BaseModel):
    """Share of salary charged on release, as fractions between 0 and 1."""

    model_config = ConfigDict(extra="forbid")

    current_season: float = Field(default=1.0, ge=0, le=1)
    future_seasons: Dict[str, float] = Field(
        default_factory=lambda: {"1": 0.25, "2": 0.25, "3": 0.25, "4": 0.25}
    )


class LeagueCreateRequest(BaseModel):
    model_config = ConfigDict(extra="forbid")

    name: str
    season: Optional[int] = None
    salary_cap: Optional[int] = Field(default=None, ge=0)
    annual_increase_percentage: Optional[float] = Field(default=None, ge=0, le=1)
    minimum_salary: Optional[int] = Field(default=None, ge=0)
    max_franchise_tags: Optional[int] = Field(default=None, ge=0)
    dead_money_config: Optional[DeadMoneyConfigPayload] = None
    season_turnover_date: Optional[date] = None


class LeagueResponse(BaseModel):
    model_config = ConfigDict(extra="forbid", from_attributes=True)

    id: int
    name: str
    season: int
    salary_cap: int
    annual_increase_percentage: float
    minimum_salary: int
    max_franchise_tags: int
    dead_money_config: Dict[str, Any]
    season_turnover_date: Optional[date] = None


class TeamCreateRequest(BaseModel):
    model_config = ConfigDict(extra="forbid")

    name: str
    abbreviation: Optional[str] = None


class TeamResponse(BaseModel):
    model_config = ConfigDict(extra="forbid", from_attributes=True)

    id: int
    league_id: int
    name: str
    abbreviation: Optional[str] = None
    franchise_tags_used: int
    available_cap: int
    current_dead_money: int
    next_season_dead_money: int


class PlayerCreateRequest(BaseModel):
    model_config = ConfigDict(extra="forbid")

    name: str
    position: str = Field(min_length=1, max_length=8)


class PlayerResponse(BaseModel):
    model_config = ConfigDict(extra="forbid", from_attributes=True)

    id: int
    name: str
    position: str


class ContractCreateRequest(BaseModel):
    """Contract signing; salary and years are range-checked by the engine."""

    model_config = ConfigDict(extra="forbid")

    team_id: int
    player_id: int
    years: int
    annual_salary: int
    acquisition_type: str
    guaranteed_money: int = 0
    has_fourth_year_option: bool = False


class ExtendRequest(BaseModel):
    model_config = ConfigDict(extra="forbid")

    additional_years: int
    new_salary: int


class ReleaseRequest(BaseModel):
    model_config = ConfigDict(extra="forbid")

    practice_squad: bool = False
    reason: Optional[str] = None


class TradeRequest(BaseModel):
    model_config = ConfigDict(extra="forbid")

    to_team_id: int


class ContractView(BaseModel):
    model_config = ConfigDict(extra="forbid")

    id: int
    player_id: int
    team_id: int
    league_id: int
    player_name: Optional[str] = None
    position: Optional[str] = None
    original_salary: int
    current_salary: int
    original_years: int
    years_remaining: int
    acquisition_type: str
    signed_season: int
    status: str
    total_value: int
    guaranteed_money: int
    has_fourth_year_option: bool
    fourth_year_option_activated: bool
    has_been_tagged: bool
    has_been_extended: bool


class TeamCapSnapshot(BaseModel):
    model_config = ConfigDict(extra="forbid")

    team_id: int
    available_cap: int
    current_dead_money: int
    next_season_dead_money: int
    franchise_tags_used: int


class TagValuationView(BaseModel):
    model_config = ConfigDict(extra="forbid")

    contract_id: int
    position: str
    current_salary: int
    salary_raise: int
    position_average: int
    pool_size: int
    tag_value: int
    basis: str
    source: str


class DeadMoneyChargeView(BaseModel):
    model_config = ConfigDict(extra="forbid")

    current_season_charge: int
    next_season_charge: int
    projected_next_salary: int
    future_percentage: float
    total: int


class DeadMoneyEntry(BaseModel):
    model_config = ConfigDict(extra="forbid")

    team_id: int
    player_id: int
    contract_id: Optional[int] = None
    amount: int
    year: int
    reason: str


class DeadMoneyLedgerEntry(DeadMoneyEntry):
    id: int
    player_name: str
    position: str
    created_at: datetime


class DeadMoneyLedgerResponse(BaseModel):
    """Dead money booked against a team, optionally for one season."""

    model_config = ConfigDict(extra="forbid")

    team_id: int
    season: int
    current_season_total: int
    next_season_total: int
    entries: List[DeadMoneyLedgerEntry]


class ContractOperationResponse(BaseModel):
    """Contract and team cap state after a committed operation."""

    model_config = ConfigDict(extra="forbid")

    contract: ContractView
    team: TeamCapSnapshot
    notes: List[str] = Field(default_factory=list)
    valuation: Optional[TagValuationView] = None
    charge: Optional[DeadMoneyChargeView] = None
    dead_money: List[DeadMoneyEntry] = Field(default_factory=list)


class TradeResponse(BaseModel):
    model_config = ConfigDict(extra="forbid")

    contract: ContractView
    from_team: TeamCapSnapshot
    to_team: TeamCapSnapshot


class ReleasePreviewResponse(DeadMoneyChargeView):
    contract_id: int
    season: int
    current_salary: int
    years_remaining: int
    practice_squad: bool
    cap_savings: int


class CapEntry(BaseModel):
    model_config = ConfigDict(extra="forbid")

    contract_id: int
    player_id: int
    current_salary: int
    years_remaining: int
    status: str


class CapProjectionView(BaseModel):
    model_config = ConfigDict(extra="forbid")

    year: int
    committed_salaries: int
    dead_money: int
    available_cap: int
    expiring_contracts: int


class TeamCapResponse(BaseModel):
    """Salary cap summary for a single team."""

    model_config = ConfigDict(extra="forbid")

    team_id: int
    season: int
    franchise_tags_used: int
    max_franchise_tags: int
    salary_cap: int
    used_cap: int
    current_dead_money: int
    next_season_dead_money: int
    available_cap: int
    projected_next_season_cap: int
    contract_count: int
    entries: List[CapEntry]
    projection: List[CapProjectionView] = Field(default_factory=list)


class TurnoverChangeView(BaseModel):
    model_config = ConfigDict(extra="forbid")

    contract_id: int
    team_id: int
    player_id: int
    before_years_remaining: int
    after_years_remaining: int
    before_salary: int
    after_salary: int
    salary_delta: int
    eligible_for_extension: bool
    eligible_for_tag: bool
    stale: bool


class TurnoverSummary(BaseModel):
    model_config = ConfigDict(extra="forbid")

    total_contracts: int
    contracts_affected: int
    eligible_for_extension: int
    eligible_for_franchise_tag: int
    stale_contracts: int


class TurnoverResponse(BaseModel):
    model_config = ConfigDict(extra="forbid")

    league_id: int
    from_season: int
    to_season: int
    summary: TurnoverSummary
    changes: List[TurnoverChangeView]


class TurnoverCommitRequest(BaseModel):
    model_config = ConfigDict(extra="forbid")

    from_season: int


class TransactionRecord(BaseModel):
    """Single committed transaction entry."""

    model_config = ConfigDict(extra="forbid", from_attributes=True)

    id: int
    league_id: int
    team_id: Optional[int] = None
    contract_id: Optional[int] = None
    type: str
    status: str
    cap_delta: int
    payload: Dict[str, Any]
    result: Dict[str, Any]
    notes: Optional[str] = None
    created_at: datetime
