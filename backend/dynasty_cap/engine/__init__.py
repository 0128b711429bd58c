"""Pure contract and salary-cap engine.

Nothing in this package touches the database or the network; callers pass
records in and get new records back.
"""

from dynasty_cap.engine.cap import (
    CapProjection,
    CapSpaceCheck,
    CapSummary,
    check_cap_space,
    compute_team_cap,
    project_team_cap,
    refresh_team,
)
from dynasty_cap.engine.dead_money import DeadMoneyCharge, build_dead_money_records, compute_dead_money
from dynasty_cap.engine.errors import CapEngineError, EligibilityError, LimitError, ValidationError
from dynasty_cap.engine.franchise_tag import MarketSnapshot, TagValuation, compute_franchise_tag_value
from dynasty_cap.engine.league import DeadMoneyConfig, LeagueConfig
from dynasty_cap.engine.lifecycle import (
    ReleaseOutcome,
    TagOutcome,
    TradeOutcome,
    activate_fourth_year_option,
    apply_franchise_tag,
    create_contract,
    expire_contract,
    extend_contract,
    release_contract,
    trade_contract,
)
from dynasty_cap.engine.records import (
    AcquisitionType,
    ContractRecord,
    ContractStatus,
    DeadMoneyRecord,
    TeamRecord,
)
from dynasty_cap.engine.turnover import (
    TurnoverChange,
    TurnoverOutcome,
    preview_season_turnover,
    run_season_turnover,
    summarize_turnover,
)

__all__ = [
    "AcquisitionType",
    "CapEngineError",
    "CapProjection",
    "CapSpaceCheck",
    "CapSummary",
    "ContractRecord",
    "ContractStatus",
    "DeadMoneyCharge",
    "DeadMoneyConfig",
    "DeadMoneyRecord",
    "EligibilityError",
    "LeagueConfig",
    "LimitError",
    "MarketSnapshot",
    "ReleaseOutcome",
    "TagOutcome",
    "TagValuation",
    "TeamRecord",
    "TradeOutcome",
    "TurnoverChange",
    "TurnoverOutcome",
    "ValidationError",
    "activate_fourth_year_option",
    "apply_franchise_tag",
    "build_dead_money_records",
    "check_cap_space",
    "compute_dead_money",
    "compute_franchise_tag_value",
    "compute_team_cap",
    "create_contract",
    "expire_contract",
    "extend_contract",
    "preview_season_turnover",
    "project_team_cap",
    "refresh_team",
    "release_contract",
    "run_season_turnover",
    "summarize_turnover",
    "trade_contract",
]
