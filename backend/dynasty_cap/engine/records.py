"""Plain records exchanged between the host application and the engine."""

from __future__ import annotations

from dataclasses import asdict, dataclass, replace
from enum import Enum
from typing import Any, Dict, Optional, Union

from dynasty_cap.engine.errors import ValidationError


class AcquisitionType(str, Enum):
    AUCTION = "AUCTION"
    FAAB = "FAAB"
    ROOKIE_DRAFT = "ROOKIE_DRAFT"
    TRADE = "TRADE"
    UNDISPUTED = "UNDISPUTED"

    @classmethod
    def parse(cls, value: Union[str, "AcquisitionType"]) -> "AcquisitionType":
        if isinstance(value, cls):
            return value
        try:
            return cls(str(value).strip().upper())
        except ValueError:
            raise ValidationError(
                f"Unknown acquisition type '{value}'", rule="acquisition_type"
            ) from None


class ContractStatus(str, Enum):
    ACTIVE = "ACTIVE"
    TAGGED = "TAGGED"
    EXTENDED = "EXTENDED"
    CUT = "CUT"
    EXPIRED = "EXPIRED"


# Statuses whose salary counts against the cap.
LIVE_STATUSES = frozenset(
    {ContractStatus.ACTIVE, ContractStatus.TAGGED, ContractStatus.EXTENDED}
)


@dataclass(frozen=True)
class ContractRecord:
    """A contract as the engine sees it. Operations return modified copies."""

    id: Optional[int]
    player_id: int
    team_id: int
    league_id: int
    original_salary: int
    current_salary: int
    original_years: int
    years_remaining: int
    acquisition_type: AcquisitionType
    signed_season: int
    status: ContractStatus = ContractStatus.ACTIVE
    total_value: int = 0
    guaranteed_money: int = 0
    has_fourth_year_option: bool = False
    fourth_year_option_activated: bool = False
    has_been_tagged: bool = False
    has_been_extended: bool = False

    @property
    def is_live(self) -> bool:
        return self.status in LIVE_STATUSES

    def evolve(self, **changes: Any) -> "ContractRecord":
        return replace(self, **changes)

    def to_dict(self) -> Dict[str, Any]:
        data = asdict(self)
        data["acquisition_type"] = self.acquisition_type.value
        data["status"] = self.status.value
        return data


@dataclass(frozen=True)
class TeamRecord:
    id: int
    league_id: int
    name: str = ""
    franchise_tags_used: int = 0
    available_cap: int = 0
    current_dead_money: int = 0
    next_season_dead_money: int = 0

    def evolve(self, **changes: Any) -> "TeamRecord":
        return replace(self, **changes)


@dataclass(frozen=True)
class DeadMoneyRecord:
    """Immutable ledger entry; several may exist per player across years."""

    team_id: int
    player_id: int
    amount: int
    year: int
    reason: str
    contract_id: Optional[int] = None

    def to_dict(self) -> Dict[str, Any]:
        return asdict(self)
