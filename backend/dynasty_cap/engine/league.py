"""League configuration: the numeric policy every calculator reads."""

from __future__ import annotations

from dataclasses import dataclass, field, replace
from decimal import Decimal
from typing import Any, Dict, Mapping, Optional

from dynasty_cap.engine.errors import ValidationError
from dynasty_cap.engine.money import to_decimal

DEAD_MONEY_YEAR_KEYS = (1, 2, 3, 4)

DEFAULT_CURRENT_SEASON_PCT = 1.0
DEFAULT_FUTURE_SEASONS_PCT = {1: 0.25, 2: 0.25, 3: 0.25, 4: 0.25}


def _check_fraction(value: Any, name: str) -> Decimal:
    try:
        pct = to_decimal(value)
    except (ArithmeticError, ValueError, TypeError):
        raise ValidationError(f"{name} must be a number", rule=name) from None
    if not pct.is_finite() or pct < 0 or pct > 1:
        raise ValidationError(f"{name} must be between 0 and 1 (got {value})", rule=name)
    return pct


@dataclass(frozen=True)
class DeadMoneyConfig:
    """Share of salary charged this season and, by years left, next season."""

    current_season: Decimal = field(default_factory=lambda: Decimal(str(DEFAULT_CURRENT_SEASON_PCT)))
    future_seasons: Mapping[int, Decimal] = field(
        default_factory=lambda: {k: Decimal(str(v)) for k, v in DEFAULT_FUTURE_SEASONS_PCT.items()}
    )

    def __post_init__(self) -> None:
        object.__setattr__(
            self, "current_season", _check_fraction(self.current_season, "dead_money.current_season")
        )
        normalized: Dict[int, Decimal] = {}
        for raw_key, raw_value in dict(self.future_seasons).items():
            try:
                key = int(raw_key)
            except (TypeError, ValueError):
                raise ValidationError(
                    f"Invalid dead money year key '{raw_key}'", rule="dead_money.future_seasons"
                ) from None
            if key not in DEAD_MONEY_YEAR_KEYS:
                raise ValidationError(
                    f"Dead money year key must be 1-4 (got {key})", rule="dead_money.future_seasons"
                )
            normalized[key] = _check_fraction(raw_value, f"dead_money.future_seasons[{key}]")
        missing = [key for key in DEAD_MONEY_YEAR_KEYS if key not in normalized]
        if missing:
            raise ValidationError(
                f"Dead money config missing years: {', '.join(str(k) for k in missing)}",
                rule="dead_money.future_seasons",
            )
        object.__setattr__(self, "future_seasons", normalized)

    def future_percentage(self, years_remaining: int) -> Decimal:
        if years_remaining < 1:
            return Decimal("0")
        return self.future_seasons[min(years_remaining, 4)]

    @classmethod
    def from_dict(cls, data: Optional[Mapping[str, Any]]) -> "DeadMoneyConfig":
        if not data:
            return cls()
        return cls(
            current_season=data.get("current_season", data.get("currentSeason", DEFAULT_CURRENT_SEASON_PCT)),
            future_seasons=data.get("future_seasons", data.get("futureSeasons", DEFAULT_FUTURE_SEASONS_PCT)),
        )

    def to_dict(self) -> Dict[str, Any]:
        return {
            "current_season": float(self.current_season),
            "future_seasons": {str(k): float(v) for k, v in sorted(self.future_seasons.items())},
        }


@dataclass(frozen=True)
class LeagueConfig:
    id: int
    season: int
    salary_cap: int
    annual_increase_percentage: Decimal = Decimal("0.15")
    minimum_salary: int = 1_000_000
    max_franchise_tags: int = 1
    dead_money: DeadMoneyConfig = field(default_factory=DeadMoneyConfig)

    def __post_init__(self) -> None:
        object.__setattr__(
            self,
            "annual_increase_percentage",
            _check_fraction(self.annual_increase_percentage, "annual_increase_percentage"),
        )
        if self.salary_cap < 0:
            raise ValidationError("salary_cap cannot be negative", rule="salary_cap")
        if self.minimum_salary < 0:
            raise ValidationError("minimum_salary cannot be negative", rule="minimum_salary")
        if self.max_franchise_tags < 0:
            raise ValidationError("max_franchise_tags cannot be negative", rule="max_franchise_tags")
        if isinstance(self.dead_money, Mapping):
            object.__setattr__(self, "dead_money", DeadMoneyConfig.from_dict(self.dead_money))

    def next_season(self) -> "LeagueConfig":
        return replace(self, season=self.season + 1)
