"""Franchise tag valuation and the per-team tag quota."""

from __future__ import annotations

import logging
from dataclasses import dataclass, field
from datetime import datetime, timedelta, timezone
from decimal import Decimal
from typing import Iterable, List, Mapping, Optional

from dynasty_cap.engine.errors import LimitError
from dynasty_cap.engine.league import LeagueConfig
from dynasty_cap.engine.money import mean_units, scale
from dynasty_cap.engine.records import ContractRecord, TeamRecord

logger = logging.getLogger(__name__)

TAG_POOL_SIZE = 10
TAG_SALARY_RAISE = Decimal("1.15")


def _as_utc(moment: datetime) -> datetime:
    """Naive timestamps are taken to be UTC, as written by ``datetime.utcnow``."""
    if moment.tzinfo is None:
        return moment.replace(tzinfo=timezone.utc)
    return moment.astimezone(timezone.utc)


@dataclass(frozen=True)
class MarketSnapshot:
    """Externally fetched position averages, valid for ``max_age`` after ``fetched_at``."""

    position_averages: Mapping[str, int]
    fetched_at: datetime
    max_age: timedelta = field(default=timedelta(hours=24))

    def __post_init__(self) -> None:
        object.__setattr__(self, "fetched_at", _as_utc(self.fetched_at))

    def is_fresh(self, now: datetime) -> bool:
        return _as_utc(now) - self.fetched_at <= self.max_age

    def average_for(self, position: str) -> Optional[int]:
        value = self.position_averages.get(position.upper())
        return int(value) if value is not None else None


@dataclass(frozen=True)
class TagValuation:
    contract_id: Optional[int]
    current_salary: int
    salary_raise: int
    position_average: int
    pool_size: int
    tag_value: int
    basis: str
    source: str = "pool"


def top_position_salaries(
    position_contracts: Iterable[ContractRecord], limit: int = TAG_POOL_SIZE
) -> List[int]:
    salaries = sorted(
        (c.current_salary for c in position_contracts if c.is_live), reverse=True
    )
    return salaries[:limit]


def compute_franchise_tag_value(
    contract: ContractRecord,
    position_contracts: Iterable[ContractRecord],
    *,
    position: Optional[str] = None,
    market: Optional[MarketSnapshot] = None,
    now: Optional[datetime] = None,
) -> TagValuation:
    """Greater of the player's salary plus 15% and the position's top-10 average."""
    top = top_position_salaries(position_contracts)
    position_average = mean_units(top)
    pool_size = len(top)
    source = "pool"

    if market is not None and position:
        moment = now or datetime.now(tz=timezone.utc)
        if market.is_fresh(moment):
            snapshot_average = market.average_for(position)
            if snapshot_average is not None:
                position_average = snapshot_average
                source = "market"
        else:
            logger.info(
                "Ignoring stale market snapshot for %s fetched at %s",
                position,
                market.fetched_at.isoformat(),
            )

    salary_raise = scale(contract.current_salary, TAG_SALARY_RAISE)
    if position_average > salary_raise:
        tag_value, basis = position_average, "position_average"
    else:
        tag_value, basis = salary_raise, "salary_raise"

    return TagValuation(
        contract_id=contract.id,
        current_salary=contract.current_salary,
        salary_raise=salary_raise,
        position_average=position_average,
        pool_size=pool_size,
        tag_value=tag_value,
        basis=basis,
        source=source,
    )


def ensure_tag_available(team: TeamRecord, league: LeagueConfig, contract_id: Optional[int] = None) -> None:
    if team.franchise_tags_used >= league.max_franchise_tags:
        raise LimitError(
            f"Team {team.id} already used {team.franchise_tags_used} of "
            f"{league.max_franchise_tags} franchise tags this season",
            contract_id=contract_id,
            rule="max_franchise_tags",
        )
