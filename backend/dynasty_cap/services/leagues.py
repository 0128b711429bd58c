"""League, team and player setup."""

from __future__ import annotations

import logging
from datetime import date
from typing import Any, Mapping, Optional

from sqlalchemy.orm import Session

from dynasty_cap.core.config import settings
from dynasty_cap.engine import DeadMoneyConfig, LeagueConfig
from dynasty_cap.models import League, Player, Team
from dynasty_cap.services import records
from dynasty_cap.services.cap import refresh_team_row
from dynasty_cap.services.locks import team_locks
from dynasty_cap.services.transactions import get_league, record_transaction

logger = logging.getLogger(__name__)


def create_league(
    session: Session,
    name: str,
    *,
    season: Optional[int] = None,
    salary_cap: Optional[int] = None,
    annual_increase_percentage: Optional[float] = None,
    minimum_salary: Optional[int] = None,
    max_franchise_tags: Optional[int] = None,
    dead_money_config: Optional[Mapping[str, Any]] = None,
    season_turnover_date: Optional[date] = None,
) -> League:
    # Validate through the engine before anything touches the session.
    config = LeagueConfig(
        id=0,
        season=season if season is not None else settings.default_season,
        salary_cap=salary_cap if salary_cap is not None else settings.default_salary_cap,
        annual_increase_percentage=(
            annual_increase_percentage
            if annual_increase_percentage is not None
            else settings.default_annual_increase_percentage
        ),
        minimum_salary=minimum_salary if minimum_salary is not None else settings.default_minimum_salary,
        max_franchise_tags=(
            max_franchise_tags if max_franchise_tags is not None else settings.default_max_franchise_tags
        ),
        dead_money=DeadMoneyConfig.from_dict(dead_money_config),
    )
    league = League(
        name=name,
        season=config.season,
        salary_cap=config.salary_cap,
        annual_increase_percentage=config.annual_increase_percentage,
        minimum_salary=config.minimum_salary,
        max_franchise_tags=config.max_franchise_tags,
        dead_money_config=config.dead_money.to_dict(),
        season_turnover_date=season_turnover_date,
    )
    session.add(league)
    session.commit()
    session.refresh(league)
    logger.info("Created league %s (%s) for season %s", league.id, name, league.season)
    return league


def update_dead_money_config(session: Session, league_id: int, config: Mapping[str, Any]) -> League:
    league = get_league(session, league_id)
    validated = DeadMoneyConfig.from_dict(config)
    previous = league.dead_money_config
    with team_locks(team.id for team in league.teams):
        try:
            league.dead_money_config = validated.to_dict()
            record_transaction(
                session,
                league_id=league.id,
                type="dead_money_config",
                payload={"dead_money_config": validated.to_dict()},
                result={"previous": previous},
            )
            session.commit()
        except Exception:
            session.rollback()
            raise
    session.refresh(league)
    return league


def create_team(session: Session, league_id: int, name: str, abbreviation: Optional[str] = None) -> Team:
    league = get_league(session, league_id)
    team = Team(league_id=league.id, name=name, abbreviation=abbreviation)
    session.add(team)
    session.flush()
    refresh_team_row(session, team, records.league_config(league))
    session.commit()
    session.refresh(team)
    return team


def create_player(session: Session, name: str, position: str) -> Player:
    player = Player(name=name, position=position.upper())
    session.add(player)
    session.commit()
    session.refresh(player)
    return player
