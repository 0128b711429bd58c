"""SQLAlchemy models backing the dynasty cap engine."""

from dynasty_cap.models.contract import Contract
from dynasty_cap.models.dead_money import DeadMoney
from dynasty_cap.models.league import League
from dynasty_cap.models.player import Player
from dynasty_cap.models.team import Team
from dynasty_cap.models.transaction import Transaction

__all__ = ["League", "Team", "Player", "Contract", "DeadMoney", "Transaction"]
