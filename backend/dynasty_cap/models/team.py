from datetime import datetime

from sqlalchemy import BigInteger, Column, DateTime, ForeignKey, Integer, String
from sqlalchemy.orm import relationship

from dynasty_cap.db.session import Base


class Team(Base):
    """Fantasy franchise; cap figures are derived and refreshed by the services."""

    __tablename__ = "teams"

    id = Column(Integer, primary_key=True)
    league_id = Column(Integer, ForeignKey("leagues.id", ondelete="CASCADE"), nullable=False, index=True)
    name = Column(String(128), nullable=False)
    abbreviation = Column(String(8), nullable=True)
    franchise_tags_used = Column(Integer, default=0, nullable=False)
    available_cap = Column(BigInteger, default=0, nullable=False)
    current_dead_money = Column(BigInteger, default=0, nullable=False)
    next_season_dead_money = Column(BigInteger, default=0, nullable=False)
    created_at = Column(DateTime, default=datetime.utcnow, nullable=False)
    updated_at = Column(
        DateTime, default=datetime.utcnow, onupdate=datetime.utcnow, nullable=False
    )

    league = relationship("League", back_populates="teams")
    contracts = relationship("Contract", back_populates="team")
    dead_money = relationship("DeadMoney", back_populates="team")
    transactions = relationship("Transaction", back_populates="team")
