from datetime import datetime

from sqlalchemy import BigInteger, Boolean, Column, DateTime, ForeignKey, Integer, String
from sqlalchemy.orm import relationship

from dynasty_cap.db.session import Base


class Contract(Base):
    """A player's deal with one team in one league. Rows are kept after release."""

    __tablename__ = "contracts"

    id = Column(Integer, primary_key=True)
    player_id = Column(Integer, ForeignKey("players.id", ondelete="CASCADE"), nullable=False)
    team_id = Column(Integer, ForeignKey("teams.id", ondelete="CASCADE"), nullable=False, index=True)
    league_id = Column(Integer, ForeignKey("leagues.id", ondelete="CASCADE"), nullable=False, index=True)
    original_salary = Column(BigInteger, nullable=False)
    current_salary = Column(BigInteger, nullable=False)
    original_years = Column(Integer, nullable=False)
    years_remaining = Column(Integer, nullable=False)
    total_value = Column(BigInteger, default=0, nullable=False)
    guaranteed_money = Column(BigInteger, default=0, nullable=False)
    acquisition_type = Column(String(16), nullable=False)
    status = Column(String(16), default="ACTIVE", nullable=False, index=True)
    has_fourth_year_option = Column(Boolean, default=False, nullable=False)
    fourth_year_option_activated = Column(Boolean, default=False, nullable=False)
    has_been_tagged = Column(Boolean, default=False, nullable=False)
    has_been_extended = Column(Boolean, default=False, nullable=False)
    signed_season = Column(Integer, nullable=False)
    created_at = Column(DateTime, default=datetime.utcnow, nullable=False)
    updated_at = Column(
        DateTime, default=datetime.utcnow, onupdate=datetime.utcnow, nullable=False
    )

    player = relationship("Player", back_populates="contracts")
    team = relationship("Team", back_populates="contracts")
    league = relationship("League", back_populates="contracts")
