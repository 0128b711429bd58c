from datetime import datetime

from sqlalchemy import JSON, BigInteger, Column, Date, DateTime, Integer, Numeric, String
from sqlalchemy.orm import relationship

from dynasty_cap.db.session import Base


class League(Base):
    """Competitive season context and its cap policy."""

    __tablename__ = "leagues"

    id = Column(Integer, primary_key=True)
    name = Column(String(128), nullable=False)
    season = Column(Integer, nullable=False)
    salary_cap = Column(BigInteger, nullable=False)
    annual_increase_percentage = Column(Numeric(6, 4), default=0.15, nullable=False)
    minimum_salary = Column(BigInteger, default=0, nullable=False)
    max_franchise_tags = Column(Integer, default=1, nullable=False)
    dead_money_config = Column(JSON, nullable=False)
    season_turnover_date = Column(Date, nullable=True)
    created_at = Column(DateTime, default=datetime.utcnow, nullable=False)
    updated_at = Column(
        DateTime, default=datetime.utcnow, onupdate=datetime.utcnow, nullable=False
    )

    teams = relationship("Team", back_populates="league", cascade="all, delete-orphan")
    contracts = relationship("Contract", back_populates="league")
