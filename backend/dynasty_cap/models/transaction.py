from datetime import datetime

from sqlalchemy import JSON, BigInteger, Column, DateTime, ForeignKey, Integer, String, Text
from sqlalchemy.orm import relationship

from dynasty_cap.db.session import Base


class Transaction(Base):
    """Audit row for every committed contract or turnover operation."""

    __tablename__ = "transactions"

    id = Column(Integer, primary_key=True)
    league_id = Column(Integer, ForeignKey("leagues.id", ondelete="CASCADE"), nullable=False, index=True)
    team_id = Column(Integer, ForeignKey("teams.id", ondelete="CASCADE"), nullable=True)
    contract_id = Column(Integer, ForeignKey("contracts.id", ondelete="SET NULL"), nullable=True)
    type = Column(String(32), nullable=False)
    status = Column(String(32), default="committed", nullable=False)
    payload = Column(JSON, nullable=False)
    result = Column(JSON, nullable=False)
    cap_delta = Column(BigInteger, default=0, nullable=False)
    notes = Column(Text, nullable=True)
    created_at = Column(DateTime, default=datetime.utcnow, nullable=False)

    team = relationship("Team", back_populates="transactions")
