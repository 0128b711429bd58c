from datetime import datetime

from sqlalchemy import Column, DateTime, Integer, String
from sqlalchemy.orm import relationship

from dynasty_cap.db.session import Base


class Player(Base):
    __tablename__ = "players"

    id = Column(Integer, primary_key=True, index=True)
    name = Column(String(128), nullable=False)
    position = Column(String(8), nullable=False, index=True)
    created_at = Column(DateTime, default=datetime.utcnow, nullable=False)

    contracts = relationship("Contract", back_populates="player")
