"""
Guest (party) model
"""

from datetime import datetime
from sqlalchemy import Column, Integer, String, Boolean, DateTime, ForeignKey, JSON
from sqlalchemy.orm import relationship

from seatplan.core.db import Base

class Guest(Base):
    __tablename__ = "guests"
    
    id = Column(Integer, primary_key=True, index=True)
    event_id = Column(Integer, ForeignKey("events.id"), nullable=False, index=True)
    name = Column(String(255), nullable=False)
    status = Column(String(20), nullable=False, default="pending")  # pending, confirmed, declined
    allotted = Column(JSON, nullable=False, default=dict)  # {adults, teens, kids, infants}
    confirmed = Column(JSON, nullable=False, default=dict)
    companion_names = Column(JSON, nullable=False, default=dict)  # {category: [names]}; legacy rows hold a flat list
    sent = Column(Boolean, default=False)
    updated_at = Column(DateTime, default=datetime.utcnow, onupdate=datetime.utcnow)
    
    # Relationships
    event = relationship("Event", back_populates="guests")
