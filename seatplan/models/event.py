"""
Event (celebration) model
"""

from datetime import datetime
from sqlalchemy import Column, Integer, String, DateTime
from sqlalchemy.orm import relationship

from seatplan.core.db import Base

class Event(Base):
    __tablename__ = "events"

    id = Column(Integer, primary_key=True, index=True)
    name = Column(String(255), nullable=False)
    date = Column(DateTime, nullable=False)
    organizer_email = Column(String(255), nullable=False)
    # Shared in RSVP links and names the event's live-update room
    public_code = Column(String(50), unique=True, nullable=False, index=True)
    created_at = Column(DateTime, default=datetime.utcnow)
    updated_at = Column(DateTime, default=datetime.utcnow, onupdate=datetime.utcnow)

    # Deleting an event removes its parties and tables
    guests = relationship("Guest", back_populates="event", cascade="all, delete-orphan", order_by="Guest.id")
    tables = relationship("Table", back_populates="event", cascade="all, delete-orphan", order_by="Table.sort_order")
