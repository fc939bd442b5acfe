"""
Event-related Pydantic schemas
"""

from datetime import datetime
from typing import Optional, Union
from pydantic import BaseModel, EmailStr

class EventCreate(BaseModel):
    """Schema for creating an event"""
    name: str
    date: datetime
    organizer_email: EmailStr

class EventResponse(BaseModel):
    """Basic event response"""
    id: Union[int, str]
    name: str
    date: datetime
    organizer_email: str
    public_code: str
    created_at: Optional[datetime] = None
    
    class Config:
        from_attributes = True
