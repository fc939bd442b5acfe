"""
Guest-related Pydantic schemas
"""

from typing import List, Literal, Optional, Union
from pydantic import BaseModel, Field

GuestStatus = Literal["pending", "confirmed", "declined"]

class Allotment(BaseModel):
    """Seats granted per category by the organizer"""
    adults: int = Field(0, ge=0)
    teens: int = Field(0, ge=0)
    kids: int = Field(0, ge=0)
    infants: int = Field(0, ge=0)

class RequestedCounts(BaseModel):
    """Seats claimed by a guest; out-of-range values are clamped, not rejected"""
    adults: int = 0
    teens: int = 0
    kids: int = 0
    infants: int = 0

class CompanionNames(BaseModel):
    """Name slots per category"""
    adults: List[str] = []
    teens: List[str] = []
    kids: List[str] = []
    infants: List[str] = []

class GuestCreate(BaseModel):
    """Schema for creating a guest"""
    name: str = Field(..., min_length=1)
    allotted: Allotment = Allotment()
    companion_names: Optional[CompanionNames] = None
    sent: bool = False

class GuestUpdate(BaseModel):
    """Schema for an organizer edit of a guest"""
    name: Optional[str] = Field(None, min_length=1)
    allotted: Optional[Allotment] = None
    status: Optional[GuestStatus] = None
    companion_names: Optional[CompanionNames] = None
    sent: Optional[bool] = None

class GuestResponse(BaseModel):
    """Guest response schema"""
    id: Union[int, str]
    name: str
    status: GuestStatus
    allotted: Allotment
    confirmed: RequestedCounts
    companion_names: CompanionNames
    sent: bool
    
    class Config:
        from_attributes = True

class RSVPRequest(BaseModel):
    """Guest RSVP answer"""
    name: str = Field(..., min_length=1)
    attending: bool
    confirmed: Optional[RequestedCounts] = None
    companion_names: Optional[CompanionNames] = None
