"""
Table and seating Pydantic schemas
"""

from typing import List, Optional, Union
from pydantic import BaseModel, Field

class TableCreate(BaseModel):
    """Schema for creating a table"""
    name: str = Field(..., min_length=1)
    capacity: Optional[int] = Field(None, gt=0)

class TableUpdate(BaseModel):
    """Schema for renaming or resizing a table"""
    name: Optional[str] = Field(None, min_length=1)
    capacity: Optional[int] = Field(None, gt=0)

class TableOrder(BaseModel):
    """Full display order of an event's tables"""
    table_ids: List[Union[int, str]]

class SeatAssignment(BaseModel):
    """Seat-unit to place at a table"""
    guest_id: Union[int, str]
    companion_index: int = Field(-1, ge=-1)

class SeatUnitResponse(BaseModel):
    guest_id: Union[int, str]
    companion_index: int
    name: str
    status: str
    is_primary: bool
    
    class Config:
        from_attributes = True

class TableResponse(BaseModel):
    id: Union[int, str]
    name: str
    capacity: int
    order: int
    occupants: List[SeatUnitResponse]
    free_seats: int
    over_capacity: bool
    
    class Config:
        from_attributes = True
