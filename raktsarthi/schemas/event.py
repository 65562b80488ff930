from pydantic import BaseModel, Field
from typing import List, Optional
from datetime import datetime
from raktsarthi.models.enums import EventType

class EventBase(BaseModel):
    title: str = Field(..., min_length=1)
    description: str = Field(..., min_length=1)
    event_type: EventType = EventType.BLOOD_DRIVE
    location_name: Optional[str] = None
    location_address: Optional[str] = None
    latitude: Optional[float] = None
    longitude: Optional[float] = None
    date: datetime
    start_time: str = Field(..., min_length=1)
    end_time: str = Field(..., min_length=1)
    contact_phone: Optional[str] = None
    contact_email: Optional[str] = None
    expected_donors: int = Field(0, ge=0)

class EventCreate(EventBase):
    pass

class EventUpdate(BaseModel):
    title: Optional[str] = None
    description: Optional[str] = None
    event_type: Optional[EventType] = None
    location_name: Optional[str] = None
    location_address: Optional[str] = None
    latitude: Optional[float] = None
    longitude: Optional[float] = None
    date: Optional[datetime] = None
    start_time: Optional[str] = None
    end_time: Optional[str] = None
    contact_phone: Optional[str] = None
    contact_email: Optional[str] = None
    expected_donors: Optional[int] = Field(None, ge=0)
    is_active: Optional[bool] = None

class EventResponse(EventBase):
    id: int
    organizer: str
    organized_by: Optional[int] = None
    registered_donors: List[int] = []
    is_active: bool = True
    created_at: Optional[datetime] = None
    updated_at: Optional[datetime] = None
    
    class Config:
        from_attributes = True

class EventRegistrant(BaseModel):
    id: int
    name: str
    email: str
    phone: Optional[str] = None
    blood_group: Optional[str] = None
    
    class Config:
        from_attributes = True

class EventRegistrationsResponse(BaseModel):
    event_id: int
    title: str
    total: int
    registrants: List[EventRegistrant]
