from pydantic import BaseModel, Field
from typing import List, Optional
from datetime import datetime
from raktsarthi.models.enums import CampStatus

class BloodCampBase(BaseModel):
    name: str = Field(..., min_length=1)
    date: datetime
    start_time: str = Field(..., min_length=1)
    end_time: str = Field(..., min_length=1)
    venue: str = Field(..., min_length=1)
    address: str = Field(..., min_length=1)
    city: str = Field(..., min_length=1)
    state: Optional[str] = None
    pincode: Optional[str] = None
    latitude: Optional[float] = None
    longitude: Optional[float] = None
    target_units: int = Field(..., ge=1)
    description: Optional[str] = None

class BloodCampCreate(BloodCampBase):
    contact_phone: Optional[str] = None
    contact_email: Optional[str] = None

class BloodCampUpdate(BaseModel):
    name: Optional[str] = None
    date: Optional[datetime] = None
    start_time: Optional[str] = None
    end_time: Optional[str] = None
    venue: Optional[str] = None
    address: Optional[str] = None
    city: Optional[str] = None
    state: Optional[str] = None
    pincode: Optional[str] = None
    latitude: Optional[float] = None
    longitude: Optional[float] = None
    target_units: Optional[int] = Field(None, ge=1)
    description: Optional[str] = None
    contact_phone: Optional[str] = None
    contact_email: Optional[str] = None
    status: Optional[CampStatus] = None

class CollectedUnitsUpdate(BaseModel):
    collected_units: int = Field(..., ge=0)

class CampRegistrationResponse(BaseModel):
    id: int
    donor_id: Optional[int] = None
    name: Optional[str] = None
    phone: Optional[str] = None
    blood_group: Optional[str] = None
    registered_at: datetime
    attended: bool = False
    
    class Config:
        from_attributes = True

class BloodCampResponse(BloodCampBase):
    id: int
    organizer_id: int
    organizer_name: str
    contact_phone: Optional[str] = None
    contact_email: Optional[str] = None
    collected_units: int = 0
    status: CampStatus
    registered_donors: List[CampRegistrationResponse] = []
    created_at: Optional[datetime] = None
    updated_at: Optional[datetime] = None
    
    class Config:
        from_attributes = True

class CampRegistrationsResponse(BaseModel):
    camp_id: int
    camp_name: str
    total: int
    registrations: List[CampRegistrationResponse]

class RegistrationBackfillResult(BaseModel):
    message: str
    fixed: int
    errors: int
    camps_processed: int

class RegistrationCleanupResult(BaseModel):
    message: str
    removed: int
    camps_processed: int

class CampRegistrationResult(BaseModel):
    message: str
    camp_id: int
    registration: CampRegistrationResponse
