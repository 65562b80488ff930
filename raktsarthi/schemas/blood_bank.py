from pydantic import BaseModel, Field
from typing import List, Optional
from datetime import datetime
from raktsarthi.schemas.inventory import InventoryItem

class OperatingHours(BaseModel):
    open: str = "09:00"
    close: str = "18:00"
    days: List[str] = []

class ContactPerson(BaseModel):
    name: Optional[str] = None
    phone: Optional[str] = None
    email: Optional[str] = None

class BloodBankBase(BaseModel):
    name: str = Field(..., min_length=1)
    email: str = Field(..., min_length=3)
    phone: str = Field(..., min_length=1)
    license_number: str = Field(..., min_length=1)
    registration_number: Optional[str] = None
    established_year: Optional[int] = None
    street: Optional[str] = None
    city: Optional[str] = None
    state: Optional[str] = None
    pincode: Optional[str] = None
    latitude: Optional[float] = None
    longitude: Optional[float] = None
    operating_hours: Optional[OperatingHours] = None
    services: List[str] = []
    contact_person: Optional[ContactPerson] = None
    logo: Optional[str] = None

class BloodBankRegister(BloodBankBase):
    password: str = Field(..., min_length=1)

class BloodBankProfileUpdate(BaseModel):
    name: Optional[str] = None
    phone: Optional[str] = None
    logo: Optional[str] = None
    street: Optional[str] = None
    city: Optional[str] = None
    state: Optional[str] = None
    pincode: Optional[str] = None
    latitude: Optional[float] = None
    longitude: Optional[float] = None
    operating_hours: Optional[OperatingHours] = None
    services: Optional[List[str]] = None
    contact_person: Optional[ContactPerson] = None
    established_year: Optional[int] = None

class BloodBankResponse(BloodBankBase):
    id: int
    is_active: bool = True
    is_verified: bool = False
    inventory: List[InventoryItem] = []
    created_at: Optional[datetime] = None
    updated_at: Optional[datetime] = None
    
    class Config:
        from_attributes = True

class DashboardResponse(BaseModel):
    blood_bank_name: str
    inventory: List[InventoryItem]
    total_units: int
    pending_requests: int
    approved_requests: int
    handled_this_month: int
    total_camps: int
    upcoming_camps: int
    total_events: int
