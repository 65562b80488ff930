from pydantic import BaseModel, Field
from typing import Dict, List, Optional
from datetime import datetime
from raktsarthi.models.enums import BloodGroup

class UserBase(BaseModel):
    name: str = Field(..., min_length=1)
    email: str = Field(..., min_length=3)
    phone: Optional[str] = None
    blood_group: Optional[BloodGroup] = None

class UserCreate(UserBase):
    password: str = Field(..., min_length=1)
    is_donor: bool = False

class UserUpdate(BaseModel):
    name: Optional[str] = None
    phone: Optional[str] = None
    blood_group: Optional[BloodGroup] = None
    is_donor: Optional[bool] = None
    is_available: Optional[bool] = None
    needs_blood: Optional[bool] = None
    street: Optional[str] = None
    city: Optional[str] = None
    state: Optional[str] = None
    pincode: Optional[str] = None
    latitude: Optional[float] = None
    longitude: Optional[float] = None
    last_donation_date: Optional[datetime] = None

class UserResponse(UserBase):
    id: int
    role: str
    is_donor: bool = False
    is_available: bool = True
    needs_blood: bool = False
    street: Optional[str] = None
    city: Optional[str] = None
    state: Optional[str] = None
    pincode: Optional[str] = None
    last_donation_date: Optional[datetime] = None
    created_at: Optional[datetime] = None
    
    class Config:
        from_attributes = True

class BloodGroupCount(BaseModel):
    blood_group: str
    count: int

class MonthlyCount(BaseModel):
    year: int
    month: int
    count: int

class UserDashboardOverview(BaseModel):
    total_donors: int
    total_users: int
    upcoming_events: int
    registered_events: int

class UserDashboardStats(BaseModel):
    my_requests: Dict[str, int]
    blood_groups: List[BloodGroupCount]
    urgency: Dict[str, int]
    monthly_trend: List[MonthlyCount]
    overview: UserDashboardOverview
