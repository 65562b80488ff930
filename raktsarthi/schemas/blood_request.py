from pydantic import BaseModel, Field, field_validator
from typing import Dict, Optional
from datetime import datetime
from raktsarthi.models.enums import BloodGroup, RequestStatus, RequestUrgency, BankResponseStatus

class Hospital(BaseModel):
    name: Optional[str] = None
    address: Optional[str] = None
    latitude: Optional[float] = None
    longitude: Optional[float] = None

class BloodRequestCreate(BaseModel):
    patient_name: str = Field(..., min_length=1)
    blood_group: BloodGroup
    units: int = Field(..., ge=1)
    urgency: RequestUrgency = RequestUrgency.NORMAL
    hospital: Optional[Hospital] = None
    contact_number: str = Field(..., min_length=1)
    required_by: Optional[datetime] = None
    description: Optional[str] = None

class BloodRequestStatusUpdate(BaseModel):
    status: RequestStatus

    @field_validator('status')
    @classmethod
    def only_cancellation(cls, v):
        if v != RequestStatus.CANCELLED:
            raise ValueError('Requesters can only cancel a request')
        return v

class RequestDecision(BaseModel):
    note: Optional[str] = None

class BankResponse(BaseModel):
    blood_bank_id: Optional[int] = None
    blood_bank_name: Optional[str] = None
    status: Optional[BankResponseStatus] = None
    responded_at: Optional[datetime] = None
    note: Optional[str] = None

class BloodRequestResponse(BaseModel):
    id: int
    requested_by: int
    requester_name: Optional[str] = None
    patient_name: str
    blood_group: BloodGroup
    units: int
    urgency: RequestUrgency
    hospital: Hospital
    contact_number: str
    required_by: datetime
    status: RequestStatus
    description: Optional[str] = None
    blood_bank_response: Optional[BankResponse] = None
    created_at: Optional[datetime] = None
    updated_at: Optional[datetime] = None

class RequestStats(BaseModel):
    pending: int
    approved: int
    rejected: int
    by_urgency: Dict[str, int]
    by_blood_group: Dict[str, int]
