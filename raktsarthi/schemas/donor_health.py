from pydantic import BaseModel, Field, field_validator
from typing import List, Optional
from datetime import date, datetime
from raktsarthi.models.enums import DeclaredBloodGroup, Gender, HealthFormStatus

class MedicalConditions(BaseModel):
    heart_disease: bool = False
    diabetes: bool = False
    high_blood_pressure: bool = False
    low_blood_pressure: bool = False
    cancer: bool = False
    hiv_aids: bool = False
    hepatitis_bc: bool = False
    malaria: bool = False
    tuberculosis: bool = False
    epilepsy: bool = False
    asthma: bool = False
    bleeding_disorder: bool = False
    kidney_disease: bool = False
    liver_disease: bool = False

class RecentActivities(BaseModel):
    tattoo_or_piercing: bool = False
    surgery_or_transfusion: bool = False
    dental_work: bool = False
    vaccination: bool = False
    travel_to_malaria_area: bool = False
    pregnancy_or_breastfeeding: bool = False

class CurrentHealth(BaseModel):
    recent_fever_or_illness: bool = False
    taking_medication: bool = False
    medication_details: Optional[str] = None
    recent_alcohol_consumption: bool = False

class Lifestyle(BaseModel):
    smoker: bool = False
    regular_alcohol_use: bool = False

class DonationHistory(BaseModel):
    has_donated_before: bool = False
    last_donation_date: Optional[date] = None
    total_donations: int = Field(0, ge=0)
    adverse_reactions: bool = False
    adverse_reaction_details: Optional[str] = None

class Consent(BaseModel):
    information_accurate: bool = False
    consent_to_donate: bool = False
    understands_process: bool = False

    def is_complete(self) -> bool:
        return self.information_accurate and self.consent_to_donate and self.understands_process

class HealthFormBase(BaseModel):
    full_name: str = Field(..., min_length=1)
    date_of_birth: date
    gender: Gender
    blood_group: DeclaredBloodGroup
    weight: float = Field(..., ge=0)
    phone: str = Field(..., min_length=1)
    email: str = Field(..., min_length=3)
    address: Optional[str] = None
    city: Optional[str] = None
    medical_conditions: MedicalConditions = MedicalConditions()
    recent_activities: RecentActivities = RecentActivities()
    current_health: CurrentHealth = CurrentHealth()
    lifestyle: Lifestyle = Lifestyle()
    donation_history: DonationHistory = DonationHistory()

class HealthFormCreate(HealthFormBase):
    consent: Consent

class HealthFormUpdate(BaseModel):
    full_name: Optional[str] = None
    date_of_birth: Optional[date] = None
    gender: Optional[Gender] = None
    blood_group: Optional[DeclaredBloodGroup] = None
    weight: Optional[float] = Field(None, ge=0)
    phone: Optional[str] = None
    email: Optional[str] = None
    address: Optional[str] = None
    city: Optional[str] = None
    medical_conditions: Optional[MedicalConditions] = None
    recent_activities: Optional[RecentActivities] = None
    current_health: Optional[CurrentHealth] = None
    lifestyle: Optional[Lifestyle] = None
    donation_history: Optional[DonationHistory] = None
    consent: Optional[Consent] = None

class HealthFormReview(BaseModel):
    status: HealthFormStatus
    review_notes: Optional[str] = None

    @field_validator('status')
    @classmethod
    def review_decision(cls, v):
        if v == HealthFormStatus.PENDING:
            raise ValueError('Review must approve, reject or flag the form for review')
        return v

class HealthFormResponse(HealthFormBase):
    id: int
    donor_id: int
    consent: Consent
    is_eligible: bool
    ineligibility_reasons: List[str] = []
    eligibility_date: Optional[datetime] = None
    status: HealthFormStatus
    reviewed_by: Optional[int] = None
    reviewed_at: Optional[datetime] = None
    review_notes: Optional[str] = None
    submitted_at: datetime
    updated_at: Optional[datetime] = None
    
    class Config:
        from_attributes = True

class EligibilityStatusResponse(BaseModel):
    has_form: bool
    message: Optional[str] = None
    is_eligible: Optional[bool] = None
    ineligibility_reasons: List[str] = []
    status: Optional[HealthFormStatus] = None
    submitted_at: Optional[datetime] = None
    form_id: Optional[int] = None
