from sqlalchemy import Column, Integer, String, Text, Boolean, Date, DateTime, Float, ForeignKey, JSON, event
from sqlalchemy.orm import relationship
from raktsarthi.database.database import Base, utcnow
from raktsarthi.models.enums import HealthFormStatus
from raktsarthi.services.eligibility import evaluate_eligibility

class DonorHealth(Base):
    """A donor's health questionnaire for one review cycle."""
    __tablename__ = "donor_health_forms"
    
    id = Column(Integer, primary_key=True, index=True)
    donor_id = Column(Integer, ForeignKey("users.id", ondelete="CASCADE"), nullable=False, index=True)
    
    # Personal information
    full_name = Column(String, nullable=False)
    date_of_birth = Column(Date, nullable=False)
    gender = Column(String(16), nullable=False)
    blood_group = Column(String(8), nullable=False)
    weight = Column(Float, nullable=False)  # kg
    phone = Column(String, nullable=False)
    email = Column(String, nullable=False)
    address = Column(String, nullable=True)
    city = Column(String, nullable=True)
    
    # Questionnaire sections, stored as submitted (snake_case keys)
    medical_conditions = Column(JSON, nullable=False, default=dict)
    recent_activities = Column(JSON, nullable=False, default=dict)
    current_health = Column(JSON, nullable=False, default=dict)
    lifestyle = Column(JSON, nullable=False, default=dict)
    donation_history = Column(JSON, nullable=False, default=dict)
    consent = Column(JSON, nullable=False, default=dict)
    
    # Derived, never user supplied
    is_eligible = Column(Boolean, nullable=False, default=True, index=True)
    ineligibility_reasons = Column(JSON, nullable=False, default=list)
    eligibility_date = Column(DateTime(timezone=True), nullable=True)  # re-eligibility date, not computed yet
    
    # Review
    status = Column(String(32), nullable=False, default=HealthFormStatus.PENDING.value, index=True)
    reviewed_by = Column(Integer, ForeignKey("blood_banks.id", ondelete="SET NULL"), nullable=True)
    reviewed_at = Column(DateTime(timezone=True), nullable=True)
    review_notes = Column(Text, nullable=True)
    
    submitted_at = Column(DateTime(timezone=True), nullable=False, default=utcnow)
    updated_at = Column(DateTime(timezone=True), default=utcnow, onupdate=utcnow)
    
    # Relationships
    donor = relationship("User", backref="health_forms")
    reviewer = relationship("BloodBank", foreign_keys=[reviewed_by])
    
    def eligibility_input(self) -> dict:
        return {
            "weight": self.weight,
            "medical_conditions": self.medical_conditions or {},
            "recent_activities": self.recent_activities or {},
            "current_health": self.current_health or {},
            "donation_history": self.donation_history or {},
        }
    
    def refresh_eligibility(self, now=None) -> None:
        verdict = evaluate_eligibility(self.eligibility_input(), now=now)
        self.is_eligible = verdict.is_eligible
        self.ineligibility_reasons = list(verdict.reasons)


@event.listens_for(DonorHealth, "before_insert")
@event.listens_for(DonorHealth, "before_update")
def _recompute_eligibility(mapper, connection, target):
    """Every persisted form carries a verdict computed from its current answers."""
    target.refresh_eligibility()
