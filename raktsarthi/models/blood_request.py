from sqlalchemy import Column, Integer, String, Text, DateTime, Float, ForeignKey
from sqlalchemy.sql import func
from sqlalchemy.orm import relationship
from raktsarthi.database.database import Base
from raktsarthi.models.enums import RequestStatus, RequestUrgency

class BloodRequest(Base):
    """A patient's ask for units of one blood group, open to every blood bank."""
    __tablename__ = "blood_requests"
    
    id = Column(Integer, primary_key=True, index=True)
    requested_by = Column(Integer, ForeignKey("users.id", ondelete="CASCADE"), nullable=False, index=True)
    patient_name = Column(String, nullable=False)
    blood_group = Column(String(8), nullable=False, index=True)
    units = Column(Integer, nullable=False)
    urgency = Column(String(16), nullable=False, default=RequestUrgency.NORMAL.value)
    
    # Hospital
    hospital_name = Column(String, nullable=True)
    hospital_address = Column(String, nullable=True)
    hospital_latitude = Column(Float, nullable=True)
    hospital_longitude = Column(Float, nullable=True)
    
    contact_number = Column(String, nullable=False)
    required_by = Column(DateTime(timezone=True), nullable=False)
    status = Column(String(16), nullable=False, default=RequestStatus.PENDING.value, index=True)
    description = Column(Text, nullable=True)
    
    # Blood bank response (set on approve/reject)
    blood_bank_id = Column(Integer, ForeignKey("blood_banks.id", ondelete="SET NULL"), nullable=True, index=True)
    response_status = Column(String(16), nullable=True)
    responded_at = Column(DateTime(timezone=True), nullable=True)
    response_note = Column(Text, nullable=True)
    
    created_at = Column(DateTime(timezone=True), server_default=func.now())
    updated_at = Column(DateTime(timezone=True), onupdate=func.now())
    
    # Relationships
    requester = relationship("User", backref="blood_requests")
    blood_bank = relationship("BloodBank")
