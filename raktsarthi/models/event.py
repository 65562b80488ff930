from sqlalchemy import Column, Integer, String, Text, Boolean, DateTime, Float, ForeignKey, JSON
from sqlalchemy.sql import func
from sqlalchemy.orm import relationship
from raktsarthi.database.database import Base
from raktsarthi.models.enums import EventType

class Event(Base):
    __tablename__ = "events"
    
    id = Column(Integer, primary_key=True, index=True)
    title = Column(String, nullable=False)
    description = Column(Text, nullable=False)
    organizer = Column(String, nullable=False)  # organizer display name
    organized_by = Column(Integer, ForeignKey("blood_banks.id", ondelete="CASCADE"), nullable=True, index=True)
    event_type = Column(String(32), nullable=False, default=EventType.BLOOD_DRIVE.value)
    
    location_name = Column(String, nullable=True)
    location_address = Column(String, nullable=True)
    latitude = Column(Float, nullable=True)
    longitude = Column(Float, nullable=True)
    
    date = Column(DateTime(timezone=True), nullable=False, index=True)
    start_time = Column(String(8), nullable=False)
    end_time = Column(String(8), nullable=False)
    contact_phone = Column(String, nullable=True)
    contact_email = Column(String, nullable=True)
    expected_donors = Column(Integer, nullable=False, default=0)
    registered_donors = Column(JSON, nullable=False, default=list)  # user ids
    is_active = Column(Boolean, default=True)
    created_at = Column(DateTime(timezone=True), server_default=func.now())
    updated_at = Column(DateTime(timezone=True), onupdate=func.now())
    
    # Relationships
    organizing_bank = relationship("BloodBank")
