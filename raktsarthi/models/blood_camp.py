from sqlalchemy import Column, Integer, String, Text, Boolean, DateTime, Float, ForeignKey, UniqueConstraint
from sqlalchemy.sql import func
from sqlalchemy.orm import relationship
from raktsarthi.database.database import Base, utcnow
from raktsarthi.models.enums import CampStatus

class BloodCamp(Base):
    __tablename__ = "blood_camps"
    
    id = Column(Integer, primary_key=True, index=True)
    name = Column(String, nullable=False)
    organizer_id = Column(Integer, ForeignKey("blood_banks.id", ondelete="CASCADE"), nullable=False, index=True)
    organizer_name = Column(String, nullable=False)  # denormalized at creation
    
    # Schedule
    date = Column(DateTime(timezone=True), nullable=False, index=True)
    start_time = Column(String(8), nullable=False)
    end_time = Column(String(8), nullable=False)
    
    # Location
    venue = Column(String, nullable=False)
    address = Column(String, nullable=False)
    city = Column(String, nullable=False, index=True)
    state = Column(String, nullable=True)
    pincode = Column(String, nullable=True)
    latitude = Column(Float, nullable=True)
    longitude = Column(Float, nullable=True)
    
    target_units = Column(Integer, nullable=False)
    collected_units = Column(Integer, nullable=False, default=0)  # updated manually by the organizer
    description = Column(Text, nullable=True)
    contact_phone = Column(String, nullable=True)
    contact_email = Column(String, nullable=True)
    status = Column(String(16), nullable=False, default=CampStatus.SCHEDULED.value)
    
    created_at = Column(DateTime(timezone=True), server_default=func.now())
    updated_at = Column(DateTime(timezone=True), onupdate=func.now())
    
    # Relationships
    organizer = relationship("BloodBank", back_populates="camps")
    registered_donors = relationship(
        "CampRegistration",
        back_populates="camp",
        order_by="CampRegistration.id",
        cascade="all, delete-orphan"
    )

class CampRegistration(Base):
    """Snapshot of a donor's contact details taken when they registered for a camp."""
    __tablename__ = "camp_registrations"
    __table_args__ = (
        UniqueConstraint("camp_id", "donor_id", name="uq_camp_registration_donor"),
    )
    
    id = Column(Integer, primary_key=True, index=True)
    camp_id = Column(Integer, ForeignKey("blood_camps.id", ondelete="CASCADE"), nullable=False, index=True)
    donor_id = Column(Integer, ForeignKey("users.id", ondelete="SET NULL"), nullable=True, index=True)
    name = Column(String, nullable=True)
    phone = Column(String, nullable=True)
    blood_group = Column(String(16), nullable=True)
    registered_at = Column(DateTime(timezone=True), nullable=False, default=utcnow)
    attended = Column(Boolean, nullable=False, default=False)
    
    # Relationships
    camp = relationship("BloodCamp", back_populates="registered_donors")
