from sqlalchemy import Column, Integer, String, Boolean, DateTime, Float, JSON
from sqlalchemy.sql import func
from sqlalchemy.orm import relationship
from raktsarthi.database.database import Base

class BloodBank(Base):
    __tablename__ = "blood_banks"
    
    id = Column(Integer, primary_key=True, index=True)
    name = Column(String, nullable=False)
    email = Column(String, unique=True, index=True, nullable=False)
    hashed_password = Column(String, nullable=False)
    phone = Column(String, nullable=False)
    license_number = Column(String, unique=True, index=True, nullable=False)
    registration_number = Column(String, nullable=True)
    established_year = Column(Integer, nullable=True)
    
    # Address
    street = Column(String, nullable=True)
    city = Column(String, nullable=True, index=True)
    state = Column(String, nullable=True)
    pincode = Column(String, nullable=True)
    latitude = Column(Float, nullable=True)
    longitude = Column(Float, nullable=True)
    
    operating_hours = Column(JSON, nullable=True)  # {"open": "09:00", "close": "18:00", "days": [...]}
    services = Column(JSON, nullable=False, default=list)
    contact_person = Column(JSON, nullable=True)  # {"name", "phone", "email"}
    logo = Column(String, nullable=True)
    
    # Embedded inventory snapshot: [{"blood_group", "units", "last_updated"}]
    # The standalone Inventory row is preferred by readers when it has items.
    inventory = Column(JSON, nullable=False, default=list)
    
    is_active = Column(Boolean, default=True)
    is_verified = Column(Boolean, default=False)
    created_at = Column(DateTime(timezone=True), server_default=func.now())
    updated_at = Column(DateTime(timezone=True), onupdate=func.now())
    
    # Relationships
    standalone_inventory = relationship(
        "Inventory",
        back_populates="blood_bank",
        uselist=False,
        cascade="all, delete-orphan"
    )
    camps = relationship("BloodCamp", back_populates="organizer", cascade="all, delete-orphan")
