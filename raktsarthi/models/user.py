from sqlalchemy import Column, Integer, String, Boolean, DateTime, Float
from sqlalchemy.sql import func
from raktsarthi.database.database import Base
import enum

class UserRole(str, enum.Enum):
    USER = "user"
    DONOR = "donor"
    ADMIN = "admin"

class User(Base):
    __tablename__ = "users"
    
    id = Column(Integer, primary_key=True, index=True)
    name = Column(String, nullable=False)
    email = Column(String, unique=True, index=True, nullable=False)
    hashed_password = Column(String, nullable=False)
    phone = Column(String, nullable=True)
    blood_group = Column(String(8), nullable=True, index=True)
    role = Column(String(16), nullable=False, default=UserRole.USER.value)
    is_donor = Column(Boolean, default=False)
    is_available = Column(Boolean, default=True)
    needs_blood = Column(Boolean, default=False)
    
    # Address
    street = Column(String, nullable=True)
    city = Column(String, nullable=True)
    state = Column(String, nullable=True)
    pincode = Column(String, nullable=True)
    latitude = Column(Float, nullable=True)
    longitude = Column(Float, nullable=True)
    
    last_donation_date = Column(DateTime(timezone=True), nullable=True)
    created_at = Column(DateTime(timezone=True), server_default=func.now())
    updated_at = Column(DateTime(timezone=True), onupdate=func.now())
