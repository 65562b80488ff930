from sqlalchemy import Column, Integer, String, DateTime, ForeignKey, JSON
from sqlalchemy.sql import func
from sqlalchemy.orm import relationship
from raktsarthi.database.database import Base, utcnow

class Inventory(Base):
    """Standalone per-bank stock ledger, keyed 1:1 by blood bank."""
    __tablename__ = "inventories"
    
    id = Column(Integer, primary_key=True, index=True)
    blood_bank_id = Column(
        Integer,
        ForeignKey("blood_banks.id", ondelete="CASCADE"),
        unique=True,
        nullable=False,
        index=True
    )
    blood_bank_name = Column(String, nullable=False)  # denormalized for display
    items = Column(JSON, nullable=False, default=list)  # [{"blood_group", "units", "last_updated"}]
    last_modified = Column(DateTime(timezone=True), nullable=False, default=utcnow)
    created_at = Column(DateTime(timezone=True), server_default=func.now())
    updated_at = Column(DateTime(timezone=True), onupdate=func.now())
    
    # Relationships
    blood_bank = relationship("BloodBank", back_populates="standalone_inventory")
