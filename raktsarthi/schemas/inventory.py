from pydantic import BaseModel, Field
from typing import List, Literal, Optional
from datetime import datetime
from raktsarthi.models.enums import BloodGroup

class InventoryItem(BaseModel):
    blood_group: BloodGroup
    units: int = Field(0, ge=0)
    last_updated: Optional[datetime] = None

class InventoryResponse(BaseModel):
    inventory: List[InventoryItem]
    source: str  # collection, embedded or default
    is_new: bool = False

class InventoryEntry(BaseModel):
    """Counts below zero are clamped, not rejected."""
    blood_group: BloodGroup
    units: int = 0

class InventorySave(BaseModel):
    inventory: List[InventoryEntry]

class InventoryUnitsUpdate(BaseModel):
    units: int

class InventoryOperation(BaseModel):
    blood_group: BloodGroup
    units: int = Field(..., ge=0)
    operation: Literal["add", "subtract", "set"] = "set"
