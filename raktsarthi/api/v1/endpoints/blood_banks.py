from fastapi import APIRouter, Depends, HTTPException, Query, status
from sqlalchemy.orm import Session
from typing import List, Optional
import logging
from raktsarthi.core.config import settings
from raktsarthi.core.security import create_blood_bank_token, hash_password, verify_password
from raktsarthi.database.database import get_db
from raktsarthi.models.blood_bank import BloodBank
from raktsarthi.models.enums import BloodGroup
from raktsarthi.schemas.auth import BloodBankToken, LoginRequest
from raktsarthi.schemas.blood_bank import BloodBankRegister, BloodBankResponse
from raktsarthi.schemas.inventory import InventoryItem, InventoryOperation, InventoryResponse
from raktsarthi.services import inventory as inventory_service
from raktsarthi.api.v1.endpoints.auth import get_current_blood_bank

logger = logging.getLogger(__name__)
router = APIRouter()

def blood_bank_response(db: Session, blood_bank: BloodBank, items: Optional[List[dict]] = None) -> BloodBankResponse:
    """Serialize a bank with its reconciled inventory in place of the embedded snapshot."""
    if items is None:
        items, _ = inventory_service.load_inventory(db, blood_bank)
    response = BloodBankResponse.model_validate(blood_bank)
    response.inventory = [InventoryItem(**item) for item in items]
    return response

@router.post("/register", response_model=BloodBankToken, status_code=status.HTTP_201_CREATED)
async def register_blood_bank(bank_in: BloodBankRegister, db: Session = Depends(get_db)):
    """Register a blood bank with zero stock for every blood group."""
    email = bank_in.email.strip().lower()
    existing = db.query(BloodBank).filter(
        (BloodBank.email == email) | (BloodBank.license_number == bank_in.license_number)
    ).first()
    if existing:
        raise HTTPException(
            status_code=status.HTTP_400_BAD_REQUEST,
            detail="Blood bank with this email or license number already exists"
        )
    if len(bank_in.password) < settings.PASSWORD_MIN_LENGTH:
        raise HTTPException(
            status_code=status.HTTP_400_BAD_REQUEST,
            detail=f"Password must be at least {settings.PASSWORD_MIN_LENGTH} characters"
        )
    
    bank_data = bank_in.dict(exclude={"password", "email"})
    blood_bank = BloodBank(
        **bank_data,
        email=email,
        hashed_password=hash_password(bank_in.password),
        inventory=inventory_service.default_inventory()
    )
    db.add(blood_bank)
    db.commit()
    db.refresh(blood_bank)
    
    logger.info(f"Blood bank registered: {blood_bank.name} ({blood_bank.email})")
    return BloodBankToken(
        access_token=create_blood_bank_token(blood_bank.id),
        blood_bank=blood_bank_response(db, blood_bank)
    )

@router.post("/login", response_model=BloodBankToken)
async def login_blood_bank(credentials: LoginRequest, db: Session = Depends(get_db)):
    blood_bank = db.query(BloodBank).filter(BloodBank.email == credentials.email.strip().lower()).first()
    if not blood_bank or not verify_password(credentials.password, blood_bank.hashed_password):
        logger.warning(f"Failed blood bank login attempt for: {credentials.email}")
        raise HTTPException(
            status_code=status.HTTP_401_UNAUTHORIZED,
            detail="Incorrect email or password",
            headers={"WWW-Authenticate": "Bearer"},
        )
    if not blood_bank.is_active:
        raise HTTPException(
            status_code=status.HTTP_403_FORBIDDEN,
            detail="Blood bank account is inactive"
        )
    
    logger.info(f"Blood bank logged in: {blood_bank.email}")
    return BloodBankToken(
        access_token=create_blood_bank_token(blood_bank.id),
        blood_bank=blood_bank_response(db, blood_bank)
    )

@router.get("/", response_model=List[BloodBankResponse])
async def list_blood_banks(
    blood_group: Optional[BloodGroup] = Query(None),
    city: Optional[str] = Query(None),
    db: Session = Depends(get_db)
):
    """Active blood banks; with `blood_group`, only those holding stock of it."""
    query = db.query(BloodBank).filter(BloodBank.is_active.is_(True))
    if city:
        query = query.filter(BloodBank.city.ilike(f"%{city}%"))
    
    results = []
    for blood_bank in query.order_by(BloodBank.name).all():
        items, _ = inventory_service.load_inventory(db, blood_bank)
        if blood_group and inventory_service.units_available(items, blood_group.value) <= 0:
            continue
        results.append(blood_bank_response(db, blood_bank, items))
    return results

@router.get("/profile", response_model=BloodBankResponse)
async def get_blood_bank_profile(
    db: Session = Depends(get_db),
    current_bank: BloodBank = Depends(get_current_blood_bank)
):
    return blood_bank_response(db, current_bank)

@router.put("/inventory", response_model=InventoryResponse)
async def update_inventory(
    update: InventoryOperation,
    db: Session = Depends(get_db),
    current_bank: BloodBank = Depends(get_current_blood_bank)
):
    """Add to, subtract from or overwrite one blood group's units."""
    blood_group = update.blood_group.value
    if update.operation == "add":
        items = inventory_service.adjust_units(db, current_bank, blood_group, update.units)
    elif update.operation == "subtract":
        items = inventory_service.adjust_units(db, current_bank, blood_group, -update.units)
    else:
        items = inventory_service.set_units(db, current_bank, blood_group, update.units)
    return InventoryResponse(inventory=items, source=inventory_service.SOURCE_COLLECTION)

@router.get("/{blood_bank_id}", response_model=BloodBankResponse)
async def get_blood_bank(blood_bank_id: int, db: Session = Depends(get_db)):
    blood_bank = db.query(BloodBank).filter(BloodBank.id == blood_bank_id).first()
    if not blood_bank:
        raise HTTPException(
            status_code=status.HTTP_404_NOT_FOUND,
            detail="Blood bank not found"
        )
    return blood_bank_response(db, blood_bank)
