from fastapi import APIRouter, Depends, HTTPException, Query, status
from sqlalchemy.orm import Session
from typing import List, Optional
import logging
from raktsarthi.database.database import get_db, utcnow
from raktsarthi.models.blood_bank import BloodBank
from raktsarthi.models.blood_camp import BloodCamp
from raktsarthi.models.enums import CampStatus
from raktsarthi.models.user import User
from raktsarthi.schemas.blood_camp import (
    BloodCampCreate,
    BloodCampResponse,
    BloodCampUpdate,
    CampRegistrationResponse,
    CampRegistrationResult,
    CollectedUnitsUpdate,
    RegistrationBackfillResult,
    RegistrationCleanupResult,
)
from raktsarthi.services import camp_registration
from raktsarthi.api.v1.endpoints.auth import get_current_blood_bank, get_current_user

logger = logging.getLogger(__name__)
router = APIRouter()

UPCOMING_STATUSES = (CampStatus.SCHEDULED.value, CampStatus.UPCOMING.value)

def get_camp_or_404(db: Session, camp_id: int) -> BloodCamp:
    camp = db.query(BloodCamp).filter(BloodCamp.id == camp_id).first()
    if not camp:
        raise HTTPException(
            status_code=status.HTTP_404_NOT_FOUND,
            detail="Blood camp not found"
        )
    return camp

def get_owned_camp(db: Session, camp_id: int, blood_bank: BloodBank) -> BloodCamp:
    camp = get_camp_or_404(db, camp_id)
    if camp.organizer_id != blood_bank.id:
        raise HTTPException(
            status_code=status.HTTP_403_FORBIDDEN,
            detail="Not authorized to manage this camp"
        )
    return camp

@router.get("/", response_model=List[BloodCampResponse])
async def list_blood_camps(
    city: Optional[str] = Query(None),
    status_filter: Optional[CampStatus] = Query(None, alias="status"),
    upcoming: Optional[bool] = Query(None),
    db: Session = Depends(get_db)
):
    """
    Public camp listing. Without a status filter (or with upcoming=true) only
    future scheduled or upcoming camps are returned, soonest first.
    """
    query = db.query(BloodCamp)
    if city:
        query = query.filter(BloodCamp.city.ilike(f"%{city}%"))
    if status_filter:
        query = query.filter(BloodCamp.status == status_filter.value)
    if upcoming or (status_filter is None and upcoming is None):
        query = query.filter(
            BloodCamp.date >= utcnow(),
            BloodCamp.status.in_(UPCOMING_STATUSES)
        )
    return query.order_by(BloodCamp.date.asc()).all()

@router.get("/my-camps", response_model=List[BloodCampResponse])
async def get_my_camps(
    db: Session = Depends(get_db),
    current_bank: BloodBank = Depends(get_current_blood_bank)
):
    return db.query(BloodCamp).filter(
        BloodCamp.organizer_id == current_bank.id
    ).order_by(BloodCamp.date.desc()).all()

@router.post("/fix-registrations", response_model=RegistrationBackfillResult)
async def fix_registrations(
    db: Session = Depends(get_db),
    current_bank: BloodBank = Depends(get_current_blood_bank)
):
    """Refill placeholder registration details in this bank's camps from donor profiles."""
    logger.info(f"Registration backfill requested by blood bank: {current_bank.email}")
    result = camp_registration.backfill_registrations(db, organizer_id=current_bank.id)
    return RegistrationBackfillResult(message="Registrations fixed", **result)

@router.post("/cleanup-registrations", response_model=RegistrationCleanupResult)
async def cleanup_registrations(
    db: Session = Depends(get_db),
    current_bank: BloodBank = Depends(get_current_blood_bank)
):
    """Delete registrations in this bank's camps without a donor id or a usable name."""
    logger.info(f"Registration cleanup requested by blood bank: {current_bank.email}")
    result = camp_registration.cleanup_registrations(db, organizer_id=current_bank.id)
    return RegistrationCleanupResult(message="Invalid registrations removed", **result)

@router.get("/{camp_id}", response_model=BloodCampResponse)
async def get_blood_camp(camp_id: int, db: Session = Depends(get_db)):
    return get_camp_or_404(db, camp_id)

@router.post("/", response_model=BloodCampResponse, status_code=status.HTTP_201_CREATED)
async def create_blood_camp(
    camp_in: BloodCampCreate,
    db: Session = Depends(get_db),
    current_bank: BloodBank = Depends(get_current_blood_bank)
):
    camp_data = camp_in.dict()
    camp_data["contact_phone"] = camp_data.get("contact_phone") or current_bank.phone
    camp_data["contact_email"] = camp_data.get("contact_email") or current_bank.email
    
    camp = BloodCamp(
        **camp_data,
        organizer_id=current_bank.id,
        organizer_name=current_bank.name,
        collected_units=0,
        status=CampStatus.SCHEDULED.value
    )
    db.add(camp)
    db.commit()
    db.refresh(camp)
    
    logger.info(f"Blood camp {camp.id} ({camp.name}) created by blood bank: {current_bank.email}")
    return camp

@router.put("/{camp_id}", response_model=BloodCampResponse)
async def update_blood_camp(
    camp_id: int,
    camp_update: BloodCampUpdate,
    db: Session = Depends(get_db),
    current_bank: BloodBank = Depends(get_current_blood_bank)
):
    camp = get_owned_camp(db, camp_id, current_bank)
    update_data = camp_update.dict(exclude_unset=True)
    if update_data.get("status") is not None:
        update_data["status"] = update_data["status"].value
    
    for field, value in update_data.items():
        setattr(camp, field, value)
    db.commit()
    db.refresh(camp)
    
    logger.info(f"Blood camp {camp.id} updated by blood bank: {current_bank.email}")
    return camp

@router.delete("/{camp_id}")
async def delete_blood_camp(
    camp_id: int,
    db: Session = Depends(get_db),
    current_bank: BloodBank = Depends(get_current_blood_bank)
):
    """Delete a camp together with its registrations."""
    camp = get_owned_camp(db, camp_id, current_bank)
    db.delete(camp)
    db.commit()
    
    logger.info(f"Blood camp {camp_id} deleted by blood bank: {current_bank.email}")
    return {"message": "Blood camp deleted successfully"}

@router.put("/{camp_id}/collected", response_model=BloodCampResponse)
async def update_collected_units(
    camp_id: int,
    update: CollectedUnitsUpdate,
    db: Session = Depends(get_db),
    current_bank: BloodBank = Depends(get_current_blood_bank)
):
    camp = get_owned_camp(db, camp_id, current_bank)
    camp.collected_units = update.collected_units
    db.commit()
    db.refresh(camp)
    return camp

@router.post("/{camp_id}/register", response_model=CampRegistrationResult, status_code=status.HTTP_201_CREATED)
async def register_for_camp(
    camp_id: int,
    db: Session = Depends(get_db),
    current_user: User = Depends(get_current_user)
):
    camp = get_camp_or_404(db, camp_id)
    registration = camp_registration.register_donor(db, camp, current_user.id)
    return CampRegistrationResult(
        message="Successfully registered for the camp",
        camp_id=camp.id,
        registration=CampRegistrationResponse.model_validate(registration)
    )
