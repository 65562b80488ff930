"""
Blood-bank portal: the request queue, the bank's own camps and events, its
dashboard and account settings. Every route needs a blood-bank session.
"""
from fastapi import APIRouter, Depends, HTTPException, Query, status
from sqlalchemy import case, func
from sqlalchemy.orm import Session
from typing import List, Optional
import logging
from raktsarthi.core.config import settings
from raktsarthi.core.exceptions import InventoryGroupNotFound
from raktsarthi.core.security import hash_password, verify_password
from raktsarthi.database.database import get_db, utcnow
from raktsarthi.models.blood_bank import BloodBank
from raktsarthi.models.blood_camp import BloodCamp
from raktsarthi.models.blood_request import BloodRequest
from raktsarthi.models.enums import (
    BankResponseStatus,
    BloodGroup,
    CampStatus,
    RequestStatus,
    RequestUrgency,
)
from raktsarthi.models.event import Event
from raktsarthi.models.user import User
from raktsarthi.schemas.auth import MessageResponse, PasswordChange
from raktsarthi.schemas.blood_bank import BloodBankProfileUpdate, BloodBankResponse, DashboardResponse
from raktsarthi.schemas.blood_camp import BloodCampResponse, CampRegistrationResponse, CampRegistrationsResponse
from raktsarthi.schemas.blood_request import BloodRequestResponse, RequestDecision, RequestStats
from raktsarthi.schemas.event import (
    EventCreate,
    EventRegistrant,
    EventRegistrationsResponse,
    EventResponse,
    EventUpdate,
)
from raktsarthi.schemas.inventory import InventoryResponse, InventorySave, InventoryUnitsUpdate
from raktsarthi.services import camp_registration
from raktsarthi.services import inventory as inventory_service
from raktsarthi.api.v1.endpoints.auth import get_current_blood_bank
from raktsarthi.api.v1.endpoints.blood_banks import blood_bank_response
from raktsarthi.api.v1.endpoints.blood_camps import get_owned_camp
from raktsarthi.api.v1.endpoints.requests import blood_request_response

logger = logging.getLogger(__name__)
router = APIRouter()

URGENCY_RANK = case(
    (BloodRequest.urgency == RequestUrgency.CRITICAL.value, 0),
    (BloodRequest.urgency == RequestUrgency.URGENT.value, 1),
    else_=2
)

def _open_requests(db: Session):
    return db.query(BloodRequest).filter(
        BloodRequest.status == RequestStatus.PENDING.value,
        BloodRequest.response_status.is_(None)
    )

def _get_request(db: Session, request_id: int, for_update: bool = False) -> BloodRequest:
    query = db.query(BloodRequest).filter(BloodRequest.id == request_id)
    if for_update:
        query = query.with_for_update()
    blood_request = query.first()
    if not blood_request:
        raise HTTPException(
            status_code=status.HTTP_404_NOT_FOUND,
            detail="Blood request not found"
        )
    return blood_request

def _record_response(blood_request: BloodRequest, blood_bank: BloodBank, decision: BankResponseStatus, note: Optional[str]):
    blood_request.blood_bank_id = blood_bank.id
    blood_request.response_status = decision.value
    blood_request.responded_at = utcnow()
    blood_request.response_note = note

def _require_pending(blood_request: BloodRequest):
    if blood_request.status != RequestStatus.PENDING.value:
        raise HTTPException(
            status_code=status.HTTP_400_BAD_REQUEST,
            detail="Request is no longer pending"
        )

# ---------------------------------------------------------------------------
# Request queue
# ---------------------------------------------------------------------------

@router.get("/requests", response_model=List[BloodRequestResponse])
async def list_queue(
    status_filter: Optional[RequestStatus] = Query(None, alias="status"),
    blood_group: Optional[BloodGroup] = Query(None),
    urgency: Optional[RequestUrgency] = Query(None),
    limit: int = Query(settings.PORTAL_REQUEST_LIMIT, ge=1, le=500),
    db: Session = Depends(get_db),
    current_bank: BloodBank = Depends(get_current_blood_bank)
):
    """
    Requests awaiting a blood bank, most urgent first and newest first within
    an urgency. Passing `status` lists requests in that status instead.
    """
    if status_filter:
        query = db.query(BloodRequest).filter(BloodRequest.status == status_filter.value)
    else:
        query = _open_requests(db)
    if blood_group:
        query = query.filter(BloodRequest.blood_group == blood_group.value)
    if urgency:
        query = query.filter(BloodRequest.urgency == urgency.value)
    
    requests = query.order_by(
        URGENCY_RANK, BloodRequest.created_at.desc(), BloodRequest.id.desc()
    ).limit(limit).all()
    return [blood_request_response(r) for r in requests]

@router.get("/requests/approved", response_model=List[BloodRequestResponse])
async def list_approved_requests(
    db: Session = Depends(get_db),
    current_bank: BloodBank = Depends(get_current_blood_bank)
):
    requests = db.query(BloodRequest).filter(
        BloodRequest.blood_bank_id == current_bank.id,
        BloodRequest.response_status == BankResponseStatus.APPROVED.value
    ).order_by(BloodRequest.responded_at.desc(), BloodRequest.id.desc()).all()
    return [blood_request_response(r) for r in requests]

@router.get("/requests/stats/summary", response_model=RequestStats)
async def request_stats(
    db: Session = Depends(get_db),
    current_bank: BloodBank = Depends(get_current_blood_bank)
):
    open_requests = _open_requests(db).all()
    by_urgency = {urgency.value: 0 for urgency in RequestUrgency}
    by_blood_group = {group.value: 0 for group in BloodGroup}
    for blood_request in open_requests:
        by_urgency[blood_request.urgency] = by_urgency.get(blood_request.urgency, 0) + 1
        by_blood_group[blood_request.blood_group] = by_blood_group.get(blood_request.blood_group, 0) + 1
    
    responded = db.query(BloodRequest.response_status, func.count(BloodRequest.id)).filter(
        BloodRequest.blood_bank_id == current_bank.id
    ).group_by(BloodRequest.response_status).all()
    responded = dict(responded)
    
    return RequestStats(
        pending=len(open_requests),
        approved=responded.get(BankResponseStatus.APPROVED.value, 0),
        rejected=responded.get(BankResponseStatus.REJECTED.value, 0),
        by_urgency=by_urgency,
        by_blood_group=by_blood_group
    )

@router.get("/requests/{request_id}", response_model=BloodRequestResponse)
async def get_queue_request(
    request_id: int,
    db: Session = Depends(get_db),
    current_bank: BloodBank = Depends(get_current_blood_bank)
):
    return blood_request_response(_get_request(db, request_id))

@router.post("/requests/{request_id}/approve", response_model=BloodRequestResponse)
async def approve_request(
    request_id: int,
    decision: Optional[RequestDecision] = None,
    db: Session = Depends(get_db),
    current_bank: BloodBank = Depends(get_current_blood_bank)
):
    """Fulfil a pending request and take its units out of this bank's stock."""
    blood_request = _get_request(db, request_id, for_update=True)
    _require_pending(blood_request)
    
    blood_request.status = RequestStatus.FULFILLED.value
    _record_response(blood_request, current_bank, BankResponseStatus.APPROVED, decision.note if decision else None)
    try:
        inventory_service.deduct_for_request(
            db, current_bank, blood_request.blood_group, blood_request.units, commit=False
        )
    except InventoryGroupNotFound:
        db.rollback()
        raise
    db.commit()
    db.refresh(blood_request)
    
    logger.info(
        f"Blood request {blood_request.id} approved by blood bank: {current_bank.email} "
        f"({blood_request.units} unit(s) {blood_request.blood_group})"
    )
    return blood_request_response(blood_request)

@router.post("/requests/{request_id}/reject", response_model=BloodRequestResponse)
async def reject_request(
    request_id: int,
    decision: Optional[RequestDecision] = None,
    db: Session = Depends(get_db),
    current_bank: BloodBank = Depends(get_current_blood_bank)
):
    """Decline a pending request. Inventory is not touched."""
    blood_request = _get_request(db, request_id, for_update=True)
    _require_pending(blood_request)
    
    blood_request.status = RequestStatus.REJECTED.value
    _record_response(blood_request, current_bank, BankResponseStatus.REJECTED, decision.note if decision else None)
    db.commit()
    db.refresh(blood_request)
    
    logger.info(f"Blood request {blood_request.id} rejected by blood bank: {current_bank.email}")
    return blood_request_response(blood_request)

# ---------------------------------------------------------------------------
# Camps
# ---------------------------------------------------------------------------

@router.get("/camps", response_model=List[BloodCampResponse])
async def list_own_camps(
    db: Session = Depends(get_db),
    current_bank: BloodBank = Depends(get_current_blood_bank)
):
    return db.query(BloodCamp).filter(
        BloodCamp.organizer_id == current_bank.id
    ).order_by(BloodCamp.created_at.desc(), BloodCamp.id.desc()).all()

@router.get("/camps/{camp_id}/registrations", response_model=CampRegistrationsResponse)
async def get_camp_registrations(
    camp_id: int,
    db: Session = Depends(get_db),
    current_bank: BloodBank = Depends(get_current_blood_bank)
):
    camp = get_owned_camp(db, camp_id, current_bank)
    return CampRegistrationsResponse(
        camp_id=camp.id,
        camp_name=camp.name,
        total=len(camp.registered_donors),
        registrations=[CampRegistrationResponse.model_validate(entry) for entry in camp.registered_donors]
    )

def _registration_removed(removed: int) -> dict:
    if not removed:
        raise HTTPException(
            status_code=status.HTTP_404_NOT_FOUND,
            detail="Registration not found"
        )
    return {"message": "Registration removed", "removed": removed}

@router.delete("/camps/{camp_id}/registrations/donor/{donor_id}")
async def delete_donor_camp_registration(
    camp_id: int,
    donor_id: int,
    db: Session = Depends(get_db),
    current_bank: BloodBank = Depends(get_current_blood_bank)
):
    """Remove every registration belonging to donor `donor_id`."""
    camp = get_owned_camp(db, camp_id, current_bank)
    removed = camp_registration.remove_registration(db, camp, donor_id=donor_id)
    return _registration_removed(removed)

@router.delete("/camps/{camp_id}/registrations/{registration_id}")
async def delete_camp_registration(
    camp_id: int,
    registration_id: int,
    db: Session = Depends(get_db),
    current_bank: BloodBank = Depends(get_current_blood_bank)
):
    camp = get_owned_camp(db, camp_id, current_bank)
    removed = camp_registration.remove_registration(db, camp, registration_id=registration_id)
    return _registration_removed(removed)

# ---------------------------------------------------------------------------
# Events
# ---------------------------------------------------------------------------

def _get_own_event(db: Session, event_id: int, blood_bank: BloodBank) -> Event:
    event = db.query(Event).filter(Event.id == event_id).first()
    if not event:
        raise HTTPException(
            status_code=status.HTTP_404_NOT_FOUND,
            detail="Event not found"
        )
    if event.organized_by != blood_bank.id:
        raise HTTPException(
            status_code=status.HTTP_403_FORBIDDEN,
            detail="Not authorized to manage this event"
        )
    return event

@router.get("/events", response_model=List[EventResponse])
async def list_own_events(
    db: Session = Depends(get_db),
    current_bank: BloodBank = Depends(get_current_blood_bank)
):
    return db.query(Event).filter(
        Event.organized_by == current_bank.id
    ).order_by(Event.date.desc()).all()

@router.post("/events", response_model=EventResponse, status_code=status.HTTP_201_CREATED)
async def create_event(
    event_in: EventCreate,
    db: Session = Depends(get_db),
    current_bank: BloodBank = Depends(get_current_blood_bank)
):
    event_data = event_in.dict()
    event_data["event_type"] = event_in.event_type.value
    event = Event(
        **event_data,
        organizer=current_bank.name,
        organized_by=current_bank.id,
        registered_donors=[],
        is_active=True
    )
    db.add(event)
    db.commit()
    db.refresh(event)
    
    logger.info(f"Event {event.id} ({event.title}) created by blood bank: {current_bank.email}")
    return event

@router.put("/events/{event_id}", response_model=EventResponse)
async def update_event(
    event_id: int,
    event_update: EventUpdate,
    db: Session = Depends(get_db),
    current_bank: BloodBank = Depends(get_current_blood_bank)
):
    event = _get_own_event(db, event_id, current_bank)
    update_data = event_update.dict(exclude_unset=True)
    if update_data.get("event_type") is not None:
        update_data["event_type"] = update_data["event_type"].value
    
    for field, value in update_data.items():
        setattr(event, field, value)
    db.commit()
    db.refresh(event)
    return event

@router.delete("/events/{event_id}")
async def delete_event(
    event_id: int,
    db: Session = Depends(get_db),
    current_bank: BloodBank = Depends(get_current_blood_bank)
):
    event = _get_own_event(db, event_id, current_bank)
    db.delete(event)
    db.commit()
    
    logger.info(f"Event {event_id} deleted by blood bank: {current_bank.email}")
    return {"message": "Event deleted successfully"}

@router.get("/events/{event_id}/registrations", response_model=EventRegistrationsResponse)
async def get_event_registrations(
    event_id: int,
    db: Session = Depends(get_db),
    current_bank: BloodBank = Depends(get_current_blood_bank)
):
    event = _get_own_event(db, event_id, current_bank)
    donor_ids = list(event.registered_donors or [])
    registrants = db.query(User).filter(User.id.in_(donor_ids)).all() if donor_ids else []
    return EventRegistrationsResponse(
        event_id=event.id,
        title=event.title,
        total=len(donor_ids),
        registrants=[EventRegistrant.model_validate(user) for user in registrants]
    )

# ---------------------------------------------------------------------------
# Dashboard
# ---------------------------------------------------------------------------

@router.get("/dashboard", response_model=DashboardResponse)
async def get_dashboard(
    db: Session = Depends(get_db),
    current_bank: BloodBank = Depends(get_current_blood_bank)
):
    items, _ = inventory_service.load_inventory(db, current_bank)
    now = utcnow()
    month_start = now.replace(day=1, hour=0, minute=0, second=0, microsecond=0)
    
    own_requests = db.query(BloodRequest).filter(BloodRequest.blood_bank_id == current_bank.id)
    own_camps = db.query(BloodCamp).filter(BloodCamp.organizer_id == current_bank.id)
    
    return DashboardResponse(
        blood_bank_name=current_bank.name,
        inventory=items,
        total_units=sum(int(item.get("units") or 0) for item in items),
        pending_requests=_open_requests(db).count(),
        approved_requests=own_requests.filter(
            BloodRequest.response_status == BankResponseStatus.APPROVED.value
        ).count(),
        handled_this_month=own_requests.filter(BloodRequest.responded_at >= month_start).count(),
        total_camps=own_camps.count(),
        upcoming_camps=own_camps.filter(
            BloodCamp.date >= now,
            BloodCamp.status.in_((CampStatus.SCHEDULED.value, CampStatus.UPCOMING.value))
        ).count(),
        total_events=db.query(Event).filter(Event.organized_by == current_bank.id).count()
    )

# ---------------------------------------------------------------------------
# Settings
# ---------------------------------------------------------------------------

@router.get("/settings/profile", response_model=BloodBankResponse)
async def get_settings_profile(
    db: Session = Depends(get_db),
    current_bank: BloodBank = Depends(get_current_blood_bank)
):
    return blood_bank_response(db, current_bank)

@router.put("/settings/profile", response_model=BloodBankResponse)
async def update_settings_profile(
    profile_update: BloodBankProfileUpdate,
    db: Session = Depends(get_db),
    current_bank: BloodBank = Depends(get_current_blood_bank)
):
    for field, value in profile_update.dict(exclude_unset=True).items():
        setattr(current_bank, field, value)
    db.commit()
    db.refresh(current_bank)
    
    logger.info(f"Profile updated by blood bank: {current_bank.email}")
    return blood_bank_response(db, current_bank)

@router.put("/settings/password", response_model=MessageResponse)
async def change_password(
    password_change: PasswordChange,
    db: Session = Depends(get_db),
    current_bank: BloodBank = Depends(get_current_blood_bank)
):
    if not verify_password(password_change.current_password, current_bank.hashed_password):
        raise HTTPException(
            status_code=status.HTTP_400_BAD_REQUEST,
            detail="Current password is incorrect"
        )
    if len(password_change.new_password) < settings.PASSWORD_MIN_LENGTH:
        raise HTTPException(
            status_code=status.HTTP_400_BAD_REQUEST,
            detail=f"Password must be at least {settings.PASSWORD_MIN_LENGTH} characters"
        )
    
    current_bank.hashed_password = hash_password(password_change.new_password)
    db.commit()
    
    logger.info(f"Password changed by blood bank: {current_bank.email}")
    return MessageResponse(message="Password updated successfully")

@router.get("/settings/inventory", response_model=InventoryResponse)
async def get_settings_inventory(
    db: Session = Depends(get_db),
    current_bank: BloodBank = Depends(get_current_blood_bank)
):
    items, source = inventory_service.load_inventory(db, current_bank)
    return InventoryResponse(
        inventory=items,
        source=source,
        is_new=source == inventory_service.SOURCE_DEFAULT
    )

@router.put("/settings/inventory", response_model=InventoryResponse)
async def save_settings_inventory(
    inventory_in: InventorySave,
    db: Session = Depends(get_db),
    current_bank: BloodBank = Depends(get_current_blood_bank)
):
    entries = [(entry.blood_group.value, entry.units) for entry in inventory_in.inventory]
    items = inventory_service.save_inventory(db, current_bank, entries)
    return InventoryResponse(inventory=items, source=inventory_service.SOURCE_COLLECTION)

@router.patch("/settings/inventory/{blood_group}", response_model=InventoryResponse)
async def set_group_units(
    blood_group: BloodGroup,
    update: InventoryUnitsUpdate,
    db: Session = Depends(get_db),
    current_bank: BloodBank = Depends(get_current_blood_bank)
):
    items = inventory_service.set_units(db, current_bank, blood_group.value, update.units)
    return InventoryResponse(inventory=items, source=inventory_service.SOURCE_COLLECTION)
