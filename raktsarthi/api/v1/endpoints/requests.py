from fastapi import APIRouter, Depends, HTTPException, Query, status
from sqlalchemy.orm import Session
from typing import List, Optional
from datetime import timedelta
import logging
from raktsarthi.core.config import settings
from raktsarthi.database.database import get_db, utcnow
from raktsarthi.models.blood_request import BloodRequest
from raktsarthi.models.enums import BloodGroup, RequestStatus
from raktsarthi.models.user import User
from raktsarthi.schemas.blood_request import (
    BankResponse,
    BloodRequestCreate,
    BloodRequestResponse,
    BloodRequestStatusUpdate,
    Hospital,
)
from raktsarthi.api.v1.endpoints.auth import get_current_user

logger = logging.getLogger(__name__)
router = APIRouter()

def blood_request_response(blood_request: BloodRequest) -> BloodRequestResponse:
    """Build the API shape of a request, nesting hospital and bank response fields."""
    bank_response = None
    if blood_request.response_status:
        bank_response = BankResponse(
            blood_bank_id=blood_request.blood_bank_id,
            blood_bank_name=blood_request.blood_bank.name if blood_request.blood_bank else None,
            status=blood_request.response_status,
            responded_at=blood_request.responded_at,
            note=blood_request.response_note
        )
    
    return BloodRequestResponse(
        id=blood_request.id,
        requested_by=blood_request.requested_by,
        requester_name=blood_request.requester.name if blood_request.requester else None,
        patient_name=blood_request.patient_name,
        blood_group=blood_request.blood_group,
        units=blood_request.units,
        urgency=blood_request.urgency,
        hospital=Hospital(
            name=blood_request.hospital_name,
            address=blood_request.hospital_address,
            latitude=blood_request.hospital_latitude,
            longitude=blood_request.hospital_longitude
        ),
        contact_number=blood_request.contact_number,
        required_by=blood_request.required_by,
        status=blood_request.status,
        description=blood_request.description,
        blood_bank_response=bank_response,
        created_at=blood_request.created_at,
        updated_at=blood_request.updated_at
    )

@router.get("/", response_model=List[BloodRequestResponse])
async def list_blood_requests(
    status_filter: Optional[RequestStatus] = Query(None, alias="status"),
    blood_group: Optional[BloodGroup] = Query(None),
    db: Session = Depends(get_db)
):
    query = db.query(BloodRequest)
    if status_filter:
        query = query.filter(BloodRequest.status == status_filter.value)
    if blood_group:
        query = query.filter(BloodRequest.blood_group == blood_group.value)
    requests = query.order_by(BloodRequest.created_at.desc(), BloodRequest.id.desc()).all()
    return [blood_request_response(r) for r in requests]

@router.get("/my-requests", response_model=List[BloodRequestResponse])
async def get_my_requests(
    db: Session = Depends(get_db),
    current_user: User = Depends(get_current_user)
):
    requests = db.query(BloodRequest).filter(
        BloodRequest.requested_by == current_user.id
    ).order_by(BloodRequest.created_at.desc(), BloodRequest.id.desc()).all()
    return [blood_request_response(r) for r in requests]

@router.post("/", response_model=BloodRequestResponse, status_code=status.HTTP_201_CREATED)
async def create_blood_request(
    request_in: BloodRequestCreate,
    db: Session = Depends(get_db),
    current_user: User = Depends(get_current_user)
):
    """Open a request to every blood bank."""
    hospital = request_in.hospital or Hospital()
    required_by = request_in.required_by or utcnow() + timedelta(days=settings.DEFAULT_REQUEST_WINDOW_DAYS)
    
    blood_request = BloodRequest(
        requested_by=current_user.id,
        patient_name=request_in.patient_name,
        blood_group=request_in.blood_group.value,
        units=request_in.units,
        urgency=request_in.urgency.value,
        hospital_name=hospital.name,
        hospital_address=hospital.address,
        hospital_latitude=hospital.latitude,
        hospital_longitude=hospital.longitude,
        contact_number=request_in.contact_number,
        required_by=required_by,
        status=RequestStatus.PENDING.value,
        description=request_in.description
    )
    db.add(blood_request)
    db.commit()
    db.refresh(blood_request)
    
    logger.info(
        f"Blood request {blood_request.id} created by user: {current_user.email} "
        f"({blood_request.units} unit(s) {blood_request.blood_group}, {blood_request.urgency})"
    )
    return blood_request_response(blood_request)

@router.patch("/{request_id}/status", response_model=BloodRequestResponse)
async def update_request_status(
    request_id: int,
    status_update: BloodRequestStatusUpdate,
    db: Session = Depends(get_db),
    current_user: User = Depends(get_current_user)
):
    """Requesters may cancel their own request while it is still pending."""
    blood_request = db.query(BloodRequest).filter(BloodRequest.id == request_id).first()
    if not blood_request:
        raise HTTPException(
            status_code=status.HTTP_404_NOT_FOUND,
            detail="Blood request not found"
        )
    if blood_request.requested_by != current_user.id:
        raise HTTPException(
            status_code=status.HTTP_403_FORBIDDEN,
            detail="Not authorized to update this request"
        )
    if blood_request.status != RequestStatus.PENDING.value:
        raise HTTPException(
            status_code=status.HTTP_400_BAD_REQUEST,
            detail="Only pending requests can be cancelled"
        )
    
    blood_request.status = status_update.status.value
    db.commit()
    db.refresh(blood_request)
    
    logger.info(f"Blood request {blood_request.id} cancelled by user: {current_user.email}")
    return blood_request_response(blood_request)
