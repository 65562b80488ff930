from fastapi import APIRouter, Depends, HTTPException, Query, status
from sqlalchemy.orm import Session
from typing import List, Optional
import logging
from raktsarthi.database.database import get_db, utcnow
from raktsarthi.models.blood_bank import BloodBank
from raktsarthi.models.donor_health import DonorHealth
from raktsarthi.models.enums import HealthFormStatus
from raktsarthi.models.user import User
from raktsarthi.schemas.donor_health import (
    EligibilityStatusResponse,
    HealthFormCreate,
    HealthFormResponse,
    HealthFormReview,
    HealthFormUpdate,
)
from raktsarthi.api.v1.endpoints.auth import get_current_blood_bank, get_current_user

logger = logging.getLogger(__name__)
router = APIRouter()

SECTION_FIELDS = (
    "medical_conditions",
    "recent_activities",
    "current_health",
    "lifestyle",
    "donation_history",
    "consent",
)
EDITABLE_STATUSES = (HealthFormStatus.PENDING.value, HealthFormStatus.REQUIRES_REVIEW.value)

def _form_values(form_in) -> dict:
    """Column values from a create/update payload; sections are stored as JSON."""
    values = {}
    for field, value in form_in.dict(exclude_unset=True).items():
        if value is None:
            continue
        if field in SECTION_FIELDS:
            values[field] = getattr(form_in, field).model_dump(mode="json")
        elif field in ("gender", "blood_group"):
            values[field] = value.value
        else:
            values[field] = value
    return values

def _consent_error() -> HTTPException:
    return HTTPException(
        status_code=status.HTTP_400_BAD_REQUEST,
        detail="All consent fields must be accepted"
    )

def _get_form(db: Session, form_id: int) -> DonorHealth:
    form = db.query(DonorHealth).filter(DonorHealth.id == form_id).first()
    if not form:
        raise HTTPException(
            status_code=status.HTTP_404_NOT_FOUND,
            detail="Health form not found"
        )
    return form

def _latest_form(db: Session, donor_id: int) -> Optional[DonorHealth]:
    return db.query(DonorHealth).filter(
        DonorHealth.donor_id == donor_id
    ).order_by(DonorHealth.submitted_at.desc(), DonorHealth.id.desc()).first()

@router.post("/", response_model=HealthFormResponse, status_code=status.HTTP_201_CREATED)
async def submit_health_form(
    form_in: HealthFormCreate,
    db: Session = Depends(get_db),
    current_user: User = Depends(get_current_user)
):
    """Submit a health questionnaire; eligibility is evaluated on save."""
    if not form_in.consent.is_complete():
        raise _consent_error()
    
    pending = db.query(DonorHealth).filter(
        DonorHealth.donor_id == current_user.id,
        DonorHealth.status == HealthFormStatus.PENDING.value
    ).first()
    if pending:
        raise HTTPException(
            status_code=status.HTTP_400_BAD_REQUEST,
            detail="You already have a pending health form under review"
        )
    
    form = DonorHealth(
        donor_id=current_user.id,
        status=HealthFormStatus.PENDING.value,
        submitted_at=utcnow(),
        **_form_values(form_in)
    )
    db.add(form)
    db.commit()
    db.refresh(form)
    
    logger.info(
        f"Health form {form.id} submitted by user: {current_user.email} "
        f"(eligible={form.is_eligible})"
    )
    return form

@router.get("/my-forms", response_model=List[HealthFormResponse])
async def get_my_forms(
    db: Session = Depends(get_db),
    current_user: User = Depends(get_current_user)
):
    return db.query(DonorHealth).filter(
        DonorHealth.donor_id == current_user.id
    ).order_by(DonorHealth.submitted_at.desc(), DonorHealth.id.desc()).all()

@router.get("/latest", response_model=HealthFormResponse)
async def get_latest_form(
    db: Session = Depends(get_db),
    current_user: User = Depends(get_current_user)
):
    form = _latest_form(db, current_user.id)
    if not form:
        raise HTTPException(
            status_code=status.HTTP_404_NOT_FOUND,
            detail="No health form found"
        )
    return form

@router.get("/eligibility", response_model=EligibilityStatusResponse)
async def get_eligibility_status(
    db: Session = Depends(get_db),
    current_user: User = Depends(get_current_user)
):
    """Eligibility verdict from the donor's most recent form."""
    form = _latest_form(db, current_user.id)
    if not form:
        return EligibilityStatusResponse(
            has_form=False,
            message="Please fill out the health form to check your eligibility"
        )
    return EligibilityStatusResponse(
        has_form=True,
        is_eligible=form.is_eligible,
        ineligibility_reasons=form.ineligibility_reasons or [],
        status=form.status,
        submitted_at=form.submitted_at,
        form_id=form.id
    )

@router.get("/", response_model=List[HealthFormResponse])
async def list_health_forms(
    status_filter: Optional[HealthFormStatus] = Query(None, alias="status"),
    is_eligible: Optional[bool] = Query(None),
    db: Session = Depends(get_db),
    current_bank: BloodBank = Depends(get_current_blood_bank)
):
    """All submitted forms for blood-bank review."""
    query = db.query(DonorHealth)
    if status_filter:
        query = query.filter(DonorHealth.status == status_filter.value)
    if is_eligible is not None:
        query = query.filter(DonorHealth.is_eligible.is_(is_eligible))
    return query.order_by(DonorHealth.submitted_at.desc(), DonorHealth.id.desc()).all()

@router.get("/{form_id}", response_model=HealthFormResponse)
async def get_health_form(
    form_id: int,
    db: Session = Depends(get_db),
    current_bank: BloodBank = Depends(get_current_blood_bank)
):
    return _get_form(db, form_id)

@router.put("/{form_id}/review", response_model=HealthFormResponse)
async def review_health_form(
    form_id: int,
    review: HealthFormReview,
    db: Session = Depends(get_db),
    current_bank: BloodBank = Depends(get_current_blood_bank)
):
    form = _get_form(db, form_id)
    form.status = review.status.value
    form.review_notes = review.review_notes
    form.reviewed_by = current_bank.id
    form.reviewed_at = utcnow()
    db.commit()
    db.refresh(form)
    
    logger.info(f"Health form {form.id} marked {form.status} by blood bank: {current_bank.email}")
    return form

@router.put("/{form_id}", response_model=HealthFormResponse)
async def update_health_form(
    form_id: int,
    form_update: HealthFormUpdate,
    db: Session = Depends(get_db),
    current_user: User = Depends(get_current_user)
):
    """Edit an unreviewed form. The form goes back to pending and eligibility is re-evaluated."""
    form = _get_form(db, form_id)
    if form.donor_id != current_user.id:
        raise HTTPException(
            status_code=status.HTTP_403_FORBIDDEN,
            detail="Not authorized to update this form"
        )
    if form.status not in EDITABLE_STATUSES:
        raise HTTPException(
            status_code=status.HTTP_400_BAD_REQUEST,
            detail=f"Cannot update a form that has been {form.status}"
        )
    if form_update.consent is not None and not form_update.consent.is_complete():
        raise _consent_error()
    
    for field, value in _form_values(form_update).items():
        setattr(form, field, value)
    form.status = HealthFormStatus.PENDING.value
    db.commit()
    db.refresh(form)
    
    logger.info(f"Health form {form.id} updated by user: {current_user.email} (eligible={form.is_eligible})")
    return form
