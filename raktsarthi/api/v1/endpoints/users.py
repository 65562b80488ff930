from fastapi import APIRouter, Depends, Query
from sqlalchemy import func
from sqlalchemy.orm import Session
from typing import List, Optional
from collections import Counter
from datetime import datetime
import logging
from raktsarthi.database.database import get_db, utcnow
from raktsarthi.models.blood_request import BloodRequest
from raktsarthi.models.enums import BloodGroup, RequestStatus
from raktsarthi.models.event import Event
from raktsarthi.models.user import User, UserRole
from raktsarthi.schemas.user import (
    BloodGroupCount,
    MonthlyCount,
    UserDashboardOverview,
    UserDashboardStats,
    UserResponse,
    UserUpdate,
)
from raktsarthi.api.v1.endpoints.auth import get_current_user

logger = logging.getLogger(__name__)
router = APIRouter()

@router.get("/profile", response_model=UserResponse)
async def get_profile(current_user: User = Depends(get_current_user)):
    return current_user

@router.put("/profile", response_model=UserResponse)
async def update_profile(
    profile_update: UserUpdate,
    db: Session = Depends(get_db),
    current_user: User = Depends(get_current_user)
):
    """Partially update the signed-in user's profile."""
    update_data = profile_update.dict(exclude_unset=True)
    if update_data.get("blood_group") is not None:
        update_data["blood_group"] = update_data["blood_group"].value
    
    for field, value in update_data.items():
        setattr(current_user, field, value)
    
    if update_data.get("is_donor") and current_user.role == UserRole.USER.value:
        current_user.role = UserRole.DONOR.value
    
    db.commit()
    db.refresh(current_user)
    
    logger.info(f"Profile updated by user: {current_user.email}")
    return current_user

@router.get("/donors", response_model=List[UserResponse])
async def list_available_donors(
    blood_group: Optional[BloodGroup] = Query(None),
    db: Session = Depends(get_db),
    current_user: User = Depends(get_current_user)
):
    """Donors currently marked available, optionally for one blood group."""
    query = db.query(User).filter(User.is_donor.is_(True), User.is_available.is_(True))
    if blood_group:
        query = query.filter(User.blood_group == blood_group.value)
    return query.order_by(User.name).all()

TREND_MONTHS = 6

def trend_window_start(now: datetime, months: int = TREND_MONTHS) -> datetime:
    """First instant of the calendar month `months - 1` months before `now`."""
    years_back, month_index = divmod(now.month - 1 - (months - 1), 12)
    return now.replace(
        year=now.year + years_back, month=month_index + 1, day=1,
        hour=0, minute=0, second=0, microsecond=0
    )

@router.get("/dashboard/stats", response_model=UserDashboardStats)
async def get_dashboard_stats(
    db: Session = Depends(get_db),
    current_user: User = Depends(get_current_user)
):
    """
    Chart data for the user dashboard: the caller's requests by status, open
    requests by blood group and urgency, a monthly request trend and a few
    platform-wide counts.
    """
    now = utcnow()

    my_requests = db.query(BloodRequest.status, func.count(BloodRequest.id)).filter(
        BloodRequest.requested_by == current_user.id
    ).group_by(BloodRequest.status).all()

    pending = db.query(BloodRequest).filter(BloodRequest.status == RequestStatus.PENDING.value)
    blood_groups = pending.with_entities(
        BloodRequest.blood_group, func.count(BloodRequest.id)
    ).group_by(BloodRequest.blood_group).all()
    urgency = pending.with_entities(
        BloodRequest.urgency, func.count(BloodRequest.id)
    ).group_by(BloodRequest.urgency).all()

    # year/month buckets are built in Python
    created = db.query(BloodRequest.created_at).filter(
        BloodRequest.created_at >= trend_window_start(now)
    ).all()
    trend = Counter((created_at.year, created_at.month) for (created_at,) in created if created_at)

    upcoming_events = db.query(Event).filter(Event.date >= now)
    registered_events = sum(
        1 for event in upcoming_events.all() if current_user.id in (event.registered_donors or [])
    )

    return UserDashboardStats(
        my_requests=dict(my_requests),
        blood_groups=[
            BloodGroupCount(blood_group=group, count=count)
            for group, count in sorted(blood_groups, key=lambda row: (-row[1], row[0]))
        ],
        urgency=dict(urgency),
        monthly_trend=[
            MonthlyCount(year=year, month=month, count=count)
            for (year, month), count in sorted(trend.items())
        ],
        overview=UserDashboardOverview(
            total_donors=db.query(User).filter(User.is_donor.is_(True), User.is_available.is_(True)).count(),
            total_users=db.query(User).count(),
            upcoming_events=upcoming_events.filter(Event.is_active.is_(True)).count(),
            registered_events=registered_events
        )
    )
