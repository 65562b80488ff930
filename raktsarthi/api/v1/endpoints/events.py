from fastapi import APIRouter, Depends, HTTPException, status
from sqlalchemy.orm import Session
from typing import List
import logging
from raktsarthi.core.exceptions import AlreadyRegistered
from raktsarthi.database.database import get_db, utcnow
from raktsarthi.models.event import Event
from raktsarthi.models.user import User
from raktsarthi.schemas.event import EventResponse
from raktsarthi.api.v1.endpoints.auth import get_current_user

logger = logging.getLogger(__name__)
router = APIRouter()

def get_event_or_404(db: Session, event_id: int) -> Event:
    event = db.query(Event).filter(Event.id == event_id).first()
    if not event:
        raise HTTPException(
            status_code=status.HTTP_404_NOT_FOUND,
            detail="Event not found"
        )
    return event

@router.get("/", response_model=List[EventResponse])
async def list_events(db: Session = Depends(get_db)):
    """Active events that have not happened yet, soonest first."""
    return db.query(Event).filter(
        Event.is_active.is_(True),
        Event.date >= utcnow()
    ).order_by(Event.date.asc()).all()

@router.get("/{event_id}", response_model=EventResponse)
async def get_event(event_id: int, db: Session = Depends(get_db)):
    return get_event_or_404(db, event_id)

@router.post("/{event_id}/register", response_model=EventResponse)
async def register_for_event(
    event_id: int,
    db: Session = Depends(get_db),
    current_user: User = Depends(get_current_user)
):
    event = get_event_or_404(db, event_id)
    if not event.is_active:
        raise HTTPException(
            status_code=status.HTTP_400_BAD_REQUEST,
            detail="Event is no longer active"
        )
    registrants = list(event.registered_donors or [])
    if current_user.id in registrants:
        raise AlreadyRegistered("Already registered for this event")
    
    # Reassign so the JSON column is flagged dirty
    event.registered_donors = registrants + [current_user.id]
    db.commit()
    db.refresh(event)
    
    logger.info(f"User {current_user.email} registered for event {event.id}")
    return event
