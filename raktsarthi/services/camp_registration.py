"""
Blood camp registrations.

A registration copies the donor's name, phone and blood group at the time of
registering; later profile edits do not change it. Missing values are stored
as placeholders so the organizer's roster always has something to show.
"""
import logging
from typing import Optional

from sqlalchemy.exc import IntegrityError
from sqlalchemy.orm import Session

from raktsarthi.core.exceptions import AlreadyRegistered, DonorNotFound
from raktsarthi.database.database import utcnow
from raktsarthi.models.blood_camp import BloodCamp, CampRegistration
from raktsarthi.models.user import User

logger = logging.getLogger(__name__)

UNKNOWN_NAME = "Unknown"
NOT_PROVIDED_PHONE = "Not provided"
NOT_SPECIFIED_BLOOD_GROUP = "Not specified"

# registration attribute -> (donor attribute, placeholder)
SNAPSHOT_FIELDS = {
    "name": ("name", UNKNOWN_NAME),
    "phone": ("phone", NOT_PROVIDED_PHONE),
    "blood_group": ("blood_group", NOT_SPECIFIED_BLOOD_GROUP),
}


def is_placeholder(value: Optional[str], placeholder: str) -> bool:
    return value is None or not str(value).strip() or value == placeholder


def snapshot_donor(donor: User) -> dict:
    """Contact fields to store on a registration, with placeholders for gaps."""
    snapshot = {}
    for field, (source, placeholder) in SNAPSHOT_FIELDS.items():
        value = getattr(donor, source, None)
        snapshot[field] = value if not is_placeholder(value, placeholder) else placeholder
    return snapshot


def _find_donor(db: Session, donor_id) -> Optional[User]:
    if not is_plausible_donor_id(donor_id):
        return None
    return db.query(User).filter(User.id == int(donor_id)).first()


def is_plausible_donor_id(donor_id) -> bool:
    if donor_id is None or isinstance(donor_id, bool):
        return False
    try:
        return int(donor_id) > 0
    except (TypeError, ValueError):
        return False


def register_donor(db: Session, camp: BloodCamp, donor_id) -> CampRegistration:
    """
    Add a donor to a camp's roster.

    Raises DonorNotFound when the donor does not resolve and AlreadyRegistered
    when the donor is on the roster already; the camp is left untouched in both cases.
    """
    donor = _find_donor(db, donor_id)
    if donor is None:
        raise DonorNotFound()

    if any(entry.donor_id == donor.id for entry in camp.registered_donors):
        raise AlreadyRegistered("Already registered for this camp")

    registration = CampRegistration(donor_id=donor.id, registered_at=utcnow(), **snapshot_donor(donor))
    camp.registered_donors.append(registration)
    try:
        db.commit()
    except IntegrityError:
        # Lost a race with a concurrent registration of the same donor
        db.rollback()
        raise AlreadyRegistered("Already registered for this camp")
    db.refresh(registration)

    logger.info(f"Donor {donor.id} registered for camp {camp.id} ({camp.name})")
    return registration


def remove_registration(
    db: Session,
    camp: BloodCamp,
    *,
    registration_id: Optional[int] = None,
    donor_id: Optional[int] = None,
) -> int:
    """
    Remove a camp registration, addressed either by its own id or by the
    donor it belongs to. Returns the number of entries removed.
    """
    if (registration_id is None) == (donor_id is None):
        raise ValueError("pass exactly one of registration_id or donor_id")
    if registration_id is not None:
        matches = [entry for entry in camp.registered_donors if entry.id == registration_id]
        key = f"registration {registration_id}"
    else:
        matches = [entry for entry in camp.registered_donors if entry.donor_id == donor_id]
        key = f"donor {donor_id}"
    for entry in matches:
        camp.registered_donors.remove(entry)
    if matches:
        db.commit()
        logger.info(f"Removed {len(matches)} registration(s) for {key} from camp {camp.id}")
    return len(matches)


def _camps_for(db: Session, organizer_id: Optional[int]) -> list:
    query = db.query(BloodCamp)
    if organizer_id is not None:
        query = query.filter(BloodCamp.organizer_id == organizer_id)
    return query.all()


def backfill_registrations(db: Session, organizer_id: Optional[int] = None) -> dict:
    """
    Re-copy contact fields from donor profiles into registrations whose stored
    snapshot is empty or a placeholder. Registrations whose donor cannot be
    found are counted as errors and left as they are. When `organizer_id` is
    given only that blood bank's camps are touched.
    """
    fixed = 0
    errors = 0
    camps = _camps_for(db, organizer_id)

    for camp in camps:
        for entry in camp.registered_donors:
            stale = [
                field for field, (_, placeholder) in SNAPSHOT_FIELDS.items()
                if is_placeholder(getattr(entry, field), placeholder)
            ]
            if not stale:
                continue

            donor = _find_donor(db, entry.donor_id)
            if donor is None:
                logger.warning(f"Camp {camp.id}: donor {entry.donor_id} for registration {entry.id} not found")
                errors += 1
                continue

            changed = False
            for field in stale:
                source, placeholder = SNAPSHOT_FIELDS[field]
                value = getattr(donor, source, None)
                if not is_placeholder(value, placeholder):
                    setattr(entry, field, value)
                    changed = True
            if changed:
                fixed += 1

    db.commit()
    logger.info(f"Registration backfill: {fixed} fixed, {errors} error(s), {len(camps)} camp(s) processed")
    return {"fixed": fixed, "errors": errors, "camps_processed": len(camps)}


def cleanup_registrations(db: Session, organizer_id: Optional[int] = None) -> dict:
    """
    Permanently delete registrations with no usable donor id or with an
    empty/placeholder name, optionally only in one blood bank's camps.
    """
    removed = 0
    camps = _camps_for(db, organizer_id)

    for camp in camps:
        invalid = [
            entry for entry in camp.registered_donors
            if not is_plausible_donor_id(entry.donor_id) or is_placeholder(entry.name, UNKNOWN_NAME)
        ]
        for entry in invalid:
            camp.registered_donors.remove(entry)
        removed += len(invalid)

    db.commit()
    logger.info(f"Registration cleanup: {removed} removed, {len(camps)} camp(s) processed")
    return {"removed": removed, "camps_processed": len(camps)}
