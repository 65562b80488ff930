"""Unit tests for camp registrations: donor snapshot, duplicate rejection, removal, backfill and cleanup."""
import pytest

from raktsarthi.core.exceptions import AlreadyRegistered, DonorNotFound
from raktsarthi.models import CampRegistration
from raktsarthi.services.camp_registration import (
    NOT_PROVIDED_PHONE,
    NOT_SPECIFIED_BLOOD_GROUP,
    UNKNOWN_NAME,
    backfill_registrations,
    cleanup_registrations,
    register_donor,
    remove_registration,
    snapshot_donor,
)
from tests.conftest import make_blood_bank, make_camp, make_user


def test_register_copies_donor_contact_fields(db):
    donor = make_user(db)
    camp = make_camp(db, make_blood_bank(db))

    registration = register_donor(db, camp, donor.id)
    assert registration.donor_id == donor.id
    assert registration.name == "Asha Verma"
    assert registration.phone == "9876543210"
    assert registration.blood_group == "O+"
    assert registration.attended is False

    # Snapshot does not follow later profile edits
    donor.phone = "1112223333"
    db.commit()
    db.refresh(registration)
    assert registration.phone == "9876543210"


def test_register_uses_placeholders_for_missing_fields(db):
    donor = make_user(db, phone=None, blood_group=None)
    camp = make_camp(db, make_blood_bank(db))
    registration = register_donor(db, camp, donor.id)
    assert registration.phone == NOT_PROVIDED_PHONE
    assert registration.blood_group == NOT_SPECIFIED_BLOOD_GROUP


def test_duplicate_registration_rejected(db):
    donor = make_user(db)
    camp = make_camp(db, make_blood_bank(db))
    register_donor(db, camp, donor.id)

    with pytest.raises(AlreadyRegistered):
        register_donor(db, camp, donor.id)
    db.refresh(camp)
    assert len(camp.registered_donors) == 1


def test_unknown_donor_rejected(db):
    camp = make_camp(db, make_blood_bank(db))
    with pytest.raises(DonorNotFound):
        register_donor(db, camp, 999)
    with pytest.raises(DonorNotFound):
        register_donor(db, camp, None)
    assert camp.registered_donors == []


def test_remove_registration_by_id_or_donor_id(db):
    first = make_user(db, email="one@example.com")
    second = make_user(db, email="two@example.com")
    camp = make_camp(db, make_blood_bank(db))
    registration = register_donor(db, camp, first.id)
    register_donor(db, camp, second.id)

    assert remove_registration(db, camp, registration_id=registration.id) == 1
    assert remove_registration(db, camp, donor_id=second.id) == 1
    assert remove_registration(db, camp, registration_id=12345) == 0
    assert remove_registration(db, camp, donor_id=12345) == 0
    assert db.query(CampRegistration).count() == 0


def test_remove_registration_requires_exactly_one_key(db):
    camp = make_camp(db, make_blood_bank(db))
    with pytest.raises(ValueError):
        remove_registration(db, camp)
    with pytest.raises(ValueError):
        remove_registration(db, camp, registration_id=1, donor_id=1)


def test_remove_by_donor_ignores_matching_registration_id(db):
    donors = [make_user(db, email=f"donor{n}@example.com") for n in range(3)]
    camp = make_camp(db, make_blood_bank(db))
    register_donor(db, camp, donors[0].id)
    crossed = register_donor(db, camp, donors[2].id)
    target = register_donor(db, camp, donors[1].id)
    # registration ids and donor ids overlap in both directions
    assert crossed.id == donors[1].id
    assert target.id == donors[2].id

    assert remove_registration(db, camp, donor_id=donors[1].id) == 1
    remaining = sorted(entry.donor_id for entry in db.query(CampRegistration).all())
    assert remaining == [donors[0].id, donors[2].id]

    assert remove_registration(db, camp, registration_id=crossed.id) == 1
    assert [entry.donor_id for entry in db.query(CampRegistration).all()] == [donors[0].id]


def test_snapshot_donor_replaces_blank_values():
    class Profile:
        name = "  "
        phone = ""
        blood_group = "A-"

    assert snapshot_donor(Profile()) == {
        "name": UNKNOWN_NAME,
        "phone": NOT_PROVIDED_PHONE,
        "blood_group": "A-",
    }


def test_backfill_refreshes_placeholder_fields(db):
    donor = make_user(db)
    orphan_camp = make_camp(db, make_blood_bank(db))
    orphan_camp.registered_donors.append(CampRegistration(
        donor_id=donor.id, name=UNKNOWN_NAME, phone=NOT_PROVIDED_PHONE, blood_group=""
    ))
    orphan_camp.registered_donors.append(CampRegistration(
        donor_id=None, name="Walk-in", phone=NOT_PROVIDED_PHONE, blood_group="B+"
    ))
    orphan_camp.registered_donors.append(CampRegistration(
        donor_id=donor.id + 100, name=UNKNOWN_NAME, phone="123", blood_group="B+"
    ))
    db.commit()

    result = backfill_registrations(db)
    assert result == {"fixed": 1, "errors": 2, "camps_processed": 1}

    fixed = db.query(CampRegistration).filter(CampRegistration.donor_id == donor.id).one()
    assert fixed.name == "Asha Verma"
    assert fixed.phone == "9876543210"
    assert fixed.blood_group == "O+"


def test_cleanup_removes_invalid_registrations(db):
    donor = make_user(db)
    camp = make_camp(db, make_blood_bank(db))
    register_donor(db, camp, donor.id)
    camp.registered_donors.append(CampRegistration(donor_id=None, name="Walk-in"))
    camp.registered_donors.append(CampRegistration(donor_id=donor.id + 1, name=UNKNOWN_NAME))
    db.commit()

    result = cleanup_registrations(db)
    assert result == {"removed": 2, "camps_processed": 1}
    remaining = db.query(CampRegistration).all()
    assert [entry.donor_id for entry in remaining] == [donor.id]


def test_maintenance_limited_to_one_organizer(db):
    donor = make_user(db)
    own_bank = make_blood_bank(db)
    other_bank = make_blood_bank(db, email="other@example.com", name="Other Bank", license_number="LIC-999")
    own_camp = make_camp(db, own_bank)
    other_camp = make_camp(db, other_bank)
    for camp in (own_camp, other_camp):
        camp.registered_donors.append(CampRegistration(donor_id=donor.id, name=UNKNOWN_NAME))
        camp.registered_donors.append(CampRegistration(donor_id=None, name="Walk-in"))
    db.commit()

    assert backfill_registrations(db, organizer_id=own_bank.id) == {"fixed": 1, "errors": 1, "camps_processed": 1}
    assert cleanup_registrations(db, organizer_id=own_bank.id) == {"removed": 1, "camps_processed": 1}

    db.expire_all()
    assert [entry.name for entry in own_camp.registered_donors] == ["Asha Verma"]
    assert sorted(entry.name for entry in other_camp.registered_donors) == [UNKNOWN_NAME, "Walk-in"]
