"""Pytest configuration and fixtures."""
import os

# Configure the app for an in-memory database before it is imported
os.environ["DATABASE_URL"] = "sqlite://"
os.environ.setdefault("SECRET_KEY", "test-secret-key")
os.environ["DEBUG"] = "true"
os.environ["BCRYPT_ROUNDS"] = "4"

from datetime import timedelta

import pytest
from fastapi.testclient import TestClient

from raktsarthi.core.security import create_blood_bank_token, create_user_token, hash_password
from raktsarthi.database.database import Base, engine, get_db, SessionLocal, utcnow
from raktsarthi.main import app
from raktsarthi.models import BloodBank, BloodCamp, User
from raktsarthi.services.inventory import default_inventory


@pytest.fixture
def db():
    Base.metadata.create_all(bind=engine)
    session = SessionLocal()
    try:
        yield session
    finally:
        session.close()
        Base.metadata.drop_all(bind=engine)


@pytest.fixture
def client(db):
    def override_get_db():
        yield db

    app.dependency_overrides[get_db] = override_get_db
    try:
        yield TestClient(app)
    finally:
        app.dependency_overrides.clear()


def make_user(db, email="donor@example.com", name="Asha Verma", phone="9876543210", blood_group="O+", is_donor=True):
    user = User(
        name=name,
        email=email,
        hashed_password=hash_password("secret123"),
        phone=phone,
        blood_group=blood_group,
        role="donor" if is_donor else "user",
        is_donor=is_donor,
        is_available=True,
    )
    db.add(user)
    db.commit()
    db.refresh(user)
    return user


def make_blood_bank(db, email="bank@example.com", name="City Blood Bank", license_number="LIC-001", inventory=None):
    blood_bank = BloodBank(
        name=name,
        email=email,
        hashed_password=hash_password("bankpass1"),
        phone="0201234567",
        license_number=license_number,
        city="Pune",
        inventory=default_inventory() if inventory is None else inventory,
        is_active=True,
    )
    db.add(blood_bank)
    db.commit()
    db.refresh(blood_bank)
    return blood_bank


def make_camp(db, blood_bank, name="Community Drive", days_ahead=10, city="Pune"):
    camp = BloodCamp(
        name=name,
        organizer_id=blood_bank.id,
        organizer_name=blood_bank.name,
        date=utcnow() + timedelta(days=days_ahead),
        start_time="09:00",
        end_time="17:00",
        venue="Town Hall",
        address="1 Main Road",
        city=city,
        target_units=50,
        collected_units=0,
        status="scheduled",
    )
    db.add(camp)
    db.commit()
    db.refresh(camp)
    return camp


def auth_headers(token):
    return {"Authorization": f"Bearer {token}"}


@pytest.fixture
def user(db):
    return make_user(db)


@pytest.fixture
def blood_bank(db):
    return make_blood_bank(db)


@pytest.fixture
def user_headers(user):
    return auth_headers(create_user_token(user.id))


@pytest.fixture
def bank_headers(blood_bank):
    return auth_headers(create_blood_bank_token(blood_bank.id))
