from fastapi import APIRouter
from raktsarthi.api.v1.endpoints import (
    auth,
    blood_bank_portal,
    blood_banks,
    blood_camps,
    donor_health,
    events,
    requests,
    users,
)

api_router = APIRouter()

api_router.include_router(auth.router, prefix="/auth", tags=["authentication"])
api_router.include_router(users.router, prefix="/users", tags=["users"])
api_router.include_router(blood_banks.router, prefix="/blood-banks", tags=["blood-banks"])
api_router.include_router(blood_bank_portal.router, prefix="/bloodbank", tags=["blood-bank-portal"])
api_router.include_router(donor_health.router, prefix="/donor-health", tags=["donor-health"])
api_router.include_router(requests.router, prefix="/requests", tags=["blood-requests"])
api_router.include_router(blood_camps.router, prefix="/blood-camps", tags=["blood-camps"])
api_router.include_router(events.router, prefix="/events", tags=["events"])
