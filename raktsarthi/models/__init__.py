# Database models
from .enums import (
    BloodGroup, DeclaredBloodGroup, BLOOD_GROUPS, Gender, HealthFormStatus,
    RequestUrgency, RequestStatus, BankResponseStatus, CampStatus, EventType
)
from .user import User, UserRole
from .blood_bank import BloodBank
from .inventory import Inventory
from .donor_health import DonorHealth
from .blood_request import BloodRequest
from .blood_camp import BloodCamp, CampRegistration
from .event import Event
