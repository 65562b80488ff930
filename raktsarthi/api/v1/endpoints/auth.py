from fastapi import APIRouter, Depends, HTTPException, status
from fastapi.security import HTTPBearer, HTTPAuthorizationCredentials
from sqlalchemy.orm import Session
import logging
from raktsarthi.core.config import settings
from raktsarthi.core.security import (
    BLOOD_BANK_TOKEN_TYPE,
    create_user_token,
    hash_password,
    verify_password,
    verify_token,
)
from raktsarthi.database.database import get_db
from raktsarthi.models.blood_bank import BloodBank
from raktsarthi.models.user import User, UserRole
from raktsarthi.schemas.auth import LoginRequest, UserToken
from raktsarthi.schemas.user import UserCreate, UserResponse

logger = logging.getLogger(__name__)
router = APIRouter()

bearer_scheme = HTTPBearer(auto_error=False)

def _credentials_error(detail: str = "Could not validate credentials") -> HTTPException:
    return HTTPException(
        status_code=status.HTTP_401_UNAUTHORIZED,
        detail=detail,
        headers={"WWW-Authenticate": "Bearer"},
    )

def _token_payload(credentials: HTTPAuthorizationCredentials) -> dict:
    if credentials is None or not credentials.credentials:
        raise _credentials_error("Not authenticated")
    return verify_token(credentials.credentials)

def _subject_id(payload: dict) -> int:
    try:
        return int(payload["sub"])
    except (KeyError, TypeError, ValueError):
        raise _credentials_error()

async def get_current_user(
    credentials: HTTPAuthorizationCredentials = Depends(bearer_scheme),
    db: Session = Depends(get_db)
) -> User:
    """Resolve the user behind a user session token."""
    payload = _token_payload(credentials)
    if payload.get("type") == BLOOD_BANK_TOKEN_TYPE:
        raise _credentials_error("User session required")
    
    user = db.query(User).filter(User.id == _subject_id(payload)).first()
    if user is None:
        raise HTTPException(
            status_code=status.HTTP_404_NOT_FOUND,
            detail="User not found"
        )
    return user

async def get_current_blood_bank(
    credentials: HTTPAuthorizationCredentials = Depends(bearer_scheme),
    db: Session = Depends(get_db)
) -> BloodBank:
    """Resolve the blood bank behind a blood-bank session token."""
    payload = _token_payload(credentials)
    if payload.get("type") != BLOOD_BANK_TOKEN_TYPE:
        raise HTTPException(
            status_code=status.HTTP_403_FORBIDDEN,
            detail="Blood bank access required"
        )
    
    blood_bank = db.query(BloodBank).filter(BloodBank.id == _subject_id(payload)).first()
    if blood_bank is None:
        raise _credentials_error("Blood bank not found")
    if not blood_bank.is_active:
        raise HTTPException(
            status_code=status.HTTP_403_FORBIDDEN,
            detail="Blood bank account is inactive"
        )
    return blood_bank

@router.post("/register", response_model=UserToken, status_code=status.HTTP_201_CREATED)
async def register(user_in: UserCreate, db: Session = Depends(get_db)):
    """Create a user account and return a session token."""
    email = user_in.email.strip().lower()
    if db.query(User).filter(User.email == email).first():
        raise HTTPException(
            status_code=status.HTTP_400_BAD_REQUEST,
            detail="Email already registered"
        )
    if len(user_in.password) < settings.PASSWORD_MIN_LENGTH:
        raise HTTPException(
            status_code=status.HTTP_400_BAD_REQUEST,
            detail=f"Password must be at least {settings.PASSWORD_MIN_LENGTH} characters"
        )
    
    user = User(
        name=user_in.name,
        email=email,
        hashed_password=hash_password(user_in.password),
        phone=user_in.phone,
        blood_group=user_in.blood_group.value if user_in.blood_group else None,
        is_donor=user_in.is_donor,
        role=UserRole.DONOR.value if user_in.is_donor else UserRole.USER.value
    )
    db.add(user)
    db.commit()
    db.refresh(user)
    
    logger.info(f"User registered: {user.email}")
    return UserToken(access_token=create_user_token(user.id), user=UserResponse.model_validate(user))

@router.post("/login", response_model=UserToken)
async def login(credentials: LoginRequest, db: Session = Depends(get_db)):
    user = db.query(User).filter(User.email == credentials.email.strip().lower()).first()
    if not user or not verify_password(credentials.password, user.hashed_password):
        logger.warning(f"Failed login attempt for: {credentials.email}")
        raise _credentials_error("Incorrect email or password")
    
    logger.info(f"User logged in: {user.email}")
    return UserToken(access_token=create_user_token(user.id), user=UserResponse.model_validate(user))

@router.get("/me", response_model=UserResponse)
async def read_current_user(current_user: User = Depends(get_current_user)):
    return current_user
