from pydantic import BaseModel
from typing import Optional
from raktsarthi.schemas.user import UserResponse
from raktsarthi.schemas.blood_bank import BloodBankResponse

class LoginRequest(BaseModel):
    email: str
    password: str

class Token(BaseModel):
    access_token: str
    token_type: str = "bearer"

class UserToken(Token):
    user: UserResponse

class BloodBankToken(Token):
    blood_bank: BloodBankResponse

class PasswordChange(BaseModel):
    current_password: str
    new_password: str

class MessageResponse(BaseModel):
    message: str
    detail: Optional[str] = None
